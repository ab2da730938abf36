"""
AuthGate Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app(settings)` builds every process-wide component once
       (Database, PasswordHasher, TokenService, AuthService), hands each its
       logger, stores them on `app.state`, then registers middleware,
       exception handlers and routers.
Who:   uvicorn (`uvicorn authgate.main:app`) and the test suite, which calls
       create_app() with its own Settings.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → CORS            │
    │                                                      │
    │  Routes:                                             │
    │    POST /api/auth/register   POST /api/auth/login    │
    │    POST /api/auth/logout     GET  /api/auth/me       │
    │    GET  /api/users           GET  /health, /api      │
    │                                                      │
    │  Exception Handlers:                                 │
    │    Validation→400  Credentials/Token→401  Role→403   │
    │    NotFound→404    Conflict→409           other→500  │
    └──────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from authgate import __version__
from authgate.config import Settings
from authgate.database import Database
from authgate.exceptions import (
    AuthGateError,
    DatabaseError,
    FieldError,
    InvalidTokenError,
    ValidationError,
)
from authgate.middleware.logging import RequestLoggingMiddleware
from authgate.middleware.request_id import RequestIDMiddleware, request_id_var
from authgate.routes import auth, health, users
from authgate.services import AuthService, PasswordHasher, TokenService
from authgate.validation import BODY_FIELD

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout,
    which the container runtime collects.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Library loggers are noisy at INFO.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate security-critical settings (fatal in production)
    Shutdown:
        1. Dispose the database engine (close pooled connections)
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("AuthGate %s starting (environment=%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("AuthGate shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    errors: Optional[List[FieldError]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Builds the {error, message, errors, request_id} body every error shares.

    The X-Request-ID header is set here too: the catch-all 500 handler runs
    outside RequestIDMiddleware, which never sees that response.
    """
    field_errors = errors if errors is not None else [FieldError(field=None, message=message)]
    rid = request_id_var.get("")
    response_headers = dict(headers or {})
    if rid:
        response_headers["X-Request-ID"] = rid
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "errors": [e.to_dict() for e in field_errors],
            "request_id": rid,
        },
        headers=response_headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception taxonomy onto HTTP responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        InvalidTokenError (+ ExpiredTokenError)   → 401 with WWW-Authenticate
        DatabaseError                             → 500, generic message
        AuthGateError (base)                      → exc.status_code
        StarletteHTTPException                    → its status (404 route, 405 method)
        Exception (fallback)                      → 500, generic message

    500 responses never include exception text; it goes to the log only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning(
            "[%s] Validation failed on %s: %s",
            request_id_var.get(""),
            request.url.path,
            [e.field for e in exc.errors],
        )
        return error_response(400, exc.error_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Query/path parameters still go through FastAPI's own validation.
        errors = [
            FieldError(
                field=".".join(str(p) for p in err.get("loc", ())[1:]) or BODY_FIELD,
                message=err.get("msg", "Invalid value"),
            )
            for err in exc.errors()
        ]
        return error_response(400, ValidationError.error_code, "Request validation failed", errors)

    @app.exception_handler(InvalidTokenError)
    async def handle_invalid_token(request: Request, exc: InvalidTokenError):
        return error_response(
            exc.status_code,
            exc.error_code,
            exc.message,
            exc.errors,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(500, exc.error_code, "An internal error occurred. Please try again later.")

    @app.exception_handler(AuthGateError)
    async def handle_app_error(request: Request, exc: AuthGateError):
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
            return error_response(exc.status_code, exc.error_code, "An internal error occurred. Please try again later.")
        return error_response(exc.status_code, exc.error_code, exc.message, exc.errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        code = "not_found" if exc.status_code == 404 else "http_error"
        return error_response(exc.status_code, code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration; read from the environment when omitted.

    Returns:
        A FastAPI instance whose `app.state` holds settings, database and services.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="AuthGate API",
        description="Signup, login, JWT cookies and role-based access over PostgreSQL.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Process-wide components ───────────────────────────────────────────
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
        logger=logging.getLogger("authgate.tokens"),
    )
    app.state.auth_service = AuthService(hasher=hasher, logger=logging.getLogger("authgate.auth"))

    # ── Middleware ────────────────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # the auth cookie
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


# uvicorn expects `authgate.main:app` to be importable.
app = create_app()
