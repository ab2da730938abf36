"""
AuthGate Backend — Health Check & API Index
============================================

What:  GET /health for probes and GET /api for a machine-readable endpoint index.
How:   /health runs SELECT 1 against the store. The service is only useful when
       the database answers, so a failed ping reports `unhealthy` with HTTP 503.
"""

import time

from fastapi import APIRouter, Request, Response

from authgate import __version__
from authgate.database import Database
from authgate.schemas.auth import ApiInfoResponse, EndpointInfo, HealthResponse

router = APIRouter(tags=["Health"])

# Module-level: set once at import, used for uptime.
_start_time = time.time()

ENDPOINTS = [
    EndpointInfo(method="POST", path="/api/auth/register", description="Create an account"),
    EndpointInfo(method="POST", path="/api/auth/login", description="Sign in"),
    EndpointInfo(method="POST", path="/api/auth/logout", description="Clear the auth cookie"),
    EndpointInfo(method="GET", path="/api/auth/me", description="The signed-in user"),
    EndpointInfo(method="GET", path="/api/users", description="List accounts (admin only)"),
    EndpointInfo(method="GET", path="/health", description="Service health"),
]


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    database: Database = request.app.state.database
    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


@router.get("/api", response_model=ApiInfoResponse, summary="API index")
async def api_index() -> ApiInfoResponse:
    return ApiInfoResponse(name="AuthGate API", version=__version__, endpoints=ENDPOINTS)
