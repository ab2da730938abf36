"""
AuthGate Backend — Auth Route Handlers
=======================================

What:  POST /api/auth/register, POST /api/auth/login, POST /api/auth/logout,
       GET /api/auth/me.
How:   Bodies are validated by the `validated_body` dependency, handlers call
       AuthService / TokenService, and the signed token goes into an HTTP-only
       cookie. Errors propagate to the global handlers in main.py.

Cookie attributes:
    HttpOnly:  scripts can't read the token
    Secure:    sent over HTTPS only (COOKIE_SECURE, on by default)
    SameSite:  COOKIE_SAMESITE, 'lax' by default
    Max-Age:   matches the token's lifetime
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from authgate.config import Settings
from authgate.database import get_db_session
from authgate.routes.dependencies import (
    get_auth_service,
    get_current_claims,
    get_settings,
    get_token_service,
    validated_body,
)
from authgate.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from authgate.services import AuthService, TokenClaims, TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def set_auth_cookie(
    response: Response,
    settings: Settings,
    tokens: TokenService,
    user: UserResponse,
) -> None:
    issued = tokens.issue(user)
    response.set_cookie(
        key=settings.cookie_name,
        value=issued.token,
        max_age=issued.max_age,
        expires=issued.expires_at,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid email, password or role", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    response: Response,
    payload: RegisterRequest = Depends(validated_body(RegisterRequest)),
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    user = await auth.register(
        db=db,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    set_auth_cookie(response, settings, tokens, user)
    return AuthResponse(message="Account created", user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Malformed credentials", "model": ErrorResponse},
        401: {"description": "Invalid email or password", "model": ErrorResponse},
    },
    summary="Sign in",
)
async def login(
    response: Response,
    payload: LoginRequest = Depends(validated_body(LoginRequest)),
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    user = await auth.authenticate(db=db, email=payload.email, password=payload.password)
    set_auth_cookie(response, settings, tokens, user)
    return AuthResponse(message="Login successful", user=user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Clear the auth cookie",
)
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    # Tokens aren't tracked server-side; clearing the cookie is all logout can do.
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    responses={
        401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
        404: {"description": "Account no longer exists", "model": ErrorResponse},
    },
    summary="The signed-in user",
)
async def me(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> CurrentUserResponse:
    user = await auth.get_user(db=db, user_id=claims.user_id)
    return CurrentUserResponse(user=user)
