"""
AuthGate Backend — Route Dependencies
======================================

What:  FastAPI dependencies shared by the route modules.
How:   Services and settings are built once by `create_app()` and live on
       `app.state`; these functions fetch them per request so handlers never
       import module-level singletons.

    validated_body(Schema)  → decoded + validated request body, or 400
    get_current_claims      → claims from the auth cookie (or Bearer header), or 401
    require_role(role)      → claims whose role matches, or 403
"""

import json
from typing import Awaitable, Callable, Optional, Type, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel

from authgate.config import Settings
from authgate.exceptions import FieldError, ForbiddenError, InvalidTokenError, ValidationError
from authgate.models.user import UserRole
from authgate.services import AuthService, TokenClaims, TokenService
from authgate.validation import BODY_FIELD, validate_payload

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def validated_body(schema: Type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """
    Build a dependency that parses the JSON body and validates it against `schema`.

    Raises ValidationError (→ 400) with every failing field before the route
    handler, and therefore the service layer, is ever called.
    """

    async def dependency(request: Request) -> ModelT:
        body = await request.body()
        try:
            raw = json.loads(body) if body else None
        except (ValueError, UnicodeDecodeError):
            raise ValidationError(
                errors=[FieldError(field=BODY_FIELD, message="Request body must be valid JSON")]
            )

        result = validate_payload(schema, raw)
        if not result.ok:
            raise ValidationError(errors=result.errors)
        return result.value

    return dependency


def _extract_token(request: Request, cookie_name: str) -> Optional[str]:
    token = request.cookies.get(cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_current_claims(
    request: Request,
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    token = _extract_token(request, settings.cookie_name)
    if token is None:
        raise InvalidTokenError(message="Authentication required")
    return tokens.verify(token)


def require_role(role: UserRole) -> Callable[..., Awaitable[TokenClaims]]:
    """Dependency factory: the caller's token must carry `role`."""

    async def dependency(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if claims.role != role:
            raise ForbiddenError(context={"required_role": role.value, "role": claims.role.value})
        return claims

    return dependency
