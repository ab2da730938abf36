"""
AuthGate Backend — User Administration Routes
==============================================

What:  GET /api/users, a paginated account listing for administrators.
Why:   The role claim in the token is only useful if something checks it;
       this is the endpoint that does.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from authgate.database import get_db_session
from authgate.models.user import UserRole
from authgate.routes.dependencies import get_auth_service, require_role
from authgate.schemas.auth import ErrorResponse, UserListResponse
from authgate.services import AuthService, TokenClaims

router = APIRouter(prefix="/api", tags=["Users"])


@router.get(
    "/users",
    response_model=UserListResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        403: {"description": "Caller is not an administrator", "model": ErrorResponse},
    },
    summary="List accounts (admin only)",
)
async def list_users(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    _admin: TokenClaims = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> UserListResponse:
    users = await auth.list_users(db=db, limit=limit, offset=offset)
    return UserListResponse(users=users, count=len(users), limit=limit, offset=offset)
