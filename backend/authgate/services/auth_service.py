"""
AuthGate Backend — Auth Service (Business Logic)
=================================================

What:  Registration, authentication, and user lookups.
Why:   Keeps hashing and persistence rules independent of HTTP concerns.
How:   Receives a db session per call; hashing goes through the injected
       PasswordHasher on a worker thread, so bcrypt never runs on the event
       loop. Every method returns `UserResponse`, so the password hash never
       leaves this module.
Who:   Called by route handlers; calls the ORM.

Data-store access per operation:
    register:      one read (existence check) + one write
    authenticate:  one read
    get_user:      one read
    list_users:    one read

No retries: store errors propagate. The unique constraint on `users.email`
backs up the existence check when two signups for the same address race.
"""

import asyncio
import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from authgate.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    NotFoundError,
)
from authgate.models.user import User, UserRole
from authgate.schemas.auth import UserResponse
from authgate.services.password import PasswordHasher

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"


class AuthService:
    """
    Business logic layer for accounts.

    Args:
        hasher: Password hashing strategy
        logger: Logger handle injected by the application factory

    Error Handling Strategy:
        Domain outcomes raise ConflictError / InvalidCredentialsError /
        NotFoundError. Any other SQLAlchemy failure is logged with its type and
        wrapped in DatabaseError so the client only sees a generic message.
    """

    def __init__(self, hasher: PasswordHasher, logger: Optional[logging.Logger] = None):
        self.hasher = hasher
        self.logger = logger or logging.getLogger(__name__)

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
    ) -> UserResponse:
        """
        Create a new account.

        Raises:
            ConflictError: Email already registered (→ 409)
            DatabaseError: Store failure (→ 500)
        """
        try:
            if await self._find_by_email(db, email) is not None:
                self.logger.info("Registration rejected, email already registered: %s", email)
                raise ConflictError(message=DUPLICATE_EMAIL_MESSAGE, field="email")

            user = User(
                email=email,
                password_hash=await asyncio.to_thread(self.hasher.hash, password),
                role=role,
            )
            db.add(user)
            await db.flush()
            await db.commit()

        except ConflictError:
            raise
        except IntegrityError:
            # Lost a race with a concurrent signup for the same address.
            await db.rollback()
            self.logger.info("Registration hit unique constraint for %s", email)
            raise ConflictError(message=DUPLICATE_EMAIL_MESSAGE, field="email")
        except SQLAlchemyError as e:
            self.logger.error("Database error registering %s: %s", email, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "register", "error_type": type(e).__name__})

        self.logger.info("User registered: id=%s role=%s", user.id, user.role.value)
        return UserResponse.model_validate(user)

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> UserResponse:
        """
        Check credentials.

        Unknown email and wrong password raise the same InvalidCredentialsError;
        the dummy verify keeps the two paths at the same cost.
        """
        try:
            user = await self._find_by_email(db, email)
        except SQLAlchemyError as e:
            self.logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "authenticate", "error_type": type(e).__name__})

        if user is None:
            await asyncio.to_thread(self.hasher.dummy_verify)
            self.logger.warning("Failed login: unknown email %s", email)
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            self.logger.warning("Failed login: wrong password for user %s", user.id)
            raise InvalidCredentialsError(context={"user_id": str(user.id)})

        self.logger.info("User authenticated: id=%s", user.id)
        return UserResponse.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> UserResponse:
        """
        Raises:
            NotFoundError: No user with this id (→ 404)
        """
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return UserResponse.model_validate(user)

    async def list_users(
        self,
        db: AsyncSession,
        limit: int = 50,
        offset: int = 0,
    ) -> List[UserResponse]:
        """Newest accounts first."""
        try:
            result = await db.execute(
                select(User).order_by(desc(User.created_at)).limit(limit).offset(offset)
            )
            users = list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list_users"})
        return [UserResponse.model_validate(u) for u in users]
