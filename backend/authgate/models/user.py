"""
AuthGate Backend — User SQLAlchemy Model
=========================================

What:  ORM model representing the `users` table.
Why:   Maps Python objects to database rows for type-safe queries.
Who:   Used by AuthService for lookups and inserts, and by Alembic for migrations.

Table Design:
    - UUID primary key: non-sequential, so ids in tokens can't be enumerated
    - email: unique constraint is the source of truth for uniqueness
    - password_hash: bcrypt output only; plaintext never reaches this layer
    - role: enum `user_role` (user, admin)
    - created_at: timezone-aware UTC
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Enum, Index, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from authgate.database import Base


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    An account that can sign in.

    Lifecycle:
        Created on signup, read on login and on authenticated lookups.
        Immutable afterwards.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Stored lowercase; the validation layer normalizes before it gets here.
    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Login identifier, lowercase",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the password",
    )

    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role",
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.USER,
        server_default=text("'user'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the account was created (UTC)",
    )

    # Constraint and index names match migration 001.
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("idx_users_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        # No password_hash here; reprs end up in logs.
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
