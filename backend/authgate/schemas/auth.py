"""
AuthGate Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract.
Why:   Declarative input rules in one place, explicit control over what is
       exposed (no password hash ever appears in a response model).
How:   Request models are run through `authgate.validation.validate_payload`;
       response models are returned by services and serialized by FastAPI.

Request models forbid unknown fields: a body with `{"is_admin": true}` tacked on
is rejected rather than silently ignored.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from authgate.models.user import UserRole

# bcrypt only looks at the first 72 bytes of its input.
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise PydanticCustomError(
            "password_too_long",
            "Password must be at most {max_bytes} bytes when UTF-8 encoded",
            {"max_bytes": PASSWORD_MAX_BYTES},
        )
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    """
    What:  Signup payload for POST /api/auth/register.

    Rules:
        email:    valid address, stored lowercase
        password: at least 8 characters, at most 72 bytes
        role:     optional, 'user' (default) or 'admin'
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr = Field(description="Account email address")
    password: str = Field(
        min_length=PASSWORD_MIN_LENGTH,
        description=f"Password, at least {PASSWORD_MIN_LENGTH} characters",
    )
    role: UserRole = Field(default=UserRole.USER, description="Account role")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _check_password_bytes(v)


class LoginRequest(BaseModel):
    """
    What:  Credentials for POST /api/auth/login.

    No minimum length here: a login attempt with a short password is just a
    wrong password, and should get the same 401 as any other.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr = Field(description="Account email address")
    password: str = Field(min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _check_password_bytes(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """Public view of a user. Deliberately has no password field."""

    id: uuid.UUID = Field(description="Unique user identifier (UUID)")
    email: str = Field(description="Account email address")
    role: UserRole = Field(description="Account role")
    created_at: datetime = Field(description="When the account was created (UTC)")

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """
    Returned by register and login.

    The token itself travels only in the HTTP-only cookie, never in this body.
    """

    message: str = Field(description="Human-readable success message")
    user: UserResponse


class CurrentUserResponse(BaseModel):
    user: UserResponse


class UserListResponse(BaseModel):
    users: List[UserResponse]
    count: int = Field(description="Number of users in this page")
    limit: int
    offset: int


class MessageResponse(BaseModel):
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class FieldErrorModel(BaseModel):
    field: Optional[str] = Field(default=None, description="Failing field, null for request-level errors")
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "An account with this email already exists",
            "errors": [{"field": "email", "message": "An account with this email already exists"}],
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: List[FieldErrorModel] = Field(default_factory=list)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


# ══════════════════════════════════════════════════════════════════════════
# Service Metadata
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class EndpointInfo(BaseModel):
    method: str
    path: str
    description: str


class ApiInfoResponse(BaseModel):
    name: str
    version: str
    endpoints: List[EndpointInfo]
