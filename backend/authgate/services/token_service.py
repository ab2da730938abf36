"""
AuthGate Backend — Token Issuance & Verification
=================================================

What:  Signs and verifies the JWTs carried in the auth cookie.
Why:   Sessions are not stored server-side; trust rests entirely on the
       HMAC signature and the `exp` claim.
How:   PyJWT encodes {sub, role, iat, exp}. Verification requires every claim,
       checks the signature and expiry, and maps PyJWT's errors onto
       InvalidTokenError / ExpiredTokenError.

Claim set:
    sub:  user id (UUID string)
    role: 'user' | 'admin'
    iat:  issued-at (epoch seconds)
    exp:  expiry (epoch seconds)
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from authgate.exceptions import ExpiredTokenError, InvalidTokenError
from authgate.models.user import UserRole
from authgate.schemas.auth import UserResponse

REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, validated claim set."""

    user_id: uuid.UUID
    role: UserRole
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime
    max_age: int  # seconds, for the cookie's Max-Age


class TokenService:
    """
    Issues and verifies HS256 tokens with a process-wide secret.

    Args:
        secret:          HMAC signing key
        algorithm:       JWT algorithm name (HS256 by default)
        expires_minutes: Lifetime of issued tokens
        logger:          Logger handle injected by the application factory
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60,
        logger: Optional[logging.Logger] = None,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expires_minutes)
        self.logger = logger or logging.getLogger(__name__)

    def issue(self, user: UserResponse, now: Optional[datetime] = None) -> IssuedToken:
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.lifetime
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        return IssuedToken(
            token=token,
            expires_at=expires_at,
            max_age=int(self.lifetime.total_seconds()),
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Recover the claim set from a token.

        Raises:
            ExpiredTokenError: Signature is valid but `exp` has passed
            InvalidTokenError: Anything else (bad signature, malformed,
                               missing claims, unknown role, bad subject)
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            self.logger.debug("Token rejected: %s", str(e))
            raise InvalidTokenError(context={"reason": type(e).__name__})

        try:
            return TokenClaims(
                user_id=uuid.UUID(str(payload["sub"])),
                role=UserRole(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (ValueError, TypeError) as e:
            raise InvalidTokenError(context={"reason": "malformed_claims", "detail": str(e)})
