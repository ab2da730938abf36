"""
AuthGate Backend — Token Service Unit Tests
============================================

What:  Issue/verify behavior of TokenService, including expiry and tampering.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from authgate.exceptions import ExpiredTokenError, InvalidTokenError
from authgate.models.user import UserRole
from authgate.schemas.auth import UserResponse
from authgate.services.token_service import TokenService

SECRET = "unit-test-secret-with-plenty-of-length"


def make_user(role: UserRole = UserRole.USER) -> UserResponse:
    return UserResponse(
        id=uuid4(),
        email="a@x.com",
        role=role,
        created_at=datetime.now(timezone.utc),
    )


class TestTokenService:

    def setup_method(self):
        self.service = TokenService(secret=SECRET, expires_minutes=60)

    def test_verify_recovers_issued_claims(self):
        user = make_user(UserRole.ADMIN)

        issued = self.service.issue(user)
        claims = self.service.verify(issued.token)

        assert claims.user_id == user.id
        assert claims.role is UserRole.ADMIN
        assert claims.expires_at > datetime.now(timezone.utc)
        assert issued.max_age == 3600

    def test_expired_token_raises_expiry_specific_error(self):
        issued = self.service.issue(
            make_user(), now=datetime.now(timezone.utc) - timedelta(hours=2)
        )

        with pytest.raises(ExpiredTokenError) as exc_info:
            self.service.verify(issued.token)
        assert exc_info.value.error_code == "token_expired"

    def test_token_signed_with_other_secret_is_invalid(self):
        other = TokenService(secret="a-completely-different-secret-value")
        token = other.issue(make_user()).token

        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify(token)
        assert not isinstance(exc_info.value, ExpiredTokenError)

    def test_tampered_payload_is_invalid(self):
        header, payload, signature = self.service.issue(make_user()).token.split(".")
        forged_payload = jwt.utils.base64url_encode(b'{"sub":"x","role":"admin"}').decode()

        with pytest.raises(InvalidTokenError):
            self.service.verify(f"{header}.{forged_payload}.{signature}")

    def test_garbage_is_invalid(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify("not-a-jwt")

    def test_missing_role_claim_is_invalid(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode({"sub": str(uuid4()), "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_unknown_role_is_invalid(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "root", "iat": now, "exp": now + 60},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_non_uuid_subject_is_invalid(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {"sub": "alice", "role": "user", "iat": now, "exp": now + 60},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify(token)
