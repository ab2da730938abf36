"""
AuthGate Backend — Validation Unit Tests
=========================================

What:  Tests for validate_payload over the register/login schemas.
How:   Plain dicts in, ValidationResult out. No app, no database.
"""

from authgate.models.user import UserRole
from authgate.schemas.auth import LoginRequest, RegisterRequest
from authgate.validation import validate_payload


def _fields(result):
    return {e.field for e in result.errors}


class TestRegisterValidation:

    def test_valid_payload_is_normalized(self):
        result = validate_payload(
            RegisterRequest, {"email": "Alice@Example.COM", "password": "longenough1"}
        )

        assert result.ok
        assert result.errors == []
        assert result.value.email == "alice@example.com"
        assert result.value.role is UserRole.USER

    def test_admin_role_accepted(self):
        result = validate_payload(
            RegisterRequest,
            {"email": "root@x.com", "password": "longenough1", "role": "admin"},
        )
        assert result.ok
        assert result.value.role is UserRole.ADMIN

    def test_every_failing_field_is_reported(self):
        """Bad email AND short password: both appear, each with its own message."""
        result = validate_payload(RegisterRequest, {"email": "not-an-email", "password": "short"})

        assert not result.ok
        assert result.value is None
        assert _fields(result) == {"email", "password"}
        messages = {e.field: e.message for e in result.errors}
        assert "email" in messages["email"].lower()
        assert "8" in messages["password"]

    def test_unknown_role_rejected(self):
        result = validate_payload(
            RegisterRequest,
            {"email": "a@x.com", "password": "longenough1", "role": "superuser"},
        )
        assert not result.ok
        assert _fields(result) == {"role"}

    def test_excess_fields_rejected(self):
        """No silent pass-through of fields the schema doesn't know."""
        result = validate_payload(
            RegisterRequest,
            {"email": "a@x.com", "password": "longenough1", "is_admin": True},
        )
        assert not result.ok
        assert _fields(result) == {"is_admin"}

    def test_missing_fields_reported(self):
        result = validate_payload(RegisterRequest, {})
        assert not result.ok
        assert _fields(result) == {"email", "password"}

    def test_password_over_bcrypt_limit_rejected(self):
        # 40 two-byte characters = 80 bytes
        result = validate_payload(RegisterRequest, {"email": "a@x.com", "password": "é" * 40})
        assert not result.ok
        assert _fields(result) == {"password"}
        assert "72 bytes" in result.errors[0].message

    def test_non_object_body_rejected(self):
        for raw in (None, [], "a@x.com", 42):
            result = validate_payload(RegisterRequest, raw)
            assert not result.ok
            assert _fields(result) == {"body"}


class TestLoginValidation:

    def test_short_password_is_not_a_validation_error(self):
        """A short password at login is just a wrong password (401, not 400)."""
        result = validate_payload(LoginRequest, {"email": "A@X.com", "password": "abc"})
        assert result.ok
        assert result.value.email == "a@x.com"

    def test_empty_password_rejected(self):
        result = validate_payload(LoginRequest, {"email": "a@x.com", "password": ""})
        assert not result.ok
        assert _fields(result) == {"password"}

    def test_role_not_accepted_at_login(self):
        result = validate_payload(
            LoginRequest, {"email": "a@x.com", "password": "longenough1", "role": "admin"}
        )
        assert not result.ok
        assert _fields(result) == {"role"}
