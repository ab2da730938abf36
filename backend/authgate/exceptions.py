"""
AuthGate Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
Why:   Services raise domain errors without knowing about HTTP; the global
       handlers registered in main.py turn them into status codes and a
       consistent JSON body.
How:   Each exception carries a client-safe message, a list of field-level
       errors, and an optional context dict that is logged but never returned.

Exception Hierarchy:
    AuthGateError (base)
    ├── ValidationError           → 400 Bad Request
    ├── InvalidCredentialsError   → 401 Unauthorized
    ├── InvalidTokenError         → 401 Unauthorized
    │   └── ExpiredTokenError     → 401 Unauthorized
    ├── ForbiddenError            → 403 Forbidden
    ├── NotFoundError             → 404 Not Found
    ├── ConflictError             → 409 Conflict
    └── DatabaseError             → 500 Internal Server Error
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    """One failing input field and a human-readable reason."""

    field: Optional[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AuthGateError(Exception):
    """
    Base exception for all AuthGate application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        errors:   Field-level errors returned in the `errors` array
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        errors: Optional[List[FieldError]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.errors = list(errors) if errors else [FieldError(field=None, message=message)]
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AuthGateError):
    """
    Raised when the request body fails validation.

    HTTP: 400 Bad Request. Every failing field is listed, not just the first.

    Example response:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "errors": [
                {"field": "email", "message": "value is not a valid email address"},
                {"field": "password", "message": "String should have at least 8 characters"}
            ]
        }
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        errors: List[FieldError],
        message: str = "Request validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, errors=errors, context=context)


class InvalidCredentialsError(AuthGateError):
    """
    Raised when login fails.

    The message is identical whether the email is unknown or the password is
    wrong, so the response never reveals which accounts exist.
    """

    status_code = 401
    error_code = "invalid_credentials"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid email or password", context=context)


class InvalidTokenError(AuthGateError):
    """Raised when a token is missing, malformed, or carries a bad signature."""

    status_code = 401
    error_code = "invalid_token"

    def __init__(
        self,
        message: str = "Authentication token is invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ExpiredTokenError(InvalidTokenError):
    """Raised when a correctly signed token is past its `exp` claim."""

    error_code = "token_expired"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Authentication token has expired", context=context)


class ForbiddenError(AuthGateError):
    """Raised when an authenticated caller lacks the role an endpoint requires."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You do not have permission to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(AuthGateError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception so HTTP concerns stay out of the service logic.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(AuthGateError):
    """Raised when creating a resource that already exists (duplicate email)."""

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            errors=[FieldError(field=field, message=message)],
            context=context,
        )
        self.field = field


class DatabaseError(AuthGateError):
    """
    Raised when a database operation fails unexpectedly.

    The client always sees a generic message. The SQL, constraint names and
    driver errors go to the server log through `context`.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
