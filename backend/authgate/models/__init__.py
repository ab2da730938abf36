"""ORM models. Importing this package registers every table with Base.metadata."""

from authgate.models.user import User, UserRole

__all__ = ["User", "UserRole"]
