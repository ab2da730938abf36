"""
AuthGate Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services are constructed once by `create_app()` with their settings and
       logger, stored on `app.state`, and handed to routes via dependencies.

Service Inventory:
    - PasswordHasher: bcrypt hashing and verification
    - TokenService:   JWT issuance and verification
    - AuthService:    register / authenticate / user lookups
"""

from authgate.services.auth_service import AuthService
from authgate.services.password import PasswordHasher
from authgate.services.token_service import IssuedToken, TokenClaims, TokenService

__all__ = [
    "AuthService",
    "IssuedToken",
    "PasswordHasher",
    "TokenClaims",
    "TokenService",
]
