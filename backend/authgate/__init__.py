"""
AuthGate Backend — Application Package Initializer
===================================================

What: Marks the `authgate` directory as a Python package.
Why:  Enables module imports like `from authgate.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │        Routes (Controllers)         │  ← HTTP concerns, cookies, status codes
    ├─────────────────────────────────────┤
    │       Validation (Schemas)          │  ← Raw body → typed value or field errors
    ├─────────────────────────────────────┤
    │        Services (Auth Logic)        │  ← Hashing, token signing, user records
    ├─────────────────────────────────────┤
    │        Models & Database            │  ← SQLAlchemy ORM + async sessions
    └─────────────────────────────────────┘

    Each layer only adds to or transforms what the layer below returns.
"""

__version__ = "1.0.0"
