"""
AuthGate Backend — Password Hashing
====================================

What:  Salted one-way hashing of passwords with bcrypt.
How:   passlib's CryptContext picks the bcrypt scheme, generates a per-hash salt,
       and verifies in constant time. `dummy_verify` burns the same CPU time as a
       real check so an unknown email and a wrong password take equally long.
"""

from passlib.context import CryptContext


class PasswordHasher:
    """
    Thin wrapper around a CryptContext configured from settings.

    Args:
        rounds: bcrypt cost factor (2^rounds iterations)
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognized or corrupt hash in the store.
            return False

    def dummy_verify(self) -> None:
        self._context.dummy_verify()
