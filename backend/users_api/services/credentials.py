"""
Users API — Password Hashing
==============================

What:  One-way hashing and verification of user passwords.
How:   passlib's CryptContext. New hashes use settings.password_hash_scheme;
       verification accepts any supported scheme, so switching the default
       does not lock out existing users.

Failure signalling:
    hash() returns None when the backend rejects the secret (passlib raises
    ValueError/TypeError for e.g. NUL bytes or over-long bcrypt input).
    Any other exception propagates to the caller.
    verify() never raises for bad input; an unrecognised or malformed
    stored hash simply does not verify.
"""

import logging
from typing import Optional, Sequence

from passlib.context import CryptContext

from users_api.config import SUPPORTED_HASH_SCHEMES, settings

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Hash and verify passwords with a passlib CryptContext."""

    def __init__(
        self,
        default_scheme: str = "bcrypt",
        schemes: Sequence[str] = SUPPORTED_HASH_SCHEMES,
    ):
        ordered = [default_scheme] + [s for s in schemes if s != default_scheme]
        self._context = CryptContext(schemes=ordered, default=default_scheme, deprecated="auto")

    def hash(self, plaintext: str) -> Optional[str]:
        """Return the hash of `plaintext`, or None if the backend rejected it."""
        try:
            return self._context.hash(plaintext)
        except (ValueError, TypeError) as e:
            logger.warning("Password hashing rejected input: %s", type(e).__name__)
            return None

    def verify(self, plaintext: str, hashed: Optional[str]) -> bool:
        if not plaintext or not hashed:
            return False
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            # Unknown hash format or malformed hash string
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
password_hasher = PasswordHasher(default_scheme=settings.password_hash_scheme)
