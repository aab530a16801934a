"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection feeds bcrypt a password longer than 72 bytes, which newer bcrypt
releases reject. Direct usage has no compatibility shim to go stale.

bcrypt only ever reads the first 72 bytes of a password. _encode() applies
that cut explicitly so hashing and verification agree on every bcrypt
release, including those that raise on longer input.

Failure semantics:
  A mismatch is a normal False from verify(). A stored hash that bcrypt cannot
  parse is data corruption, not a wrong password, and raises InternalError so
  it is never silently reported as "invalid credentials".

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

import bcrypt

from auth.errors import InternalError

logger = logging.getLogger("rolegate.auth")

_BCRYPT_MAX_BYTES = 72
_DUMMY_PASSWORD = b"rolegate_timing_dummy"


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        # Built up front so the first unknown-email login costs one bcrypt run, not two.
        self._dummy_hash = bcrypt.hashpw(_DUMMY_PASSWORD, bcrypt.gensalt(rounds=rounds))

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of plain. Each call uses a fresh salt."""
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if plain matches hashed. bcrypt.checkpw compares in constant time."""
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except ValueError as exc:
            logger.error("Stored password hash could not be parsed")
            raise InternalError() from exc

    def verify_dummy(self, plain: str) -> None:
        """Burn one verification's worth of CPU against a throwaway hash.

        Called when the email is unknown so the response takes as long as a
        wrong-password attempt; otherwise response time reveals which emails
        are registered.
        """
        bcrypt.checkpw(_encode(plain), self._dummy_hash)
