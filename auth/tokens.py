"""
auth/tokens.py -- Session token issuance and verification.

Security design decisions:
  Format: python-jose HS256 JWT signed with SECRET_KEY. Claims are
       {"uid": user id, "sub": subject marker, "iat": epoch s, "exp": epoch s}.
       Tokens are stateless: nothing is stored server-side, there is no
       revocation, and a token simply stops verifying at "exp".

  Subject marker: every session token carries the same fixed "sub" value
       ("accessApi" by default). A JWT signed with the same key for some other
       purpose is rejected instead of being accepted as a session.

  Verify before parse: verify() hands the raw token to jws.verify(), which
       checks the MAC and only then returns the payload bytes. No claim is
       decoded, let alone trusted, before the signature has passed.

  Clock: expiry is checked against an injectable clock rather than jose's
       built-in "exp" check, so expiry boundaries are testable to the second.
       A token is expired from the instant now >= exp.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import jws, jwt
from jose.exceptions import JWSError

from auth.errors import InvalidTokenError
from auth.models import TokenClaims

_ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _epoch(value: datetime) -> int:
    return int(value.timestamp())


class TokenService:
    """Issue and verify signed, time-limited session tokens.

    Args:
        secret_key:  HMAC key. Held only by the server.
        ttl_seconds: Lifetime of every issued token (4 hours in production).
        subject:     Fixed "sub" marker identifying session tokens.
        clock:       Returns the current aware UTC datetime. Tests pass a
                     frozen clock; production uses the system clock.
    """

    def __init__(
        self,
        secret_key: str,
        ttl_seconds: int = 4 * 60 * 60,
        subject: str = "accessApi",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret_key.")
        self._secret_key = secret_key
        self.ttl = timedelta(seconds=ttl_seconds)
        self.subject = subject
        self._clock = clock or _utcnow

    def issue(self, user_id: str, now: datetime | None = None) -> str:
        """Return a signed token for user_id, valid for exactly ttl from now."""
        issued_at = _epoch(now or self._clock())
        payload = {
            "uid": user_id,
            "sub": self.subject,
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Return the claims of a valid token or raise InvalidTokenError.

        Checks, in order: signature, payload shape, subject marker, expiry.
        """
        try:
            raw = jws.verify(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWSError as exc:
            # jose reports a MAC mismatch as a plain JWSError, so tell the two
            # apart by whether the token at least parses.
            if _is_well_formed(token):
                raise InvalidTokenError("signature", "Invalid token signature") from exc
            raise InvalidTokenError("malformed", "Malformed token") from exc

        try:
            claims = json.loads(raw)
        except ValueError as exc:
            raise InvalidTokenError("malformed", "Malformed token payload") from exc
        if not isinstance(claims, dict):
            raise InvalidTokenError("malformed", "Malformed token payload")

        if claims.get("sub") != self.subject:
            raise InvalidTokenError("subject", "Token was not issued for API access")

        user_id = claims.get("uid")
        issued_at = claims.get("iat")
        expires_at = claims.get("exp")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("malformed", "Token has no user identity")
        if not _is_epoch(issued_at) or not _is_epoch(expires_at) or expires_at <= issued_at:
            raise InvalidTokenError("malformed", "Token has invalid timestamps")

        if _epoch(self._clock()) >= expires_at:
            raise InvalidTokenError("expired", "Token has expired")

        return TokenClaims(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )


def _is_well_formed(token: str) -> bool:
    """True if the token has three decodable segments and a JSON header. Says nothing about trust."""
    try:
        jws.get_unverified_header(token)
    except JWSError:
        return False
    return True


def _is_epoch(value: object) -> bool:
    # bool is an int subclass; a JSON true is not a timestamp.
    return isinstance(value, int) and not isinstance(value, bool)
