"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own domain
shape; stores, services and routes do the work.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

DEFAULT_ROLE = "member"


@dataclass
class User:
    """A registered identity.

    id is an opaque string assigned by the store at creation; callers never
    choose it. email is stored normalised (stripped, lower-cased) and is unique
    across all users. role is a free-form label ("member", "moderator",
    "admin", ...) checked by the Authorize dependency.
    """

    name: str
    email: str
    hashed_password: str
    role: str = DEFAULT_ROLE
    id: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token. Only TokenService.verify() builds these."""

    user_id: str
    issued_at: datetime
    expires_at: datetime
