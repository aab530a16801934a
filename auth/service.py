"""
auth/service.py -- Registration and login flows.

Both flows are plain functions over explicit collaborators (store, hasher) so
the HTTP routes and the create-user CLI share one code path, and tests can
drive them without an app.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

from auth.errors import ConflictError, InvalidCredentialsError
from auth.models import DEFAULT_ROLE, User
from auth.passwords import PasswordHasher
from auth.store import CredentialStore

logger = logging.getLogger("rolegate.auth")


def register_user(
    store: CredentialStore,
    hasher: PasswordHasher,
    name: str,
    email: str,
    password: str,
    role: str | None = None,
) -> User:
    """Create a user with a hashed password. role defaults to "member".

    The pre-check avoids paying for a bcrypt hash when the email is already
    taken. The store's create() raises ConflictError as well, which covers
    the window between this check and the insert.
    """
    if store.get_by_email(email) is not None:
        logger.info("Registration rejected: email already registered")
        raise ConflictError()
    hashed = hasher.hash(password)
    return store.create(name, email, hashed, role or DEFAULT_ROLE)


def authenticate_user(store: CredentialStore, hasher: PasswordHasher, email: str, password: str) -> User:
    """Return the user for a valid email/password pair or raise InvalidCredentialsError.

    Always runs bcrypt whether or not the email exists:
    - Unknown email: bcrypt runs against a dummy hash (same cost as a real check)
    - Wrong password: bcrypt runs against the real hash
    Both raise the same error with the same message, so neither the response
    body nor its timing says which half of the pair was wrong.
    """
    user = store.get_by_email(email)
    if user is None:
        hasher.verify_dummy(password)
        logger.info("Login failed: bad credentials")
        raise InvalidCredentialsError()
    if not hasher.verify(password, user.hashed_password):
        logger.info("Login failed: bad credentials")
        raise InvalidCredentialsError()
    return user
