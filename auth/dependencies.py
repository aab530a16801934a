"""
auth/dependencies.py -- FastAPI Depends() stages for access control.

Each stage is a dependency with one contract: return a value (the request
continues) or raise an AuthError (the request short-circuits with that
error's envelope). Stages compose through Depends(), which also fixes their
order -- Authorize depends on authenticate, so a role check can never run
on an unauthenticated request.

  authenticate        -- token from the Authorization header -> TokenClaims.
                         401 UnauthenticatedError if missing or invalid.
  get_current_user    -- authenticate + load the User. 401 if the user is gone.
  Authorize(roles)    -- authenticate + load the User + role allow-list.
                         403 ForbiddenError if the user is gone or the role
                         is not allowed.

Collaborators (token_service, user_store) are read from request.app.state,
where the app factory puts them. Nothing here reads module-level config.

Sync dependencies run in FastAPI's thread pool, so the store lookups do not
block the event loop.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import Depends, Request

from auth.errors import ForbiddenError, InvalidTokenError, UnauthenticatedError
from auth.models import TokenClaims, User
from auth.store import CredentialStore
from auth.tokens import TokenService

logger = logging.getLogger("rolegate.auth")


def _extract_token(request: Request) -> str:
    """Return the raw token from the Authorization header, or "" if absent.

    Accepts "Bearer <token>" and, for older clients, the bare token.
    """
    header = request.headers.get("Authorization", "").strip()
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer":
        return credentials.strip()
    return header


def authenticate(request: Request) -> TokenClaims:
    """Verify the request's session token and record the caller's user id."""
    token = _extract_token(request)
    if not token:
        raise UnauthenticatedError("Access token not found")

    token_service: TokenService = request.app.state.token_service
    try:
        claims = token_service.verify(token)
    except InvalidTokenError as exc:
        logger.info("Rejected token on %s: %s", request.url.path, exc.reason)
        raise UnauthenticatedError(str(exc), meta={"reason": exc.reason}) from exc

    request.state.user_id = claims.user_id
    return claims


def get_current_user(request: Request, claims: TokenClaims = Depends(authenticate)) -> User:
    """Return the authenticated User. 401 if the token names a user that does not exist."""
    user_store: CredentialStore = request.app.state.user_store
    user = user_store.get_by_id(claims.user_id)
    if user is None:
        raise UnauthenticatedError("This user is not found")
    return user


class Authorize:
    """Role allow-list stage.

    Use as a FastAPI dependency:
        require_admin = Authorize({"admin"})

        @router.get("/admin")
        def route(user: User = Depends(require_admin)): ...
    """

    def __init__(self, allowed_roles: Iterable[str]) -> None:
        self.allowed_roles = frozenset(allowed_roles)

    def __call__(self, request: Request, claims: TokenClaims = Depends(authenticate)) -> User:
        user_store: CredentialStore = request.app.state.user_store
        user = user_store.get_by_id(claims.user_id)
        if user is None or user.role not in self.allowed_roles:
            logger.info("Forbidden: %s on %s", claims.user_id, request.url.path)
            raise ForbiddenError()
        return user


require_admin = Authorize({"admin"})
require_moderator = Authorize({"admin", "moderator"})
