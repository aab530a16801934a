"""
auth/errors.py -- Error taxonomy for authentication and authorization failures.

Every failure a request can hit maps to exactly one subclass of AuthError.
Each carries its HTTP status and a client-safe message; the api/ exception
handlers turn them into a failure envelope. error_name is the class name and
is what clients see in the envelope's errorName field.

InvalidTokenError is the one exception that never reaches a client: the
access-control layer wraps it in UnauthenticatedError.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any


class AuthError(Exception):
    """Base class for failures that end a request with a structured envelope."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, *, meta: Mapping[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.meta = dict(meta) if meta else {}
        super().__init__(self.message)

    @property
    def error_name(self) -> str:
        return type(self).__name__

    @property
    def status_code(self) -> int:
        return int(self.status)


class ValidationError(AuthError):
    status = HTTPStatus.UNPROCESSABLE_ENTITY
    default_message = "Request validation failed."


class ConflictError(AuthError):
    status = HTTPStatus.CONFLICT
    default_message = "Email already exists"


class InvalidCredentialsError(AuthError):
    """Bad email/password pair. Deliberately identical for unknown email and wrong password."""

    status = HTTPStatus.UNAUTHORIZED
    default_message = "Email or password is invalid"


class UnauthenticatedError(AuthError):
    status = HTTPStatus.UNAUTHORIZED
    default_message = "Authentication required."


class ForbiddenError(AuthError):
    status = HTTPStatus.FORBIDDEN
    default_message = "Access denied"


class InternalError(AuthError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR


class InvalidTokenError(Exception):
    """A session token failed verification.

    reason is one of "malformed", "signature", "subject", "expired".
    """

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        super().__init__(message)
