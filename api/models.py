"""
API request and response models for RoleGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Every response, success or failure, is an Envelope:
    {"success", "message", "data", "dataList", "httpStatus", "meta", "errorName"?}
errorName is only present on failures that have an error kind.
"""

from http import HTTPStatus
from typing import Annotated, Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, StringConstraints

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Deliberately loose: one "@", no whitespace, a dot in the domain part.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# Whitespace is trimmed from identity fields only. Passwords are taken
# byte-for-byte so every creation path hashes exactly what the user typed.
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
RegisterEmail = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=320, pattern=EMAIL_PATTERN)
]
LoginEmail = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=320)]
Role = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]
Password = Annotated[str, Field(min_length=1, max_length=255)]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register. role is optional (defaults to "member")."""

    name: Name
    email: RegisterEmail
    password: Password
    role: Optional[Role] = None


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: LoginEmail
    password: Password


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------


class Envelope(BaseModel):
    """Uniform wrapper for every API response. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    message: str = ""
    data: Optional[Any] = None
    data_list: Optional[list[Any]] = Field(default=None, alias="dataList")
    http_status: str = Field(default="", alias="httpStatus")
    meta: dict[str, Any] = Field(default_factory=dict)
    error_name: Optional[str] = Field(default=None, alias="errorName")

    def to_json(self) -> dict[str, Any]:
        payload = self.model_dump(by_alias=True)
        if not payload.get("errorName"):
            payload.pop("errorName", None)
        return payload


def envelope_response(
    status_code: int,
    *,
    success: bool,
    message: str,
    meta: Optional[dict[str, Any]] = None,
    error_name: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Build a JSONResponse carrying an Envelope. httpStatus is the status reason phrase."""
    envelope = Envelope(
        success=success,
        message=message,
        http_status=HTTPStatus(status_code).phrase,
        meta=meta or {},
        error_name=error_name,
    )
    return JSONResponse(status_code=status_code, content=envelope.to_json(), headers=headers)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Payload placed in the health envelope's meta."""

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
