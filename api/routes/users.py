"""
api/routes/users.py -- Endpoints about the calling user.

Routes:
  GET /api/users/current   -- identity of the token holder (requires auth)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.models import envelope_response
from auth.dependencies import get_current_user
from auth.models import User

router = APIRouter()


@router.get("/users/current")
def current_user(user: User = Depends(get_current_user)) -> JSONResponse:
    """Return id, name and email of the authenticated user. The password hash never leaves the store."""
    return envelope_response(
        200,
        success=True,
        message="Current user data",
        meta={"id": user.id, "name": user.name, "email": user.email},
    )
