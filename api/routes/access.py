"""
api/routes/access.py -- Role-gated endpoints.

Routes:
  GET /api/admin       -- role in {admin}
  GET /api/moderator   -- role in {admin, moderator}

The handlers do nothing but confirm access; the Authorize dependency is the
whole point. A valid token with the wrong role gets 403, no token gets 401.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.models import envelope_response
from auth.dependencies import require_admin, require_moderator
from auth.models import User

router = APIRouter()


@router.get("/admin")
def admin_area(user: User = Depends(require_admin)) -> JSONResponse:
    return envelope_response(200, success=True, message="Only admins can access this route!")


@router.get("/moderator")
def moderator_area(user: User = Depends(require_moderator)) -> JSONResponse:
    return envelope_response(200, success=True, message="Only admins and moderators can access this route!")
