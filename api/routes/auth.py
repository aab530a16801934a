"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /api/auth/register   -- create an account; 201 with {id}
  POST /api/auth/login      -- exchange email/password for a session token

Both handlers are plain `def`: FastAPI runs them in its thread pool, so the
bcrypt work inside them never stalls the event loop for other requests.

Security:
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify().
  Cache-Control: no-store on login responses (they carry a bearer token).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, RegisterRequest, envelope_response
from auth.passwords import PasswordHasher
from auth.service import authenticate_user, register_user
from auth.store import CredentialStore
from auth.tokens import TokenService

logger = logging.getLogger("rolegate.api")

# Auth policy: both endpoints are public -- they are how a caller gets a token.
router = APIRouter()


@router.post("/auth/register", status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Register a new user. Conflicts on an email that is already registered."""
    user_store: CredentialStore = request.app.state.user_store
    hasher: PasswordHasher = request.app.state.hasher

    user = register_user(user_store, hasher, body.name, body.email, body.password, body.role)
    return envelope_response(
        201,
        success=True,
        message="User registered successfully",
        meta={"id": user.id},
    )


@router.post("/auth/login")
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a 4-hour session token.

    Wrong password and unknown email produce the same 401 body.
    """
    user_store: CredentialStore = request.app.state.user_store
    hasher: PasswordHasher = request.app.state.hasher
    token_service: TokenService = request.app.state.token_service

    user = authenticate_user(user_store, hasher, body.email, body.password)
    token = token_service.issue(user.id)
    logger.info("User %s logged in", user.id)
    return envelope_response(
        200,
        success=True,
        message="User logged in successfully",
        meta={
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "accessToken": token,
        },
        headers={"Cache-Control": "no-store"},
    )
