"""
api/main.py -- FastAPI application factory for RoleGate.

create_app() builds a fresh app from explicit collaborators. Nothing is read
from module-level globals at request time: settings, the credential store,
the password hasher and the token service all live on app.state, put there
by the lifespan, and routes/dependencies read them from request.app.state.

Run with:  uvicorn asgi:app --reload
           python main.py serve

Middleware stack:
  log_requests -- one access-log line per request with latency.

Lifespan handles startup (store, hasher, token service) and shutdown (close
the store, if this app created it) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse, envelope_response
from api.routes.access import router as access_router
from api.routes.auth import router as auth_router
from api.routes.users import router as users_router
from auth.errors import AuthError, InternalError, ValidationError
from auth.passwords import PasswordHasher
from auth.store import CredentialStore, UserStore
from auth.tokens import TokenService
from core.config import Settings, get_settings
from core.logging_config import configure_logging

API_VERSION = "1.0.0"

logger = logging.getLogger("rolegate.api")


def create_app(settings: Settings | None = None, user_store: UserStore | None = None) -> FastAPI:
    """Build the RoleGate ASGI app.

    Args:
        settings:   Explicit configuration. Defaults to get_settings(), i.e.
                    the process environment.
        user_store: Pre-built credential store. When given, the app uses it
                    as-is and leaves closing it to the caller (tests share one
                    store between the app and their assertions).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Wire collaborators onto app.state before the first request.

        Everything before yield runs on startup; everything after yield runs
        on shutdown, even if a request handler raised.
        """
        logger.info("RoleGate API starting up")
        owns_store = user_store is None
        store = user_store if user_store is not None else UserStore(settings.database_url)
        app.state.settings = settings
        app.state.user_store = store
        app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        app.state.token_service = TokenService(
            settings.secret_key,
            ttl_seconds=settings.token_expire_seconds,
            subject=settings.token_subject,
        )
        logger.info(
            "Auth initialized (users_present=%s, token_ttl=%ds)",
            store.has_users(),
            settings.token_expire_seconds,
        )

        yield

        if owns_store:
            store.close()
        logger.info("RoleGate API shutdown complete")

    app = FastAPI(
        title="RoleGate API",
        description="User registration, session tokens, and role-based access control.",
        version=API_VERSION,
        lifespan=lifespan,
    )

    # ---------------------------------------------------------------------------
    # Request logging middleware
    #
    # Every request passes through this coroutine before reaching any route
    # handler. Wall-clock time before and after call_next gives the latency.
    # ---------------------------------------------------------------------------

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    # ---------------------------------------------------------------------------
    # Router registration
    # ---------------------------------------------------------------------------

    app.include_router(auth_router, prefix="/api", tags=["Auth"])
    app.include_router(users_router, prefix="/api", tags=["Users"])
    app.include_router(access_router, prefix="/api", tags=["Access"])

    _register_exception_handlers(app)
    _register_public_routes(app)
    return app


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same Envelope so API clients can parse errors
# uniformly. Internal details go to the server log, never the response body.
# ---------------------------------------------------------------------------


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        """Return the error's own status, message and kind."""
        return envelope_response(
            exc.status_code,
            success=False,
            message=exc.message,
            meta=exc.meta,
            error_name=exc.error_name,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Return 422 listing the offending fields when the body fails validation."""
        fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in exc.errors()})
        return envelope_response(
            422,
            success=False,
            message="Please fill in all fields correctly: " + ", ".join(fields),
            meta={"fields": fields},
            error_name=ValidationError.__name__,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Unknown routes, wrong methods and the like, wrapped in the envelope."""
        return envelope_response(
            exc.status_code,
            success=False,
            message=str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected server errors.

        The raw exception is written to the log only. The client receives a
        generic InternalError envelope.
        """
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        error = InternalError()
        return envelope_response(
            error.status_code,
            success=False,
            message=error.message,
            error_name=error.error_name,
        )


# ---------------------------------------------------------------------------
# Public routes
#
# Defined on the app (not a router) so they are reachable regardless of
# router registration. No auth: load balancers and monitors call them.
# ---------------------------------------------------------------------------


def _register_public_routes(app: FastAPI) -> None:
    @app.get("/", tags=["Health"])
    async def root() -> JSONResponse:
        return envelope_response(200, success=True, message="REST API Authentication and Authorization")

    @app.get("/api/health", tags=["Health"])
    def health(request: Request) -> JSONResponse:
        """Return API liveness, version, and whether the user database answers."""
        user_store: CredentialStore = request.app.state.user_store
        database = "ok" if user_store.ping() else "error"
        status = HTTPStatus.OK if database == "ok" else HTTPStatus.SERVICE_UNAVAILABLE
        payload = HealthResponse(
            status="healthy" if database == "ok" else "degraded",
            version=API_VERSION,
            components={"app": "ok", "database": database},
        )
        return envelope_response(
            int(status),
            success=database == "ok",
            message="Service is healthy" if database == "ok" else "Service is degraded",
            meta=payload.model_dump(),
        )
