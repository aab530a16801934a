#!/usr/bin/env python3
"""
RoleGate -- user registration, session tokens, and role-based access control.

Usage:
  python main.py serve
  python main.py serve --port 8080 --reload
  python main.py create-user --name Root --email root@example.com --role admin

Environment variables:
  SECRET_KEY    Token-signing key, at least 32 characters. Required unless
                DEBUG=true (then a throwaway key is generated per process).
  PORT          Port for `serve` (default 5000).
  DATABASE_URL  SQLAlchemy URL of the user database.
"""

import argparse
import getpass
import logging
import sys

from pydantic import ValidationError as PydanticValidationError

from api.models import RegisterRequest
from auth.errors import ConflictError
from auth.passwords import PasswordHasher
from auth.service import register_user
from auth.store import UserStore
from core.config import get_settings
from core.logging_config import configure_logging

logger = logging.getLogger("rolegate.cli")


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def _create_user(args: argparse.Namespace) -> int:
    """Seed a user through the same path as POST /api/auth/register.

    Arguments pass the same request validation as the HTTP body. The usual
    use is creating the first admin on a fresh database.
    """
    settings = get_settings()
    password = args.password or getpass.getpass("Password: ")
    try:
        details = RegisterRequest(name=args.name, email=args.email, password=password, role=args.role)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        print(f"  [!] Invalid user details: {fields}")
        return 1

    store = UserStore(settings.database_url)
    try:
        user = register_user(
            store,
            PasswordHasher(rounds=settings.bcrypt_rounds),
            details.name,
            details.email,
            details.password,
            details.role,
        )
    except ConflictError:
        print(f"  [!] A user with email '{details.email}' already exists.")
        return 1
    finally:
        store.close()

    print(f"  Created user {user.id} ({user.email}, role={user.role})")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rolegate",
        description="RoleGate authentication and authorization API.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn.")
    serve.add_argument("--host", help="Bind address (default: HOST or 127.0.0.1).")
    serve.add_argument("--port", type=int, help="Port (default: PORT or 5000).")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only).")
    serve.set_defaults(func=_serve)

    create = sub.add_parser("create-user", help="Create a user directly in the database.")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--role", default=None, help='Role name (default: "member").')
    create.add_argument("--password", help="Password (prompted for when omitted).")
    create.set_defaults(func=_create_user)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
