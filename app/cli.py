"""CLI entrypoints for operational tasks."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
from collections.abc import Sequence

import uvicorn

from app.config import configure_structlog, get_settings
from app.db.session import dispose_engine, get_session_factory
from app.errors import ServiceError
from app.services.user_service import get_user_service


async def _run_create_user(email: str, password: str) -> int:
    """Create a password account through the same service the HTTP route uses."""
    user_service = get_user_service()
    session_factory = get_session_factory()
    try:
        async with session_factory() as db_session:
            user = await user_service.create_user(
                db_session=db_session,
                email=email,
                password=password,
            )
    except ServiceError as exc:
        print(json.dumps({"created": False, "status_code": exc.status_code, "detail": exc.detail}))
        return 1
    finally:
        await dispose_engine()

    print(json.dumps({"created": True, "user_id": str(user.id), "email": user.email}))
    return 0


def _run_serve() -> int:
    """Serve the API on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_level=settings.app.log_level.lower(),
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.cli")
    subcommands = parser.add_subparsers(dest="command", required=True)

    create_parser = subcommands.add_parser("create-user")
    create_parser.add_argument("--email", required=True)
    create_parser.add_argument(
        "--password",
        default=None,
        help="Account password. Prompted for when omitted so it stays out of shell history.",
    )

    subcommands.add_parser("serve", help="Run the HTTP API with uvicorn.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run CLI command."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_structlog(get_settings())
    if args.command == "create-user":
        password = args.password if args.password is not None else getpass.getpass("Password: ")
        return asyncio.run(_run_create_user(email=args.email, password=password))
    if args.command == "serve":
        return _run_serve()
    parser.error("Unsupported command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
