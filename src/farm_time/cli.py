"""Command-line interface for Farm Time."""

import argparse
import asyncio
import logging
import sys

from sqlalchemy import select

from farm_time.auth.session import SessionStore
from farm_time.config import Settings, get_settings
from farm_time.database.connection import close_db, create_tables, get_db, init_db
from farm_time.database.models import User

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    from farm_time.api import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


async def _init_db(settings: Settings) -> int:
    await init_db(settings)
    try:
        await create_tables()
    finally:
        await close_db()
    return 0


async def _purge_sessions(settings: Settings) -> int:
    await init_db(settings)
    try:
        async with get_db() as db:
            purged = await SessionStore(db, ttl=settings.session_ttl).purge_expired()
    finally:
        await close_db()

    print(f"Purged {purged} expired sessions")
    return 0


async def _revoke_sessions(settings: Settings, email: str) -> int:
    await init_db(settings)
    try:
        async with get_db() as db:
            user = await db.scalar(select(User).where(User.email == email))
            if user is None:
                print(f"No user with email {email}", file=sys.stderr)
                return 1
            store = SessionStore(db, ttl=settings.session_ttl)
            revoked = await store.delete_user_sessions(user.id)
    finally:
        await close_db()

    logger.info(f"Revoked {revoked} sessions for {email}")
    print(f"Revoked {revoked} sessions for {email}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Farm Time - Plan gatherings, meals and who brings what"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST)")
    serve_parser.add_argument("--port", type=int, help="Listen port (default: PORT)")

    # Database commands
    subparsers.add_parser("init-db", help="Create missing database tables")
    subparsers.add_parser("purge-sessions", help="Delete expired login sessions")

    revoke_parser = subparsers.add_parser(
        "revoke-sessions", help="Log a user out everywhere"
    )
    revoke_parser.add_argument("email", help="Email address of the user")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    _configure_logging(settings)

    if args.command == "serve":
        return _serve(settings, args)
    if args.command == "init-db":
        return asyncio.run(_init_db(settings))
    if args.command == "purge-sessions":
        return asyncio.run(_purge_sessions(settings))
    if args.command == "revoke-sessions":
        return asyncio.run(_revoke_sessions(settings, args.email))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
