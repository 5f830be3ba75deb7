"""Command-line interface for the user administration console."""

from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from useradmin.client import UsersAPIClient, UsersAPIError
from useradmin.config import Settings, load_settings

logger = logging.getLogger("useradmin.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: $USERADMIN_CONFIG or config/useradmin.yaml)",
    )

    parser = argparse.ArgumentParser(description="User administration console")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", parents=[common], help="Start the web console")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the console")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the console (default: 8000)",
    )

    subparsers.add_parser(
        "list-users",
        parents=[common],
        help="Print the users held by the remote API",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "list-users"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _serve(*, settings: Settings, host: str, port: int) -> None:
    from useradmin.web import create_app
    import uvicorn

    logger.info("Starting user administration console on http://%s:%s", host, port)

    app = create_app(settings=settings)
    uvicorn.run(app, host=host, port=port, log_level="info")


async def _fetch_users(settings: Settings):
    async with UsersAPIClient(settings.api_base_url, timeout=settings.request_timeout) as client:
        return await client.list_users()


def _list_users(settings: Settings) -> int:
    try:
        users = asyncio.run(_fetch_users(settings))
    except UsersAPIError as exc:
        print(f"Failed to fetch users from {settings.api_base_url}: {exc}")
        return 1

    if not users:
        print("No users were returned by the API.")
        return 0

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':>4}  {'Name':<24}  {'Username':<16}  Email")
    print("-" * 80)
    for user in users:
        print(f"{user.id:>4}  {user.name:<24}  {user.username:<16}  {user.email}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    settings = load_settings(Path(args.config).expanduser() if args.config else None)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.command == "list-users":
        return _list_users(settings)

    _serve(settings=settings, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
