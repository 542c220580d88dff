"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from migren import commands
from migren.errors import MigrenError
from migren.storage import create_dir_if_not_exists, default_migrations_dir

logger = logging.getLogger(__name__)


def _migration_id(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid migration id: {value!r}") from exc
    if not 0 <= number <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"invalid migration id: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migren",
        description="Small migration tool for relational databases.",
    )
    parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=default_migrations_dir(),
        help="migrations directory (default: current directory)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    to_parser = sub.add_parser(
        "to", help="Move to selected migration (can be used as rollback as well)"
    )
    to_parser.add_argument("migration_id", type=_migration_id)
    sub.add_parser("top", help="Move to last added migration")
    sub.add_parser("status", help="Status about DB and migrations")
    new_parser = sub.add_parser("new", help="Create new migration")
    new_parser.add_argument("name")
    return parser


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url is None:
        raise MigrenError("Failed to load env variables: DATABASE_URL is not set")
    return url


def _run(args: argparse.Namespace, database_url: str) -> None:
    if args.command == "to":
        commands.to(database_url, args.migration_id)
    elif args.command == "top":
        commands.top(database_url)
    elif args.command == "new":
        commands.new(args.name)
    elif args.command == "status":
        commands.status(database_url)


def main(argv: list[str] | None = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )
    args = build_parser().parse_args(argv)
    try:
        database_url = _database_url()
        create_dir_if_not_exists(args.directory)
        os.chdir(args.directory)
        _run(args, database_url)
    except (MigrenError, OSError, ValueError) as exc:
        logger.error("Program failed: %s", exc)
        return 1
    return 0