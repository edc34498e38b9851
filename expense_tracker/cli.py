"""Console interface for the expense recorder."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from expenses.exceptions import StorageError
from expenses.services import ExpenseCommands
from expenses.storage import create_storage

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///expenses.db"
COMMANDS = {
    "list": "List all expenses",
    "add": "Record a new expense: AMOUNT MEMO",
    "search": "List expenses with a matching memo: QUERY",
    "delete": "Remove the expense with id NUMBER",
    "clear": "Delete all expenses",
}

HELP_TEXT = """An expense recording system

Commands:

add AMOUNT MEMO - record a new expense
clear - delete all expenses
list - list all expenses
delete NUMBER - remove expense with id NUMBER
search QUERY - list expenses with a matching memo field"""


def _configure_logging() -> None:
    level_name = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expense", description="An expense recording system", add_help=False
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, summary in COMMANDS.items():
        command_parser = subparsers.add_parser(name, help=summary, add_help=False)
        command_parser.add_argument("args", nargs="*", default=[])
    return parser


def dispatch(commands: ExpenseCommands, argv: List[str]) -> None:
    """Run the handler named by ``argv[0]`` with the remaining tokens."""
    if not argv or argv[0] not in COMMANDS:
        print(HELP_TEXT)
        return
    # "--" keeps tokens such as "-4.25" or "--x" as plain arguments.
    args = build_parser().parse_args([argv[0], "--", *argv[1:]])
    logger.debug("Dispatching %s with %d argument(s)", args.command, len(args.args))
    getattr(commands, args.command)(*args.args)


def main(argv: Optional[List[str]] = None) -> int:
    _configure_logging()
    if argv is None:
        argv = sys.argv[1:]

    database_url = os.getenv("EXPENSE_TRACKER_DATABASE_URL", DEFAULT_DATABASE_URL)
    try:
        with create_storage(database_url) as storage:
            storage.ensure_schema()
            dispatch(ExpenseCommands(storage), argv)
    except StorageError as exc:
        logger.error("Storage error: %s", exc)
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
