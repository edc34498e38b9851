"""Command handlers: validate arguments, call the storage, render output."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Sequence

from .exceptions import ValidationError
from .models import Expense
from .storage import ExpenseStorage
from .validators import parse_amount, parse_expense_id, validate_memo

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 50
TOTAL_LABEL = "Total"
TOTAL_WIDTH = 26

ADD_USAGE = "You must provide an amount and memo."
ADDED = "The expense has been added."
DELETED_HEADING = "The following expense has been deleted:"
MISSING_ID = "You must provide an expense id."
CLEAR_PROMPT = "This will remove all expenses. Are you sure? (y/n) "
CLEARED = "All expenses have been deleted."


def count_message(count: int) -> str:
    if count == 0:
        return "There are no expenses."
    if count == 1:
        return "There is 1 expense."
    return f"There are {count} expenses."


def format_expense(expense: Expense) -> str:
    return " | ".join(
        [
            f"{expense.id:>3}",
            f"{expense.created_on.isoformat():>10}",
            f"{expense.amount:>12.2f}",
            expense.memo,
        ]
    )


def format_total(expenses: Iterable[Expense]) -> str:
    total = sum((expense.amount for expense in expenses), Decimal("0"))
    return f"{TOTAL_LABEL}{total:>{TOTAL_WIDTH}.2f}"


def render(expenses: Sequence[Expense], show_total: bool = True) -> List[str]:
    """Return the lines printed for a set of expenses.

    The total footer only appears when requested and at least one row is shown.
    """
    lines = ["", count_message(len(expenses))]
    lines.extend(format_expense(expense) for expense in expenses)
    if show_total and expenses:
        lines.append("-" * SEPARATOR_WIDTH)
        lines.append(format_total(expenses))
    lines.append("")
    return lines


class ExpenseCommands:
    """One method per CLI subcommand."""

    def __init__(
        self,
        storage: ExpenseStorage,
        prompt: Callable[[str], str] = input,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._storage = storage
        self._prompt = prompt
        self._today = today

    def add(self, *args: str) -> None:
        if len(args) != 2:
            print(ADD_USAGE)
            return
        try:
            amount = parse_amount(args[0])
            memo = validate_memo(args[1])
        except ValidationError as exc:
            logger.debug("Rejected add arguments: %s", exc)
            print(ADD_USAGE)
            return
        self._storage.insert(amount, memo, self._today())
        print(ADDED)

    def list(self, *args: str) -> None:
        self._display(self._storage.fetch_all())

    def search(self, *args: str) -> None:
        term = args[0] if args else ""
        self._display(self._storage.search(term))

    def delete(self, *args: str) -> None:
        if not args:
            print(MISSING_ID)
            return
        raw_id = args[0]
        expense_id = parse_expense_id(raw_id)
        if expense_id is None or not self._storage.exists(expense_id):
            print(f"There is no expense with the id '{raw_id}'")
            return
        expense = self._storage.fetch_by_id(expense_id)
        print(DELETED_HEADING)
        self._display([expense] if expense else [], show_total=False)
        self._storage.delete_by_id(expense_id)

    def clear(self, *args: str) -> None:
        try:
            answer = self._prompt(CLEAR_PROMPT)
        except EOFError:
            answer = ""
        if answer.strip()[:1].lower() != "y":
            logger.debug("Clear declined with %r", answer)
            return
        self._storage.delete_all()
        print(CLEARED)

    def _display(self, expenses: Sequence[Expense], show_total: bool = True) -> None:
        for line in render(expenses, show_total=show_total):
            print(line)
