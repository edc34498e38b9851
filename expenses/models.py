"""Data models for the expense recorder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

from .validators import quantize_amount

__all__ = ["Expense", "parse_date"]


def parse_date(value: Any) -> date:
    """Accept a ``date`` (PostgreSQL drivers) or an ISO string (SQLite)."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Expense:
    id: int
    amount: Decimal
    memo: str
    created_on: date

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Expense":
        """Hydrate an Expense from a result row mapping."""
        return cls(
            id=int(row["id"]),
            amount=quantize_amount(Decimal(str(row["amount"]))),
            memo=row["memo"],
            created_on=parse_date(row["created_on"]),
        )
