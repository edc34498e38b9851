"""Relational persistence for recorded expenses."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import StorageError
from .models import Expense

logger = logging.getLogger(__name__)

TABLE_NAME = "expenses"
SCHEMA_PATH = Path(__file__).with_name("schema.sql")

_SELECT_COLUMNS = "SELECT id, amount, memo, created_on FROM expenses"


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_lower(engine: Engine) -> None:
    """Replace SQLite's ASCII-only LOWER() so memo matching folds all of Unicode."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def _like_pattern(term: str) -> str:
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ExpenseStorage:
    """Owns the connection to the store and every query against ``expenses``."""

    def __init__(self, engine: Engine, schema_path: Path = SCHEMA_PATH) -> None:
        self._engine = engine
        self._schema_path = schema_path
        if engine.dialect.name == "sqlite":
            _register_sqlite_lower(engine)
        try:
            self._connection = engine.connect()
        except SQLAlchemyError as exc:
            raise StorageError(f"Unable to connect to {engine.url!r}") from exc

    def ensure_schema(self) -> bool:
        """Create the expenses table when the catalog does not list it.

        Returns True when the schema script was executed.
        """
        try:
            if inspect(self._connection).has_table(TABLE_NAME):
                return False
        except SQLAlchemyError as exc:
            raise StorageError("Unable to inspect the database catalog") from exc

        try:
            script = self._schema_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to read schema from {self._schema_path}") from exc

        statements = [stmt.strip() for stmt in script.split(";") if stmt.strip()]
        try:
            for statement in statements:
                self._connection.exec_driver_sql(statement)
            self._connection.commit()
        except SQLAlchemyError as exc:
            self._rollback()
            raise StorageError(f"Unable to apply schema from {self._schema_path}") from exc
        logger.info("Created table %s from %s", TABLE_NAME, self._schema_path.name)
        return True

    def insert(self, amount: Decimal, memo: str, created_on: date) -> None:
        self._write(
            "INSERT INTO expenses (amount, memo, created_on) VALUES (:amount, :memo, :created_on)",
            {"amount": str(amount), "memo": memo, "created_on": created_on.isoformat()},
        )
        logger.info("Inserted expense of %s dated %s", amount, created_on)

    def delete_by_id(self, expense_id: int) -> None:
        self._write("DELETE FROM expenses WHERE id = :id", {"id": expense_id})
        logger.info("Deleted expense %s", expense_id)

    def delete_all(self) -> None:
        self._write("DELETE FROM expenses")
        logger.info("Deleted all expenses")

    def fetch_by_id(self, expense_id: int) -> Optional[Expense]:
        rows = self._read(f"{_SELECT_COLUMNS} WHERE id = :id", {"id": expense_id})
        return rows[0] if rows else None

    def fetch_all(self) -> List[Expense]:
        return self._read(f"{_SELECT_COLUMNS} ORDER BY id")

    def search(self, term: str) -> List[Expense]:
        return self._read(
            f"{_SELECT_COLUMNS} WHERE LOWER(memo) LIKE :pattern ESCAPE '\\' ORDER BY id",
            {"pattern": _like_pattern(term)},
        )

    def exists(self, expense_id: int) -> bool:
        result = self._execute(
            "SELECT 1 FROM expenses WHERE id = :id", {"id": expense_id}
        )
        return result.first() is not None

    def count(self) -> int:
        return int(self._execute("SELECT COUNT(id) FROM expenses").scalar_one())

    def close(self) -> None:
        self._connection.close()
        self._engine.dispose()

    def __enter__(self) -> "ExpenseStorage":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _read(self, statement: str, params: Optional[Dict[str, Any]] = None) -> List[Expense]:
        result = self._execute(statement, params)
        return [Expense.from_row(row) for row in result.mappings()]

    def _write(self, statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        self._execute(statement, params)
        try:
            self._connection.commit()
        except SQLAlchemyError as exc:
            self._rollback()
            raise StorageError("Unable to commit changes") from exc

    def _execute(self, statement: str, params: Optional[Dict[str, Any]] = None):
        try:
            return self._connection.execute(text(statement), params or {})
        except SQLAlchemyError as exc:
            self._rollback()
            raise StorageError(f"Query failed: {exc}") from exc

    def _rollback(self) -> None:
        try:
            self._connection.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback failed after a storage error", exc_info=True)


def create_storage(database_url: str) -> ExpenseStorage:
    """Build the engine for ``database_url`` and wrap it in an ExpenseStorage."""
    try:
        engine = create_engine(database_url)
    except (SQLAlchemyError, ImportError) as exc:
        raise StorageError(f"Invalid database URL {database_url!r}") from exc
    return ExpenseStorage(engine)
