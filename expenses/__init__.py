"""Core logic package for the expense recorder."""

from .exceptions import StorageError, ValidationError
from .models import Expense
from .services import ExpenseCommands
from .storage import ExpenseStorage, create_storage

__all__ = [
    "Expense",
    "ExpenseCommands",
    "ExpenseStorage",
    "create_storage",
    "StorageError",
    "ValidationError",
]
