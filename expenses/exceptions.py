"""Domain-specific exceptions for the expense recorder."""

class ValidationError(ValueError):
    """Raised when user-supplied arguments do not meet validation requirements."""


class StorageError(IOError):
    """Raised when the relational store cannot be reached or a query fails."""
