from typing import Any, Dict, Optional


class DataCleanerError(Exception):
    """Base exception for data cleaning errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DataCleanerError):
    """Raised when an operation parameter is missing or malformed."""


class LoadError(DataCleanerError):
    """Raised when an uploaded file is empty or cannot be parsed."""


class TableError(DataCleanerError):
    """Raised when rows and headers do not form a valid table."""


class HistoryError(DataCleanerError):
    """Raised on navigation to a history entry that does not exist."""
