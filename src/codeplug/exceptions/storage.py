"""Persisted-state exceptions: schema validation and write failures."""

from pathlib import Path

from .base import CodePlugError


class StorageError(CodePlugError):
    """Base class for persisted-state errors."""

    pass


class SchemaValidationError(StorageError):
    """Raised when a persisted file does not match its schema."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Invalid persisted state: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class StoreWriteError(StorageError):
    """Raised when persisted state cannot be written."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot write persisted state: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
