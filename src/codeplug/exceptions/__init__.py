"""Exception hierarchy for CodePlug."""

from .analysis import AnalysisError, FileAccessError, ParsingError
from .base import CodePlugError
from .collaborators import ModelBackendError, SourceControlError
from .config import ConfigurationError, InvalidConfigError
from .storage import SchemaValidationError, StorageError, StoreWriteError

__all__ = [
    "CodePlugError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "ConfigurationError",
    "InvalidConfigError",
    "StorageError",
    "SchemaValidationError",
    "StoreWriteError",
    "SourceControlError",
    "ModelBackendError",
]
