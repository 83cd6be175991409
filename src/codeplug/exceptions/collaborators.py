"""Failures raised by external collaborators (source control, model backend)."""

from typing import Optional

from .base import CodePlugError


class SourceControlError(CodePlugError):
    """Raised when a git query fails or the directory is not a repository."""

    def __init__(self, operation: str, reason: str, repo_path: Optional[str] = None):
        details = {"operation": operation, "reason": reason}
        if repo_path:
            details["repo"] = repo_path
        super().__init__(f"Source control query failed: {operation}", details=details)
        self.operation = operation
        self.reason = reason


class ModelBackendError(CodePlugError):
    """Raised when a model cannot be loaded or inference fails."""

    def __init__(self, role: str, reason: str):
        super().__init__(
            f"Model backend failed for role '{role}'",
            details={"role": role, "reason": reason},
        )
        self.role = role
        self.reason = reason
