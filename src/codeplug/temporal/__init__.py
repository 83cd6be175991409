"""Source-control access."""

from .git import GitIntegration, SourceControl

__all__ = ["GitIntegration", "SourceControl"]
