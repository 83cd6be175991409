"""Persisted project state under ``.codeplug/``."""

from .json_store import read_validated, state_dir, write_json
from .scores import ScoreStore, project_hash
from .stores import ConventionStore, CustomRuleStore, ViolationStore, read_decisions

__all__ = [
    "ConventionStore",
    "CustomRuleStore",
    "ViolationStore",
    "read_decisions",
    "ScoreStore",
    "project_hash",
    "read_validated",
    "state_dir",
    "write_json",
]
