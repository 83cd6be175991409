"""Core data models shared across the analysis, scoring and drift layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

Severity = Literal["critical", "high", "medium", "low"]
Dimension = Literal[
    "naming",
    "structure",
    "component",
    "testing",
    "error-handling",
    "imports",
    "git",
    "state",
    "api",
]
Classification = Literal["following", "ambiguous", "drifting"]
Trend = Literal["improving", "stable", "declining"]
RuleScope = Literal["filename", "path", "content"]

SEVERITIES: tuple[str, ...] = ("critical", "high", "medium", "low")
DIMENSIONS: tuple[str, ...] = (
    "naming",
    "structure",
    "component",
    "testing",
    "error-handling",
    "imports",
    "git",
    "state",
    "api",
)

MAX_EXAMPLES = 5


@dataclass
class ParsedFile:
    """One source file with its syntax tree. Lives only for one analysis pass."""

    path: str  # project-relative, forward slashes
    source: str
    tree: Any  # tree_sitter.Tree
    source_bytes: bytes = b""

    def __post_init__(self) -> None:
        if not self.source_bytes:
            self.source_bytes = self.source.encode("utf-8")

    @property
    def root(self) -> Any:
        return self.tree.root_node


@dataclass
class Finding:
    """One visitor's observation on one file for a (dimension, pattern) pair.

    ``count`` is the number of conforming instances out of ``total`` observed.
    ``expected``/``found`` carry a concrete identifier mismatch (for example a
    class whose name differs from its file). ``export_name`` is the name of
    the file's primary export when it should dictate the file name.
    """

    dimension: Dimension
    pattern: str
    count: int
    total: int
    example: Optional[str] = None
    expected: Optional[str] = None
    found: Optional[str] = None
    export_name: Optional[str] = None
    export_kind: Optional[str] = None

    def __post_init__(self) -> None:
        if self.count > self.total:
            raise ValueError(f"count ({self.count}) exceeds total ({self.total})")

    @property
    def key(self) -> tuple[str, str]:
        return (self.dimension, self.pattern)

    @property
    def conforming(self) -> bool:
        return self.count >= self.total


@dataclass
class DetectedPattern:
    dimension: Dimension
    pattern: str
    frequency: int
    total: int
    confidence: int
    examples: list[str] = field(default_factory=list)


@dataclass
class ConventionCandidate:
    id: str
    dimension: Dimension
    rule: str
    confidence: int
    examples: list[str]
    severity: Severity


@dataclass
class Convention:
    """A confirmed, persisted convention."""

    id: str
    dimension: Dimension
    rule: str
    confidence: float
    confirmed: bool
    examples: list[str]
    severity: Severity

    @classmethod
    def from_candidate(
        cls, candidate: ConventionCandidate, severity: Optional[Severity] = None
    ) -> Convention:
        return cls(
            id=candidate.id,
            dimension=candidate.dimension,
            rule=candidate.rule,
            confidence=candidate.confidence,
            confirmed=True,
            examples=list(candidate.examples),
            severity=severity or candidate.severity,
        )


@dataclass
class CustomRule:
    """User-authored regex rule from ``rules.json``."""

    id: str
    pattern: str
    scope: RuleScope
    message: str
    severity: Optional[Severity] = None


@dataclass
class Violation:
    id: str
    convention_id: str
    severity: Severity
    file: str
    message: str
    expected: str
    found: str
    auto_fixable: bool
    line: Optional[int] = None


@dataclass
class DriftResult:
    file: str
    convention_id: str
    dimension: Dimension
    rule: str
    classification: Classification
    confidence: float
    detail: str
    needs_review: bool = False


@dataclass(frozen=True)
class GatedResult:
    """A matcher classification after the confidence gate."""

    classification: Classification
    confidence: float
    needs_review: bool


@dataclass
class ScoreRecord:
    id: str
    project_hash: str
    score: int
    breakdown: dict[str, int]
    created_at: str  # ISO-8601


@dataclass
class ComplianceScore:
    total: int
    breakdown: dict[str, int]
    violation_count: int
    threshold: int
    trend: Optional[Trend] = None

    @property
    def passed(self) -> bool:
        return self.total >= self.threshold


@dataclass
class FolderNode:
    name: str
    path: str
    children: list[FolderNode] = field(default_factory=list)
    file_count: int = 0

    def child(self, name: str) -> Optional[FolderNode]:
        for c in self.children:
            if c.name == name:
                return c
        return None


@dataclass
class AnalysisResult:
    file_count: int
    duration_ms: int
    patterns: list[DetectedPattern]
    folder_structure: FolderNode
    file_paths: list[str] = field(default_factory=list)


@dataclass
class DiffHunk:
    """Added/removed lines for one file within a unified diff."""

    file: str
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    binary: bool = False

    @property
    def added_text(self) -> str:
        return "\n".join(self.added)


@dataclass
class CommitInfo:
    hash: str
    date: str
    message: str
    author: str
