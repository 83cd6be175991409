"""Confidence-weighted aggregation of visitor findings across a project."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from ..config import CodePlugSettings, default_settings
from ..logging_config import get_logger
from ..models import MAX_EXAMPLES, DetectedPattern, Dimension, Finding, FolderNode, ParsedFile
from .visitors import Visitor, default_visitors, placement_findings, run_visitors

logger = get_logger(__name__)

FEATURE_BASED = "Feature-based folder structure"
MVC = "MVC folder structure"
LAYERED = "Layered architecture folder structure"
SRC_ROOT = "src/ root directory convention"


def percent(count: int, total: int) -> int:
    """``100 * count / total`` rounded half up; 0 for an empty total."""
    if total <= 0:
        return 0
    return math.floor(100 * count / total + 0.5)


@dataclass
class PatternAccumulator:
    dimension: Dimension
    pattern: str
    count: int = 0
    total: int = 0
    examples: list[str] = field(default_factory=list)

    def add(self, finding: Finding) -> None:
        self.count += finding.count
        self.total += finding.total
        if finding.example and len(self.examples) < MAX_EXAMPLES:
            self.examples.append(finding.example)

    @property
    def confidence(self) -> int:
        return percent(self.count, self.total)


def collect_dirs(tree: FolderNode) -> set[str]:
    """Every directory name and every directory path in ``tree``."""
    dirs: set[str] = set()
    stack = list(tree.children)
    while stack:
        node = stack.pop()
        dirs.add(node.name)
        dirs.add(node.path)
        stack.extend(node.children)
    return dirs


class PatternAggregator:
    """Merges per-file findings into project-level patterns.

    Accumulators are keyed by ``(dimension, pattern)``. Feed parsed batches
    with :meth:`ingest`, call :meth:`ingest_structure` once after the last
    batch, then read :meth:`get_patterns`.
    """

    def __init__(
        self,
        settings: Optional[CodePlugSettings] = None,
        visitors: Optional[list[Visitor]] = None,
    ):
        self.settings = settings or default_settings
        self.visitors = visitors if visitors is not None else default_visitors(self.settings)
        self.min_confidence = self.settings.convention.min_pattern_confidence
        self._accumulators: dict[tuple[str, str], PatternAccumulator] = {}

    def add_finding(self, finding: Finding) -> None:
        acc = self._accumulators.get(finding.key)
        if acc is None:
            acc = PatternAccumulator(finding.dimension, finding.pattern)
            self._accumulators[finding.key] = acc
        acc.add(finding)

    def ingest(self, batch: list[ParsedFile]) -> None:
        for file in batch:
            for finding in run_visitors(file, self.visitors):
                self.add_finding(finding)

    def ingest_structure(self, tree: FolderNode, file_paths: Optional[list[str]] = None) -> None:
        """Derive whole-project structural patterns from the directory tree."""
        top_dirs = [c.name for c in tree.children]
        structure = self.settings.structure

        if file_paths:
            self._ingest_directory_placement(file_paths, collect_dirs(tree))

        arch = structure.architecture
        if any(d in top_dirs for d in arch.feature_based):
            self._set_structure_sample(FEATURE_BASED, top_dirs)
        elif sum(d in top_dirs for d in arch.mvc) >= 2:
            self._set_structure_sample(MVC, top_dirs)
        elif sum(d in top_dirs for d in arch.layered) >= 2:
            self._set_structure_sample(LAYERED, top_dirs)

        if "src" in top_dirs:
            self._set_structure_sample(SRC_ROOT, ["src/"])

    def _ingest_directory_placement(self, file_paths: list[str], all_dirs: set[str]) -> None:
        """Recompute placement accumulators over the full file list.

        A rule only applies when its directory exists somewhere in the
        project; per-file samples gathered during :meth:`ingest` are
        replaced by the whole-project count.
        """
        for rule in self.settings.structure.directory_placement:
            key = ("structure", rule.pattern_name)
            self._accumulators.pop(key, None)
            if not any(d == rule.dir or d.endswith(f"/{rule.dir}") for d in all_dirs):
                continue
            acc = PatternAccumulator("structure", rule.pattern_name)
            for path in file_paths:
                for finding in placement_findings(path, [rule]):
                    acc.add(finding)
            if acc.total:
                self._accumulators[key] = acc

    def _set_structure_sample(self, pattern: str, examples: list[str]) -> None:
        self._accumulators[("structure", pattern)] = PatternAccumulator(
            "structure", pattern, count=1, total=1, examples=list(examples[:MAX_EXAMPLES])
        )

    def get_patterns(self) -> list[DetectedPattern]:
        """Patterns at or above the minimum confidence, most confident first."""
        results = []
        for acc in self._accumulators.values():
            if acc.total == 0:
                continue
            confidence = acc.confidence
            if confidence < self.min_confidence:
                continue
            results.append(
                DetectedPattern(
                    dimension=acc.dimension,
                    pattern=acc.pattern,
                    frequency=acc.count,
                    total=acc.total,
                    confidence=confidence,
                    examples=list(acc.examples),
                )
            )
        results.sort(key=lambda p: p.confidence, reverse=True)
        logger.debug("%d of %d accumulated patterns pass the threshold", len(results), len(self._accumulators))
        return results
