"""Promotion of detected patterns into convention candidates."""

from __future__ import annotations

import re
from typing import Optional

from ..config import CodePlugSettings, default_settings
from ..logging_config import get_logger
from ..models import MAX_EXAMPLES, AnalysisResult, ConventionCandidate, Dimension, Severity

logger = get_logger(__name__)

SEMANTIC_RULE = "Export semantically fits file context"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def convention_id(dimension: str, rule: str) -> str:
    """Deterministic id: ``naming`` + ``Utility files use camelCase`` -> ``naming-utility-files-use-camelcase``."""
    slug = _NON_ALNUM.sub("-", rule.lower()).strip("-")[:40]
    return f"{dimension}-{slug}"


def dirs_in_paths(file_paths: list[str]) -> set[str]:
    dirs: set[str] = set()
    for path in file_paths:
        parts = path.split("/")[:-1]
        for i, part in enumerate(parts):
            dirs.add(part)
            dirs.add("/".join(parts[: i + 1]))
    return dirs


class ConventionDetector:
    """Turns an :class:`AnalysisResult` into candidates awaiting confirmation."""

    def __init__(self, settings: Optional[CodePlugSettings] = None):
        self.settings = settings or default_settings

    def _severity(self, dimension: str, fallback: str = "medium") -> Severity:
        return self.settings.convention.severity_map.get(dimension, fallback)  # type: ignore[return-value]

    def _candidate(
        self, dimension: Dimension, rule: str, confidence: int, examples: list[str], fallback: str = "medium"
    ) -> ConventionCandidate:
        return ConventionCandidate(
            id=convention_id(dimension, rule),
            dimension=dimension,
            rule=rule,
            confidence=confidence,
            examples=list(examples[:MAX_EXAMPLES]),
            severity=self._severity(dimension, fallback),
        )

    def detect(self, analysis: AnalysisResult) -> list[ConventionCandidate]:
        threshold = self.settings.convention.confidence_threshold
        candidates = [
            self._candidate(p.dimension, p.pattern, p.confidence, p.examples)
            for p in analysis.patterns
            if p.confidence >= threshold
        ]
        seen = {(c.dimension, c.rule) for c in candidates}

        candidates.extend(self._bootstrap_directory_placement(analysis, seen))
        candidates.extend(self._bootstrap_semantic(seen))

        candidates.sort(key=lambda c: c.confidence, reverse=True)
        logger.debug(
            "%d candidates from %d patterns (threshold %d)", len(candidates), len(analysis.patterns), threshold
        )
        return candidates

    def _bootstrap_directory_placement(
        self, analysis: AnalysisResult, seen: set[tuple[str, str]]
    ) -> list[ConventionCandidate]:
        """Placement rules whose directory exists, even if no file sampled them."""
        all_dirs = dirs_in_paths(analysis.file_paths)
        results = []
        for rule in self.settings.structure.directory_placement:
            if not any(d == rule.dir or d.endswith(f"/{rule.dir}") for d in all_dirs):
                continue
            key = ("structure", rule.pattern_name)
            if key in seen:
                continue
            seen.add(key)
            results.append(self._candidate("structure", rule.pattern_name, 100, [], fallback="high"))
        return results

    def _bootstrap_semantic(self, seen: set[tuple[str, str]]) -> list[ConventionCandidate]:
        if not self.settings.convention.enable_semantic_coherence:
            return []
        key = ("naming", SEMANTIC_RULE)
        if key in seen:
            return []
        seen.add(key)
        return [self._candidate("naming", SEMANTIC_RULE, 100, [])]
