"""Semantic coherence: does each top-level symbol plausibly belong in its file?

Both the pattern-detection and violation passes ask the zero-shot model one
symbol at a time. Any :class:`ModelBackendError` propagates so the caller can
mark the whole pass as skipped.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

from sklearn.metrics.pairwise import cosine_similarity

from ..exceptions import FileAccessError, ModelBackendError, ParsingError
from ..inference import ModelManager
from ..logging_config import get_logger
from ..models import MAX_EXAMPLES, Convention, DetectedPattern, Violation
from ..scanning import read_and_parse, syntax
from .aggregator import percent
from .detector import SEMANTIC_RULE
from .visitors.base import file_ext, file_stem

logger = get_logger(__name__)

SEMANTIC_EXTENSIONS = frozenset({".ts", ".tsx"})
LABELS = ["related", "unrelated"]
MIN_FILES = 3
MIN_SYMBOLS = 3
SNIPPET_CHARS = 512


class SemanticCoherenceService:
    def __init__(self, models: ModelManager):
        self.models = models

    def check_with_zero_shot(self, export_name: str, file_context: str) -> float:
        """Probability that ``export_name`` is related to ``file_context``."""
        model = self.models.load("zero_shot")
        sequence = f"Export: {export_name}. File context: {file_context[:256]}"
        try:
            scores = model.classify(sequence, LABELS)
        except Exception as e:
            raise ModelBackendError("zero_shot", str(e)) from e
        return scores.get("related", 0.5)

    def check_with_sentence_similarity(self, export_name: str, file_context: str) -> float:
        """Cosine similarity between the symbol and the file context embeddings."""
        model = self.models.load("sentence_similarity")
        try:
            vectors = model.embed([f"Main export: {export_name}", file_context[:SNIPPET_CHARS]])
        except Exception as e:
            raise ModelBackendError("sentence_similarity", str(e)) from e
        return float(cosine_similarity(vectors[0:1], vectors[1:2])[0, 0])

    def check_export_fits_context(
        self,
        export_name: str,
        stem: str,
        snippet: Optional[str] = None,
        threshold: float = 0.5,
    ) -> bool:
        context = f"{stem}: {snippet}" if snippet else stem
        return self.check_with_zero_shot(export_name, context) >= threshold


def _symbol_sources(project_root: Path, file_paths: list[str]) -> list[tuple[str, str, list[str]]]:
    """(path, snippet, symbols) for every parseable TS file that declares symbols."""
    sources = []
    for rel in file_paths:
        if file_ext(rel) not in SEMANTIC_EXTENSIONS:
            continue
        try:
            parsed = read_and_parse(project_root, rel)
        except (FileAccessError, ParsingError) as e:
            logger.debug("Semantic pass skipping %s: %s", rel, e)
            continue
        symbols = syntax.top_level_symbols(parsed)
        if symbols:
            sources.append((rel, parsed.source[:SNIPPET_CHARS], symbols))
    return sources


def detect_semantic_pattern(
    project_root: Path,
    file_paths: list[str],
    models: ModelManager,
    threshold: float = 0.5,
) -> Optional[DetectedPattern]:
    """Share of top-level symbols that fit their file, as a naming pattern.

    Returns None with fewer than three TS files or three symbols.

    Raises:
        ModelBackendError: The model could not be loaded or failed mid-pass
    """
    if sum(file_ext(f) in SEMANTIC_EXTENSIONS for f in file_paths) < MIN_FILES:
        return None

    service = SemanticCoherenceService(models)
    fits = total = 0
    examples: list[str] = []
    with models.session():
        for rel, snippet, symbols in _symbol_sources(Path(project_root), file_paths):
            for symbol in symbols:
                total += 1
                if service.check_export_fits_context(symbol, file_stem(rel), snippet, threshold):
                    fits += 1
            if len(examples) < MAX_EXAMPLES:
                examples.append(rel)

    if total < MIN_SYMBOLS:
        return None
    return DetectedPattern(
        dimension="naming",
        pattern=SEMANTIC_RULE,
        frequency=fits,
        total=total,
        confidence=percent(fits, total),
        examples=examples,
    )


def find_semantic_convention(conventions: list[Convention]) -> Optional[Convention]:
    for c in conventions:
        if c.confirmed and c.dimension == "naming" and c.rule == SEMANTIC_RULE:
            return c
    return None


def detect_semantic_violations(
    project_root: Path,
    file_paths: list[str],
    convention: Convention,
    models: ModelManager,
    threshold: float = 0.6,
) -> list[Violation]:
    """One violation per top-level symbol scoring below ``threshold``.

    Raises:
        ModelBackendError: The model could not be loaded or failed mid-pass
    """
    service = SemanticCoherenceService(models)
    violations: list[Violation] = []
    with models.session():
        for rel, snippet, symbols in _symbol_sources(Path(project_root), file_paths):
            stem = file_stem(rel)
            for symbol in symbols:
                if service.check_export_fits_context(symbol, stem, snippet, threshold):
                    continue
                violations.append(
                    Violation(
                        id=str(uuid.uuid4()),
                        convention_id=convention.id,
                        severity=convention.severity,
                        file=rel,
                        message=f"Violates: {SEMANTIC_RULE}",
                        expected=f'Symbol "{symbol}" should fit file context ({stem})',
                        found=f'Symbol "{symbol}" does not semantically fit file context',
                        auto_fixable=False,
                    )
                )
    return violations
