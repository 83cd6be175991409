"""Pattern extraction, aggregation and convention detection."""

from .aggregator import PatternAggregator
from .detector import SEMANTIC_RULE, ConventionDetector, convention_id
from .semantic import (
    SemanticCoherenceService,
    detect_semantic_pattern,
    detect_semantic_violations,
    find_semantic_convention,
)
from .visitors import default_visitors, run_visitors

__all__ = [
    "PatternAggregator",
    "ConventionDetector",
    "SEMANTIC_RULE",
    "convention_id",
    "SemanticCoherenceService",
    "detect_semantic_pattern",
    "detect_semantic_violations",
    "find_semantic_convention",
    "default_visitors",
    "run_visitors",
]
