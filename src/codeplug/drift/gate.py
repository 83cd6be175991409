"""Confidence gate between drift matchers and the report."""

from __future__ import annotations

from ..models import Classification, GatedResult


class ConfidenceGate:
    """Flags low-confidence matches for human review.

    The matcher's classification and confidence are republished unchanged;
    only ``needs_review`` is derived here.
    """

    def __init__(self, threshold: float = 0.7):
        self.threshold = threshold

    def gate(self, classification: Classification, confidence: float) -> GatedResult:
        return GatedResult(
            classification=classification,
            confidence=confidence,
            needs_review=confidence < self.threshold,
        )
