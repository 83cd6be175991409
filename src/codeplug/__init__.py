"""
CodePlug - Convention governance for TypeScript/JavaScript codebases

Infers a project's unwritten coding conventions from its syntax trees,
audits files against the confirmed ones, scores compliance over time, and
flags commits that drift away from them.
"""

__version__ = "0.1.0"

from .analysis import ConventionDetector, PatternAggregator
from .drift import DriftClassifier
from .models import Convention, ConventionCandidate, DetectedPattern, DriftResult, Violation
from .scanning import AstAnalyzer
from .scoring import ComplianceScorer, ViolationDetector

__all__ = [
    "AstAnalyzer",
    "PatternAggregator",
    "ConventionDetector",
    "ViolationDetector",
    "ComplianceScorer",
    "DriftClassifier",
    "Convention",
    "ConventionCandidate",
    "DetectedPattern",
    "DriftResult",
    "Violation",
]
