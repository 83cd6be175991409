"""Drift detection over git diffs."""

from .classifier import CommitDrift, DriftClassifier, DriftScan, render_drift_report
from .diff_parser import DiffFileStat, diff_stats, parse_diff
from .gate import ConfidenceGate
from .matchers import MATCHERS, MatchResult

__all__ = [
    "CommitDrift",
    "DriftClassifier",
    "DriftScan",
    "render_drift_report",
    "DiffFileStat",
    "diff_stats",
    "parse_diff",
    "ConfidenceGate",
    "MATCHERS",
    "MatchResult",
]
