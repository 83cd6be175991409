"""Violation detection, compliance scoring, trends and auto-fixes."""

from .autofix import AutoFixer, FixOutcome, FixReport, RenameAction
from .scorer import ComplianceScorer, render_report
from .trend import TrendTracker
from .violations import AuditResult, ViolationDetector

__all__ = [
    "AutoFixer",
    "FixOutcome",
    "FixReport",
    "RenameAction",
    "ComplianceScorer",
    "render_report",
    "TrendTracker",
    "AuditResult",
    "ViolationDetector",
]
