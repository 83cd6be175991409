"""Tests for compliance scoring and trend detection."""

from io import StringIO

from rich.console import Console

from codeplug.models import ScoreRecord
from codeplug.persistence import ScoreStore
from codeplug.scoring import ComplianceScorer, TrendTracker, render_report

from conftest import make_violation


def records(*scores):
    return [
        ScoreRecord(
            id=f"r{i}",
            project_hash="p",
            score=s,
            breakdown={},
            created_at=f"2026-01-{i + 1:02d}T00:00:00+00:00",
        )
        for i, s in enumerate(scores)
    ]


class TestCalculate:
    def test_critical_and_high(self):
        score = ComplianceScorer().calculate([make_violation("critical"), make_violation("high")])
        assert score.total == 77
        assert score.breakdown == {"critical": 1, "high": 1, "medium": 0, "low": 0}

    def test_no_violations(self):
        score = ComplianceScorer().calculate([])
        assert score.total == 100
        assert score.passed

    def test_floored_at_zero(self):
        score = ComplianceScorer().calculate([make_violation("critical")] * 10)
        assert score.total == 0
        assert not score.passed

    def test_non_increasing(self):
        scorer = ComplianceScorer()
        totals = [scorer.calculate([make_violation("medium")] * n).total for n in range(10)]
        assert totals == sorted(totals, reverse=True)


class TestTrend:
    def test_too_few_points(self):
        tracker = TrendTracker()
        assert tracker.compute_trend([]) == "stable"
        assert tracker.compute_trend(records(50)) == "stable"

    def test_improving_and_declining(self):
        tracker = TrendTracker()
        assert tracker.compute_trend(records(60, 65, 72, 80, 85)) == "improving"
        assert tracker.compute_trend(records(85, 80, 72, 65, 60)) == "declining"

    def test_constant(self):
        assert TrendTracker().compute_trend(records(70, 70, 70, 70)) == "stable"

    def test_window_limits_regression(self):
        # Early decline falls outside a 3-record window.
        assert TrendTracker(window=3).compute_trend(records(90, 10, 20, 30, 40)) == "improving"

    def test_chart(self):
        chart = TrendTracker().render_trend_chart(records(*range(0, 100, 5)))
        lines = chart.splitlines()
        assert len(lines) == 12
        assert lines[-1] == "2026-01-20 │" + "█" * 38 + "░" * 2 + "│ 95"


class TestPersist:
    def test_history_feeds_trend(self, tmp_path):
        scorer = ComplianceScorer()
        for n in (6, 4, 2, 0):
            score = scorer.score_and_persist([make_violation("medium")] * n, tmp_path)
        assert score.total == 100
        assert score.trend == "improving"
        with ScoreStore(tmp_path) as store:
            assert [r.score for r in store.history()] == [82, 88, 94, 100]


class TestReport:
    def test_grouped_by_severity(self):
        violations = [
            make_violation("low", id="l1", file="src/low.ts"),
            make_violation("critical", id="c1", file="src/crit.ts", auto_fixable=True),
        ]
        score = ComplianceScorer().calculate(violations)
        out = StringIO()
        render_report(score, violations, Console(file=out, width=120, color_system=None))
        text = out.getvalue()
        assert text.index("CRITICAL") < text.index("LOW")
        assert "codeplug fix --id c1" in text
        assert "FAIL" not in text
