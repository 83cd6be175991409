"""Least-squares trend of recent compliance scores, and a terminal bar chart."""

from __future__ import annotations

import numpy as np

from ..models import ScoreRecord, Trend

REGRESSION_WINDOW = 8
SLOPE_THRESHOLD = 1.0
MAX_CHART_ENTRIES = 12
BAR_WIDTH = 40


class TrendTracker:
    def __init__(self, window: int = REGRESSION_WINDOW):
        self.window = window

    def slope(self, history: list[ScoreRecord]) -> float:
        """OLS slope of score against record index over the trailing window."""
        points = history[-self.window :]
        if len(points) < 2:
            return 0.0
        x = np.arange(len(points), dtype=float)
        y = np.array([r.score for r in points], dtype=float)
        return float(np.polyfit(x, y, 1)[0])

    def compute_trend(self, history: list[ScoreRecord]) -> Trend:
        """``improving`` above +1 point per record, ``declining`` below -1."""
        slope = self.slope(history)
        if slope > SLOPE_THRESHOLD:
            return "improving"
        if slope < -SLOPE_THRESHOLD:
            return "declining"
        return "stable"

    def render_trend_chart(self, history: list[ScoreRecord]) -> str:
        if not history:
            return "No score history available."
        lines = []
        for record in history[-MAX_CHART_ENTRIES:]:
            filled = round(record.score / 100 * BAR_WIDTH)
            bar = "█" * filled + "░" * (BAR_WIDTH - filled)
            lines.append(f"{record.created_at[:10]} │{bar}│ {record.score}")
        return "\n".join(lines)
