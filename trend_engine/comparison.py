"""
Period-over-period comparison.

Pairs the current and prior daily series by relative day index and derives
totals, daily averages and percent change for the chart header.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd

from trend_engine.filters import DateRange, format_date_range
from trend_engine.models import ComparisonMetrics, ComparisonPoint, DailyRecord, Metric
from trend_engine.observability import get_logger

logger = get_logger(__name__)


def _side(records: Sequence[DailyRecord], metric: Metric) -> pd.DataFrame:
    return pd.DataFrame({
        "date": pd.Series([r.date for r in records], dtype=object),
        "value": pd.Series([r.value(metric) for r in records], dtype=float),
    })


def align_series(
    current: Sequence[DailyRecord],
    prior: Sequence[DailyRecord],
    metric: Metric = Metric.REVENUE,
) -> List[ComparisonPoint]:
    """
    Align two daily series by position, not by calendar date.

    Day 1 of the current series is paired with day 1 of the prior series.
    The shorter side is zero-filled, so the output always has
    max(len(current), len(prior)) points and callers cannot tell a missing
    day from a day with zero activity.
    """
    metric = Metric(metric)
    cur = _side(current, metric)
    pri = _side(prior, metric)

    # Outer join on the positional RangeIndex
    values = pd.DataFrame({"current": cur["value"], "prior": pri["value"]}).fillna(0.0)
    dates = pd.DataFrame({"current": cur["date"], "prior": pri["date"]}).astype(object)
    dates = dates.where(dates.notna(), None)

    points = [
        ComparisonPoint(
            day_index=i,
            current_value=float(values.at[i, "current"]),
            prior_value=float(values.at[i, "prior"]),
            current_date=dates.at[i, "current"],
            prior_date=dates.at[i, "prior"],
        )
        for i in range(len(values))
    ]

    if len(current) != len(prior):
        logger.debug(
            "Zero-filled shorter series",
            extra={"current_days": len(current), "prior_days": len(prior)},
        )
    return points


def percent_change(current_total: float, prior_total: float) -> float:
    """
    Percent change with an explicit zero-denominator policy.

    prior > 0       -> (current - prior) / prior * 100
    prior == 0, current > 0 -> 100
    otherwise       -> 0
    """
    if prior_total > 0:
        return (current_total - prior_total) / prior_total * 100
    if current_total > 0:
        return 100.0
    return 0.0


def compare_metrics(points: Sequence[ComparisonPoint]) -> ComparisonMetrics:
    """
    Totals, daily averages and percent change over aligned points.

    Totals include the zero-filled padding, so a shorter series lowers its
    daily average rather than being averaged over its own length.
    """
    current_total = sum(p.current_value for p in points)
    prior_total = sum(p.prior_value for p in points)
    day_count = max(len(points), 1)

    return ComparisonMetrics(
        current_total=current_total,
        prior_total=prior_total,
        current_daily_average=current_total / day_count,
        prior_daily_average=prior_total / day_count,
        percent_change=percent_change(current_total, prior_total),
    )


@dataclass(frozen=True)
class ComparisonResult:
    """Chart-ready comparison between the current and prior ranges."""
    current_range: DateRange
    prior_range: DateRange
    label: str
    metric: Metric
    points: List[ComparisonPoint] = field(default_factory=list)
    metrics: Optional[ComparisonMetrics] = None

    def to_dict(self) -> dict:
        return {
            "metric": self.metric.value,
            "label": self.label,
            "currentRange": {
                "start": self.current_range.start_str,
                "end": self.current_range.end_str,
                "display": format_date_range(self.current_range),
            },
            "priorRange": {
                "start": self.prior_range.start_str,
                "end": self.prior_range.end_str,
                "display": format_date_range(self.prior_range),
            },
            "points": [p.to_dict() for p in self.points],
            **(self.metrics.to_dict() if self.metrics else {}),
        }
