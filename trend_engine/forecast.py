"""
Forecast blending.

Merges trailing actual months with the selected scenario's projected months
into one ordered series joined by a bridge point, and derives the
scenario-adjusted headline summary for the selected horizon.
"""
import math
from dataclasses import replace
from typing import List, Optional, Sequence

from trend_engine.config import config
from trend_engine.models import (
    ForecastBaseline,
    ForecastHorizon,
    ForecastPayload,
    ForecastPoint,
    ForecastResult,
    ForecastSummary,
    Metric,
    MonthlyRecord,
    PointKind,
    Scenario,
)
from trend_engine.observability import get_logger

logger = get_logger(__name__)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def blend_forecast(
    actuals: Sequence[MonthlyRecord],
    projected: Sequence[MonthlyRecord],
    metric: Metric = Metric.REVENUE,
    trailing_months: Optional[int] = None,
) -> List[ForecastPoint]:
    """
    Build the ordered actual → bridge → projected series.

    Args:
        actuals: Monthly actuals in chronological order
        projected: Projected months for the selected scenario
        metric: Revenue or appointments
        trailing_months: How many trailing actual months to keep (default from config)

    Returns:
        Ordered points. When both sides are present the last actual point is
        turned into the single bridge point, whose projected value and
        confidence bounds equal its actual value.
    """
    metric = Metric(metric)
    trailing = config.forecast.trailing_months if trailing_months is None else trailing_months
    recent = list(actuals)[-trailing:] if actuals and trailing > 0 else []

    points = [
        ForecastPoint(label=m.period, kind=PointKind.ACTUAL, actual=m.value(metric))
        for m in recent
    ]

    if points and projected:
        last = points[-1]
        points[-1] = replace(
            last,
            kind=PointKind.BRIDGE,
            projected=last.actual,
            confidence_lower=last.actual,
            confidence_upper=last.actual,
        )

    points.extend(
        ForecastPoint(
            label=m.period,
            kind=PointKind.PROJECTED,
            projected=m.value(metric),
            confidence_lower=m.lower(metric),
            confidence_upper=m.upper(metric),
        )
        for m in projected
    )
    return points


def scenario_value(base: float, scenario: Scenario) -> float:
    """Apply the scenario multiplier to a base projection, rounded to cents."""
    return _round_half_up(base * Scenario(scenario).multiplier, 2)


def summarize_forecast(
    baseline: Optional[ForecastBaseline],
    horizon: ForecastHorizon = ForecastHorizon.TWELVE_MONTHS,
    scenario: Scenario = Scenario.BASELINE,
) -> Optional[ForecastSummary]:
    """
    Scenario-adjusted summary for the selected horizon.

    The band is a fixed ±15% around the scenario value, independent of the
    collaborator's confidence data. Revenue is rounded to 2 decimals,
    appointment counts to integers. Momentum, growth rates, months available
    and trend fit pass through unchanged.
    """
    if baseline is None:
        return None

    horizon = ForecastHorizon(horizon)
    multiplier = Scenario(scenario).multiplier
    lower, upper = config.forecast.band_lower, config.forecast.band_upper

    revenue = baseline.projected_revenue.get(horizon.value, 0.0) * multiplier
    appointments = baseline.projected_appointments.get(horizon.value, 0.0) * multiplier

    return ForecastSummary(
        revenue=_round_half_up(revenue, 2),
        revenue_lower=_round_half_up(revenue * lower, 2),
        revenue_upper=_round_half_up(revenue * upper, 2),
        appointments=int(_round_half_up(appointments)),
        appointments_lower=int(_round_half_up(appointments * lower)),
        appointments_upper=int(_round_half_up(appointments * upper)),
        momentum=baseline.momentum,
        mom_growth=baseline.mom_growth,
        yoy_growth=baseline.yoy_growth,
        months_available=baseline.months_available,
        trend_fit=baseline.trend_fit,
    )


def build_forecast(
    payload: ForecastPayload,
    scenario: Scenario = Scenario.BASELINE,
    metric: Metric = Metric.REVENUE,
    horizon: ForecastHorizon = ForecastHorizon.TWELVE_MONTHS,
) -> ForecastResult:
    """
    Blend points and summarize a forecast payload.

    With neither actuals nor projections the result is empty with no
    summary: the chart shows "insufficient history" rather than an error.
    """
    projected = payload.projections(scenario)
    if not payload.actuals and not projected:
        logger.info(
            "Forecast has no history or projections",
            extra={"scenario": Scenario(scenario).value, "horizon": int(horizon)},
        )
        return ForecastResult(insights=list(payload.insights))

    return ForecastResult(
        points=blend_forecast(payload.actuals, projected, metric),
        summary=summarize_forecast(payload.baseline, horizon, scenario),
        insights=list(payload.insights),
    )
