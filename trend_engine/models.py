"""
Domain models for the executive trend chart.

Provides enums for the closed option sets (range, comparison mode, metric,
scenario, horizon) and dataclasses for the records flowing through the
comparison and forecast pipelines. Derived values are never mutated: every
recomputation builds fresh instances.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Dict, List, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class RangeSelector(str, Enum):
    """Relative date window, re-evaluated against "today" on every view."""
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    MONTH_TO_DATE = "mtd"
    YEAR_TO_DATE = "ytd"

    @property
    def display_name(self) -> str:
        """Short button label."""
        return self.value.upper()

    @property
    def trailing_days(self) -> Optional[int]:
        """Window length for trailing selectors, None for calendar-anchored ones."""
        lengths = {
            RangeSelector.LAST_7_DAYS: 7,
            RangeSelector.LAST_30_DAYS: 30,
            RangeSelector.LAST_90_DAYS: 90,
        }
        return lengths.get(self)


class ComparisonMode(str, Enum):
    """Policy for choosing the prior period."""
    MONTH_OVER_MONTH = "mom"  # immediately preceding window of equal length
    YEAR_OVER_YEAR = "yoy"


class Metric(str, Enum):
    """Charted metric."""
    REVENUE = "revenue"
    APPOINTMENTS = "appointments"

    @property
    def daily_field(self) -> str:
        """Field name on daily sales records (appointments are counted as transactions)."""
        return "revenue" if self is Metric.REVENUE else "transactions"

    @property
    def display_name(self) -> str:
        return self.value.title()


class Scenario(str, Enum):
    """Forecast scenario, each a fixed multiplier over the base projection."""
    CONSERVATIVE = "conservative"
    BASELINE = "baseline"
    OPTIMISTIC = "optimistic"

    @property
    def multiplier(self) -> float:
        multipliers = {
            Scenario.CONSERVATIVE: 0.85,
            Scenario.BASELINE: 1.0,
            Scenario.OPTIMISTIC: 1.15,
        }
        return multipliers[self]

    @property
    def display_name(self) -> str:
        return self.value.title()


class ForecastHorizon(IntEnum):
    """Forward-looking projection length in months."""
    THREE_MONTHS = 3
    SIX_MONTHS = 6
    TWELVE_MONTHS = 12

    @property
    def suffix(self) -> str:
        """Key suffix used by the forecast summary payload (3m, 6m, 12m)."""
        return f"{self.value}m"

    @property
    def display_name(self) -> str:
        return f"{self.value}M"


class PointKind(str, Enum):
    """Role of a point in the blended forecast series."""
    ACTUAL = "actual"
    BRIDGE = "bridge"
    PROJECTED = "projected"


class Momentum(str, Enum):
    """Growth momentum classification supplied by the forecast collaborator."""
    ACCELERATING = "accelerating"
    DECELERATING = "decelerating"
    STEADY = "steady"


class ChartType(str, Enum):
    AREA = "area"
    BAR = "bar"


class ViewMode(str, Enum):
    HISTORICAL = "historical"
    FORECAST = "forecast"


# ═══════════════════════════════════════════════════════════════════════════════
# LABEL HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def short_date_label(value: date) -> str:
    """Axis label, e.g. "Jan 5"."""
    return f"{value:%b} {value.day}"


def long_date_label(value: date) -> str:
    """Tooltip label, e.g. "Mon, Jan 5"."""
    return f"{value:%a}, {value:%b} {value.day}"


# ═══════════════════════════════════════════════════════════════════════════════
# DAILY COMPARISON
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DailyRecord:
    """One day of sales activity. Days without activity may be absent."""
    date: date
    revenue: float = 0.0
    transactions: int = 0

    def value(self, metric: Metric) -> float:
        """Value of the given metric for this day."""
        return getattr(self, metric.daily_field)


@dataclass(frozen=True)
class ComparisonPoint:
    """Current and prior values paired by relative day index."""
    day_index: int
    current_value: float
    prior_value: float
    current_date: Optional[date] = None
    prior_date: Optional[date] = None

    @property
    def label(self) -> str:
        """Axis label: current-side date if present, else "Day N"."""
        if self.current_date:
            return short_date_label(self.current_date)
        return f"Day {self.day_index + 1}"

    @property
    def prior_label(self) -> str:
        return short_date_label(self.prior_date) if self.prior_date else ""

    @property
    def delta_percent(self) -> float:
        """Per-day change vs prior. Zero when there is no positive prior value."""
        if self.prior_value > 0:
            return (self.current_value - self.prior_value) / self.prior_value * 100
        return 0.0

    def to_dict(self) -> dict:
        """Chart-ready dictionary."""
        return {
            "dayIndex": self.day_index,
            "dayLabel": self.label,
            "priorDayLabel": self.prior_label,
            "current": self.current_value,
            "prior": self.prior_value,
            "currentDate": long_date_label(self.current_date) if self.current_date else "",
            "priorDate": long_date_label(self.prior_date) if self.prior_date else "",
        }


@dataclass(frozen=True)
class ComparisonMetrics:
    """Period-over-period figures derived from aligned points."""
    current_total: float
    prior_total: float
    current_daily_average: float
    prior_daily_average: float
    percent_change: float

    def to_dict(self) -> dict:
        return {
            "currentTotal": self.current_total,
            "priorTotal": self.prior_total,
            "currentDailyAvg": self.current_daily_average,
            "priorDailyAvg": self.prior_daily_average,
            "pctChange": self.percent_change,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# FORECAST
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MonthlyRecord:
    """Monthly actual or projected figures."""
    period: str
    revenue: float = 0.0
    appointments: float = 0.0
    confidence_lower: Optional[float] = None
    confidence_upper: Optional[float] = None
    appointments_lower: Optional[float] = None
    appointments_upper: Optional[float] = None

    def value(self, metric: Metric) -> float:
        return self.revenue if metric is Metric.REVENUE else self.appointments

    def lower(self, metric: Metric) -> float:
        """Lower confidence bound, defaulting to the value itself."""
        bound = self.confidence_lower if metric is Metric.REVENUE else self.appointments_lower
        return self.value(metric) if bound is None else bound

    def upper(self, metric: Metric) -> float:
        """Upper confidence bound, defaulting to the value itself."""
        bound = self.confidence_upper if metric is Metric.REVENUE else self.appointments_upper
        return self.value(metric) if bound is None else bound


@dataclass(frozen=True)
class ForecastBaseline:
    """
    Base figures computed by the forecast collaborator.

    projected_revenue / projected_appointments are keyed by horizon in months.
    The remaining fields are passed through to the summary untouched.
    """
    projected_revenue: Dict[int, float] = field(default_factory=dict)
    projected_appointments: Dict[int, float] = field(default_factory=dict)
    momentum: Momentum = Momentum.STEADY
    mom_growth: Optional[float] = None
    yoy_growth: Optional[float] = None
    months_available: int = 0
    trend_fit: Optional[float] = None


@dataclass(frozen=True)
class ForecastPayload:
    """Monthly actuals, per-scenario projections and baseline summary."""
    actuals: List[MonthlyRecord] = field(default_factory=list)
    scenarios: Dict[Scenario, List[MonthlyRecord]] = field(default_factory=dict)
    baseline: Optional[ForecastBaseline] = None
    insights: List[str] = field(default_factory=list)

    def projections(self, scenario: Scenario) -> List[MonthlyRecord]:
        return self.scenarios.get(Scenario(scenario), [])


@dataclass(frozen=True)
class ForecastPoint:
    """
    One point of the blended actual/projected series.

    Exactly one of actual/projected is set, except on the bridge point
    which carries both.
    """
    label: str
    kind: PointKind
    actual: Optional[float] = None
    projected: Optional[float] = None
    confidence_lower: Optional[float] = None
    confidence_upper: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "actual": self.actual,
            "projected": self.projected,
            "confLower": self.confidence_lower,
            "confUpper": self.confidence_upper,
            "type": self.kind.value,
        }


@dataclass(frozen=True)
class ForecastSummary:
    """Scenario-adjusted headline figures for the selected horizon."""
    revenue: float
    revenue_lower: float
    revenue_upper: float
    appointments: int
    appointments_lower: int
    appointments_upper: int
    momentum: Momentum = Momentum.STEADY
    mom_growth: Optional[float] = None
    yoy_growth: Optional[float] = None
    months_available: int = 0
    trend_fit: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "revenue": self.revenue,
            "revenueLower": self.revenue_lower,
            "revenueUpper": self.revenue_upper,
            "appointments": self.appointments,
            "appointmentsLower": self.appointments_lower,
            "appointmentsUpper": self.appointments_upper,
            "momentum": self.momentum.value,
            "momGrowth": self.mom_growth,
            "yoyGrowth": self.yoy_growth,
            "monthsAvailable": self.months_available,
            "trendFit": self.trend_fit,
        }


@dataclass(frozen=True)
class ForecastResult:
    """Blended points plus summary. An empty point list means insufficient history."""
    points: List[ForecastPoint] = field(default_factory=list)
    summary: Optional[ForecastSummary] = None
    insights: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_dict(self) -> Dict[str, object]:
        return {
            "points": [p.to_dict() for p in self.points],
            "summary": self.summary.to_dict() if self.summary else None,
            "insights": list(self.insights),
        }
