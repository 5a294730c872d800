"""
Executive trend comparison and forecast engine.

Turns two raw daily sales series plus a monthly forecast payload into
chart-ready structures:
- filters: range selectors -> dates, prior-period ranges, labels
- comparison: positional series alignment and period-over-period metrics
- forecast: actual/projected blending and scenario summary
- pipeline: loading/empty/ready/unavailable states and concurrent loading
- preferences: persisted chart display settings
"""

# Import in dependency order
from trend_engine.exceptions import (
    TrendEngineError,
    PayloadError,
    ConfigurationError,
    ValidationError,
)

from trend_engine.config import config, validate_config

from trend_engine.models import (
    RangeSelector,
    ComparisonMode,
    Metric,
    Scenario,
    ForecastHorizon,
    PointKind,
    Momentum,
    ChartType,
    ViewMode,
    DailyRecord,
    ComparisonPoint,
    ComparisonMetrics,
    MonthlyRecord,
    ForecastPoint,
    ForecastSummary,
    ForecastResult,
)

from trend_engine.filters import (
    DateRange,
    resolve_period,
    resolve_prior_period,
    comparison_label,
    format_date_range,
)

from trend_engine.comparison import (
    ComparisonResult,
    align_series,
    compare_metrics,
    percent_change,
)

from trend_engine.forecast import (
    blend_forecast,
    build_forecast,
    scenario_value,
    summarize_forecast,
)

from trend_engine.pipeline import (
    TrendLoader,
    TrendState,
    TrendStatus,
    comparison_state,
    forecast_state,
)

from trend_engine.preferences import DisplayPreferences, PreferenceStore

__all__ = [
    # Exceptions
    "TrendEngineError",
    "PayloadError",
    "ConfigurationError",
    "ValidationError",
    # Config
    "config",
    "validate_config",
    # Models
    "RangeSelector",
    "ComparisonMode",
    "Metric",
    "Scenario",
    "ForecastHorizon",
    "PointKind",
    "Momentum",
    "ChartType",
    "ViewMode",
    "DailyRecord",
    "ComparisonPoint",
    "ComparisonMetrics",
    "MonthlyRecord",
    "ForecastPoint",
    "ForecastSummary",
    "ForecastResult",
    # Periods
    "DateRange",
    "resolve_period",
    "resolve_prior_period",
    "comparison_label",
    "format_date_range",
    # Comparison
    "ComparisonResult",
    "align_series",
    "compare_metrics",
    "percent_change",
    # Forecast
    "blend_forecast",
    "build_forecast",
    "scenario_value",
    "summarize_forecast",
    # Pipeline
    "TrendLoader",
    "TrendState",
    "TrendStatus",
    "comparison_state",
    "forecast_state",
    # Preferences
    "DisplayPreferences",
    "PreferenceStore",
]
