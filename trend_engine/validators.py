"""
Input validation for trend chart options.

All validators accept either the enum member or its raw value and raise
ValidationError on anything outside the closed option set.
"""
from enum import Enum
from typing import Any, Type, TypeVar

from trend_engine.exceptions import ValidationError
from trend_engine.models import ComparisonMode, ForecastHorizon, Metric, RangeSelector, Scenario

E = TypeVar("E", bound=Enum)


def _validate_choice(value: Any, enum_cls: Type[E], field: str) -> E:
    if value is None or value == "":
        raise ValidationError(field, "Value is required")

    if isinstance(value, bool):
        raise ValidationError(field, "Must not be a boolean", value)

    try:
        return enum_cls(value)
    except ValueError:
        options = ", ".join(str(m.value) for m in enum_cls)
        raise ValidationError(field, f"Must be one of: {options}", value)


def validate_range_selector(value: Any, field: str = "range") -> RangeSelector:
    """Validate a range selector (7d, 30d, 90d, mtd, ytd)."""
    if isinstance(value, str):
        value = value.strip().lower()
    return _validate_choice(value, RangeSelector, field)


def validate_comparison_mode(value: Any, field: str = "comparison") -> ComparisonMode:
    """Validate a comparison mode (mom, yoy)."""
    if isinstance(value, str):
        value = value.strip().lower()
    return _validate_choice(value, ComparisonMode, field)


def validate_metric(value: Any, field: str = "metric") -> Metric:
    """Validate a charted metric (revenue, appointments)."""
    return _validate_choice(value, Metric, field)


def validate_scenario(value: Any, field: str = "scenario") -> Scenario:
    """Validate a forecast scenario (conservative, baseline, optimistic)."""
    return _validate_choice(value, Scenario, field)


def validate_horizon(value: Any, field: str = "horizon") -> ForecastHorizon:
    """
    Validate a forecast horizon in months.

    Accepts ints or numeric strings ("12"), since stored preferences are text.
    """
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or isinstance(value, bool):
        options = ", ".join(str(h.value) for h in ForecastHorizon)
        raise ValidationError(field, f"Must be one of: {options}", value)
    return _validate_choice(value, ForecastHorizon, field)
