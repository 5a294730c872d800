"""
Persisted display preferences for the trend chart.

Preferences are plain string values stored under independent keys. Each key
is validated on load; a missing or corrupt value falls back to its default
without affecting the others and without raising.

Usage:
    from trend_engine.preferences import PreferenceStore

    store = PreferenceStore()
    prefs = store.load()
    store.save(prefs.with_changes(range=RangeSelector.LAST_7_DAYS))
"""
import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from trend_engine.config import config
from trend_engine.exceptions import ValidationError
from trend_engine.models import ChartType, ForecastHorizon, RangeSelector, ViewMode
from trend_engine.observability import get_logger
from trend_engine.validators import validate_horizon, validate_range_selector

logger = get_logger(__name__)

CHART_TYPE_KEY = "exec-trend-chart-type"
TREND_RANGE_KEY = "exec-trend-range"
VIEW_MODE_KEY = "exec-trend-view-mode"
FORECAST_HORIZON_KEY = "exec-trend-forecast-horizon"


def _chart_type(value: Any) -> ChartType:
    return ChartType(value)


def _view_mode(value: Any) -> ViewMode:
    return ViewMode(value)


@dataclass(frozen=True)
class DisplayPreferences:
    """Chart style, range, view mode and forecast horizon."""
    chart_type: ChartType = ChartType.AREA
    range: RangeSelector = RangeSelector.LAST_30_DAYS
    view_mode: ViewMode = ViewMode.HISTORICAL
    horizon: ForecastHorizon = ForecastHorizon.TWELVE_MONTHS

    @classmethod
    def from_storage(cls, data: Optional[Mapping[str, Any]]) -> "DisplayPreferences":
        """Build preferences from stored key/value pairs, defaulting per key."""
        defaults = cls()
        data = data if isinstance(data, Mapping) else {}

        parsers = {
            "chart_type": (CHART_TYPE_KEY, _chart_type),
            "range": (TREND_RANGE_KEY, validate_range_selector),
            "view_mode": (VIEW_MODE_KEY, _view_mode),
            "horizon": (FORECAST_HORIZON_KEY, validate_horizon),
        }

        values = {}
        for attr, (key, parse) in parsers.items():
            raw = data.get(key)
            if raw is None:
                values[attr] = getattr(defaults, attr)
                continue
            try:
                values[attr] = parse(raw)
            except (ValueError, ValidationError):
                logger.warning(
                    "Ignoring invalid stored preference",
                    extra={"key": key, "value": raw},
                )
                values[attr] = getattr(defaults, attr)

        return cls(**values)

    def to_storage(self) -> Dict[str, str]:
        """Serialize to the stored key/value form."""
        return {
            CHART_TYPE_KEY: self.chart_type.value,
            TREND_RANGE_KEY: self.range.value,
            VIEW_MODE_KEY: self.view_mode.value,
            FORECAST_HORIZON_KEY: str(self.horizon.value),
        }

    def with_changes(self, **changes: Any) -> "DisplayPreferences":
        return replace(self, **changes)


class PreferenceStore:
    """
    JSON file store for display preferences.

    Reads never raise: an absent, unreadable or corrupt file yields defaults.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else config.preferences.path

    def load(self) -> DisplayPreferences:
        """Load preferences, falling back to defaults on any storage problem."""
        if not self.path.exists():
            return DisplayPreferences()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Preferences file unreadable, using defaults: {e}")
            return DisplayPreferences()

        return DisplayPreferences.from_storage(data)

    def save(self, preferences: DisplayPreferences) -> None:
        """Persist preferences, replacing the file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(preferences.to_storage(), indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        finally:
            tmp_path.unlink(missing_ok=True)
        logger.debug("Preferences saved", extra={"path": str(self.path)})
