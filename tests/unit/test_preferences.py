"""
Tests for trend_engine.preferences module.
"""
import json

import pytest

from trend_engine.models import ChartType, ForecastHorizon, RangeSelector, ViewMode
from trend_engine.preferences import (
    CHART_TYPE_KEY,
    FORECAST_HORIZON_KEY,
    TREND_RANGE_KEY,
    VIEW_MODE_KEY,
    DisplayPreferences,
    PreferenceStore,
)


class TestDisplayPreferences:
    """Tests for DisplayPreferences defaults and parsing."""

    def test_defaults(self):
        prefs = DisplayPreferences()
        assert prefs.chart_type is ChartType.AREA
        assert prefs.range is RangeSelector.LAST_30_DAYS
        assert prefs.view_mode is ViewMode.HISTORICAL
        assert prefs.horizon is ForecastHorizon.TWELVE_MONTHS

    def test_from_storage(self):
        prefs = DisplayPreferences.from_storage({
            CHART_TYPE_KEY: "bar",
            TREND_RANGE_KEY: "ytd",
            VIEW_MODE_KEY: "forecast",
            FORECAST_HORIZON_KEY: "6",
        })
        assert prefs == DisplayPreferences(
            ChartType.BAR, RangeSelector.YEAR_TO_DATE, ViewMode.FORECAST, ForecastHorizon.SIX_MONTHS
        )

    def test_corrupt_keys_fall_back_independently(self):
        """A bad value only resets its own key."""
        prefs = DisplayPreferences.from_storage({
            CHART_TYPE_KEY: "pie",
            TREND_RANGE_KEY: "7d",
            VIEW_MODE_KEY: 42,
            FORECAST_HORIZON_KEY: "NaN",
        })
        assert prefs.chart_type is ChartType.AREA
        assert prefs.range is RangeSelector.LAST_7_DAYS
        assert prefs.view_mode is ViewMode.HISTORICAL
        assert prefs.horizon is ForecastHorizon.TWELVE_MONTHS

    @pytest.mark.parametrize("data", [None, [], "garbage", {}])
    def test_unusable_storage(self, data):
        assert DisplayPreferences.from_storage(data) == DisplayPreferences()

    def test_storage_round_trip(self):
        prefs = DisplayPreferences().with_changes(range=RangeSelector.LAST_90_DAYS)
        assert DisplayPreferences.from_storage(prefs.to_storage()) == prefs

    def test_horizon_stored_as_text(self):
        stored = DisplayPreferences().to_storage()
        assert stored[FORECAST_HORIZON_KEY] == "12"


class TestPreferenceStore:
    """Tests for PreferenceStore file persistence."""

    def test_missing_file_gives_defaults(self, tmp_path):
        store = PreferenceStore(tmp_path / "missing.json")
        assert store.load() == DisplayPreferences()

    def test_save_and_load(self, tmp_path):
        store = PreferenceStore(tmp_path / "nested" / "prefs.json")
        prefs = DisplayPreferences(chart_type=ChartType.BAR, horizon=ForecastHorizon.THREE_MONTHS)
        store.save(prefs)
        assert store.load() == prefs

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")
        assert PreferenceStore(path).load() == DisplayPreferences()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({VIEW_MODE_KEY: "forecast"}), encoding="utf-8")
        prefs = PreferenceStore(path).load()
        assert prefs.view_mode is ViewMode.FORECAST
        assert prefs.range is RangeSelector.LAST_30_DAYS

    def test_failed_save_leaves_no_temp_file(self, tmp_path, monkeypatch):
        path = tmp_path / "prefs.json"
        store = PreferenceStore(path)

        def fail_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(type(path), "replace", fail_replace)
        with pytest.raises(OSError):
            store.save(DisplayPreferences())

        assert not path.exists()
        assert list(tmp_path.iterdir()) == []
