"""
Tests for trend_engine.forecast module.
"""
import pytest

from trend_engine.forecast import blend_forecast, build_forecast, scenario_value, summarize_forecast
from trend_engine.models import (
    ForecastBaseline,
    ForecastHorizon,
    ForecastPayload,
    Metric,
    Momentum,
    MonthlyRecord,
    PointKind,
    Scenario,
)
from trend_engine.schemas import parse_monthly_forecast


def _months(prefix: str, revenues, **bounds):
    return [
        MonthlyRecord(period=f"{prefix}-{i + 1:02d}", revenue=rev, appointments=rev / 100, **bounds)
        for i, rev in enumerate(revenues)
    ]


class TestBlendForecast:
    """Tests for blend_forecast function."""

    def test_single_bridge(self):
        """Exactly one bridge point, carrying both actual and projected."""
        points = blend_forecast(_months("2025", [100, 200]), _months("2026", [300, 400]))
        bridges = [p for p in points if p.kind is PointKind.BRIDGE]
        assert len(bridges) == 1
        assert bridges[0].projected == bridges[0].actual == 200
        assert bridges[0].confidence_lower == bridges[0].confidence_upper == 200

    def test_bridge_replaces_last_actual(self):
        """The bridge is the last actual point, not an extra point."""
        points = blend_forecast(_months("2025", [100, 200]), _months("2026", [300, 400]))
        assert len(points) == 4
        assert [p.kind for p in points] == [
            PointKind.ACTUAL, PointKind.BRIDGE, PointKind.PROJECTED, PointKind.PROJECTED
        ]
        assert points[1].label == "2025-02"

    def test_actual_and_projected_exclusive(self):
        points = blend_forecast(_months("2025", [100, 200]), _months("2026", [300]))
        for p in points:
            if p.kind is PointKind.ACTUAL:
                assert p.actual is not None and p.projected is None
            elif p.kind is PointKind.PROJECTED:
                assert p.actual is None and p.projected is not None

    def test_trailing_six_actuals(self):
        points = blend_forecast(_months("2025", list(range(1, 11))), [])
        assert len(points) == 6
        assert points[0].label == "2025-05"
        assert all(p.kind is PointKind.ACTUAL for p in points)

    def test_explicit_trailing_months(self):
        points = blend_forecast(_months("2025", [1, 2, 3, 4]), [], trailing_months=2)
        assert [p.label for p in points] == ["2025-03", "2025-04"]

    def test_zero_trailing_months_keeps_no_actuals(self):
        points = blend_forecast(_months("2025", [1, 2]), _months("2026", [5]), trailing_months=0)
        assert [p.kind for p in points] == [PointKind.PROJECTED]

    def test_fewer_than_six_actuals(self):
        points = blend_forecast(_months("2025", [1, 2]), [])
        assert len(points) == 2

    def test_no_bridge_without_projections(self):
        points = blend_forecast(_months("2025", [100, 200]), [])
        assert all(p.kind is PointKind.ACTUAL for p in points)

    def test_projections_only(self):
        points = blend_forecast([], _months("2026", [300, 400]))
        assert [p.kind for p in points] == [PointKind.PROJECTED, PointKind.PROJECTED]

    def test_projected_bounds_from_record(self):
        projected = _months("2026", [300], confidence_lower=250.0, confidence_upper=350.0)
        points = blend_forecast([], projected, Metric.REVENUE)
        assert points[0].confidence_lower == 250
        assert points[0].confidence_upper == 350

    def test_projected_bounds_default_to_value(self):
        """Without bounds the band has zero width."""
        points = blend_forecast([], _months("2026", [300]), Metric.REVENUE)
        assert points[0].confidence_lower == points[0].confidence_upper == 300

    def test_appointments_metric_uses_appointment_bounds(self):
        projected = _months(
            "2026", [300], confidence_lower=250.0, appointments_lower=2.0, appointments_upper=4.0
        )
        points = blend_forecast([], projected, Metric.APPOINTMENTS)
        assert points[0].projected == 3
        assert points[0].confidence_lower == 2
        assert points[0].confidence_upper == 4

    def test_empty(self):
        assert blend_forecast([], []) == []


class TestScenarioValue:
    """Tests for scenario multiplier rule."""

    def test_optimistic(self):
        assert scenario_value(1000, Scenario.OPTIMISTIC) == 1150.0

    def test_conservative(self):
        assert scenario_value(1000, Scenario.CONSERVATIVE) == 850.0

    def test_baseline(self):
        assert scenario_value(1000, Scenario.BASELINE) == 1000.0

    def test_rounds_to_cents(self):
        assert scenario_value(1234.567, Scenario.BASELINE) == 1234.57


class TestSummarizeForecast:
    """Tests for summarize_forecast function."""

    @pytest.fixture
    def baseline(self):
        return ForecastBaseline(
            projected_revenue={3: 30000.0, 6: 61000.0, 12: 125000.0},
            projected_appointments={3: 600.0, 6: 1210.0, 12: 2450.0},
            momentum=Momentum.DECELERATING,
            mom_growth=-1.5,
            yoy_growth=8.0,
            months_available=14,
            trend_fit=0.72,
        )

    def test_horizon_selects_base(self, baseline):
        summary = summarize_forecast(baseline, ForecastHorizon.SIX_MONTHS, Scenario.BASELINE)
        assert summary.revenue == 61000.0
        assert summary.appointments == 1210

    def test_fixed_band(self, baseline):
        summary = summarize_forecast(baseline, ForecastHorizon.THREE_MONTHS, Scenario.BASELINE)
        assert summary.revenue_lower == pytest.approx(25500.0)
        assert summary.revenue_upper == pytest.approx(34500.0)
        assert summary.appointments_lower == 510
        assert summary.appointments_upper == 690

    def test_scenario_applied_before_band(self, baseline):
        summary = summarize_forecast(baseline, ForecastHorizon.THREE_MONTHS, Scenario.OPTIMISTIC)
        assert summary.revenue == pytest.approx(34500.0)
        assert summary.revenue_lower == pytest.approx(29325.0)
        assert summary.revenue_upper == pytest.approx(39675.0)
        assert summary.appointments == 690

    def test_appointments_are_integers(self, baseline):
        summary = summarize_forecast(baseline, ForecastHorizon.TWELVE_MONTHS, Scenario.CONSERVATIVE)
        assert isinstance(summary.appointments, int)
        assert isinstance(summary.appointments_upper, int)
        # 2450 * 0.85 = 2082.5 rounds half up
        assert summary.appointments == 2083

    def test_passthrough_fields(self, baseline):
        summary = summarize_forecast(baseline, ForecastHorizon.TWELVE_MONTHS, Scenario.OPTIMISTIC)
        assert summary.momentum is Momentum.DECELERATING
        assert summary.mom_growth == -1.5
        assert summary.yoy_growth == 8.0
        assert summary.months_available == 14
        assert summary.trend_fit == 0.72

    def test_no_baseline(self):
        assert summarize_forecast(None) is None


class TestBuildForecast:
    """Tests for build_forecast function."""

    def test_full_payload(self, forecast_payload):
        result = build_forecast(
            parse_monthly_forecast(forecast_payload),
            Scenario.BASELINE,
            Metric.REVENUE,
            ForecastHorizon.THREE_MONTHS,
        )
        assert len(result.points) == 6 + 3
        assert result.summary.revenue == 48000.0
        assert result.insights == forecast_payload["insights"]

    def test_scenario_selects_projection(self, forecast_payload):
        payload = parse_monthly_forecast(forecast_payload)
        baseline = build_forecast(payload, Scenario.BASELINE)
        optimistic = build_forecast(payload, Scenario.OPTIMISTIC)
        assert optimistic.points[-1].projected > baseline.points[-1].projected

    def test_empty_payload(self, empty_forecast_payload):
        result = build_forecast(parse_monthly_forecast(empty_forecast_payload))
        assert result.points == []
        assert result.summary is None
        assert result.is_empty

    def test_empty_history_ignores_summary(self):
        """With nothing to chart the summary is withheld even if one was sent."""
        payload = ForecastPayload(baseline=ForecastBaseline(projected_revenue={12: 1000.0}))
        result = build_forecast(payload)
        assert result.points == []
        assert result.summary is None

    def test_missing_scenario_keeps_actuals(self, forecast_payload):
        forecast_payload["monthlyScenarios"].pop("optimistic")
        result = build_forecast(parse_monthly_forecast(forecast_payload), Scenario.OPTIMISTIC)
        assert len(result.points) == 6
        assert all(p.kind is PointKind.ACTUAL for p in result.points)
