"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, timedelta
from typing import Any, Dict, List

from trend_engine.cache import ComputationCache


def make_daily_payload(start: date, values: List[float], transactions: List[int] = None) -> Dict[str, Any]:
    """Daily series payload as delivered by fetchDailySeries."""
    transactions = transactions or [int(v // 50) for v in values]
    return {
        "overall": [
            {
                "date": (start + timedelta(days=i)).isoformat(),
                "revenue": value,
                "transactions": transactions[i],
            }
            for i, value in enumerate(values)
        ]
    }


@pytest.fixture
def daily_payload():
    """Factory for daily series payloads."""
    return make_daily_payload


@pytest.fixture
def reference_date() -> date:
    """Fixed "today" for deterministic range resolution."""
    return date(2026, 3, 15)


@pytest.fixture
def cache() -> ComputationCache:
    """Fresh computation cache per test."""
    return ComputationCache(max_entries=16)


@pytest.fixture
def forecast_payload() -> Dict[str, Any]:
    """Monthly forecast payload with 8 actual months and 3 projected months per scenario."""
    actuals = [
        {"period": f"2025-{m:02d}", "revenue": 10000.0 + m * 500, "appointments": 200 + m * 5}
        for m in range(5, 13)
    ]

    def projected(multiplier: float) -> List[Dict[str, Any]]:
        return [
            {
                "period": f"2026-{m:02d}",
                "revenue": round(16000.0 * multiplier + m * 100, 2),
                "appointments": int(300 * multiplier) + m,
                "confidenceLower": round(14000.0 * multiplier, 2),
                "confidenceUpper": round(18000.0 * multiplier, 2),
            }
            for m in range(1, 4)
        ]

    return {
        "monthlyActuals": actuals,
        "monthlyScenarios": {
            "conservative": projected(0.85),
            "baseline": projected(1.0),
            "optimistic": projected(1.15),
        },
        "summary": {
            "projectedRevenue3m": 48000.0,
            "projectedRevenue6m": 97000.0,
            "projectedRevenue12m": 200000.0,
            "projectedAppointments3m": 900,
            "projectedAppointments6m": 1820,
            "projectedAppointments12m": 3700,
            "momentum": "accelerating",
            "lastMoMGrowth": 4.2,
            "yoyGrowth": 12.5,
            "monthsAvailable": 8,
            "revenueTrendR2": 0.87,
        },
        "insights": ["Revenue is trending up for the third month in a row."],
    }


@pytest.fixture
def empty_forecast_payload() -> Dict[str, Any]:
    """Forecast payload for a location without history."""
    return {
        "monthlyActuals": [],
        "monthlyScenarios": {},
        "summary": None,
        "insights": [],
    }
