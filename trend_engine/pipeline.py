"""
Trend chart pipeline: explicit output states, memoized recomputation and
concurrent loading.

    resolve_period -> resolve_prior_period -> (two fetches) -> align_series -> compare_metrics
    forecast fetch -> build_forecast

Nothing here raises for missing data, zero denominators, failed fetches or
empty forecasts; those become TrendState values. Malformed collaborator
payloads still raise PayloadError.
"""
import asyncio
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, Tuple, TypeVar

from trend_engine.cache import ComputationCache
from trend_engine.comparison import ComparisonResult, align_series, compare_metrics
from trend_engine.filters import comparison_label, resolve_period, resolve_prior_period
from trend_engine.forecast import build_forecast
from trend_engine.models import (
    ComparisonMode,
    ForecastHorizon,
    ForecastResult,
    Metric,
    RangeSelector,
    Scenario,
)
from trend_engine.observability import Timer, chart_context, get_logger, timed
from trend_engine.schemas import parse_daily_series, parse_monthly_forecast

logger = get_logger(__name__)

T = TypeVar("T")

DailySeriesFetcher = Callable[[date, date, Optional[str]], Awaitable[Mapping[str, Any]]]
MonthlyForecastFetcher = Callable[[Optional[str], int], Awaitable[Mapping[str, Any]]]


class TrendStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class TrendState(Generic[T]):
    """Renderable state of a chart: loading, empty, ready(data) or unavailable."""
    status: TrendStatus
    data: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def loading(cls) -> "TrendState[T]":
        return cls(TrendStatus.LOADING)

    @classmethod
    def empty(cls, reason: str) -> "TrendState[T]":
        return cls(TrendStatus.EMPTY, reason=reason)

    @classmethod
    def ready(cls, data: T) -> "TrendState[T]":
        return cls(TrendStatus.READY, data=data)

    @classmethod
    def unavailable(cls, reason: str) -> "TrendState[T]":
        return cls(TrendStatus.UNAVAILABLE, reason=reason)

    @property
    def is_ready(self) -> bool:
        return self.status is TrendStatus.READY


# Shared memo for callers that don't bring their own
default_cache = ComputationCache()


def _compute_comparison(
    selector: RangeSelector,
    mode: ComparisonMode,
    metric: Metric,
    today: date,
    current_payload: Mapping[str, Any],
    prior_payload: Mapping[str, Any],
) -> ComparisonResult:
    current_range = resolve_period(selector, today)
    prior_range = resolve_prior_period(current_range, mode)

    with Timer("comparison", logger):
        points = align_series(
            parse_daily_series(current_payload),
            parse_daily_series(prior_payload),
            metric,
        )
        metrics = compare_metrics(points)

    return ComparisonResult(
        current_range=current_range,
        prior_range=prior_range,
        label=comparison_label(selector),
        metric=metric,
        points=points,
        metrics=metrics,
    )


def comparison_state(
    selector: RangeSelector,
    mode: ComparisonMode,
    metric: Metric,
    current_payload: Optional[Mapping[str, Any]],
    prior_payload: Optional[Mapping[str, Any]],
    reference_date: Optional[date] = None,
    cache: Optional[ComputationCache] = None,
) -> "TrendState[ComparisonResult]":
    """
    Comparison state for two daily series payloads.

    Until both payloads have resolved the state is loading: a comparison is
    never computed against a one-sided zero baseline.
    """
    if current_payload is None or prior_payload is None:
        return TrendState.loading()

    selector, mode, metric = RangeSelector(selector), ComparisonMode(mode), Metric(metric)
    today = reference_date or date.today()
    cache = default_cache if cache is None else cache

    result = cache.get_or_compute(
        ("comparison", selector, mode, metric, today, current_payload, prior_payload),
        lambda: _compute_comparison(selector, mode, metric, today, current_payload, prior_payload),
    )
    return TrendState.ready(result)


def forecast_state(
    payload: Optional[Mapping[str, Any]],
    scenario: Scenario = Scenario.BASELINE,
    metric: Metric = Metric.REVENUE,
    horizon: ForecastHorizon = ForecastHorizon.TWELVE_MONTHS,
    cache: Optional[ComputationCache] = None,
) -> "TrendState[ForecastResult]":
    """Forecast state for a monthly forecast payload."""
    if payload is None:
        return TrendState.loading()

    scenario, metric, horizon = Scenario(scenario), Metric(metric), ForecastHorizon(horizon)
    cache = default_cache if cache is None else cache

    result = cache.get_or_compute(
        ("forecast", scenario, metric, horizon, payload),
        lambda: build_forecast(parse_monthly_forecast(payload), scenario, metric, horizon),
    )
    if result.is_empty:
        return TrendState.empty("Insufficient history to forecast")
    return TrendState.ready(result)


class TrendLoader:
    """
    Loads chart data through the caller's fetch functions.

    The two daily series are fetched concurrently; if either fails the
    comparison is withheld. Forecast requests are numbered so that a
    response for a superseded horizon is discarded instead of returned.
    """

    def __init__(
        self,
        fetch_daily_series: DailySeriesFetcher,
        fetch_monthly_forecast: MonthlyForecastFetcher,
        location: Optional[str] = None,
        cache: Optional[ComputationCache] = None,
    ):
        self._fetch_daily_series = fetch_daily_series
        self._fetch_monthly_forecast = fetch_monthly_forecast
        self.location = location
        self.cache = ComputationCache() if cache is None else cache
        self._forecast_generation = 0
        self._requested_horizon: Optional[ForecastHorizon] = None
        self._forecast: Optional[Tuple[ForecastHorizon, Mapping[str, Any]]] = None
        self._forecast_error: Optional[str] = None

    @timed("load_comparison")
    async def load_comparison(
        self,
        selector: RangeSelector,
        mode: ComparisonMode,
        metric: Metric = Metric.REVENUE,
        reference_date: Optional[date] = None,
    ) -> "TrendState[ComparisonResult]":
        """Fetch current and prior series concurrently and compare them."""
        today = reference_date or date.today()
        current_range = resolve_period(selector, today)
        prior_range = resolve_prior_period(current_range, mode)

        with chart_context(location=self.location, chart="comparison"):
            results = await asyncio.gather(
                self._fetch_daily_series(current_range.start, current_range.end, self.location),
                self._fetch_daily_series(prior_range.start, prior_range.end, self.location),
                return_exceptions=True,
            )

            failures = [r for r in results if isinstance(r, BaseException)]
            for failure in failures:
                if isinstance(failure, asyncio.CancelledError):
                    raise failure
            if failures:
                logger.warning(
                    "Daily series fetch failed, withholding comparison",
                    extra={"errors": [repr(f) for f in failures]},
                )
                return TrendState.unavailable(f"Failed to load sales data: {failures[0]}")

            current_payload, prior_payload = results
            return comparison_state(
                selector, mode, metric, current_payload, prior_payload, today, self.cache
            )

    @timed("load_forecast")
    async def load_forecast(
        self,
        horizon: ForecastHorizon,
        scenario: Scenario = Scenario.BASELINE,
        metric: Metric = Metric.REVENUE,
    ) -> "Optional[TrendState[ForecastResult]]":
        """
        Fetch the forecast for a horizon.

        Returns None when a newer request was issued while this one was in
        flight; its response is dropped.
        """
        horizon = ForecastHorizon(horizon)
        self._forecast_generation += 1
        generation = self._forecast_generation
        self._requested_horizon = horizon
        self._forecast_error = None

        with chart_context(location=self.location, chart="forecast", horizon=horizon.value):
            try:
                payload = await self._fetch_monthly_forecast(self.location, horizon.value)
            except Exception as e:
                if generation != self._forecast_generation:
                    return None
                logger.warning("Forecast fetch failed", extra={"error": repr(e)})
                reason = f"Failed to load forecast: {e}"
                self._forecast_error = reason
                return TrendState.unavailable(reason)

            if generation != self._forecast_generation:
                logger.info(
                    "Discarding stale forecast response",
                    extra={"current_horizon": int(self._requested_horizon)},
                )
                return None

            self._forecast = (horizon, payload)
            return forecast_state(payload, scenario, metric, horizon, self.cache)

    def forecast_view(
        self,
        scenario: Scenario = Scenario.BASELINE,
        metric: Metric = Metric.REVENUE,
    ) -> "TrendState[ForecastResult]":
        """
        Recompute the latest forecast for another scenario or metric.

        No refetch is needed. While a different horizon is still loading the
        state is loading rather than the previous horizon's figures; if that
        horizon's fetch failed the state is unavailable.
        """
        if self._forecast_error is not None:
            return TrendState.unavailable(self._forecast_error)
        if self._forecast is None or self._forecast[0] != self._requested_horizon:
            return TrendState.loading()
        horizon, payload = self._forecast
        return forecast_state(payload, scenario, metric, horizon, self.cache)
