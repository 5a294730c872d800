"""
Pydantic models for collaborator payloads.

The data store delivers camelCase JSON; these models validate it at the
boundary and convert it into the domain dataclasses in trend_engine.models.
Numeric fields are strict (a string or bool where a number belongs fails
immediately), but a null metric value counts as zero.
"""
from datetime import date
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from trend_engine.exceptions import PayloadError
from trend_engine.models import (
    DailyRecord,
    ForecastBaseline,
    ForecastHorizon,
    ForecastPayload,
    Momentum,
    MonthlyRecord,
    Scenario,
)

M = TypeVar("M", bound=BaseModel)


def _none_as_zero(value: Any) -> Any:
    return 0 if value is None else value


Number = Union[StrictInt, StrictFloat]

# Missing metric values count as zero activity
ZeroableNumber = Annotated[Number, BeforeValidator(_none_as_zero)]
ZeroableInt = Annotated[StrictInt, BeforeValidator(_none_as_zero)]


# ═══════════════════════════════════════════════════════════════════════════════
# DAILY SERIES
# ═══════════════════════════════════════════════════════════════════════════════

class DailyRecordSchema(BaseModel):
    """One day from fetchDailySeries."""
    model_config = ConfigDict(populate_by_name=True)

    date: date
    revenue: ZeroableNumber = 0
    transactions: ZeroableInt = 0

    def to_domain(self) -> DailyRecord:
        return DailyRecord(date=self.date, revenue=float(self.revenue), transactions=self.transactions)


class DailySeriesPayload(BaseModel):
    """Response of fetchDailySeries: records in ascending date order."""
    overall: List[DailyRecordSchema] = Field(default_factory=list)

    def to_domain(self) -> List[DailyRecord]:
        return [r.to_domain() for r in self.overall]


# ═══════════════════════════════════════════════════════════════════════════════
# MONTHLY FORECAST
# ═══════════════════════════════════════════════════════════════════════════════

class MonthlyRecordSchema(BaseModel):
    """One actual or projected month."""
    model_config = ConfigDict(populate_by_name=True)

    period: str
    revenue: ZeroableNumber = 0
    appointments: ZeroableNumber = 0
    confidence_lower: Optional[Number] = Field(None, alias="confidenceLower")
    confidence_upper: Optional[Number] = Field(None, alias="confidenceUpper")
    appointments_lower: Optional[Number] = Field(None, alias="appointmentsLower")
    appointments_upper: Optional[Number] = Field(None, alias="appointmentsUpper")

    def to_domain(self) -> MonthlyRecord:
        return MonthlyRecord(
            period=self.period,
            revenue=float(self.revenue),
            appointments=float(self.appointments),
            confidence_lower=self.confidence_lower,
            confidence_upper=self.confidence_upper,
            appointments_lower=self.appointments_lower,
            appointments_upper=self.appointments_upper,
        )


class ForecastSummarySchema(BaseModel):
    """Baseline summary computed by the forecast collaborator."""
    model_config = ConfigDict(populate_by_name=True)

    projected_revenue_3m: Number = Field(0, alias="projectedRevenue3m")
    projected_revenue_6m: Number = Field(0, alias="projectedRevenue6m")
    projected_revenue_12m: Number = Field(0, alias="projectedRevenue12m")
    projected_appointments_3m: Number = Field(0, alias="projectedAppointments3m")
    projected_appointments_6m: Number = Field(0, alias="projectedAppointments6m")
    projected_appointments_12m: Number = Field(0, alias="projectedAppointments12m")
    momentum: Momentum = Momentum.STEADY
    last_mom_growth: Optional[Number] = Field(None, alias="lastMoMGrowth")
    yoy_growth: Optional[Number] = Field(None, alias="yoyGrowth")
    months_available: StrictInt = Field(0, alias="monthsAvailable")
    revenue_trend_r2: Optional[Number] = Field(None, alias="revenueTrendR2")

    def to_domain(self) -> ForecastBaseline:
        return ForecastBaseline(
            projected_revenue={
                h.value: float(getattr(self, f"projected_revenue_{h.suffix}"))
                for h in ForecastHorizon
            },
            projected_appointments={
                h.value: float(getattr(self, f"projected_appointments_{h.suffix}"))
                for h in ForecastHorizon
            },
            momentum=self.momentum,
            mom_growth=self.last_mom_growth,
            yoy_growth=self.yoy_growth,
            months_available=self.months_available,
            trend_fit=self.revenue_trend_r2,
        )


class MonthlyForecastPayload(BaseModel):
    """Response of fetchMonthlyForecast."""
    model_config = ConfigDict(populate_by_name=True)

    monthly_actuals: List[MonthlyRecordSchema] = Field(default_factory=list, alias="monthlyActuals")
    monthly_scenarios: Dict[Scenario, List[MonthlyRecordSchema]] = Field(
        default_factory=dict, alias="monthlyScenarios"
    )
    summary: Optional[ForecastSummarySchema] = None
    insights: List[str] = Field(default_factory=list)

    @field_validator("monthly_actuals", "insights", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("monthly_scenarios", mode="before")
    @classmethod
    def null_scenarios_as_empty(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {k: [] if v is None else v for k, v in value.items()}
        return value

    def to_domain(self) -> ForecastPayload:
        return ForecastPayload(
            actuals=[m.to_domain() for m in self.monthly_actuals],
            scenarios={
                scenario: [m.to_domain() for m in months]
                for scenario, months in self.monthly_scenarios.items()
            },
            baseline=self.summary.to_domain() if self.summary else None,
            insights=list(self.insights),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# PARSING
# ═══════════════════════════════════════════════════════════════════════════════

def _parse(model: Type[M], data: Any) -> M:
    if not isinstance(data, dict):
        raise PayloadError(
            f"Invalid {model.__name__}",
            expected="object",
            got=type(data).__name__,
        )
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise PayloadError(f"Invalid {model.__name__}", details=str(e)) from e


def parse_daily_series(data: Any) -> List[DailyRecord]:
    """
    Validate a fetchDailySeries response.

    Raises:
        PayloadError: If the payload does not match the expected shape
    """
    return _parse(DailySeriesPayload, data).to_domain()


def parse_monthly_forecast(data: Any) -> ForecastPayload:
    """
    Validate a fetchMonthlyForecast response.

    Raises:
        PayloadError: If the payload does not match the expected shape
    """
    return _parse(MonthlyForecastPayload, data).to_domain()
