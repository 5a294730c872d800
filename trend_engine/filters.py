"""
Date range resolution for the trend chart.

Maps relative range selectors to concrete dates and computes the
comparable prior range for period-over-period comparison.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from trend_engine.config import YOY_SHIFT_CALENDAR, config
from trend_engine.models import ComparisonMode, RangeSelector


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    @property
    def span(self) -> int:
        """Days between start and end (0 for a single-day range)."""
        return (self.end - self.start).days

    @property
    def days(self) -> int:
        """Number of calendar days covered, inclusive."""
        return self.span + 1

    @property
    def start_str(self) -> str:
        """Start date as YYYY-MM-DD string."""
        return self.start.isoformat()

    @property
    def end_str(self) -> str:
        """End date as YYYY-MM-DD string."""
        return self.end.isoformat()

    def as_tuple(self) -> Tuple[date, date]:
        """Return as (start, end) tuple of dates."""
        return (self.start, self.end)

    def as_str_tuple(self) -> Tuple[str, str]:
        """Return as (start, end) tuple of strings."""
        return (self.start_str, self.end_str)


def resolve_period(
    selector: RangeSelector,
    reference_date: Optional[date] = None,
) -> DateRange:
    """
    Resolve a range selector into a DateRange ending today.

    Args:
        selector: Range selector (7d, 30d, 90d, mtd, ytd)
        reference_date: Reference date for calculations (default: today)

    Returns:
        DateRange with end == reference date

    Examples:
        >>> resolve_period(RangeSelector.LAST_7_DAYS, date(2026, 1, 13))
        DateRange(start=datetime.date(2026, 1, 7), end=datetime.date(2026, 1, 13))

        >>> resolve_period(RangeSelector.MONTH_TO_DATE, date(2026, 1, 13))
        DateRange(start=datetime.date(2026, 1, 1), end=datetime.date(2026, 1, 13))
    """
    today = reference_date or date.today()
    selector = RangeSelector(selector)

    if selector is RangeSelector.MONTH_TO_DATE:
        return DateRange(today.replace(day=1), today)

    if selector is RangeSelector.YEAR_TO_DATE:
        return DateRange(today.replace(month=1, day=1), today)

    return DateRange(today - timedelta(days=selector.trailing_days - 1), today)


def shift_year_back(value: date, policy: Optional[str] = None) -> date:
    """
    Shift a date back by one year.

    The default "365d" policy subtracts exactly 365 days, an approximation
    pending a product decision on leap-year handling. The "calendar" policy
    keeps month/day and clamps Feb 29 to Feb 28.
    """
    policy = policy or config.comparison.yoy_shift
    if policy == YOY_SHIFT_CALENDAR:
        return value - relativedelta(years=1)
    return value - timedelta(days=365)


def resolve_prior_period(
    current: DateRange,
    mode: ComparisonMode,
    yoy_policy: Optional[str] = None,
) -> DateRange:
    """
    Compute the prior range to compare the current range against.

    Year-over-year shifts both ends back one year. Month-over-month returns
    the contiguous window of identical length immediately preceding the
    current one (a "previous window", not necessarily the previous calendar
    month); it is also what 7d and 90d windows compare against.
    """
    mode = ComparisonMode(mode)

    if mode is ComparisonMode.YEAR_OVER_YEAR:
        return DateRange(
            shift_year_back(current.start, yoy_policy),
            shift_year_back(current.end, yoy_policy),
        )

    prior_end = current.start - timedelta(days=1)
    prior_start = prior_end - timedelta(days=current.span)
    return DateRange(prior_start, prior_end)


def comparison_label(selector: RangeSelector) -> str:
    """
    Human-readable comparison label, chosen from the range length only.

    The comparison mode does not affect it.
    """
    labels = {
        RangeSelector.LAST_7_DAYS: "WoW",
        RangeSelector.LAST_30_DAYS: "MoM",
        RangeSelector.LAST_90_DAYS: "QoQ",
    }
    return labels.get(RangeSelector(selector), "Prior")


def format_date_range(date_range: DateRange) -> str:
    """
    Format a range as "Jan 5 – 11, 2026", "Jan 5 – Feb 3, 2026"
    or "Dec 20, 2025 – Jan 3, 2026" depending on how much the ends share.
    """
    start, end = date_range.start, date_range.end
    if (start.year, start.month) == (end.year, end.month):
        return f"{start:%b} {start.day} – {end.day}, {end.year}"
    if start.year == end.year:
        return f"{start:%b} {start.day} – {end:%b} {end.day}, {end.year}"
    return f"{start:%b} {start.day}, {start.year} – {end:%b} {end.day}, {end.year}"
