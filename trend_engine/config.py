"""
Centralized configuration for the trend engine.

Configuration is loaded from environment variables with sensible defaults.

Usage:
    from trend_engine.config import config

    policy = config.comparison.yoy_shift
    size = config.cache.max_entries
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from trend_engine.exceptions import ConfigurationError

# Load environment variables
load_dotenv()

# Year-over-year shift policies
YOY_SHIFT_365_DAYS = "365d"
YOY_SHIFT_CALENDAR = "calendar"
YOY_SHIFT_POLICIES = (YOY_SHIFT_365_DAYS, YOY_SHIFT_CALENDAR)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    return int(raw) if raw.strip().lstrip("-").isdigit() else default


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("TREND_LOG_LEVEL", "INFO"))
    json_format: bool = field(
        default_factory=lambda: os.getenv("TREND_LOG_JSON", "false").lower() == "true"
    )
    # Timed steps slower than this log at WARNING
    slow_threshold_ms: int = field(default_factory=lambda: _env_int("TREND_SLOW_MS", 1000))


@dataclass(frozen=True)
class ComparisonConfig:
    """Period comparison configuration."""

    # Feb 29 handling is an open product question; 365d is the flagged approximation
    yoy_shift: str = field(
        default_factory=lambda: os.getenv("TREND_YOY_SHIFT", YOY_SHIFT_365_DAYS)
    )


@dataclass(frozen=True)
class ForecastConfig:
    """Forecast blending configuration."""

    trailing_months: int = field(
        default_factory=lambda: _env_int("TREND_TRAILING_MONTHS", 6)
    )
    # Fixed summary band, applied regardless of scenario or horizon
    band_lower: float = 0.85
    band_upper: float = 1.15


@dataclass(frozen=True)
class CacheConfig:
    """Memoization configuration."""

    max_entries: int = field(default_factory=lambda: _env_int("TREND_CACHE_SIZE", 64))


@dataclass(frozen=True)
class PreferencesConfig:
    """Display preference storage configuration."""

    path: Path = field(
        default_factory=lambda: Path(
            os.getenv("TREND_PREFERENCES_PATH", str(Path.home() / ".trend_engine" / "preferences.json"))
        )
    )


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    version: str = "1.0.0"
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    comparison: ComparisonConfig = field(default_factory=ComparisonConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    preferences: PreferencesConfig = field(default_factory=PreferencesConfig)


# Global config instance
config = AppConfig()


def validate_config(app_config: AppConfig = None) -> None:
    """
    Validate configuration values.

    Call this on application startup to fail fast with clear error messages
    instead of surprising results later.

    Raises:
        ConfigurationError: If any value is out of range
    """
    app_config = app_config or config
    errors = []

    if app_config.comparison.yoy_shift not in YOY_SHIFT_POLICIES:
        errors.append(
            f"TREND_YOY_SHIFT must be one of {', '.join(YOY_SHIFT_POLICIES)} "
            f"(got {app_config.comparison.yoy_shift!r})"
        )

    if app_config.forecast.trailing_months < 1:
        errors.append("TREND_TRAILING_MONTHS must be at least 1")

    if app_config.cache.max_entries < 1:
        errors.append("TREND_CACHE_SIZE must be at least 1")

    if app_config.logging.slow_threshold_ms < 1:
        errors.append("TREND_SLOW_MS must be at least 1")

    if app_config.logging.level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        errors.append(f"TREND_LOG_LEVEL is not a valid level: {app_config.logging.level!r}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
