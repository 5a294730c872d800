"""
Structured logging and timing for the trend engine.

Usage:
    from trend_engine.observability import setup_logging, get_logger, chart_context, Timer

    # At startup (level and format come from TREND_LOG_LEVEL / TREND_LOG_JSON):
    setup_logging()

    # In modules:
    logger = get_logger(__name__)

    # Around a chart load, so every line carries the location:
    with chart_context(location="loc-1", chart="comparison"):
        with Timer("align_series", logger):
            points = align_series(current, prior, metric)
"""
import functools
import inspect
import json
import logging
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from trend_engine.config import config

# Fields attached to every record logged inside a chart_context block
_chart_context: ContextVar[Dict[str, Any]] = ContextVar("chart_context", default={})

_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def current_context() -> Dict[str, Any]:
    """Fields of the innermost active chart_context."""
    return dict(_chart_context.get())


class chart_context:
    """Context manager adding fields (location, chart, horizon...) to log records."""

    def __init__(self, **fields: Any):
        self.fields = {k: v for k, v in fields.items() if v is not None}
        self.token = None

    def __enter__(self) -> Dict[str, Any]:
        merged = {**_chart_context.get(), **self.fields}
        self.token = _chart_context.set(merged)
        return merged

    def __exit__(self, *args):
        _chart_context.reset(self.token)


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields = dict(_chart_context.get())
    fields.update(
        (k, v) for k, v in record.__dict__.items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    )
    return fields


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class StructuredFormatter(logging.Formatter):
    """JSON formatter: one object per line with chart context and extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": _record_time(record).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_record_fields(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Console formatter.

    Format: TIMESTAMP - LEVEL - LOGGER - MESSAGE | {fields}
    """

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_record_time(record):%Y-%m-%d %H:%M:%S} - {record.levelname:8} - "
            f"{record.name} - {record.getMessage()}"
        )
        fields = _record_fields(record)
        if fields:
            line += f" | {fields}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name; defaults to config.logging.level (TREND_LOG_LEVEL)
        json_format: JSON output if True; defaults to config.logging.json_format (TREND_LOG_JSON)
    """
    level = level or config.logging.level
    if json_format is None:
        json_format = config.logging.json_format

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter() if json_format else HumanReadableFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════════════════
# TIMING
# ═══════════════════════════════════════════════════════════════════════════════

def _log_duration(logger: logging.Logger, name: str, elapsed_ms: float, warn_threshold_ms: float) -> None:
    level = logging.WARNING if elapsed_ms > warn_threshold_ms else logging.DEBUG
    logger.log(level, f"{name} completed", extra={"duration_ms": round(elapsed_ms, 2)})


class Timer:
    """
    Context manager for timing a computation step.

    Usage:
        with Timer("blend_forecast", logger) as t:
            points = blend_forecast(actuals, projected, metric)
        t.elapsed_ms
    """

    def __init__(
        self,
        name: str,
        logger: Optional[logging.Logger] = None,
        warn_threshold_ms: Optional[float] = None,
    ):
        self.name = name
        self.logger = logger
        self.warn_threshold_ms = warn_threshold_ms or config.logging.slow_threshold_ms
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        if self.logger:
            _log_duration(self.logger, self.name, self.elapsed_ms, self.warn_threshold_ms)


def timed(name: Optional[str] = None, warn_threshold_ms: Optional[float] = None):
    """
    Decorator timing a sync or async function.

    Args:
        name: Operation name (defaults to function name)
        warn_threshold_ms: Log at WARNING above this (defaults to TREND_SLOW_MS)
    """
    def decorator(func: Callable) -> Callable:
        operation_name = name or func.__name__
        func_logger = get_logger(func.__module__)

        def timer() -> Timer:
            return Timer(operation_name, func_logger, warn_threshold_ms)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with timer():
                    return await func(*args, **kwargs)
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with timer():
                return func(*args, **kwargs)
        return sync_wrapper

    return decorator
