"""
Exception hierarchy for the trend engine.

Exception Hierarchy:
    TrendEngineError (base)
    ├── PayloadError         - Collaborator returned malformed data
    └── ConfigurationError   - Invalid configuration values

    ValidationError          - Input validation failed

Missing data, zero denominators, partial fetch failures and empty forecasts
are NOT errors: they are modelled as output states (see trend_engine.pipeline).
"""


class TrendEngineError(Exception):
    """Base exception for all trend engine errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PayloadError(TrendEngineError):
    """
    Collaborator payload has unexpected structure.

    This indicates a contract violation - the data store returned
    a series or forecast in a shape we don't understand.
    """

    def __init__(self, message: str, details: str = None, expected: str = None, got: str = None):
        super().__init__(message, details)
        self.expected = expected
        self.got = got


class ConfigurationError(TrendEngineError):
    """Raised when required configuration is missing or invalid."""
    pass


class ValidationError(Exception):
    """
    Input validation failed.

    Used for validating selector, mode, metric, horizon and scenario values.
    """

    def __init__(self, field: str, message: str, value: object = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"
