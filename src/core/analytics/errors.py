"""
Errors surfaced by the analytics core.

All of these are recoverable by the caller (show a message, re-prompt).
The core raises them and never logs; the API layer decides how each one
is presented.
"""


class PerformanceAnalyticsError(Exception):
    """Base class for analytics core errors."""
    pass


class EmptySeriesError(PerformanceAnalyticsError):
    """Raised when statistics or a chart are requested for zero records."""
    pass


class EmptyExportError(PerformanceAnalyticsError):
    """Raised when a CSV export is requested for zero records."""
    pass


class InvalidFilterValueError(PerformanceAnalyticsError):
    """Raised when a discovery filter value cannot be used (e.g. a negative age)."""

    def __init__(self, field_name: str, value: object) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid value for filter '{field_name}': {value!r}")
