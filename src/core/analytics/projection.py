"""
Chart-ready projection of a performance series.

Produces parallel label/value lists plus a legend label, which is all a
line chart needs. Dates are formatted here so every client renders the
same axis.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from .aggregation import partition_by_metric
from .errors import EmptySeriesError
from .models import MetricKey, PerformanceRecord


# English abbreviations regardless of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class ChartSeries:
    """One line on a chart."""
    series_label: str
    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.values):
            raise ValueError("Chart labels and values must have the same length")

    @property
    def point_count(self) -> int:
        return len(self.values)


def format_label(day: date) -> str:
    """Human-readable axis label, e.g. "Oct 19, 2026"."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day:02d}, {day.year}"


def project_series(records: Sequence[PerformanceRecord]) -> ChartSeries:
    """
    Convert a series into a single chart line.

    The legend comes from the first record's metric name and unit; the
    projector does not check that later records share them.

    Raises:
        EmptySeriesError: if there are no records ("no chart data").
    """
    if not records:
        raise EmptySeriesError("No chart data")

    return ChartSeries(
        series_label=records[0].metric_key.label,
        labels=[format_label(record.recorded_on) for record in records],
        values=[record.metric_value for record in records],
    )


def project_by_metric(
    records: Sequence[PerformanceRecord],
) -> dict[MetricKey, ChartSeries]:
    """One chart line per (metric name, unit) group, in first-logged order."""
    return {
        key: project_series(group)
        for key, group in partition_by_metric(records).items()
    }
