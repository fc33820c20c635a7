"""
Summary statistics over a performance series.

The functions here are pure: they take a sequence of records that the
caller has already ordered by date and return new values. Nothing is
cached and nothing is logged, so they are safe to call concurrently.
"""

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .errors import EmptySeriesError
from .models import MetricDirection, MetricKey, PerformanceRecord


UNDEFINED_IMPROVEMENT = "undefined"


@dataclass(frozen=True)
class PerformanceStatistics:
    """
    Summary of one series.

    `improvement_percent` is None when the first value is zero; in that
    case `improvement` reads "undefined" and is never positive.
    """
    total: int
    average: float
    best: float
    worst: float
    improvement_percent: Optional[float]
    improvement_positive: bool
    direction: MetricDirection = MetricDirection.HIGHER_IS_BETTER

    @property
    def is_improvement_defined(self) -> bool:
        return self.improvement_percent is not None

    @property
    def improvement(self) -> str:
        """Signed percentage, e.g. "+4.20%" or "-5.08%"."""
        if self.improvement_percent is None:
            return UNDEFINED_IMPROVEMENT
        return f"{self.improvement_percent:+.2f}%"


def average_value(values: Sequence[float]) -> float:
    """Mean rounded to two decimals, summed with fsum to avoid drift."""
    return round(math.fsum(values) / len(values), 2)


def improvement_percent(first: float, last: float) -> Optional[float]:
    """
    Percentage change from first to last, rounded to two decimals.

    Returns None when `first` is zero: the change is undefined, and
    passing inf or nan downstream would break JSON and charts alike.
    """
    if first == 0:
        return None
    rounded = round((last - first) / first * 100, 2)
    # -0.0 would render as "-0.00%"
    return rounded + 0.0


def compute_statistics(
    records: Sequence[PerformanceRecord],
    direction: MetricDirection = MetricDirection.HIGHER_IS_BETTER,
) -> PerformanceStatistics:
    """
    Summarize a series.

    The series is treated as a single metric. Use `summarize_by_metric`
    when an athlete has logged more than one.

    Raises:
        EmptySeriesError: if there are no records.
    """
    if not records:
        raise EmptySeriesError("No performance records to summarize")

    values = [record.metric_value for record in records]
    highest, lowest = max(values), min(values)
    if direction is MetricDirection.LOWER_IS_BETTER:
        best, worst = lowest, highest
    else:
        best, worst = highest, lowest

    first, last = values[0], values[-1]
    raw_change = None if first == 0 else (last - first) / first * 100

    return PerformanceStatistics(
        total=len(values),
        average=average_value(values),
        best=best,
        worst=worst,
        improvement_percent=improvement_percent(first, last),
        improvement_positive=raw_change is not None and raw_change > 0,
        direction=direction,
    )


def partition_by_metric(
    records: Sequence[PerformanceRecord],
) -> dict[MetricKey, list[PerformanceRecord]]:
    """
    Split a mixed series into one sub-series per (metric name, unit).

    Groups appear in the order their metric was first logged, and each
    group keeps the relative order of the input.
    """
    groups: dict[MetricKey, list[PerformanceRecord]] = {}
    for record in records:
        groups.setdefault(record.metric_key, []).append(record)
    return groups


def summarize_by_metric(
    records: Sequence[PerformanceRecord],
    directions: Optional[Mapping[str, MetricDirection]] = None,
    default_direction: MetricDirection = MetricDirection.HIGHER_IS_BETTER,
) -> dict[MetricKey, PerformanceStatistics]:
    """
    Statistics for each metric group of a series.

    `directions` maps metric names to their better-direction; metrics not
    in the mapping use `default_direction`. An empty series yields an
    empty mapping rather than an error, since there are simply no groups.
    """
    directions = directions or {}
    return {
        key: compute_statistics(group, directions.get(key.name, default_direction))
        for key, group in partition_by_metric(records).items()
    }
