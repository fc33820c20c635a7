"""
Controlled vocabulary for sports and metrics.

Athletes may still log free-text metric names and units; the catalog only
gives the UI something to offer and tells the aggregation engine which
direction counts as an improvement for the metrics it knows.
"""

from typing import Optional

from .models import MetricDefinition, MetricDirection


SPORTS: tuple[str, ...] = (
    "Athletics (Sprinting)",
    "Athletics (Jumping)",
    "Athletics (Throwing)",
    "Badminton",
    "Basketball",
    "Boxing",
    "Cricket",
    "Football",
    "Hockey",
    "Kabaddi",
    "Swimming",
    "Table Tennis",
    "Tennis",
    "Volleyball",
    "Weightlifting",
    "Wrestling",
    "Other",
)

_LOWER = MetricDirection.LOWER_IS_BETTER
_HIGHER = MetricDirection.HIGHER_IS_BETTER

METRICS: tuple[MetricDefinition, ...] = (
    MetricDefinition("100m Time", "seconds", _LOWER),
    MetricDefinition("200m Time", "seconds", _LOWER),
    MetricDefinition("400m Time", "seconds", _LOWER),
    MetricDefinition("Long Jump", "m", _HIGHER),
    MetricDefinition("High Jump", "m", _HIGHER),
    MetricDefinition("Shot Put", "m", _HIGHER),
    MetricDefinition("Discus Throw", "m", _HIGHER),
    MetricDefinition("Javelin Throw", "m", _HIGHER),
    MetricDefinition("Vertical Jump", "cm", _HIGHER),
    MetricDefinition("Bench Press", "kg", _HIGHER),
    MetricDefinition("Deadlift", "kg", _HIGHER),
    MetricDefinition("Squat", "kg", _HIGHER),
    MetricDefinition("Runs Scored", "count", _HIGHER),
    MetricDefinition("Wickets Taken", "count", _HIGHER),
    MetricDefinition("Goals Scored", "count", _HIGHER),
)

_METRICS_BY_NAME = {metric.name.casefold(): metric for metric in METRICS}


def find_metric(name: str) -> Optional[MetricDefinition]:
    """Look up a catalog metric by name, ignoring case. None if unknown."""
    return _METRICS_BY_NAME.get(name.strip().casefold())


def direction_for(
    name: str,
    default: MetricDirection = MetricDirection.HIGHER_IS_BETTER,
) -> MetricDirection:
    """Better-direction for a metric name, falling back to `default` for free text."""
    metric = find_metric(name)
    return metric.direction if metric else default
