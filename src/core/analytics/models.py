"""
Domain models for athlete performance tracking.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. The repositories translate
between these objects and database rows; the routes translate between them
and JSON.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(Enum):
    """The two kinds of registered user."""
    ATHLETE = "athlete"
    COACH = "coach"


class MetricDirection(Enum):
    """
    Which way is "better" for a metric.

    A sprint time improves as it drops; a bench press improves as it rises.
    The aggregation engine picks best/worst from this instead of assuming.
    """
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"


@dataclass
class AthleteProfile:
    """
    A registered user as seen by the analytics core.

    Athletes carry sport and age (the filterable fields); coaches carry
    a team. District is required for everyone.
    """
    name: str
    role: Role
    district: str
    id: UUID = field(default_factory=uuid4)
    email: str = ""
    sport: Optional[str] = None
    age: Optional[int] = None
    team: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Profile name cannot be empty")
        if not self.district.strip():
            raise ValueError("District is required")
        self.email = self.email.strip().lower()

        if self.role is Role.ATHLETE:
            if not self.sport or not self.sport.strip():
                raise ValueError("Sport is required for athletes")
            if self.age is None:
                raise ValueError("Age is required for athletes")
            if self.age < 0:
                raise ValueError("Age cannot be negative")
        elif self.role is Role.COACH:
            if not self.team or not self.team.strip():
                raise ValueError("Team or affiliation is required for coaches")

    @property
    def is_athlete(self) -> bool:
        return self.role is Role.ATHLETE


@dataclass(frozen=True)
class MetricKey:
    """
    Identifies one metric group within a series.

    Frozen so it can key a dict: two records logged as "100m Time" in
    "seconds" belong to the same group.
    """
    name: str
    unit: str

    @property
    def label(self) -> str:
        """Chart-legend format, e.g. "100m Time (seconds)"."""
        return f"{self.name} ({self.unit})"


@dataclass(frozen=True)
class PerformanceRecord:
    """
    A single logged measurement.

    Frozen because records are never updated, only created and deleted.
    """
    athlete_id: UUID
    metric_name: str
    metric_value: float
    metric_unit: str
    recorded_on: date = field(default_factory=date.today)
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        name = self.metric_name.strip()
        unit = self.metric_unit.strip()
        if not name:
            raise ValueError("Metric name cannot be empty")
        if not unit:
            raise ValueError("Metric unit cannot be empty")
        if isinstance(self.metric_value, bool) or not math.isfinite(self.metric_value):
            raise ValueError("Metric value must be a finite number")

        object.__setattr__(self, "metric_name", name)
        object.__setattr__(self, "metric_unit", unit)
        object.__setattr__(self, "metric_value", float(self.metric_value))
        if self.notes is not None:
            object.__setattr__(self, "notes", self.notes.strip() or None)

    @property
    def metric_key(self) -> MetricKey:
        return MetricKey(name=self.metric_name, unit=self.metric_unit)


@dataclass(frozen=True)
class MetricDefinition:
    """An entry in the controlled metric vocabulary."""
    name: str
    unit: str
    direction: MetricDirection = MetricDirection.HIGHER_IS_BETTER
