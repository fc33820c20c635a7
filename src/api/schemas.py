"""
Request/response models shared by the routers.

JSON on the wire is camelCase (metricName, improvementPositive, ...) to
match what the web client sends and reads; Python code uses snake_case.
Both spellings are accepted on input.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.analytics.models import AthleteProfile, PerformanceRecord


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AthleteProfileResponse(CamelModel):
    """Public view of a profile."""
    id: UUID = Field(description="Profile identifier")
    name: str
    email: str
    role: str = Field(description="athlete or coach")
    district: str
    sport: Optional[str] = None
    age: Optional[int] = None
    team: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_profile(cls, profile: AthleteProfile) -> "AthleteProfileResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role.value,
            district=profile.district,
            sport=profile.sport,
            age=profile.age,
            team=profile.team,
            created_at=profile.created_at,
        )


class PerformanceRecordResponse(CamelModel):
    """One logged measurement."""
    id: UUID
    athlete_id: UUID
    recorded_on: date = Field(alias="date", description="Calendar date of the measurement")
    metric_name: str
    metric_value: float
    metric_unit: str
    notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: PerformanceRecord) -> "PerformanceRecordResponse":
        return cls(
            id=record.id,
            athlete_id=record.athlete_id,
            recorded_on=record.recorded_on,
            metric_name=record.metric_name,
            metric_value=record.metric_value,
            metric_unit=record.metric_unit,
            notes=record.notes,
            created_at=record.created_at,
        )
