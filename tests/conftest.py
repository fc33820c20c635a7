"""
Shared fixtures.

Builders for series and rosters live here so each test module can state
only the values it cares about.
"""

from datetime import date, timedelta
from typing import Callable, Optional, Sequence
from uuid import uuid4

import pytest

from src.core.analytics.models import AthleteProfile, PerformanceRecord, Role


SERIES_START = date(2026, 1, 1)


def make_series(
    values: Sequence[float],
    metric_name: str = "100m Time",
    metric_unit: str = "seconds",
    notes: Optional[Sequence[Optional[str]]] = None,
) -> list[PerformanceRecord]:
    """One record per value, on consecutive days from SERIES_START."""
    athlete_id = uuid4()
    notes = notes or [None] * len(values)
    return [
        PerformanceRecord(
            athlete_id=athlete_id,
            recorded_on=SERIES_START + timedelta(days=i),
            metric_name=metric_name,
            metric_value=value,
            metric_unit=metric_unit,
            notes=note,
        )
        for i, (value, note) in enumerate(zip(values, notes))
    ]


def make_athlete(name: str, sport: str, district: str, age: int) -> AthleteProfile:
    return AthleteProfile(
        name=name,
        role=Role.ATHLETE,
        sport=sport,
        district=district,
        age=age,
        email=f"{name.lower().replace(' ', '.')}@example.com",
    )


@pytest.fixture
def series_factory() -> Callable[..., list[PerformanceRecord]]:
    return make_series


@pytest.fixture
def roster() -> list[AthleteProfile]:
    """
    Five athletes and one coach.

    Three Football players are 18 or under (Rajesh, Raj Kumar, Kabir); Anna
    plays Football but is 19. Two of the under-18s have "raj" in their name.
    """
    return [
        make_athlete("Rajesh Singh", "Football", "Dehradun", 17),
        make_athlete("Anna Bisht", "Football", "Haridwar", 19),
        make_athlete("Meera Rawat", "Cricket", "Dehradun", 16),
        make_athlete("Raj Kumar", "Football", "Haridwar", 18),
        make_athlete("Kabir Negi", "Football", "Dehradun", 15),
        AthleteProfile(
            name="Coach Raju",
            role=Role.COACH,
            district="Dehradun",
            team="Doon FC",
        ),
    ]
