"""
Repository tests against the in-memory Snowflake mock.

These exercise the real SQL the repositories send, so a query the mock
cursor can't parse fails here rather than at runtime.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.core.analytics.discovery import AthleteFilter, exact_match_criteria
from src.core.analytics.models import AthleteProfile, PerformanceRecord, Role
from src.infrastructure.snowflake.client import MockSnowflakeConnection
from src.infrastructure.snowflake.repositories import (
    AthleteRepository,
    DuplicateProfileError,
    PerformanceRepository,
    ProfileNotFoundError,
    RecordNotFoundError,
    build_where_clause,
)


@pytest.fixture
def connection():
    return MockSnowflakeConnection()


@pytest.fixture
def athletes(connection):
    return AthleteRepository(connection)


@pytest.fixture
def performances(connection):
    return PerformanceRepository(connection)


@pytest.fixture
def seeded_roster(athletes, roster):
    """The conftest roster, registered one second apart so order is stable."""
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for offset, profile in enumerate(roster):
        profile.created_at = base + timedelta(seconds=offset)
        athletes.create_profile(profile)
    return roster


class TestBuildWhereClause:

    def test_equality_and_upper_bound(self):
        clause, params = build_where_clause({"role": "athlete", "age__lte": 18})
        assert clause == "WHERE role = %s AND age <= %s"
        assert params == ("athlete", 18)

    def test_no_criteria(self):
        assert build_where_clause({}) == ("", ())


class TestAthleteRepository:
    """Tests for profile storage and the roster query."""

    def test_create_and_get_round_trip(self, athletes, roster):
        athlete = roster[0]
        athletes.create_profile(athlete)

        loaded = athletes.get_profile(athlete.id)
        assert loaded.id == athlete.id
        assert loaded.name == athlete.name
        assert loaded.sport == "Football"
        assert loaded.age == 17

    def test_get_missing_profile_raises(self, athletes):
        with pytest.raises(ProfileNotFoundError):
            athletes.get_profile(uuid4())

    def test_duplicate_email_rejected(self, athletes):
        first = AthleteProfile(
            name="Priya", role=Role.ATHLETE, district="Dehradun",
            sport="Football", age=16, email="priya@example.com",
        )
        second = AthleteProfile(
            name="Priya R", role=Role.ATHLETE, district="Haridwar",
            sport="Cricket", age=17, email="PRIYA@example.com",
        )
        athletes.create_profile(first)

        with pytest.raises(DuplicateProfileError):
            athletes.create_profile(second)

    def test_update_profile(self, athletes, roster):
        athlete = roster[0]
        athletes.create_profile(athlete)

        athletes.update_profile(replace(athlete, district="Haridwar", age=18))

        loaded = athletes.get_profile(athlete.id)
        assert loaded.district == "Haridwar"
        assert loaded.age == 18
        assert loaded.email == athlete.email

    def test_update_missing_profile_raises(self, athletes, roster):
        with pytest.raises(ProfileNotFoundError):
            athletes.update_profile(roster[0])

    def test_find_athletes_pushes_down_criteria(self, athletes, seeded_roster):
        criteria = exact_match_criteria(AthleteFilter(sport="Football", max_age=18))
        found = athletes.find_athletes(criteria)

        assert [p.name for p in found] == ["Rajesh Singh", "Raj Kumar", "Kabir Negi"]

    def test_find_athletes_excludes_coaches(self, athletes, seeded_roster):
        found = athletes.find_athletes({"district": "Dehradun"})
        assert all(p.is_athlete for p in found)
        assert "Coach Raju" not in [p.name for p in found]

    def test_find_athletes_ignores_role_override(self, athletes, seeded_roster):
        """Passing role=coach still only returns athletes."""
        found = athletes.find_athletes({"role": "coach"})
        assert len(found) == 5

    def test_find_athletes_rejects_unknown_criteria(self, athletes):
        with pytest.raises(ValueError, match="Unsupported"):
            athletes.find_athletes({"name": "raj"})

    def test_ping(self, athletes):
        assert athletes.ping() is True


class TestPerformanceRepository:
    """Tests for the append-only record store."""

    def _record(self, athlete_id, day, value, created_offset=0):
        return PerformanceRecord(
            athlete_id=athlete_id,
            recorded_on=day,
            metric_name="100m Time",
            metric_value=value,
            metric_unit="seconds",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=created_offset),
        )

    def test_series_is_returned_oldest_first(self, performances):
        """Back-dated entries sort by their recorded date, not by insert order."""
        athlete_id = uuid4()
        performances.add_record(self._record(athlete_id, date(2026, 3, 3), 11.2))
        performances.add_record(self._record(athlete_id, date(2026, 3, 1), 11.8))
        performances.add_record(self._record(athlete_id, date(2026, 3, 2), 11.5))

        series = performances.list_for_athlete(athlete_id)
        assert [r.metric_value for r in series] == [11.8, 11.5, 11.2]

    def test_same_day_keeps_creation_order(self, performances):
        athlete_id = uuid4()
        day = date(2026, 3, 1)
        performances.add_record(self._record(athlete_id, day, 2.0, created_offset=5))
        performances.add_record(self._record(athlete_id, day, 1.0, created_offset=1))

        series = performances.list_for_athlete(athlete_id)
        assert [r.metric_value for r in series] == [1.0, 2.0]

    def test_series_is_scoped_to_athlete(self, performances):
        mine, theirs = uuid4(), uuid4()
        performances.add_record(self._record(mine, date(2026, 3, 1), 11.8))
        performances.add_record(self._record(theirs, date(2026, 3, 1), 13.0))

        assert [r.athlete_id for r in performances.list_for_athlete(mine)] == [mine]

    def test_unknown_athlete_has_empty_series(self, performances):
        assert performances.list_for_athlete(uuid4()) == []

    def test_delete_record(self, performances):
        athlete_id = uuid4()
        record = performances.add_record(self._record(athlete_id, date(2026, 3, 1), 11.8))

        performances.delete_record(athlete_id, record.id)

        assert performances.list_for_athlete(athlete_id) == []

    def test_deleting_twice_reports_not_found(self, performances):
        """The second delete is a clean not-found, and nothing else changes."""
        athlete_id = uuid4()
        keep = performances.add_record(self._record(athlete_id, date(2026, 3, 1), 11.8))
        doomed = performances.add_record(self._record(athlete_id, date(2026, 3, 2), 11.5))

        performances.delete_record(athlete_id, doomed.id)
        with pytest.raises(RecordNotFoundError):
            performances.delete_record(athlete_id, doomed.id)

        assert [r.id for r in performances.list_for_athlete(athlete_id)] == [keep.id]

    def test_cannot_delete_another_athletes_record(self, performances):
        owner = uuid4()
        record = performances.add_record(self._record(owner, date(2026, 3, 1), 11.8))

        with pytest.raises(RecordNotFoundError):
            performances.delete_record(uuid4(), record.id)

        assert len(performances.list_for_athlete(owner)) == 1
