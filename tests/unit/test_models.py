"""
Unit tests for the domain models and metric catalog.

These tests verify the core business rules without touching
external services (no API calls, no database, no file system).

Testing philosophy:
- Test behavior, not implementation
- Each test should have a clear "given/when/then" structure
- Use descriptive names that explain what we're testing
- Prefer real objects over mocks where practical
"""

import math
from datetime import date
from uuid import uuid4

import pytest

from src.core.analytics.catalog import METRICS, SPORTS, direction_for, find_metric
from src.core.analytics.models import (
    AthleteProfile,
    MetricDirection,
    MetricKey,
    PerformanceRecord,
    Role,
)


# ---------------------------------------------------------------------------
# AthleteProfile Tests
# ---------------------------------------------------------------------------

class TestAthleteProfile:
    """Tests for registration rules on profiles."""

    def test_athlete_requires_sport(self):
        """An athlete without a sport can't be discovered, so reject it."""
        with pytest.raises(ValueError, match="Sport is required"):
            AthleteProfile(name="Priya", role=Role.ATHLETE, district="Dehradun", age=16)

    def test_athlete_requires_age(self):
        with pytest.raises(ValueError, match="Age is required"):
            AthleteProfile(
                name="Priya", role=Role.ATHLETE, district="Dehradun", sport="Football"
            )

    def test_athlete_rejects_negative_age(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            AthleteProfile(
                name="Priya", role=Role.ATHLETE, district="Dehradun",
                sport="Football", age=-1,
            )

    def test_coach_requires_team(self):
        """Coaches register with a team or affiliation instead of sport/age."""
        with pytest.raises(ValueError, match="Team"):
            AthleteProfile(name="Coach Raju", role=Role.COACH, district="Dehradun")

    def test_coach_does_not_need_sport_or_age(self):
        coach = AthleteProfile(
            name="Coach Raju", role=Role.COACH, district="Dehradun", team="Doon FC"
        )
        assert not coach.is_athlete
        assert coach.sport is None

    def test_district_is_required_for_everyone(self):
        with pytest.raises(ValueError, match="District"):
            AthleteProfile(name="Coach Raju", role=Role.COACH, district="  ", team="Doon FC")

    def test_email_is_normalized(self):
        """Emails compare case-insensitively for the duplicate check."""
        profile = AthleteProfile(
            name="Priya", role=Role.ATHLETE, district="Dehradun",
            sport="Football", age=16, email="  Priya@Example.COM ",
        )
        assert profile.email == "priya@example.com"

    def test_profiles_get_unique_ids(self):
        kwargs = dict(name="Priya", role=Role.ATHLETE, district="Dehradun",
                      sport="Football", age=16)
        assert AthleteProfile(**kwargs).id != AthleteProfile(**kwargs).id


# ---------------------------------------------------------------------------
# PerformanceRecord Tests
# ---------------------------------------------------------------------------

class TestPerformanceRecord:
    """Tests for the PerformanceRecord value object."""

    def _record(self, **overrides):
        fields = dict(
            athlete_id=uuid4(),
            recorded_on=date(2026, 3, 1),
            metric_name="100m Time",
            metric_value=12.5,
            metric_unit="seconds",
        )
        fields.update(overrides)
        return PerformanceRecord(**fields)

    def test_names_and_units_are_trimmed(self):
        record = self._record(metric_name="  100m Time ", metric_unit=" seconds")
        assert record.metric_name == "100m Time"
        assert record.metric_unit == "seconds"

    def test_empty_metric_name_rejected(self):
        with pytest.raises(ValueError, match="Metric name"):
            self._record(metric_name="   ")

    def test_empty_metric_unit_rejected(self):
        with pytest.raises(ValueError, match="Metric unit"):
            self._record(metric_unit="")

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_values_rejected(self, value):
        """NaN or infinity would poison every statistic computed later."""
        with pytest.raises(ValueError, match="finite"):
            self._record(metric_value=value)

    def test_bool_value_rejected(self):
        with pytest.raises(ValueError, match="finite"):
            self._record(metric_value=True)

    def test_integer_value_stored_as_float(self):
        record = self._record(metric_value=42)
        assert isinstance(record.metric_value, float)
        assert record.metric_value == 42.0

    def test_negative_and_zero_values_allowed(self):
        """Some metrics (e.g. a net score) can legitimately be zero or negative."""
        assert self._record(metric_value=0).metric_value == 0.0
        assert self._record(metric_value=-3.5).metric_value == -3.5

    def test_blank_notes_become_none(self):
        assert self._record(notes="   ").notes is None

    def test_records_are_immutable(self):
        record = self._record()
        with pytest.raises(AttributeError):
            record.metric_value = 1.0

    def test_metric_key_groups_by_name_and_unit(self):
        a = self._record(metric_name="Long Jump", metric_unit="m")
        b = self._record(metric_name="Long Jump", metric_unit="m", metric_value=6.1)
        c = self._record(metric_name="Long Jump", metric_unit="ft")
        assert a.metric_key == b.metric_key
        assert a.metric_key != c.metric_key


class TestMetricKey:
    """Tests for the legend label."""

    def test_label_format(self):
        assert MetricKey("100m Time", "seconds").label == "100m Time (seconds)"


# ---------------------------------------------------------------------------
# Catalog Tests
# ---------------------------------------------------------------------------

class TestCatalog:
    """Tests for the sports and metric vocabulary."""

    def test_sports_have_no_placeholder_entry(self):
        assert "Select a Sport" not in SPORTS
        assert "Football" in SPORTS

    def test_metric_names_are_unique(self):
        names = [metric.name.casefold() for metric in METRICS]
        assert len(names) == len(set(names))

    def test_find_metric_ignores_case(self):
        metric = find_metric("bench press")
        assert metric is not None
        assert metric.unit == "kg"

    def test_find_metric_unknown_returns_none(self):
        assert find_metric("Juggling Streak") is None

    def test_sprint_times_are_lower_is_better(self):
        assert direction_for("100m Time") is MetricDirection.LOWER_IS_BETTER

    def test_unknown_metric_uses_default(self):
        assert direction_for("Juggling Streak") is MetricDirection.HIGHER_IS_BETTER
        assert (
            direction_for("Juggling Streak", MetricDirection.LOWER_IS_BETTER)
            is MetricDirection.LOWER_IS_BETTER
        )
