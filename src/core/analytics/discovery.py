"""
Athlete discovery filtering.

Coaches search the roster by sport, district, maximum age and a name
fragment. The first three are exact-match criteria that the record store
can evaluate as a query; the name fragment is a case-insensitive substring
match applied afterwards. `filter_roster` runs both stages in one pass and
gives the same answer as running them separately.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, Optional, Union

from .errors import InvalidFilterValueError
from .models import AthleteProfile, Role


@dataclass(frozen=True)
class AthleteFilter:
    """
    A coach's search. Every field is optional; absent fields match everything.

    Build from raw request values with `AthleteFilter.from_params`, which
    treats blank strings as absent and validates the age.
    """
    sport: Optional[str] = None
    district: Optional[str] = None
    max_age: Optional[float] = None
    name: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        sport: Optional[str] = None,
        district: Optional[str] = None,
        age: Union[str, int, float, None] = None,
        name: Optional[str] = None,
    ) -> "AthleteFilter":
        return cls(
            sport=_blank_to_none(sport),
            district=_blank_to_none(district),
            max_age=parse_max_age(age),
            name=_blank_to_none(name),
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.sport is None
            and self.district is None
            and self.max_age is None
            and self.name is None
        )


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_max_age(value: Union[str, int, float, None]) -> Optional[float]:
    """
    Validate an age filter.

    Accepts numbers and numeric strings. Blank means "no age filter".

    Raises:
        InvalidFilterValueError: for non-numeric, negative or non-finite values.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            parsed = float(value)
        except ValueError:
            raise InvalidFilterValueError("age", value)
    elif isinstance(value, Real) and not isinstance(value, bool):
        parsed = float(value)
    else:
        raise InvalidFilterValueError("age", value)

    if not math.isfinite(parsed) or parsed < 0:
        raise InvalidFilterValueError("age", value)
    return parsed


# ---------------------------------------------------------------------------
# Stage 1: exact-match criteria
# ---------------------------------------------------------------------------

def exact_match_criteria(athlete_filter: AthleteFilter) -> dict[str, Any]:
    """
    The query part of a search, as a field -> value mapping.

    `role` is always present and always "athlete". `max_age` is an
    inclusive upper bound; the other keys are equality tests.
    """
    criteria: dict[str, Any] = {"role": Role.ATHLETE.value}
    if athlete_filter.sport is not None:
        criteria["sport"] = athlete_filter.sport
    if athlete_filter.district is not None:
        criteria["district"] = athlete_filter.district
    if athlete_filter.max_age is not None:
        criteria["max_age"] = athlete_filter.max_age
    return criteria


def matches_criteria(profile: AthleteProfile, criteria: dict[str, Any]) -> bool:
    """Evaluate `exact_match_criteria` output against one profile."""
    if profile.role.value != criteria.get("role", Role.ATHLETE.value):
        return False
    if "sport" in criteria and profile.sport != criteria["sport"]:
        return False
    if "district" in criteria and profile.district != criteria["district"]:
        return False
    if "max_age" in criteria:
        if profile.age is None or profile.age > criteria["max_age"]:
            return False
    return True


# ---------------------------------------------------------------------------
# Stage 2: name post-filter
# ---------------------------------------------------------------------------

def name_matches(profile: AthleteProfile, fragment: Optional[str]) -> bool:
    if not fragment:
        return True
    return fragment.casefold() in profile.name.casefold()


def apply_name_filter(
    profiles: Iterable[AthleteProfile],
    fragment: Optional[str],
) -> list[AthleteProfile]:
    """Keep profiles whose name contains `fragment`, ignoring case."""
    return [profile for profile in profiles if name_matches(profile, fragment)]


# ---------------------------------------------------------------------------
# Both stages
# ---------------------------------------------------------------------------

def filter_roster(
    roster: Iterable[AthleteProfile],
    athlete_filter: AthleteFilter,
) -> list[AthleteProfile]:
    """
    Apply every predicate of `athlete_filter` in a single pass.

    Coaches in the roster are always dropped. Roster order is preserved.
    """
    criteria = exact_match_criteria(athlete_filter)
    return [
        profile for profile in roster
        if matches_criteria(profile, criteria)
        and name_matches(profile, athlete_filter.name)
    ]
