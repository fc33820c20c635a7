"""
Snowflake repository for athlete and coach profiles.

Profiles are owned by registration; the analytics core only reads them.
The discovery search pushes its exact-match criteria down into the
WHERE clause here so that only candidate athletes leave the database.
"""

import logging
from typing import Any
from uuid import UUID

from src.core.analytics.models import AthleteProfile, Role

from .base import RepositoryError, SnowflakeConnection, build_where_clause


logger = logging.getLogger(__name__)


PROFILE_COLUMNS = (
    "profile_id, name, email, role, sport, district, age, team, created_at"
)

# discovery criteria key -> WHERE clause key
_CRITERIA_COLUMNS = {
    "role": "role",
    "sport": "sport",
    "district": "district",
    "max_age": "age__lte",
}


class ProfileNotFoundError(RepositoryError):
    """Raised when a requested profile doesn't exist."""
    pass


class DuplicateProfileError(RepositoryError):
    """Raised when registering an email that is already taken."""
    pass


class AthleteRepository:
    """
    Repository for user profiles.

    - create_profile: Register a new athlete or coach
    - update_profile: Save edits to name, district, sport, age or team
    - get_profile: Load one profile by ID
    - find_athletes: Roster query with exact-match criteria
    """

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def create_profile(self, profile: AthleteProfile) -> AthleteProfile:
        """
        Persist a new profile.

        Raises:
            DuplicateProfileError: if the email is already registered.
        """
        cursor = self._conn.cursor()

        try:
            if profile.email:
                cursor.execute("""
                    SELECT profile_id FROM athlete_profiles WHERE email = %s
                """, (profile.email,))
                if cursor.fetchone():
                    raise DuplicateProfileError(
                        f"User already exists with email {profile.email}"
                    )

            cursor.execute("""
                INSERT INTO athlete_profiles (
                    profile_id, name, email, role, sport, district, age, team, created_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """, (
                str(profile.id),
                profile.name,
                profile.email,
                profile.role.value,
                profile.sport,
                profile.district,
                profile.age,
                profile.team,
                profile.created_at,
            ))

            self._conn.commit()
            return profile

        except DuplicateProfileError:
            raise
        except Exception as e:
            logger.error(
                "Failed to create profile",
                extra={"profile_id": str(profile.id), "error": str(e)}
            )
            raise
        finally:
            cursor.close()

    def update_profile(self, profile: AthleteProfile) -> AthleteProfile:
        """
        Save edits to an existing profile.

        Role, email and registration time are fixed at registration and
        are not written.

        Raises:
            ProfileNotFoundError: if no profile has this ID.
        """
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                UPDATE athlete_profiles
                SET name = %s, district = %s, sport = %s, age = %s, team = %s
                WHERE profile_id = %s
            """, (
                profile.name,
                profile.district,
                profile.sport,
                profile.age,
                profile.team,
                str(profile.id),
            ))

            updated = cursor.rowcount
            self._conn.commit()

        finally:
            cursor.close()

        if not updated:
            raise ProfileNotFoundError(f"Profile {profile.id} not found")
        return profile

    def get_profile(self, profile_id: UUID) -> AthleteProfile:
        """
        Load a profile by ID.

        Raises:
            ProfileNotFoundError: if no profile has this ID.
        """
        cursor = self._conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PROFILE_COLUMNS}
                FROM athlete_profiles
                WHERE profile_id = %s
            """, (str(profile_id),))

            row = cursor.fetchone()
            if not row:
                raise ProfileNotFoundError(f"Profile {profile_id} not found")
            return self._build_profile(row)

        finally:
            cursor.close()

    def find_athletes(self, criteria: dict[str, Any]) -> list[AthleteProfile]:
        """
        Athletes matching exact-match discovery criteria.

        `criteria` is the output of `exact_match_criteria`. The role
        constraint is forced to "athlete" whatever the caller passes.
        Results come back in registration order.
        """
        where_criteria: dict[str, Any] = {"role": Role.ATHLETE.value}
        for key, value in criteria.items():
            if key not in _CRITERIA_COLUMNS:
                raise ValueError(f"Unsupported discovery criterion: {key}")
            if key == "role":
                continue
            where_criteria[_CRITERIA_COLUMNS[key]] = value

        where_clause, params = build_where_clause(where_criteria)

        cursor = self._conn.cursor()
        try:
            cursor.execute(f"""
                SELECT {PROFILE_COLUMNS}
                FROM athlete_profiles
                {where_clause}
                ORDER BY created_at, profile_id
            """, params)

            rows = cursor.fetchall()
            return [self._build_profile(row) for row in rows]

        finally:
            cursor.close()

    def ping(self) -> bool:
        """Cheap round trip for readiness checks."""
        cursor = self._conn.cursor()
        try:
            cursor.execute("SELECT 1")
            return cursor.fetchone() is not None
        finally:
            cursor.close()

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    def _build_profile(self, row) -> AthleteProfile:
        """Construct an AthleteProfile from a PROFILE_COLUMNS row."""
        return AthleteProfile(
            id=UUID(row[0]),
            name=row[1],
            email=row[2] or "",
            role=Role(row[3]),
            sport=row[4],
            district=row[5],
            age=row[6],
            team=row[7],
            created_at=row[8],
        )
