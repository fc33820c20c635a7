"""
User API endpoints.

Registration of athletes and coaches, profile lookup and editing, and
the coach's athlete discovery search.
"""

import logging
from dataclasses import replace
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import EmailStr, Field

from ...core.analytics.discovery import AthleteFilter, apply_name_filter, exact_match_criteria
from ...core.analytics.errors import InvalidFilterValueError
from ...core.analytics.models import AthleteProfile, Role
from ...infrastructure.snowflake.repositories import (
    DuplicateProfileError,
    ProfileNotFoundError,
)
from ..dependencies import AthleteRepositoryDep, AuthenticatedUser, CurrentUserId, ensure_owner
from ..schemas import AthleteProfileResponse, CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class RegisterUserRequest(CamelModel):
    """New athlete or coach."""
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    role: Role
    district: str = Field(min_length=1, max_length=200)
    sport: Optional[str] = Field(None, description="Required for athletes")
    age: Optional[int] = Field(None, ge=0, le=150, description="Required for athletes")
    team: Optional[str] = Field(None, description="Required for coaches")


class UpdateProfileRequest(CamelModel):
    """Editable profile fields. Omitted fields keep their current value."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    district: Optional[str] = Field(None, min_length=1, max_length=200)
    sport: Optional[str] = Field(None, description="Athletes only")
    age: Optional[int] = Field(None, ge=0, le=150, description="Athletes only")
    team: Optional[str] = Field(None, description="Coaches only")


class AthleteSearchResponse(CamelModel):
    """Result of a discovery search."""
    athletes: list[AthleteProfileResponse]
    total: int


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=AthleteProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="Create an athlete or coach profile",
)
async def register_user(
    request: RegisterUserRequest,
    api_key: AuthenticatedUser = None,
    repository: AthleteRepositoryDep = None,
) -> AthleteProfileResponse:
    """
    Register a new athlete or coach.

    Athletes must give a sport and age; coaches must give a team.
    Emails are unique across all profiles.
    """
    try:
        profile = AthleteProfile(
            name=request.name,
            email=str(request.email),
            role=request.role,
            district=request.district,
            sport=request.sport if request.role is Role.ATHLETE else None,
            age=request.age if request.role is Role.ATHLETE else None,
            team=request.team if request.role is Role.COACH else None,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    try:
        repository.create_profile(profile)
    except DuplicateProfileError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )

    logger.info(
        "Registered user",
        extra={"profile_id": str(profile.id), "role": profile.role.value}
    )

    return AthleteProfileResponse.from_profile(profile)


@router.get(
    "/athletes",
    response_model=AthleteSearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search athletes",
    description="Filter athletes by sport, district, maximum age and name",
)
async def search_athletes(
    sport: Optional[str] = Query(None, description="Exact sport"),
    district: Optional[str] = Query(None, description="Exact district"),
    age: Optional[str] = Query(None, description="Maximum age (inclusive)"),
    name: Optional[str] = Query(None, description="Case-insensitive name fragment"),
    api_key: AuthenticatedUser = None,
    repository: AthleteRepositoryDep = None,
) -> AthleteSearchResponse:
    """
    Coach dashboard search.

    Sport, district and age narrow the database query; the name fragment
    is matched against the rows that come back. Every filter is optional
    and they combine with AND. Coaches never appear in the results.
    """
    try:
        athlete_filter = AthleteFilter.from_params(
            sport=sport, district=district, age=age, name=name,
        )
    except InvalidFilterValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    criteria = exact_match_criteria(athlete_filter)
    logger.info("Finding athletes", extra={"criteria": criteria, "name_fragment": athlete_filter.name})

    candidates = repository.find_athletes(criteria)
    athletes = apply_name_filter(candidates, athlete_filter.name)

    return AthleteSearchResponse(
        athletes=[AthleteProfileResponse.from_profile(a) for a in athletes],
        total=len(athletes),
    )


@router.get(
    "/{user_id}",
    response_model=AthleteProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get a profile",
)
async def get_user(
    user_id: UUID,
    api_key: AuthenticatedUser = None,
    repository: AthleteRepositoryDep = None,
) -> AthleteProfileResponse:
    """Look up a single profile by ID."""
    try:
        profile = repository.get_profile(user_id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    return AthleteProfileResponse.from_profile(profile)


@router.put(
    "/{user_id}",
    response_model=AthleteProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit a profile",
    description="Update your own name, district, and sport/age (athletes) or team (coaches)",
)
async def update_user(
    user_id: UUID,
    request: UpdateProfileRequest,
    caller_id: CurrentUserId = None,
    api_key: AuthenticatedUser = None,
    repository: AthleteRepositoryDep = None,
) -> AthleteProfileResponse:
    """
    Edit the caller's own profile.

    Fields that don't apply to the profile's role are ignored, the same
    way registration ignores them. Role and email can't be changed.
    """
    ensure_owner(user_id, caller_id, detail="You can only edit your own profile")

    try:
        profile = repository.get_profile(user_id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    role_fields = {"sport", "age"} if profile.is_athlete else {"team"}
    changes = {
        key: value
        for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None and (key in role_fields or key in {"name", "district"})
    }

    try:
        updated = replace(profile, **changes)
        repository.update_profile(updated)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    logger.info(
        "Updated profile",
        extra={"profile_id": str(user_id), "fields": sorted(changes)}
    )

    return AthleteProfileResponse.from_profile(updated)
