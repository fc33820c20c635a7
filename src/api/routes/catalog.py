"""
Controlled vocabulary endpoints.

The signup form offers the sports list and the logging form offers the
metric list; both are free to send values outside them.
"""

from fastapi import APIRouter, status

from ...core.analytics import catalog
from ...core.analytics.models import MetricDirection
from ..dependencies import AuthenticatedUser
from ..schemas import CamelModel

router = APIRouter()


class SportsResponse(CamelModel):
    sports: list[str]


class MetricItem(CamelModel):
    name: str
    unit: str
    direction: MetricDirection


class MetricsResponse(CamelModel):
    metrics: list[MetricItem]


@router.get(
    "/sports",
    response_model=SportsResponse,
    status_code=status.HTTP_200_OK,
    summary="List sports",
)
async def list_sports(api_key: AuthenticatedUser = None) -> SportsResponse:
    return SportsResponse(sports=list(catalog.SPORTS))


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    status_code=status.HTTP_200_OK,
    summary="List standard metrics",
    description="Standard metrics with their default unit and which direction is better",
)
async def list_metrics(api_key: AuthenticatedUser = None) -> MetricsResponse:
    return MetricsResponse(
        metrics=[
            MetricItem(name=m.name, unit=m.unit, direction=m.direction)
            for m in catalog.METRICS
        ]
    )
