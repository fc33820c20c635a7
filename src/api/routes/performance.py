"""
Performance API endpoints.

Athletes log and delete their own measurements; coaches read the series
back as raw records, summary statistics, chart data or a CSV download.
Every read goes through the same ordered series from the repository, and
the analytics core does the rest.
"""

import logging
from datetime import date
from typing import Optional, Union
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import Field

from ...core.analytics import catalog
from ...core.analytics.aggregation import (
    PerformanceStatistics,
    compute_statistics,
    summarize_by_metric,
)
from ...core.analytics.csv_export import CSV_MEDIA_TYPE, export_series
from ...core.analytics.errors import EmptyExportError, EmptySeriesError
from ...core.analytics.models import (
    AthleteProfile,
    MetricDirection,
    MetricKey,
    PerformanceRecord,
)
from ...core.analytics.projection import ChartSeries, project_by_metric, project_series
from ...infrastructure.snowflake.repositories import (
    AthleteRepository,
    ProfileNotFoundError,
    RecordNotFoundError,
)
from ...infrastructure.storage.client import StorageError
from ..dependencies import (
    AthleteRepositoryDep,
    AuthenticatedUser,
    CurrentUserId,
    PerformanceRepositoryDep,
    SettingsDep,
    StorageClientDep,
    ensure_owner,
)
from ..schemas import CamelModel, PerformanceRecordResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class LogPerformanceRequest(CamelModel):
    """A new measurement."""
    athlete_id: UUID
    metric_name: str = Field(min_length=1, max_length=200, description='e.g. "100m Time"')
    metric_value: float = Field(allow_inf_nan=False, description="e.g. 11.8")
    metric_unit: str = Field(min_length=1, max_length=50, description='e.g. "seconds"')
    notes: Optional[str] = Field(None, max_length=1000, description='e.g. "District Meet Final"')
    recorded_on: Optional[date] = Field(None, alias="date", description="Defaults to today")


class PerformanceSeriesResponse(CamelModel):
    """An athlete's series, oldest first."""
    athlete_id: UUID
    records: list[PerformanceRecordResponse]
    total: int


class StatisticsResponse(CamelModel):
    """
    Summary statistics.

    When the series is empty, `empty` is true, `total` is 0 and the
    numeric fields are null. `improvement` is "undefined" when the first
    value is zero.
    """
    total: int
    empty: bool = False
    average: Optional[float] = None
    best: Optional[float] = None
    worst: Optional[float] = None
    improvement: Optional[str] = None
    improvement_positive: bool = False
    direction: Optional[MetricDirection] = None

    @classmethod
    def from_statistics(cls, stats: PerformanceStatistics) -> "StatisticsResponse":
        return cls(
            total=stats.total,
            average=stats.average,
            best=stats.best,
            worst=stats.worst,
            improvement=stats.improvement,
            improvement_positive=stats.improvement_positive,
            direction=stats.direction,
        )

    @classmethod
    def empty_series(cls) -> "StatisticsResponse":
        return cls(total=0, empty=True)


class MetricStatisticsItem(CamelModel):
    """Statistics for one metric group."""
    metric_name: str
    metric_unit: str
    statistics: StatisticsResponse


class MetricStatisticsResponse(CamelModel):
    """Statistics per metric group, in first-logged order."""
    athlete_id: UUID
    metrics: list[MetricStatisticsItem]


class ChartSeriesModel(CamelModel):
    """One chart line."""
    series_label: str
    labels: list[str]
    values: list[float]

    @classmethod
    def from_series(cls, series: ChartSeries) -> "ChartSeriesModel":
        return cls(
            series_label=series.series_label,
            labels=list(series.labels),
            values=list(series.values),
        )


class ChartResponse(CamelModel):
    """Chart data, or a message when there is nothing to plot."""
    athlete_id: UUID
    has_data: bool
    message: Optional[str] = None
    series: list[ChartSeriesModel] = Field(default_factory=list)


class ExportArchiveResponse(CamelModel):
    """Where an archived export was stored."""
    filename: str
    storage_path: str
    download_url: str
    row_count: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_athlete(repository: AthleteRepository, athlete_id: UUID) -> AthleteProfile:
    """Profile for `athlete_id`, or 404 if it doesn't exist."""
    try:
        return repository.get_profile(athlete_id)
    except ProfileNotFoundError:
        logger.warning("Athlete not found", extra={"athlete_id": str(athlete_id)})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Athlete not found",
        )


def _resolve_direction(
    metric_name: str,
    requested: Optional[MetricDirection],
    default: MetricDirection,
) -> MetricDirection:
    """Explicit request wins, then the catalog, then the configured default."""
    if requested is not None:
        return requested
    return catalog.direction_for(metric_name, default)


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=PerformanceRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a performance",
    description="Record a new measurement for the calling athlete",
)
async def log_performance(
    request: LogPerformanceRequest,
    user_id: CurrentUserId = None,
    api_key: AuthenticatedUser = None,
    athletes: AthleteRepositoryDep = None,
    repository: PerformanceRepositoryDep = None,
) -> PerformanceRecordResponse:
    """
    Log a new performance record.

    Only the athlete themselves may log; the X-User-Id header must match
    `athleteId`. A value of zero is a valid measurement.
    """
    ensure_owner(request.athlete_id, user_id)

    athlete = _load_athlete(athletes, request.athlete_id)
    if not athlete.is_athlete:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is not an athlete",
        )

    fields = dict(
        athlete_id=athlete.id,
        metric_name=request.metric_name,
        metric_value=request.metric_value,
        metric_unit=request.metric_unit,
        notes=request.notes,
    )
    if request.recorded_on is not None:
        fields["recorded_on"] = request.recorded_on

    try:
        record = PerformanceRecord(**fields)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    repository.add_record(record)

    logger.info(
        "Logged performance",
        extra={
            "athlete_id": str(athlete.id),
            "record_id": str(record.id),
            "metric": record.metric_name,
        }
    )

    return PerformanceRecordResponse.from_record(record)


@router.get(
    "/{athlete_id}",
    response_model=PerformanceSeriesResponse,
    status_code=status.HTTP_200_OK,
    summary="Get performance history",
    description="All performance records for an athlete, oldest first",
)
async def get_performance_history(
    athlete_id: UUID,
    api_key: AuthenticatedUser = None,
    athletes: AthleteRepositoryDep = None,
    repository: PerformanceRepositoryDep = None,
) -> PerformanceSeriesResponse:
    """Raw series for the athlete profile page."""
    _load_athlete(athletes, athlete_id)
    records = repository.list_for_athlete(athlete_id)

    return PerformanceSeriesResponse(
        athlete_id=athlete_id,
        records=[PerformanceRecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.delete(
    "/{athlete_id}/records/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a performance record",
)
async def delete_performance(
    athlete_id: UUID,
    record_id: UUID,
    user_id: CurrentUserId = None,
    api_key: AuthenticatedUser = None,
    repository: PerformanceRepositoryDep = None,
) -> Response:
    """
    Delete one of the caller's records.

    A record that was already deleted (including by a concurrent request)
    returns 404.
    """
    ensure_owner(athlete_id, user_id)

    try:
        repository.delete_record(athlete_id, record_id)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Performance record not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{athlete_id}/statistics",
    response_model=Union[StatisticsResponse, MetricStatisticsResponse],
    status_code=status.HTTP_200_OK,
    summary="Performance statistics",
    description="Total, average, best, worst and improvement for an athlete's series",
)
async def get_statistics(
    athlete_id: UUID,
    settings: SettingsDep,
    by_metric: bool = Query(False, description="One summary per metric instead of one overall"),
    direction: Optional[MetricDirection] = Query(None, description="Override which direction is better"),
    api_key: AuthenticatedUser = None,
    athletes: AthleteRepositoryDep = None,
    repository: PerformanceRepositoryDep = None,
) -> Union[StatisticsResponse, MetricStatisticsResponse]:
    """
    Summarize the athlete's series.

    Without `by_metric` the whole series is treated as one metric (the
    first record's). With it, each (metric, unit) pair gets its own
    summary and catalog metrics use their own better-direction.
    """
    _load_athlete(athletes, athlete_id)
    records = repository.list_for_athlete(athlete_id)
    default = settings.default_metric_direction

    if by_metric:
        names = {r.metric_name for r in records}
        directions = {name: _resolve_direction(name, direction, default) for name in names}
        summaries = summarize_by_metric(records, directions, default)
        return MetricStatisticsResponse(
            athlete_id=athlete_id,
            metrics=[
                MetricStatisticsItem(
                    metric_name=key.name,
                    metric_unit=key.unit,
                    statistics=StatisticsResponse.from_statistics(stats),
                )
                for key, stats in summaries.items()
            ],
        )

    first_metric = records[0].metric_name if records else ""
    resolved = _resolve_direction(first_metric, direction, default)
    try:
        stats = compute_statistics(records, resolved)
    except EmptySeriesError:
        return StatisticsResponse.empty_series()

    return StatisticsResponse.from_statistics(stats)


@router.get(
    "/{athlete_id}/chart",
    response_model=ChartResponse,
    status_code=status.HTTP_200_OK,
    summary="Chart data",
    description="Date labels and values ready for a line chart",
)
async def get_chart(
    athlete_id: UUID,
    by_metric: bool = Query(False, description="One line per metric instead of one overall"),
    api_key: AuthenticatedUser = None,
    athletes: AthleteRepositoryDep = None,
    repository: PerformanceRepositoryDep = None,
) -> ChartResponse:
    """Project the series for charting. An empty series has no chart data."""
    _load_athlete(athletes, athlete_id)
    records = repository.list_for_athlete(athlete_id)

    try:
        if by_metric:
            grouped: dict[MetricKey, ChartSeries] = project_by_metric(records)
            series = list(grouped.values())
            if not series:
                raise EmptySeriesError("No chart data")
        else:
            series = [project_series(records)]
    except EmptySeriesError:
        return ChartResponse(
            athlete_id=athlete_id,
            has_data=False,
            message="No performance data recorded yet to display a chart.",
        )

    return ChartResponse(
        athlete_id=athlete_id,
        has_data=True,
        series=[ChartSeriesModel.from_series(s) for s in series],
    )


@router.get(
    "/{athlete_id}/export",
    status_code=status.HTTP_200_OK,
    summary="Export as CSV",
    description="Download the athlete's series as CSV, or archive it to object storage",
    responses={
        200: {
            "content": {CSV_MEDIA_TYPE: {}},
            "description": "CSV file, or archive location when archive=true",
        },
        404: {"description": "Athlete not found or nothing to export"},
    },
)
async def export_performance(
    athlete_id: UUID,
    settings: SettingsDep,
    archive: bool = Query(False, description="Store the file and return a download URL"),
    api_key: AuthenticatedUser = None,
    athletes: AthleteRepositoryDep = None,
    repository: PerformanceRepositoryDep = None,
    storage: StorageClientDep = None,
):
    """
    Export the series as `<name>_performance_<date>.csv`.

    Zero records is reported as 404 rather than producing a header-only
    file.
    """
    athlete = _load_athlete(athletes, athlete_id)
    records = repository.list_for_athlete(athlete_id)

    try:
        export = export_series(records, athlete.name)
    except EmptyExportError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Nothing to export",
        )

    logger.info(
        "Exported performance CSV",
        extra={"athlete_id": str(athlete_id), "rows": export.row_count, "archive": archive}
    )

    if not archive:
        return Response(
            content=export.content_bytes,
            media_type=CSV_MEDIA_TYPE,
            headers={"Content-Disposition": _content_disposition(export.filename)},
        )

    try:
        storage_path = await storage.upload_export(
            export.content_bytes, athlete_id, export.filename, CSV_MEDIA_TYPE,
        )
        download_url = await storage.get_presigned_url(
            storage_path, expiry_seconds=settings.export_url_expiry_seconds,
        )
    except StorageError as e:
        logger.error(
            "Failed to archive export",
            extra={"athlete_id": str(athlete_id), "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to archive export",
        )

    return ExportArchiveResponse(
        filename=export.filename,
        storage_path=storage_path,
        download_url=download_url,
        row_count=export.row_count,
    )
