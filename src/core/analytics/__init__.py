"""
Performance analytics and athlete discovery.

Contains the domain models, the statistics/chart/CSV transforms over a
performance series, and the roster filter used by the coach search.
"""

from .aggregation import (
    UNDEFINED_IMPROVEMENT,
    PerformanceStatistics,
    compute_statistics,
    partition_by_metric,
    summarize_by_metric,
)
from .csv_export import CsvExport, export_series
from .discovery import AthleteFilter, apply_name_filter, exact_match_criteria, filter_roster
from .errors import (
    EmptyExportError,
    EmptySeriesError,
    InvalidFilterValueError,
    PerformanceAnalyticsError,
)
from .models import (
    AthleteProfile,
    MetricDefinition,
    MetricDirection,
    MetricKey,
    PerformanceRecord,
    Role,
)
from .projection import ChartSeries, project_by_metric, project_series

__all__ = [
    "UNDEFINED_IMPROVEMENT",
    "AthleteFilter",
    "AthleteProfile",
    "ChartSeries",
    "CsvExport",
    "EmptyExportError",
    "EmptySeriesError",
    "InvalidFilterValueError",
    "MetricDefinition",
    "MetricDirection",
    "MetricKey",
    "PerformanceAnalyticsError",
    "PerformanceRecord",
    "PerformanceStatistics",
    "Role",
    "apply_name_filter",
    "compute_statistics",
    "exact_match_criteria",
    "export_series",
    "filter_roster",
    "partition_by_metric",
    "project_by_metric",
    "project_series",
    "summarize_by_metric",
]
