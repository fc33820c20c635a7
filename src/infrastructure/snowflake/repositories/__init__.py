"""
Repository pattern implementations for Snowflake.

Repositories translate between domain models and database representations.
"""

from .athletes import AthleteRepository, DuplicateProfileError, ProfileNotFoundError
from .base import RepositoryError, SnowflakeConfig, SnowflakeConnection, build_where_clause
from .performance import PerformanceRepository, RecordNotFoundError

__all__ = [
    "AthleteRepository",
    "DuplicateProfileError",
    "PerformanceRepository",
    "ProfileNotFoundError",
    "RecordNotFoundError",
    "RepositoryError",
    "SnowflakeConfig",
    "SnowflakeConnection",
    "build_where_clause",
]
