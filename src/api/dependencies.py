"""
FastAPI dependency injection.

Dependencies provide instances of repositories, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Configuration is centralized
- Resource lifecycle (connections, clients) is managed properly

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated, Generator, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..infrastructure.snowflake.client import (
    MockSnowflakeConnection,
    create_snowflake_connection,
)
from ..infrastructure.snowflake.repositories import (
    AthleteRepository,
    PerformanceRepository,
    SnowflakeConfig,
    SnowflakeConnection,
)
from ..infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# Global mock instances (shared across requests so data survives between calls)
_mock_storage_client = None
_mock_snowflake_connection = None


def reset_mock_backends() -> None:
    """Drop the shared mock connection and storage (used between tests)."""
    global _mock_storage_client, _mock_snowflake_connection
    _mock_storage_client = None
    _mock_snowflake_connection = None


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8] if api_key else ""}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """Caller identity as asserted by the upstream auth layer, if any."""
    return x_user_id


def ensure_owner(
    owner_id: UUID,
    user_id: Optional[str],
    detail: str = "Only the athlete can modify their own performance records",
) -> None:
    """
    Only the owner may write: an athlete's series, or anyone's own profile.

    The X-User-Id header is set by the auth layer in front of this API;
    this check only compares it with the ID the request targets.
    """
    if not user_id or user_id != str(owner_id):
        logger.warning(
            "Rejected write to data owned by another user",
            extra={"owner_id": str(owner_id), "user_id": user_id}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


# ---------------------------------------------------------------------------
# Repository Dependencies
# ---------------------------------------------------------------------------

def build_snowflake_config(settings: Settings) -> SnowflakeConfig:
    return SnowflakeConfig(
        account=settings.snowflake_account,
        user=settings.snowflake_user,
        password=settings.snowflake_password or None,
        private_key_path=settings.snowflake_private_key_path,
        private_key_base64=settings.snowflake_private_key_base64,
        database=settings.snowflake_database,
        schema=settings.snowflake_schema,
        warehouse=settings.snowflake_warehouse,
        role=settings.snowflake_role,
    )


def get_db_connection(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[SnowflakeConnection, None, None]:
    """
    Provide a Snowflake connection for the duration of one request.

    This is a generator function (yields instead of returns) because
    the connection must be closed after the request. FastAPI handles
    the generator lifecycle, and caches the result per request, so the
    athlete and performance repositories share one connection.

    In mock mode, we reuse the same connection across requests
    so that data persists during the testing session.
    """
    global _mock_snowflake_connection

    if settings.snowflake_mock_mode:
        if _mock_snowflake_connection is None:
            _mock_snowflake_connection = MockSnowflakeConnection()
            logger.info("Created shared mock Snowflake connection")
        yield _mock_snowflake_connection
    else:
        with create_snowflake_connection(config=build_snowflake_config(settings)) as conn:
            logger.debug("Opened Snowflake connection for request")
            yield conn


def get_athlete_repository(
    conn: Annotated[SnowflakeConnection, Depends(get_db_connection)],
) -> AthleteRepository:
    """Provide AthleteRepository over the request's connection."""
    return AthleteRepository(conn)


def get_performance_repository(
    conn: Annotated[SnowflakeConnection, Depends(get_db_connection)],
) -> PerformanceRepository:
    """Provide PerformanceRepository over the request's connection."""
    return PerformanceRepository(conn)


def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StorageClient:
    """
    Provide storage client for archived exports.

    Returns either R2 client or mock client based on settings.
    In mock mode, the same client is reused across requests.
    """
    global _mock_storage_client

    if settings.r2_mock_mode:
        if _mock_storage_client is None:
            _mock_storage_client = create_storage_client(mock_mode=True)
            logger.info("Created shared mock storage client")
        return _mock_storage_client

    config = StorageConfig(
        access_key_id=settings.r2_access_key_id,
        secret_access_key=settings.r2_secret_access_key,
        bucket_name=settings.r2_bucket_name,
        endpoint_url=settings.r2_endpoint,
    )
    client = create_storage_client(config=config)
    logger.debug("Created R2 storage client")

    return client


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
AuthenticatedUser = Annotated[str, Depends(verify_api_key)]
CurrentUserId = Annotated[Optional[str], Depends(get_current_user_id)]
AthleteRepositoryDep = Annotated[AthleteRepository, Depends(get_athlete_repository)]
PerformanceRepositoryDep = Annotated[PerformanceRepository, Depends(get_performance_repository)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
