"""
Object storage client for exported performance files.

Supports Cloudflare R2 (S3-compatible) with mock mode for local development.
A coach can ask for a CSV export to be archived; the file lands under
exports/{athlete_id}/ and a presigned URL is handed back so the download
doesn't have to go through the API again.

Mock mode stores files in memory, enabling API testing without
provisioning actual object storage.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """Configuration for R2/S3-compatible storage."""
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "auto"  # R2 uses 'auto' for region


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Using a protocol means tests can provide mocks and we can
    swap storage backends without changing dependent code.
    """

    async def upload_export(
        self,
        content: bytes,
        athlete_id: UUID,
        filename: str,
        content_type: str = "text/csv",
    ) -> str:
        """Upload an export file and return its storage path."""
        ...

    async def get_presigned_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate temporary download URL."""
        ...


def build_export_path(athlete_id: UUID, filename: str) -> str:
    """exports/{athlete_id}/{filename}"""
    return f"exports/{athlete_id}/{filename}"


class R2StorageClient:
    """
    Cloudflare R2 object storage client.

    Uses boto3 because R2 is S3-compatible, so S3, MinIO or any other
    S3-compatible store works with the same code.

    Methods are async to match the Protocol even though boto3 is
    synchronous.
    """

    def __init__(self, config: StorageConfig) -> None:
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for R2 storage. Install with: pip install boto3"
            )

        self._config = config

        # R2 requires v4 signatures and path-style addressing
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized R2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def upload_export(
        self,
        content: bytes,
        athlete_id: UUID,
        filename: str,
        content_type: str = "text/csv",
    ) -> str:
        """
        Upload an export to R2 storage.

        Re-exporting on the same day overwrites the earlier file, since
        the filename carries the date.
        """
        storage_path = build_export_path(athlete_id, filename)

        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=storage_path,
                Body=content,
                ContentType=content_type,
                ContentDisposition=f'attachment; filename="{filename}"',
                Metadata={
                    'athlete-id': str(athlete_id),
                }
            )

            logger.info(
                "Uploaded export",
                extra={
                    "athlete_id": str(athlete_id),
                    "size_bytes": len(content),
                    "storage_path": storage_path,
                }
            )

            return storage_path

        except Exception as e:
            logger.error(
                "Failed to upload export",
                extra={"athlete_id": str(athlete_id), "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}")

    async def get_presigned_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a time-limited download URL for an archived export."""
        try:
            return self._s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self._config.bucket_name,
                    'Key': storage_path,
                },
                ExpiresIn=expiry_seconds,
            )

        except Exception as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"storage_path": storage_path, "error": str(e)}
            )
            raise StorageError(f"Presigned URL generation failed: {e}")


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development.

    Exports are stored in a dictionary and "URLs" are mock URIs.
    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self) -> None:
        # {storage_path: bytes}
        self._exports: dict[str, bytes] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def upload_export(
        self,
        content: bytes,
        athlete_id: UUID,
        filename: str,
        content_type: str = "text/csv",
    ) -> str:
        """Store export in memory."""
        storage_path = build_export_path(athlete_id, filename)
        self._exports[storage_path] = content

        logger.debug(
            "Stored export in mock storage",
            extra={
                "athlete_id": str(athlete_id),
                "size_bytes": len(content),
                "storage_path": storage_path,
            }
        )

        return storage_path

    async def get_presigned_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Return a mock URL for the export."""
        if storage_path not in self._exports:
            raise StorageError(f"Export not found: {storage_path}")

        return f"mock://storage/{storage_path}"


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (R2 or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return R2StorageClient(config)
