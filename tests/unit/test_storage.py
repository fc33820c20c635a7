"""
Tests for the in-memory export storage.

The client is async to match the R2 implementation; each test drives it
with asyncio.run.
"""

import asyncio
import inspect
from uuid import uuid4

import pytest

from src.infrastructure.storage.client import (
    MockStorageClient,
    R2StorageClient,
    StorageClient,
    StorageError,
    build_export_path,
    create_storage_client,
)


def public_methods(cls):
    return {
        name for name, _ in inspect.getmembers(cls, inspect.isfunction)
        if not name.startswith("_")
    }


class TestMockStorageClient:

    def test_upload_then_presigned_url(self):
        storage = MockStorageClient()
        athlete_id = uuid4()

        path = asyncio.run(storage.upload_export(b"a,b\n", athlete_id, "x.csv"))

        assert path == build_export_path(athlete_id, "x.csv")
        assert storage._exports[path] == b"a,b\n"
        assert asyncio.run(storage.get_presigned_url(path)) == f"mock://storage/{path}"

    def test_presigned_url_for_missing_export(self):
        with pytest.raises(StorageError):
            asyncio.run(MockStorageClient().get_presigned_url("exports/nope.csv"))

    def test_same_filename_is_scoped_to_athlete(self):
        storage = MockStorageClient()
        mine, theirs = uuid4(), uuid4()
        my_path = asyncio.run(storage.upload_export(b"1", mine, "a.csv"))
        their_path = asyncio.run(storage.upload_export(b"2", theirs, "a.csv"))

        assert my_path != their_path
        assert storage._exports[my_path] == b"1"
        assert storage._exports[their_path] == b"2"

    def test_reupload_overwrites(self):
        storage = MockStorageClient()
        athlete_id = uuid4()
        asyncio.run(storage.upload_export(b"old", athlete_id, "a.csv"))
        path = asyncio.run(storage.upload_export(b"new", athlete_id, "a.csv"))

        assert storage._exports == {path: b"new"}

    def test_factory_requires_config_outside_mock_mode(self):
        with pytest.raises(ValueError):
            create_storage_client()


class TestStorageClientSurface:
    """Both clients offer exactly what the export archive uses."""

    @pytest.mark.parametrize("client_cls", [MockStorageClient, R2StorageClient])
    def test_clients_match_protocol(self, client_cls):
        assert public_methods(client_cls) == public_methods(StorageClient)

    def test_protocol_operations(self):
        assert public_methods(StorageClient) == {"upload_export", "get_presigned_url"}
