"""Unit tests for storage layer."""

import asyncio
import json
from pathlib import Path

import pytest
import pytest_asyncio

from xtrim.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    MediaBlobStore,
    StorageError,
)
from xtrim.storage.utils import sanitize_key, validate_file_size, validate_media_id


@pytest_asyncio.fixture
async def blob_store(test_settings):
    """Create a blob store rooted in the temporary directory."""
    return MediaBlobStore(test_settings)


@pytest.fixture
def sample_video():
    """Create a sample video file content."""
    # MP4 header (simplified)
    return b'\x00\x00\x00\x18ftypmp42' + b'\x00' * 1000


class TestMediaBlobStore:
    """Test the local media blob database."""

    @pytest.mark.asyncio
    async def test_save_get_cycle(self, blob_store, sample_video):
        await blob_store.save("vid-1", sample_video)

        assert await blob_store.get("vid-1") == sample_video
        assert await blob_store.exists("vid-1")
        assert await blob_store.get_size("vid-1") == len(sample_video)

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, blob_store):
        assert await blob_store.get("never-saved") is None
        assert not await blob_store.exists("never-saved")

    @pytest.mark.asyncio
    async def test_save_overwrites(self, blob_store):
        await blob_store.save("vid-1", b"first")
        await blob_store.save("vid-1", b"second")
        assert await blob_store.get("vid-1") == b"second"

    @pytest.mark.asyncio
    async def test_delete(self, blob_store, sample_video):
        await blob_store.save("vid-1", sample_video)
        assert await blob_store.delete("vid-1")
        assert not await blob_store.delete("vid-1")
        assert await blob_store.get("vid-1") is None

    @pytest.mark.asyncio
    async def test_database_layout(self, blob_store, test_settings):
        await blob_store.save("vid-1", b"data")

        db = await blob_store.get_db()
        assert db.version == test_settings.media_db_version
        assert db.blob_path("vid-1").read_bytes() == b"data"

        meta = json.loads((db.path / "meta.json").read_text())
        assert meta["stores"] == [test_settings.media_store_name]
        assert not list(db.object_store.glob("*.tmp"))

    @pytest.mark.asyncio
    async def test_lazy_open_is_shared(self, blob_store):
        assert not blob_store.is_open
        first, second = await asyncio.gather(blob_store.get_db(), blob_store.get_db())
        assert first is second
        assert blob_store.is_open

    @pytest.mark.asyncio
    async def test_invalid_ids(self, blob_store):
        with pytest.raises(ValueError, match="Invalid media id"):
            await blob_store.save("../escape", b"data")
        assert await blob_store.get("../escape") is None
        assert not await blob_store.delete("a/b")

    @pytest.mark.asyncio
    async def test_size_limits(self, test_settings):
        test_settings.max_file_size = 10
        store = MediaBlobStore(test_settings)

        with pytest.raises(StorageError, match="too large or empty"):
            await store.save("big", b"x" * 11)
        with pytest.raises(StorageError):
            await store.save("empty", b"")

    @pytest.mark.asyncio
    async def test_unwritable_location(self, test_settings, temp_dir):
        blocker = Path(temp_dir) / "blocked"
        blocker.write_text("not a directory")
        test_settings.storage_path = str(blocker)

        store = MediaBlobStore(test_settings)
        with pytest.raises(StorageError, match="Failed to open media database"):
            await store.save("vid-1", b"data")


class TestKeyValueStores:
    """Test key-value backends."""

    def test_file_store_persists(self, temp_dir):
        store = FileKeyValueStore(temp_dir)
        store.set_item("xtrim_projects_user/1", '[{"id": "p1"}]')

        reopened = FileKeyValueStore(temp_dir)
        assert reopened.get_item("xtrim_projects_user/1") == '[{"id": "p1"}]'

    def test_file_store_missing_and_remove(self, temp_dir):
        store = FileKeyValueStore(temp_dir)
        assert store.get_item("absent") is None

        store.set_item("key", "value")
        store.remove_item("key")
        store.remove_item("key")
        assert store.get_item("key") is None

    def test_file_store_rejects_empty_key(self, temp_dir):
        with pytest.raises(ValueError):
            FileKeyValueStore(temp_dir).set_item("", "value")

    def test_in_memory_store(self):
        store = InMemoryKeyValueStore({"a": "1"})
        store.set_item("b", "2")
        store.remove_item("a")
        assert store.keys() == ["b"]
        assert store.get_item("a") is None


class TestStorageUtils:
    """Test storage utility functions."""

    def test_validate_media_id(self):
        assert validate_media_id("3f2a9c1e-1b2c-4d5e-8f90-123456789abc")
        assert validate_media_id("clip.mp4")
        assert not validate_media_id("")
        assert not validate_media_id("..")
        assert not validate_media_id("a/b")
        assert not validate_media_id("a\\b")
        assert not validate_media_id("~root")

    def test_sanitize_key(self):
        assert sanitize_key("xtrim_projects_user@mail.com") == "xtrim_projects_user_mail.com"
        assert sanitize_key("../../etc") == "____etc"
        assert sanitize_key(".") == "unnamed"
        assert len(sanitize_key("k" * 300)) == 200

    def test_validate_file_size(self):
        assert validate_file_size(1)
        assert not validate_file_size(0)
        assert not validate_file_size(-5)
        assert validate_file_size(100, max_size=100)
        assert not validate_file_size(101, max_size=100)
