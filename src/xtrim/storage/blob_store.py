"""Local blob database for imported media content."""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import aiofiles
import aiofiles.os

from ..config import Settings, settings as default_settings
from .interface import BinaryStoreInterface, StorageError
from .utils import validate_media_id, validate_file_size


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobDatabase:
    """Opened database handle: a versioned directory with one object store."""
    name: str
    version: int
    path: Path
    store_name: str

    @property
    def object_store(self) -> Path:
        return self.path / self.store_name

    def blob_path(self, media_id: str) -> Path:
        return self.object_store / media_id


class MediaBlobStore(BinaryStoreInterface):
    """Content store for raw media bytes keyed by media id.

    The database handle is opened lazily on first use and memoized for the
    lifetime of the store, so concurrent first calls share one
    initialization. Writes go to a temporary file and are renamed into
    place.
    """

    def __init__(self, config: Optional[Settings] = None):
        """Initialize the blob store.

        Args:
            config: Settings providing the storage path, database name,
                version, object store name and size limit
        """
        self.config = config or default_settings
        self._db: Optional[BlobDatabase] = None
        self._db_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._db is not None

    async def get_db(self) -> BlobDatabase:
        """Open the database, creating its layout on first use."""
        if self._db is not None:
            return self._db

        async with self._db_lock:
            if self._db is None:
                db = BlobDatabase(
                    name=self.config.media_db_name,
                    version=self.config.media_db_version,
                    path=Path(self.config.media_db_path).resolve(),
                    store_name=self.config.media_store_name,
                )
                try:
                    await asyncio.to_thread(self._upgrade, db)
                except OSError as e:
                    raise StorageError(f"Failed to open media database: {e}") from e
                logger.debug(f"Opened media database {db.name} v{db.version} at {db.path}")
                self._db = db
        return self._db

    @staticmethod
    def _upgrade(db: BlobDatabase) -> None:
        """Create the object store if this version has not been set up yet."""
        db.object_store.mkdir(parents=True, exist_ok=True)
        meta_path = db.path / "meta.json"
        if not meta_path.exists():
            meta_path.write_text(json.dumps({
                "name": db.name,
                "version": db.version,
                "stores": [db.store_name],
            }))

    def _check_id(self, media_id: str) -> None:
        if not validate_media_id(media_id):
            raise ValueError(f"Invalid media id: {media_id!r}")

    async def save(self, media_id: str, content: bytes) -> None:
        """Persist binary content under a media id.

        Args:
            media_id: Key for the content
            content: Raw file bytes

        Raises:
            StorageError: If the write fails or exceeds the size limit
            ValueError: If the media id is malformed
        """
        self._check_id(media_id)
        if not validate_file_size(len(content), self.config.max_file_size):
            raise StorageError(f"File too large or empty: {len(content)} bytes")

        db = await self.get_db()
        blob_path = db.blob_path(media_id)
        temp_path = blob_path.with_name(f"{media_id}.tmp")

        try:
            async with aiofiles.open(temp_path, 'wb') as f:
                await f.write(content)
            await aiofiles.os.replace(temp_path, blob_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"Failed to save media {media_id}: {e}") from e

    async def get(self, media_id: str) -> Optional[bytes]:
        """Load binary content.

        Args:
            media_id: Key used in save()

        Returns:
            The stored bytes, or None if nothing is stored under the id

        Raises:
            StorageError: If the read fails
        """
        if not validate_media_id(media_id):
            return None

        db = await self.get_db()
        blob_path = db.blob_path(media_id)
        if not blob_path.exists():
            return None

        try:
            async with aiofiles.open(blob_path, 'rb') as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read media {media_id}: {e}") from e

    async def delete(self, media_id: str) -> bool:
        """Delete stored content.

        Returns:
            True if content was deleted, False if it didn't exist

        Raises:
            StorageError: If deletion fails
        """
        if not validate_media_id(media_id):
            return False

        db = await self.get_db()
        blob_path = db.blob_path(media_id)
        try:
            if not blob_path.exists():
                return False
            await aiofiles.os.remove(blob_path)
            return True
        except OSError as e:
            raise StorageError(f"Failed to delete media {media_id}: {e}") from e

    async def exists(self, media_id: str) -> bool:
        if not validate_media_id(media_id):
            return False
        db = await self.get_db()
        return db.blob_path(media_id).exists()

    async def get_size(self, media_id: str) -> int:
        """Get stored content size in bytes.

        Raises:
            FileNotFoundError: If nothing is stored under the id
        """
        self._check_id(media_id)
        db = await self.get_db()
        blob_path = db.blob_path(media_id)
        if not blob_path.exists():
            raise FileNotFoundError(f"Media not found: {media_id}")
        stat = await aiofiles.os.stat(blob_path)
        return stat.st_size
