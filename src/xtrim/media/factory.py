"""Build fully populated MediaItems from raw files."""

import base64
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import aiofiles

from ..models.media_item import (
    EphemeralReference,
    MediaItem,
    MediaType,
    PersistedReference,
)
from ..storage.interface import BinaryStoreInterface
from ..utils.formatting import format_file_size
from ..utils.simple_logger import log_start, log_update, log_complete
from .classifier import classify_media, get_extension
from .prober import MetadataProber, ProbeResult
from .session import SessionReferences


logger = logging.getLogger(__name__)


class UnsupportedMediaError(ValueError):
    """Raised when a file that is not video, audio or image reaches the factory."""
    pass


def inline_data_url(content: bytes, content_type: str = "") -> str:
    """Self-contained playback reference for content with nowhere else to live."""
    mime = content_type or "application/octet-stream"
    return f"data:{mime};base64," + base64.b64encode(content).decode("ascii")


@dataclass
class MediaFile:
    """A user-supplied file: its name, declared content type and bytes."""
    name: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    async def from_path(cls, path: str, content_type: Optional[str] = None) -> "MediaFile":
        """Read a file from disk, guessing its content type from the name."""
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()
        if content_type is None:
            content_type, _ = mimetypes.guess_type(path)
        return cls(name=Path(path).name, content=content, content_type=content_type or "")


class MediaItemFactory:
    """Creates MediaItems: classify, persist, probe.

    If the blob store rejects the content the item keeps its temporary
    session reference instead, so it stays usable until the process ends.
    If no session reference can be written either, the content is inlined
    as a data URL. A classified file always yields an item.
    """

    def __init__(
        self,
        store: BinaryStoreInterface,
        prober: Optional[MetadataProber] = None,
        session_refs: Optional[SessionReferences] = None,
    ):
        self.store = store
        self.prober = prober or MetadataProber()
        self.session_refs = session_refs or SessionReferences()

    async def create(self, file: MediaFile) -> MediaItem:
        """Create a MediaItem from a raw file.

        Args:
            file: The file to import

        Returns:
            MediaItem with a persisted reference (or a session reference
            when persistence failed) and whatever metadata could be probed.
            Without a local copy to probe, metadata holds the failure
            sentinels.

        Raises:
            UnsupportedMediaError: If the file is not a supported media type
        """
        media_type = classify_media(file.name, file.content_type)
        if media_type is None:
            raise UnsupportedMediaError(
                f"Unsupported file: {file.name} ({file.content_type or 'unknown type'})"
            )

        log_start(logger, f"Importing {media_type.value}: {file.name} ({format_file_size(file.size)})")

        media_id = str(uuid.uuid4())
        try:
            session_ref = await self.session_refs.mint(file.content, get_extension(file.name))
        except OSError as e:
            logger.warning(f"Could not create a session reference for {file.name}: {e}")
            session_ref = None

        try:
            await self.store.save(media_id, file.content)
            reference = PersistedReference(media_id=media_id)
        except Exception as e:
            logger.warning(
                f"Failed to persist {file.name}, keeping it for this session only: {e}"
            )
            reference = EphemeralReference(
                session_ref=session_ref or inline_data_url(file.content, file.content_type)
            )

        if session_ref is None:
            logger.warning(f"No local copy of {file.name} to probe, metadata unavailable")
            probed = ProbeResult.unavailable(media_type)
        else:
            try:
                log_update(logger, "Probing metadata...")
                probed = await self.prober.probe(session_ref, media_type)
            finally:
                if isinstance(reference, PersistedReference):
                    await self.session_refs.revoke(session_ref)

        item = MediaItem(
            id=media_id,
            type=media_type,
            uri=reference,
            name=file.name,
            size=file.size,
            duration=probed.duration if media_type != MediaType.PHOTO else None,
            width=probed.width if media_type != MediaType.AUDIO else None,
            height=probed.height if media_type != MediaType.AUDIO else None,
            thumbnail=probed.thumbnail if media_type != MediaType.AUDIO else None,
        )

        log_complete(logger, f"Imported {file.name} as {item.source_uri}")
        return item
