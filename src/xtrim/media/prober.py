"""Metadata probing with bounded wait times."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, TypeVar

from ..config import Settings, settings as default_settings
from ..models.media_item import MediaType
from .decoder import MediaDecoder


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Values reported when a probe times out or fails
DURATION_SENTINEL = 0.0
DIMENSIONS_SENTINEL = (0, 0)
THUMBNAIL_SENTINEL = ""


@dataclass
class ProbeResult:
    """Metadata gathered for one file. Fields not applicable stay None."""
    duration: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    thumbnail: Optional[str] = None

    @classmethod
    def unavailable(cls, media_type: MediaType) -> "ProbeResult":
        """Result for a file that could not be probed at all."""
        media_type = MediaType(media_type)
        if media_type == MediaType.AUDIO:
            return cls(duration=DURATION_SENTINEL)
        width, height = DIMENSIONS_SENTINEL
        return cls(
            duration=DURATION_SENTINEL if media_type == MediaType.VIDEO else None,
            width=width,
            height=height,
            thumbnail=THUMBNAIL_SENTINEL,
        )


def jpeg_data_url(data: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(data).decode("ascii")


async def race_with_timeout(
    func: Callable[..., T],
    *args: Any,
    timeout: float,
    sentinel: T,
    label: str = "probe",
) -> T:
    """Run a blocking call in the default executor against a timer.

    Whichever finishes first wins. On timeout the decode task is cancelled
    and any late result is dropped; decode errors are logged. Either way
    the sentinel is returned instead of raising.
    """
    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(loop.run_in_executor(None, func, *args))
    done, _ = await asyncio.wait({task}, timeout=timeout)

    if task not in done:
        # The worker thread runs to completion but its result is dropped
        task.cancel()
        logger.warning(f"{label} timed out after {timeout:.1f}s")
        return sentinel

    error = task.exception()
    if error is not None:
        logger.warning(f"{label} failed: {error}")
        return sentinel
    return task.result()


class MetadataProber:
    """Extracts duration, dimensions and preview images for imported media.

    All probes for one file run concurrently and each is bounded by its own
    timeout, so probing never blocks item creation for longer than the
    slowest timeout.
    """

    def __init__(self, decoder: Optional[MediaDecoder] = None, config: Optional[Settings] = None):
        self.decoder = decoder or MediaDecoder()
        self.config = config or default_settings

    async def get_duration(self, path: str, media_type: MediaType) -> float:
        func = self.decoder.video_duration if media_type == MediaType.VIDEO else self.decoder.audio_duration
        return await race_with_timeout(
            func, path,
            timeout=self.config.probe_timeout,
            sentinel=DURATION_SENTINEL,
            label=f"{media_type} duration probe",
        )

    async def get_dimensions(self, path: str, media_type: MediaType) -> Tuple[int, int]:
        func = self.decoder.video_dimensions if media_type == MediaType.VIDEO else self.decoder.image_dimensions
        return await race_with_timeout(
            func, path,
            timeout=self.config.probe_timeout,
            sentinel=DIMENSIONS_SENTINEL,
            label=f"{media_type} dimension probe",
        )

    async def get_thumbnail(self, path: str, media_type: MediaType) -> str:
        if media_type == MediaType.VIDEO:
            data = await race_with_timeout(
                self.decoder.video_frame_jpeg, path,
                self.config.thumbnail_seek_seconds, self.config.thumbnail_quality,
                timeout=self.config.thumbnail_timeout,
                sentinel=b"",
                label="video thumbnail capture",
            )
        else:
            data = await race_with_timeout(
                self.decoder.image_preview_jpeg, path,
                self.config.thumbnail_max_size, self.config.thumbnail_quality,
                timeout=self.config.thumbnail_timeout,
                sentinel=b"",
                label="image preview",
            )
        return jpeg_data_url(data) if data else THUMBNAIL_SENTINEL

    async def probe(self, path: str, media_type: MediaType) -> ProbeResult:
        """Gather every probe relevant to the media type.

        Args:
            path: Session playback reference (local file path)
            media_type: Classified type of the file

        Returns:
            ProbeResult with sentinels in place of failed probes
        """
        media_type = MediaType(media_type)
        result = ProbeResult()

        if media_type == MediaType.AUDIO:
            result.duration = await self.get_duration(path, media_type)
            return result

        if media_type == MediaType.VIDEO:
            duration, (width, height), thumbnail = await asyncio.gather(
                self.get_duration(path, media_type),
                self.get_dimensions(path, media_type),
                self.get_thumbnail(path, media_type),
            )
            result.duration = duration
        else:
            (width, height), thumbnail = await asyncio.gather(
                self.get_dimensions(path, media_type),
                self.get_thumbnail(path, media_type),
            )

        result.width, result.height = width, height
        result.thumbnail = thumbnail
        return result
