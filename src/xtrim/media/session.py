"""Session-local playback references.

A session reference is a local file path holding a copy of some media
bytes. It is directly usable by decoders and renderers but only lives as
long as the process (or until it is revoked).
"""

import asyncio
import logging
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Optional, Set
import aiofiles
import aiofiles.os

from ..config import Settings, settings as default_settings


logger = logging.getLogger(__name__)


class SessionReferences:
    """Mints and revokes session playback references.

    The backing directory is created on first use and removed by close().
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._directory: Optional[Path] = None
        self._owns_directory = False
        self._live: Set[str] = set()

    @property
    def directory(self) -> Path:
        if self._directory is None:
            if self.config.session_dir:
                self._directory = Path(self.config.session_dir).resolve()
                self._directory.mkdir(parents=True, exist_ok=True)
            else:
                self._directory = Path(tempfile.mkdtemp(prefix="xtrim-session-"))
                self._owns_directory = True
        return self._directory

    async def mint(self, content: bytes, suffix: str = "") -> str:
        """Write content to a new session file and return its reference.

        Args:
            content: Media bytes
            suffix: File extension to keep so decoders can sniff the format
        """
        path = self.directory / f"{uuid.uuid4().hex}{suffix}"
        async with aiofiles.open(path, "wb") as f:
            await f.write(content)
        ref = str(path)
        self._live.add(ref)
        return ref

    def is_live(self, ref: str) -> bool:
        return ref in self._live

    async def revoke(self, ref: str) -> bool:
        """Release a reference minted by this registry.

        Returns:
            True if the reference was live and is now gone
        """
        if ref not in self._live:
            return False
        self._live.discard(ref)
        try:
            await aiofiles.os.remove(ref)
        except FileNotFoundError:
            pass
        return True

    async def close(self) -> None:
        """Revoke every live reference and drop the session directory."""
        for ref in list(self._live):
            await self.revoke(ref)
        if self._directory is not None and self._owns_directory:
            await asyncio.to_thread(shutil.rmtree, self._directory, True)
            logger.debug(f"Removed session directory {self._directory}")
        self._directory = None
        self._owns_directory = False
