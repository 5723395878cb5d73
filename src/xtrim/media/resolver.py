"""Turn persisted media references back into playback references."""

import logging
from typing import Dict, List, Optional, Union

from ..models.media_item import (
    EphemeralReference,
    MediaItem,
    PersistedReference,
    PERSISTED_URI_PREFIX,
)
from ..storage.interface import BinaryStoreInterface, StorageError
from .classifier import get_extension
from .session import SessionReferences


logger = logging.getLogger(__name__)

Reference = Union[str, PersistedReference, EphemeralReference]


class MediaUriResolver:
    """Resolves ``media://<id>`` references through the blob store.

    Each resolved id is cached for the lifetime of the resolver; entries
    are never evicted since there is one per imported asset. Concurrent
    resolutions of the same id may both hit the store, which is harmless
    because resolution is idempotent.
    """

    def __init__(
        self,
        store: BinaryStoreInterface,
        session_refs: Optional[SessionReferences] = None,
        suffix: str = "",
    ):
        self.store = store
        self.session_refs = session_refs or SessionReferences()
        self.suffix = suffix
        self._cache: Dict[str, str] = {}

    def cached_ids(self) -> List[str]:
        return list(self._cache)

    async def resolve(self, reference: Reference, suffix: Optional[str] = None) -> str:
        """Return a playback reference for any media reference.

        Non-persisted references come back unchanged. Persisted references
        with no stored content, or whose content cannot be read, come back
        as their original ``media://`` string so callers can show a
        broken-media placeholder.

        Args:
            reference: String or typed media reference
            suffix: File extension for a newly minted playback file, so
                decoders that sniff by name can open it
        """
        if isinstance(reference, (PersistedReference, EphemeralReference)):
            reference = reference.to_uri()
        if not isinstance(reference, str):
            raise TypeError(f"Cannot resolve reference of type {type(reference).__name__}")

        if not reference.startswith(PERSISTED_URI_PREFIX):
            return reference

        media_id = reference[len(PERSISTED_URI_PREFIX):]
        if not media_id:
            return reference

        cached = self._cache.get(media_id)
        if cached:
            return cached

        try:
            content = await self.store.get(media_id)
        except StorageError as e:
            logger.error(f"Failed to resolve persisted media {media_id}: {e}")
            return reference

        if content is None:
            logger.debug(f"No stored content for {media_id}")
            return reference

        try:
            playback_ref = await self.session_refs.mint(
                content, self.suffix if suffix is None else suffix
            )
        except OSError as e:
            logger.error(f"Failed to create playback reference for {media_id}: {e}")
            return reference
        self._cache[media_id] = playback_ref
        return playback_ref

    async def resolve_item(self, item: MediaItem) -> str:
        """Resolve a media item, keeping the extension of its original name."""
        return await self.resolve(item.uri, get_extension(item.name))

    async def close(self) -> None:
        """Release every playback reference minted by this resolver."""
        for playback_ref in self._cache.values():
            await self.session_refs.revoke(playback_ref)
        self._cache.clear()
