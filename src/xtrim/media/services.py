"""Process-wide wiring of the media pipeline.

The blob store's database handle, the resolver cache and the session
references are shared state. They are created together on first use by
get_media_services() and torn down by close_media_services(); tests
build their own MediaServices with injected parts instead.
"""

import logging
from typing import Optional

from ..config import Settings, settings as default_settings
from ..storage.blob_store import MediaBlobStore
from ..storage.interface import BinaryStoreInterface
from .factory import MediaItemFactory
from .prober import MetadataProber
from .resolver import MediaUriResolver
from .session import SessionReferences


logger = logging.getLogger(__name__)

# Module-level instance shared by the whole process
_services_instance: Optional["MediaServices"] = None


class MediaServices:
    """Container for the collaborating media components."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        store: Optional[BinaryStoreInterface] = None,
        prober: Optional[MetadataProber] = None,
        session_refs: Optional[SessionReferences] = None,
    ):
        self.config = config or default_settings
        self.store = store or MediaBlobStore(self.config)
        self.session_refs = session_refs or SessionReferences(self.config)
        self.prober = prober or MetadataProber(config=self.config)
        self.resolver = MediaUriResolver(self.store, self.session_refs)
        self.factory = MediaItemFactory(self.store, self.prober, self.session_refs)

    async def close(self) -> None:
        """Release every session reference, including cached resolutions."""
        await self.resolver.close()
        await self.session_refs.close()


def get_media_services(config: Optional[Settings] = None) -> MediaServices:
    """Get the shared MediaServices, creating it on first call."""
    global _services_instance
    if _services_instance is None:
        _services_instance = MediaServices(config)
        logger.debug("Initialized media services")
    return _services_instance


async def close_media_services() -> None:
    global _services_instance
    if _services_instance is not None:
        await _services_instance.close()
        _services_instance = None
