"""Media ingestion: classification, probing, references and import."""

from .classifier import classify_media, is_supported, supported_formats
from .decoder import MediaDecoder, DecodeError
from .prober import MetadataProber, ProbeResult
from .session import SessionReferences
from .resolver import MediaUriResolver
from .factory import MediaItemFactory, MediaFile, UnsupportedMediaError
from .drafts import MediaDraft, MediaDraftStore
from .services import MediaServices, get_media_services, close_media_services

__all__ = [
    "classify_media",
    "is_supported",
    "supported_formats",
    "MediaDecoder",
    "DecodeError",
    "MetadataProber",
    "ProbeResult",
    "SessionReferences",
    "MediaUriResolver",
    "MediaItemFactory",
    "MediaFile",
    "UnsupportedMediaError",
    "MediaDraft",
    "MediaDraftStore",
    "MediaServices",
    "get_media_services",
    "close_media_services",
]
