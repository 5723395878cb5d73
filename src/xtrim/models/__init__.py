"""
Data models for Xtrim.

This module provides Pydantic models for type safety and validation
throughout the application.
"""

from .media_item import (
    MediaItem,
    MediaType,
    MediaReference,
    PersistedReference,
    EphemeralReference,
    PERSISTED_URI_PREFIX,
    is_persisted_uri,
    parse_media_uri,
)
from .timeline import (
    TimelineClip,
    AudioTrack,
    TransitionType,
    CropRatio,
    AnimatedFilter,
)
from .project import (
    Project,
    ExportSettings,
    AspectRatio,
)

__all__ = [
    # Media
    "MediaItem",
    "MediaType",
    "MediaReference",
    "PersistedReference",
    "EphemeralReference",
    "PERSISTED_URI_PREFIX",
    "is_persisted_uri",
    "parse_media_uri",
    # Timeline
    "TimelineClip",
    "AudioTrack",
    "TransitionType",
    "CropRatio",
    "AnimatedFilter",
    # Project
    "Project",
    "ExportSettings",
    "AspectRatio",
]
