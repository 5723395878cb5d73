"""
Media item data models.

Defines the record kept for every imported photo, video or audio file and
the two kinds of reference a media item can carry: a persisted reference
into the local blob store, or an ephemeral reference that only lives for
the current session.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


PERSISTED_URI_PREFIX = "media://"


def utcnow() -> datetime:
    """Current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


class MediaType(str, Enum):
    """Supported media file types."""
    VIDEO = "video"
    PHOTO = "photo"
    AUDIO = "audio"


class PersistedReference(BaseModel):
    """Reference to content stored in the durable blob store."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal["persisted"] = "persisted"
    media_id: str = Field(..., min_length=1, description="Blob store key")

    def to_uri(self) -> str:
        return f"{PERSISTED_URI_PREFIX}{self.media_id}"


class EphemeralReference(BaseModel):
    """Session-local playback reference used when persistence failed."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal["ephemeral"] = "ephemeral"
    session_ref: str = Field(..., min_length=1, description="Playback reference valid for this session")

    def to_uri(self) -> str:
        return self.session_ref


MediaReference = Annotated[
    Union[PersistedReference, EphemeralReference],
    Field(discriminator="kind"),
]


def is_persisted_uri(uri: str) -> bool:
    """Check whether a string uses the persisted ``media://`` scheme."""
    return uri.startswith(PERSISTED_URI_PREFIX)


def parse_media_uri(uri: str) -> Union[PersistedReference, EphemeralReference]:
    """Parse the string wire form of a media reference.

    Args:
        uri: Either ``media://<id>`` or any directly playable reference

    Returns:
        The matching reference variant

    Raises:
        ValueError: If the string is empty or a persisted URI without an id
    """
    if not uri:
        raise ValueError("Media URI must not be empty")
    if is_persisted_uri(uri):
        media_id = uri[len(PERSISTED_URI_PREFIX):]
        if not media_id:
            raise ValueError(f"Persisted media URI has no id: {uri!r}")
        return PersistedReference(media_id=media_id)
    return EphemeralReference(session_ref=uri)


class MediaItem(BaseModel):
    """Individual imported media file."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier")
    type: MediaType = Field(..., description="Media file type")
    uri: MediaReference = Field(..., description="Where the content lives")
    name: str = Field(..., description="Original file name")
    size: int = Field(0, ge=0, description="File size in bytes")
    created_at: datetime = Field(default_factory=utcnow, description="When the item was imported")

    # Probed metadata; None means not known yet, 0 means probing failed
    duration: Optional[float] = Field(None, ge=0, description="Duration in seconds (video/audio)")
    width: Optional[int] = Field(None, ge=0, description="Pixel width (video/photo)")
    height: Optional[int] = Field(None, ge=0, description="Pixel height (video/photo)")
    thumbnail: Optional[str] = Field(None, description="Preview image data URL (video/photo)")

    @field_validator("uri", mode="before")
    @classmethod
    def parse_legacy_uri(cls, v):
        """Accept the plain string form used by older stored records."""
        if isinstance(v, str):
            return parse_media_uri(v)
        return v

    @model_validator(mode="after")
    def check_fields_match_type(self):
        if self.type == MediaType.PHOTO and self.duration is not None:
            raise ValueError("Photos do not carry a duration")
        if self.type == MediaType.AUDIO:
            for field in ("width", "height", "thumbnail"):
                if getattr(self, field) is not None:
                    raise ValueError(f"Audio items do not carry {field}")
        return self

    @property
    def source_uri(self) -> str:
        """String form of the reference (``media://<id>`` or session reference)."""
        return self.uri.to_uri()

    @property
    def is_persisted(self) -> bool:
        return isinstance(self.uri, PersistedReference)

    @property
    def has_dimensions(self) -> bool:
        return bool(self.width) and bool(self.height)
