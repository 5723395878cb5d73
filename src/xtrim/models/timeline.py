"""
Timeline data models.

Defines clips placed on the edit timeline and the independent audio
layers that play alongside them.
"""

from enum import Enum
from typing import List, Literal, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# Placed and trimmed durations of an audio track may differ by this much
DURATION_TOLERANCE = 0.001


class TransitionType(str, Enum):
    """Available transition effects between clips."""
    FADE = "fade"
    DISSOLVE = "dissolve"
    SLIDE_LEFT = "slide-left"
    SLIDE_RIGHT = "slide-right"
    ZOOM = "zoom"
    GLITCH = "glitch"
    WHIP = "whip"
    MORPH = "morph"
    LIGHT_LEAK = "light-leak"
    AI_SMOOTH = "ai-smooth"


class CropRatio(str, Enum):
    """Crop presets applied from the frame center."""
    FREE = "free"
    SQUARE = "1:1"
    LANDSCAPE_4_3 = "4:3"
    PORTRAIT_3_4 = "3:4"
    WIDESCREEN = "16:9"
    VERTICAL = "9:16"


class AnimatedFilter(str, Enum):
    """Particle overlays drawn on top of a clip."""
    NONE = "none"
    SNOW = "snow"
    RAIN = "rain"
    SPARKLES = "sparkles"


class TimelineClip(BaseModel):
    """Single placed instance of a media item on the timeline."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique clip ID")
    media_id: str = Field(..., description="Reference to MediaItem")
    name: Optional[str] = Field(None, description="Display name")

    # Trim window into the source media
    start_time: float = Field(0.0, ge=0, description="Trim start in source media (seconds)")
    end_time: float = Field(..., gt=0, description="Trim end in source media (seconds)")
    original_duration: Optional[float] = Field(None, gt=0, description="Full source duration")
    order: int = Field(..., ge=0, description="Position among sibling clips")

    # Cosmetic adjustments
    filters: List[str] = Field(default_factory=list, description="Applied color filters")
    speed: float = Field(1.0, ge=0.25, le=4.0, description="Playback speed multiplier")
    rotation: Literal[0, 90, 180, 270] = Field(0, description="Rotation in degrees")
    flip_h: bool = Field(False, description="Mirror horizontally")
    flip_v: bool = Field(False, description="Mirror vertically")
    crop_ratio: Optional[CropRatio] = Field(None, description="Crop preset")
    transition: Optional[TransitionType] = Field(None, description="Transition into the next clip")
    animated_filter: Optional[AnimatedFilter] = Field(None, description="Animated overlay")

    @model_validator(mode="after")
    def validate_trim_window(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be greater than start_time")
        if self.original_duration is not None and self.end_time > self.original_duration + DURATION_TOLERANCE:
            raise ValueError(
                f"end_time {self.end_time} exceeds source duration {self.original_duration}"
            )
        return self

    @property
    def duration(self) -> float:
        """Length of the trimmed window in source seconds."""
        return self.end_time - self.start_time


class AudioTrack(BaseModel):
    """Audio layer placed on the timeline independently of video clips."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique track ID")
    uri: str = Field(..., description="Audio source reference")
    name: str = Field(..., description="Display name")

    # Placement on the timeline
    start_time: float = Field(0.0, ge=0, description="When the track starts in the timeline")
    end_time: float = Field(..., gt=0, description="When the track ends in the timeline")

    # Trim window into the source audio
    trim_start: float = Field(0.0, ge=0, description="Trim start in the source file")
    trim_end: float = Field(..., gt=0, description="Trim end in the source file")
    source_duration: Optional[float] = Field(None, gt=0, description="Full source duration")

    # Mix
    volume: float = Field(1.0, ge=0, le=1, description="Track volume")
    fade_in: float = Field(0.0, ge=0, description="Fade-in duration (seconds)")
    fade_out: float = Field(0.0, ge=0, description="Fade-out duration (seconds)")
    is_muted: bool = Field(False, description="Muted in the mix")

    @model_validator(mode="after")
    def validate_windows(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be greater than start_time")
        if self.trim_end <= self.trim_start:
            raise ValueError("trim_end must be greater than trim_start")
        if self.source_duration is not None and self.trim_end > self.source_duration + DURATION_TOLERANCE:
            raise ValueError(
                f"trim_end {self.trim_end} exceeds source duration {self.source_duration}"
            )

        # Audio tracks have no playback rate, so both windows must match
        if abs(self.placed_duration - self.trimmed_duration) > DURATION_TOLERANCE:
            raise ValueError(
                f"placed duration {self.placed_duration:.3f}s must equal "
                f"trimmed duration {self.trimmed_duration:.3f}s"
            )
        if self.fade_in + self.fade_out > self.placed_duration + DURATION_TOLERANCE:
            raise ValueError("fade_in + fade_out must not exceed the placed duration")
        return self

    @property
    def placed_duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def trimmed_duration(self) -> float:
        return self.trim_end - self.trim_start
