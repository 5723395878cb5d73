"""
Project data model.

The aggregate root the editor reads and writes: the imported media, the
ordered clip timeline, the audio layers and the export configuration.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .media_item import MediaItem, MediaType, utcnow
from .timeline import AudioTrack, TimelineClip


DEFAULT_CLIP_DURATION = 5.0


class AspectRatio(str, Enum):
    """Project canvas aspect ratios."""
    WIDESCREEN = "16:9"
    VERTICAL = "9:16"
    SQUARE = "1:1"
    PORTRAIT = "4:5"


class ExportSettings(BaseModel):
    """Video export configuration. Every field has a default."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    resolution: Literal["720p", "1080p", "4k"] = Field("1080p", description="Output resolution")
    fps: Literal[24, 30, 60] = Field(30, description="Frames per second")
    bitrate: Literal["low", "medium", "high"] = Field("medium", description="Bitrate preset")
    format: Literal["mp4", "webm", "mov", "gif"] = Field("mp4", description="Container format")
    fast_start: bool = Field(True, description="Move the moov atom to the front")
    hdr: bool = Field(False, description="Keep HDR metadata")
    remove_audio: bool = Field(False, description="Strip the audio stream")


class Project(BaseModel):
    """Complete editing project - the source of truth."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique project ID")
    name: str = Field("Untitled Project", description="User-facing project name")
    created_at: datetime = Field(default_factory=utcnow, description="Project creation time")
    updated_at: datetime = Field(default_factory=utcnow, description="Last save time")
    thumbnail: Optional[str] = Field(None, description="Cover image")

    media_items: List[MediaItem] = Field(default_factory=list, description="Imported media")
    timeline: List[TimelineClip] = Field(default_factory=list, description="Clips on the timeline")
    audio_tracks: List[AudioTrack] = Field(default_factory=list, description="Audio layers")
    export_settings: ExportSettings = Field(default_factory=ExportSettings, description="Export configuration")
    aspect_ratio: AspectRatio = Field(AspectRatio.WIDESCREEN, description="Canvas aspect ratio")
    duration: float = Field(0.0, ge=0, description="Total duration in seconds (kept by callers)")

    def update_timestamp(self) -> None:
        """Update the last modified timestamp."""
        self.updated_at = utcnow()

    # Lookups

    def get_media_by_id(self, media_id: str) -> Optional[MediaItem]:
        """Find media item by ID."""
        for media in self.media_items:
            if media.id == media_id:
                return media
        return None

    def get_clip(self, clip_id: str) -> Optional[TimelineClip]:
        for clip in self.timeline:
            if clip.id == clip_id:
                return clip
        return None

    def get_audio_track(self, track_id: str) -> Optional[AudioTrack]:
        for track in self.audio_tracks:
            if track.id == track_id:
                return track
        return None

    def ordered_timeline(self) -> List[TimelineClip]:
        """Clips sorted by their order field."""
        return sorted(self.timeline, key=lambda c: c.order)

    # Duration bookkeeping

    def compute_duration(self) -> float:
        """Sum of the trimmed windows of all clips."""
        return sum(clip.duration for clip in self.timeline)

    def recompute_duration(self) -> float:
        self.duration = self.compute_duration()
        return self.duration

    # Timeline editing

    def normalize_order(self) -> None:
        """Sort clips by order and renumber them 0..n-1."""
        self.timeline = [
            clip.model_copy(update={"order": index})
            for index, clip in enumerate(self.ordered_timeline())
        ]

    def add_media(
        self,
        items: Iterable[MediaItem],
        photo_duration: float = DEFAULT_CLIP_DURATION,
    ) -> List[TimelineClip]:
        """Add imported media and append a clip for every visual item.

        Photos get ``photo_duration`` seconds, videos their probed duration
        (or the default when the duration could not be determined). Audio
        items are only added to the media pool.

        Returns:
            The clips that were appended
        """
        new_clips = []
        next_order = len(self.timeline)
        for item in items:
            self.media_items.append(item)
            if item.type == MediaType.AUDIO:
                continue

            original_duration = None
            if item.type == MediaType.PHOTO:
                clip_duration = photo_duration
            elif item.duration:
                clip_duration = item.duration
                original_duration = item.duration
            else:
                clip_duration = DEFAULT_CLIP_DURATION

            clip = TimelineClip(
                media_id=item.id,
                start_time=0.0,
                end_time=clip_duration,
                original_duration=original_duration,
                order=next_order,
            )
            next_order += 1
            new_clips.append(clip)

        self.timeline.extend(new_clips)
        self.recompute_duration()
        return new_clips

    def remove_clip(self, clip_id: str) -> bool:
        """Remove a clip and renumber the remaining ones."""
        if self.get_clip(clip_id) is None:
            return False
        self.timeline = [c for c in self.timeline if c.id != clip_id]
        self.normalize_order()
        self.recompute_duration()
        return True

    def split_clip(self, clip_id: str, at: Optional[float] = None) -> TimelineClip:
        """Split a clip in two at a source time.

        Args:
            clip_id: Clip to split
            at: Split point in source seconds, defaults to the midpoint

        Returns:
            The newly created second half

        Raises:
            KeyError: If the clip does not exist
            ValueError: If the split point is not strictly inside the clip
        """
        clip = self.get_clip(clip_id)
        if clip is None:
            raise KeyError(clip_id)

        split_point = at if at is not None else (clip.start_time + clip.end_time) / 2
        if split_point <= clip.start_time or split_point >= clip.end_time:
            raise ValueError(
                f"Split point must be between {clip.start_time:.1f} and {clip.end_time:.1f} seconds"
            )

        self.normalize_order()
        clip = self.get_clip(clip_id)
        first_half = clip.model_copy(update={"end_time": split_point})
        second_half = TimelineClip(
            media_id=clip.media_id,
            start_time=split_point,
            end_time=clip.end_time,
            original_duration=clip.original_duration,
            order=clip.order + 1,
        )

        timeline = []
        for existing in self.timeline:
            if existing.id == clip_id:
                timeline.extend([first_half, second_half])
            elif existing.order > clip.order:
                timeline.append(existing.model_copy(update={"order": existing.order + 1}))
            else:
                timeline.append(existing)
        self.timeline = timeline
        return second_half

    def duplicate_clip(self, clip_id: str) -> TimelineClip:
        """Append a copy of a clip, with all its adjustments, to the end of the timeline.

        Raises:
            KeyError: If the clip does not exist
        """
        clip = self.get_clip(clip_id)
        if clip is None:
            raise KeyError(clip_id)

        copy = clip.model_copy(
            deep=True,
            update={"id": str(uuid.uuid4()), "order": len(self.timeline)},
        )
        self.timeline.append(copy)
        self.duration += copy.duration
        return copy

    def trim_clip(self, clip_id: str, start_time: float, end_time: float) -> TimelineClip:
        """Change the trim window of a clip, re-validating it."""
        clip = self.get_clip(clip_id)
        if clip is None:
            raise KeyError(clip_id)
        data = clip.model_dump()
        data.update(start_time=start_time, end_time=end_time)
        trimmed = TimelineClip.model_validate(data)
        self.timeline = [trimmed if c.id == clip_id else c for c in self.timeline]
        self.recompute_duration()
        return trimmed

    def reorder_clips(self, clip_ids: List[str]) -> None:
        """Reorder the timeline to follow ``clip_ids`` exactly."""
        current = {clip.id: clip for clip in self.timeline}
        if sorted(clip_ids) != sorted(current):
            raise ValueError("clip_ids must list every timeline clip exactly once")
        self.timeline = [
            current[clip_id].model_copy(update={"order": index})
            for index, clip_id in enumerate(clip_ids)
        ]

    # Audio tracks

    def add_audio_track(self, track: AudioTrack) -> AudioTrack:
        self.audio_tracks.append(track)
        return track

    def update_audio_track(self, track_id: str, **changes: Any) -> AudioTrack:
        """Apply changes to an audio track and re-validate it."""
        track = self.get_audio_track(track_id)
        if track is None:
            raise KeyError(track_id)
        data = track.model_dump()
        data.update(changes)
        updated = AudioTrack.model_validate(data)
        self.audio_tracks = [updated if t.id == track_id else t for t in self.audio_tracks]
        return updated

    def remove_audio_track(self, track_id: str) -> bool:
        before = len(self.audio_tracks)
        self.audio_tracks = [t for t in self.audio_tracks if t.id != track_id]
        return len(self.audio_tracks) != before

    def validate_state(self) -> List[str]:
        """Validate the project state and return list of issues.

        Returns:
            List of validation errors, empty if valid
        """
        errors = []

        media_ids = {m.id for m in self.media_items}
        for clip in self.timeline:
            if clip.media_id not in media_ids:
                errors.append(f"Clip {clip.id} references unknown media ID: {clip.media_id}")
                continue
            media = self.get_media_by_id(clip.media_id)
            if media.duration and clip.end_time > media.duration:
                errors.append(f"Clip {clip.id} ends after its media ({media.duration:.3f}s)")

        orders = sorted(clip.order for clip in self.timeline)
        if orders != list(range(len(orders))):
            errors.append(f"Clip order is not contiguous: {orders}")

        return errors

    def to_summary(self) -> Dict[str, Any]:
        """Create a summary view of the project."""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "media_count": len(self.media_items),
            "clip_count": len(self.timeline),
            "audio_track_count": len(self.audio_tracks),
            "duration": self.duration,
        }
