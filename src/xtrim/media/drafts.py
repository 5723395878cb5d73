"""Template media draft kept for the current session.

When a user starts from a template, each of its media slots is filled one
by one before the project is built. The partially filled draft lives in
session storage so it survives screen changes but not a restart.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..config import Settings, settings as default_settings
from ..models.media_item import MediaItem, utcnow
from ..models.project import AspectRatio
from ..storage.interface import KeyValueStoreInterface


logger = logging.getLogger(__name__)


class MediaDraft(BaseModel):
    """Media chosen so far for a template's slots."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    template_id: str
    aspect_ratio: AspectRatio
    media_slots: int = Field(..., ge=1)
    items: List[Optional[MediaItem]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_complete(self) -> bool:
        return len(self.items) == self.media_slots and all(item is not None for item in self.items)


class MediaDraftStore:
    """Keeps the single active draft, memoized in memory."""

    def __init__(self, kv: KeyValueStoreInterface, config: Optional[Settings] = None):
        self.kv = kv
        self.config = config or default_settings
        self._draft: Optional[MediaDraft] = None

    def initialize_draft(self, template_id: str, aspect_ratio: str, media_slots: int) -> MediaDraft:
        """Start a new draft with every slot empty."""
        draft = MediaDraft(
            template_id=template_id,
            aspect_ratio=aspect_ratio,
            media_slots=media_slots,
            items=[None] * media_slots,
        )
        self._save(draft)
        return draft

    def get_draft(self) -> Optional[MediaDraft]:
        if self._draft is not None:
            return self._draft

        stored = self.kv.get_item(self.config.draft_storage_key)
        if not stored:
            return None
        try:
            self._draft = MediaDraft.model_validate_json(stored)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable media draft: {e}")
            return None
        return self._draft

    def set_slot(self, index: int, item: MediaItem) -> Optional[MediaDraft]:
        """Put a media item into a slot.

        Returns:
            The updated draft, or None if there is no active draft

        Raises:
            IndexError: If the slot index is out of range
        """
        draft = self.get_draft()
        if draft is None:
            return None
        if not 0 <= index < len(draft.items):
            raise IndexError(f"Slot {index} out of range for {len(draft.items)} slots")

        items = list(draft.items)
        items[index] = item
        updated = draft.model_copy(update={"items": items})
        self._save(updated)
        return updated

    def clear_draft(self) -> None:
        self._draft = None
        self.kv.remove_item(self.config.draft_storage_key)

    def _save(self, draft: MediaDraft) -> None:
        self._draft = draft
        self.kv.set_item(self.config.draft_storage_key, draft.model_dump_json(by_alias=True))
