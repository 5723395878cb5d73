"""Unit tests for the template media draft."""

import pytest

from xtrim.media.drafts import MediaDraftStore
from xtrim.models import MediaItem, MediaType
from xtrim.storage import InMemoryKeyValueStore


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def drafts(kv, test_settings):
    return MediaDraftStore(kv, test_settings)


def photo(name="a.jpg"):
    return MediaItem(type=MediaType.PHOTO, uri="media://img-1", name=name, width=10, height=10)


class TestMediaDraftStore:
    def test_no_draft_initially(self, drafts):
        assert drafts.get_draft() is None
        assert drafts.set_slot(0, photo()) is None

    def test_initialize_and_fill(self, drafts):
        draft = drafts.initialize_draft("travel-3", "9:16", 2)
        assert draft.items == [None, None]
        assert not draft.is_complete

        drafts.set_slot(0, photo("first.jpg"))
        updated = drafts.set_slot(1, photo("second.jpg"))

        assert updated.is_complete
        assert [item.name for item in updated.items] == ["first.jpg", "second.jpg"]

    def test_slot_out_of_range(self, drafts):
        drafts.initialize_draft("travel-3", "16:9", 1)
        with pytest.raises(IndexError):
            drafts.set_slot(3, photo())

    def test_draft_survives_new_store_instance(self, drafts, kv, test_settings):
        drafts.initialize_draft("travel-3", "1:1", 2)
        drafts.set_slot(1, photo())

        restored = MediaDraftStore(kv, test_settings).get_draft()

        assert restored.template_id == "travel-3"
        assert restored.aspect_ratio == "1:1"
        assert restored.items[0] is None
        assert restored.items[1].name == "a.jpg"

    def test_unreadable_draft_is_discarded(self, kv, test_settings):
        kv.set_item(test_settings.draft_storage_key, '{"templateId": 5}')
        assert MediaDraftStore(kv, test_settings).get_draft() is None

    def test_clear_draft(self, drafts, kv, test_settings):
        drafts.initialize_draft("travel-3", "4:5", 1)
        drafts.clear_draft()

        assert drafts.get_draft() is None
        assert kv.get_item(test_settings.draft_storage_key) is None
