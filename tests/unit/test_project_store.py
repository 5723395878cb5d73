"""Unit tests for per-user project persistence."""

import json
import logging

import pytest
from pydantic import ValidationError

from xtrim.models import MediaItem, MediaType, Project
from xtrim.services import StaticIdentityProvider
from xtrim.storage import FileKeyValueStore, InMemoryKeyValueStore, ProjectStore, StorageError


class CountingKeyValueStore(InMemoryKeyValueStore):
    """In-memory store that records how often each key is written."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = {}

    def set_item(self, key, value):
        self.writes[key] = self.writes.get(key, 0) + 1
        super().set_item(key, value)


@pytest.fixture
def kv():
    return CountingKeyValueStore()


@pytest.fixture
def project_store(kv, test_settings):
    return ProjectStore(kv, config=test_settings)


def make_project(name="Trip"):
    project = Project(name=name)
    project.add_media([
        MediaItem(type=MediaType.VIDEO, uri="media://vid-1", name="a.mp4", duration=8.0, width=1280, height=720),
        MediaItem(type=MediaType.PHOTO, uri="media://img-1", name="b.jpg", width=800, height=600),
    ])
    return project


class TestProjectStore:
    """Test save, list, delete and duplicate within a scope."""

    def test_create_project_defaults(self, project_store):
        project = project_store.create_project()
        assert project.name == "Untitled Project"
        assert project.timeline == []
        assert project.export_settings.resolution == "1080p"

    def test_round_trip(self, project_store):
        project = make_project()
        project_store.save_project(project)

        loaded = project_store.get_projects()
        assert len(loaded) == 1
        assert loaded[0].model_dump(mode="json") == project.model_dump(mode="json")

    def test_stored_as_camel_case_json(self, project_store, kv, test_settings):
        project_store.save_project(make_project())

        records = json.loads(kv.get_item(test_settings.projects_storage_prefix))
        assert "mediaItems" in records[0]
        assert "exportSettings" in records[0]
        assert records[0]["timeline"][0]["mediaId"] == "vid-1"

    def test_new_projects_prepended(self, project_store):
        first = project_store.save_project(Project(name="First"))
        second = project_store.save_project(Project(name="Second"))

        assert [p.id for p in project_store.get_projects()] == [second.id, first.id]

    def test_existing_project_replaced_in_place(self, project_store):
        first = project_store.save_project(Project(name="First"))
        project_store.save_project(Project(name="Second"))

        first.name = "Renamed"
        project_store.save_project(first)

        projects = project_store.get_projects()
        assert len(projects) == 2
        assert projects[1].id == first.id
        assert projects[1].name == "Renamed"

    def test_save_refreshes_timestamp_and_order(self, project_store):
        project = make_project()
        project.timeline[0].order = 7
        before = project.updated_at

        project_store.save_project(project)

        assert project.updated_at >= before
        assert [c.order for c in project.ordered_timeline()] == [0, 1]

    def test_save_rejects_non_project(self, project_store):
        with pytest.raises(TypeError):
            project_store.save_project({"id": "p1"})

    def test_corrupt_storage_reads_empty(self, test_settings, caplog):
        kv = InMemoryKeyValueStore({test_settings.projects_storage_prefix: "{not json"})
        store = ProjectStore(kv, config=test_settings)

        with caplog.at_level(logging.ERROR):
            assert store.get_projects() == []
        assert "Error loading projects" in caplog.text

    def test_wrong_shape_reads_empty(self, test_settings):
        kv = InMemoryKeyValueStore({test_settings.projects_storage_prefix: '{"id": "p1"}'})
        assert ProjectStore(kv, config=test_settings).get_projects() == []

    def test_invalid_edit_is_rejected_and_scope_survives(self, project_store):
        """An edit that breaks a clip invariant must not wipe the other projects."""
        keep = project_store.save_project(Project(name="Keep me"))
        edited = project_store.save_project(make_project("Edited"))

        edited.timeline[0].end_time = 9.0  # past the 8s source
        with pytest.raises(ValidationError):
            project_store.save_project(edited)

        project_store.save_project(Project(name="Third"))

        names = [p.name for p in project_store.get_projects()]
        assert names == ["Third", "Edited", "Keep me"]
        assert project_store.get_project(edited.id).timeline[0].end_time == 8.0
        assert project_store.get_project(keep.id) is not None

    def test_bad_record_is_skipped_not_dropped(self, test_settings, caplog):
        good = Project(name="Good").model_dump(mode="json", by_alias=True)
        bad = {"id": "broken", "name": "Broken", "timeline": [{"mediaId": "m", "endTime": -1, "order": 0}]}
        key = test_settings.projects_storage_prefix
        kv = InMemoryKeyValueStore({key: json.dumps([bad, good])})
        store = ProjectStore(kv, config=test_settings)

        with caplog.at_level(logging.ERROR):
            assert [p.name for p in store.get_projects()] == ["Good"]
        assert "Skipping unreadable project broken" in caplog.text

        # Saving and deleting elsewhere in the scope leaves the bad record alone
        store.save_project(Project(name="New"))
        store.delete_project(good["id"])
        ids = [record["id"] for record in json.loads(kv.get_item(key))]
        assert "broken" in ids
        assert len(ids) == 2

    def test_failed_write_leaves_project_untouched(self, test_settings):
        class FailingKeyValueStore(InMemoryKeyValueStore):
            def set_item(self, key, value):
                raise StorageError("disk full")

        store = ProjectStore(FailingKeyValueStore(), config=test_settings)
        project = make_project()
        project.timeline[0].order = 5
        before = project.updated_at

        with pytest.raises(StorageError):
            store.save_project(project)

        assert project.updated_at == before
        assert project.timeline[0].order == 5

    def test_delete_unknown_does_not_write(self, project_store, kv, test_settings):
        """Deleting an unknown id leaves storage untouched."""
        project_store.save_project(Project(name="Keep"))
        key = test_settings.projects_storage_prefix
        writes_before = kv.writes[key]

        assert not project_store.delete_project("missing")
        assert kv.writes[key] == writes_before
        assert len(project_store.get_projects()) == 1

    def test_delete_project(self, project_store):
        project = project_store.save_project(Project(name="Gone"))
        assert project_store.delete_project(project.id)
        assert project_store.get_projects() == []

    def test_duplicate_is_deep_copy(self, project_store):
        original = project_store.save_project(make_project("Trip"))

        duplicate = project_store.duplicate_project(original.id)

        assert duplicate.id != original.id
        assert duplicate.name == "Trip (Copy)"
        assert duplicate.created_at >= original.created_at
        assert project_store.get_projects()[0].id == duplicate.id

        # Mutating the copy must not leak into the original
        duplicate.timeline[0].end_time = 2.0
        duplicate.media_items[0].name = "changed.mp4"
        stored_original = project_store.get_project(original.id)
        assert stored_original.timeline[0].end_time == 8.0
        assert stored_original.media_items[0].name == "a.mp4"

    def test_duplicate_missing(self, project_store, kv, caplog):
        with caplog.at_level(logging.WARNING):
            assert project_store.duplicate_project("missing") is None
        assert kv.writes == {}
        assert "missing" in caplog.text

    def test_persists_across_instances(self, temp_dir, test_settings):
        kv = FileKeyValueStore(f"{temp_dir}/kv")
        saved = ProjectStore(kv, config=test_settings).save_project(make_project())

        reopened = ProjectStore(FileKeyValueStore(f"{temp_dir}/kv"), config=test_settings)
        assert reopened.get_project(saved.id).model_dump(mode="json") == saved.model_dump(mode="json")


class TestProjectScopes:
    """Test per-user scoping of project lists."""

    def test_storage_keys(self, project_store, test_settings):
        prefix = test_settings.projects_storage_prefix
        assert project_store.storage_key(None) == prefix
        assert project_store.storage_key("") == prefix
        assert project_store.storage_key("u1") == f"{prefix}_u1"

    def test_scopes_are_isolated(self, project_store):
        project_store.cache_identity("alice")
        alice_project = project_store.save_project(Project(name="Alice's"))

        project_store.cache_identity("bob")
        assert project_store.get_projects() == []
        project_store.save_project(Project(name="Bob's"))

        project_store.cache_identity(None)
        assert project_store.get_projects() == []

        assert [p.id for p in project_store.list_projects("alice")] == [alice_project.id]
        assert [p.name for p in project_store.list_projects("bob")] == ["Bob's"]

    def test_delete_only_affects_current_scope(self, project_store):
        project_store.cache_identity("alice")
        project = project_store.save_project(Project(name="Shared name"))

        project_store.cache_identity("bob")
        assert not project_store.delete_project(project.id)

        assert len(project_store.list_projects("alice")) == 1

    @pytest.mark.asyncio
    async def test_async_read_caches_identity(self, kv, test_settings):
        store = ProjectStore(kv, StaticIdentityProvider("carol"), test_settings)
        kv.set_item(store.storage_key("carol"), "[]")

        assert await store.get_projects_async() == []
        assert store.current_user_id() == "carol"

        saved = store.save_project(Project(name="Carol's"))
        assert [p.id for p in store.list_projects("carol")] == [saved.id]

    @pytest.mark.asyncio
    async def test_signed_out_clears_cached_identity(self, kv, test_settings):
        store = ProjectStore(kv, StaticIdentityProvider(None), test_settings)
        store.cache_identity("stale-user")

        await store.get_projects_async()

        assert store.current_user_id() is None
        assert kv.get_item(test_settings.current_user_key) is None
