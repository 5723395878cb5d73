"""Per-user project persistence on top of local key-value storage."""

import json
import logging
from typing import Any, List, Optional
import uuid

from pydantic import ValidationError

from ..config import Settings, settings as default_settings
from ..models.media_item import utcnow
from ..models.project import Project
from ..services.identity import IdentityProvider
from .interface import KeyValueStoreInterface, StorageError


logger = logging.getLogger(__name__)


class ProjectStore:
    """Stores the project list of each scope under one key.

    A scope is a user id, or the unscoped bucket when nobody is signed in.
    The last known user id is cached in the key-value store so synchronous
    reads resolve the same scope as the most recent async identity lookup.
    Writes replace the whole list for a scope; concurrent saves are
    last-write-wins.
    """

    def __init__(
        self,
        kv: KeyValueStoreInterface,
        identity_provider: Optional[IdentityProvider] = None,
        config: Optional[Settings] = None,
    ):
        self.kv = kv
        self.identity_provider = identity_provider
        self.config = config or default_settings

    def create_project(self, name: Optional[str] = None) -> Project:
        """Create an empty in-memory project with default export settings."""
        return Project(name=name or self.config.default_project_name)

    def storage_key(self, user_id: Optional[str]) -> str:
        prefix = self.config.projects_storage_prefix
        return f"{prefix}_{user_id}" if user_id else prefix

    # Identity cache

    def current_user_id(self) -> Optional[str]:
        """Last cached identity, or None for the unscoped bucket."""
        return self.kv.get_item(self.config.current_user_key) or None

    def cache_identity(self, user_id: Optional[str]) -> None:
        if user_id:
            self.kv.set_item(self.config.current_user_key, user_id)
        else:
            self.kv.remove_item(self.config.current_user_key)

    async def refresh_identity(self) -> Optional[str]:
        """Ask the identity provider for the current user and cache it."""
        if self.identity_provider is None:
            return self.current_user_id()
        user_id = await self.identity_provider.get_user_id()
        self.cache_identity(user_id)
        return user_id

    # Reads

    def _read_records(self, key: str) -> List[Any]:
        """Raw stored records for a key.

        Raises:
            ValueError: If the stored value is not a JSON list
            StorageError: If the backend cannot be read
        """
        stored = self.kv.get_item(key)
        if not stored:
            return []
        records = json.loads(stored)
        if not isinstance(records, list):
            raise ValueError(f"expected a list, got {type(records).__name__}")
        return records

    def list_projects(self, user_id: Optional[str]) -> List[Project]:
        """Load every project stored for a scope.

        An unreadable list is logged and reported as empty. Individual
        records that fail validation are logged and skipped so one bad
        project does not hide the rest of the scope.
        """
        key = self.storage_key(user_id)
        try:
            records = self._read_records(key)
        except (ValueError, StorageError) as e:
            logger.error(f"Error loading projects from {key}: {e}")
            return []

        projects = []
        for index, record in enumerate(records):
            try:
                projects.append(Project.model_validate(record))
            except ValidationError as e:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.error(f"Skipping unreadable project {record_id or index} in {key}: {e}")
        return projects

    def get_projects(self) -> List[Project]:
        """Synchronous read for the cached identity's scope."""
        return self.list_projects(self.current_user_id())

    async def get_projects_async(self) -> List[Project]:
        """Resolve the identity first, then read its scope."""
        user_id = await self.refresh_identity()
        return self.list_projects(user_id)

    def get_project(self, project_id: str) -> Optional[Project]:
        for project in self.get_projects():
            if project.id == project_id:
                return project
        return None

    # Writes

    def _records_for_write(self, key: str) -> List[Any]:
        # Unreadable records are carried over untouched; only a value that
        # is not a list at all is replaced.
        try:
            return self._read_records(key)
        except ValueError as e:
            logger.warning(f"Replacing unreadable project list in {key}: {e}")
            return []

    def save_project(self, project: Project) -> Project:
        """Insert or replace a project in the current scope.

        The project is re-validated first, so edits that broke a clip or
        audio track invariant raise instead of being stored. Clip order is
        renumbered to be contiguous and ``updated_at`` is refreshed; both
        are copied back onto the passed project once the write succeeded.
        New projects go to the front of the list; existing ones keep their
        position.

        Raises:
            TypeError: If ``project`` is not a Project
            ValidationError: If the project is in an invalid state
            StorageError: If the list cannot be read or written
        """
        if not isinstance(project, Project):
            raise TypeError(f"Expected Project, got {type(project).__name__}")

        saved = Project.model_validate(project.model_dump())
        saved.normalize_order()
        saved.update_timestamp()

        key = self.storage_key(self.current_user_id())
        records = self._records_for_write(key)
        record = saved.model_dump(mode="json", by_alias=True)

        for index, existing in enumerate(records):
            if isinstance(existing, dict) and existing.get("id") == saved.id:
                records[index] = record
                break
        else:
            records.insert(0, record)

        self.kv.set_item(key, json.dumps(records))
        logger.debug(f"Saved project {saved.id} ({len(records)} in scope)")

        project.timeline = saved.timeline
        project.updated_at = saved.updated_at
        return project

    def delete_project(self, project_id: str) -> bool:
        """Remove a project from the current scope. Unknown ids are a no-op."""
        key = self.storage_key(self.current_user_id())
        records = self._records_for_write(key)
        remaining = [
            r for r in records
            if not (isinstance(r, dict) and r.get("id") == project_id)
        ]
        if len(remaining) == len(records):
            return False
        self.kv.set_item(key, json.dumps(remaining))
        return True

    def duplicate_project(self, project_id: str) -> Optional[Project]:
        """Save a deep copy of a project under a new id.

        Returns:
            The saved duplicate, or None if the source project does not exist
        """
        original = self.get_project(project_id)
        if original is None:
            logger.warning(f"Cannot duplicate missing project {project_id}")
            return None

        now = utcnow()
        duplicate = original.model_copy(
            deep=True,
            update={
                "id": str(uuid.uuid4()),
                "name": f"{original.name} (Copy)",
                "created_at": now,
                "updated_at": now,
            },
        )
        return self.save_project(duplicate)
