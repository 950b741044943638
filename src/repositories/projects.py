"""Project repository - CRUD against the ``projects`` table with a local cache."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from src.core.database import DatabaseService
from src.core.exceptions import BackendError, NotFoundError, ValidationError
from src.models import Project, ProjectDraft, ProjectUpdate, QuickProjectDraft
from src.repositories.cache import ListCache
from src.views import completion_status, order_projects

logger = logging.getLogger(__name__)


class ProjectRepository:
    """
    Projects owned by one account.

    ``list`` refreshes the cache; ``get_by_id`` only reads it. Every write
    recomputes the persisted ``status`` from the canonical completion
    predicates, so the stored field is never set independently.
    """

    TABLE_NAME = "projects"

    def __init__(self, db: DatabaseService, user_id: str):
        self.db = db
        self.user_id = user_id
        self.cache: ListCache[Project] = ListCache("projects")

    # ===========================================
    # Read Operations
    # ===========================================

    async def list(self) -> List[Project]:
        """All projects of the account, newest first."""
        rows = await self.db.select(
            self.TABLE_NAME,
            {"user_id": self.user_id},
            order_by="created_at",
            desc=True
        )
        projects = [Project.from_row(row) for row in rows]
        self.cache.replace_all(projects)
        logger.debug(f"Loaded {len(projects)} projects for {self.user_id}")
        return projects

    async def ensure_loaded(self) -> List[Project]:
        if not self.cache.loaded:
            return await self.list()
        return self.cache.items

    def get_by_id(self, project_id: str) -> Optional[Project]:
        """Cache lookup only."""
        return self.cache.get(project_id)

    def require(self, project_id: str) -> Project:
        project = self.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")
        return project

    # ===========================================
    # Write Operations
    # ===========================================

    async def create(self, draft: ProjectDraft) -> Project:
        """Insert a project at the end of the display order and prepend it to the cache."""
        if not draft.title.strip():
            raise ValidationError("Project title is required")

        await self.ensure_loaded()
        row = draft.to_row()
        row["user_id"] = self.user_id
        row["status"] = completion_status(draft).value
        row["display_order"] = len(self.cache)

        stored = await self.db.insert(self.TABLE_NAME, row)
        if stored is None:
            raise BackendError("Failed to create project")

        project = Project.from_row(stored)
        self.cache.prepend(project)
        logger.info(f"Created project {project.id} ({project.status.value})")
        return project

    async def quick_create(self, quick: QuickProjectDraft) -> Project:
        """Create from the short form; needs a title and at least one image."""
        if not quick.title.strip():
            raise ValidationError("Project title is required")
        if not quick.images:
            raise ValidationError("Add at least one image")

        return await self.create(quick.to_draft())

    async def update(self, project_id: str, patch: ProjectUpdate) -> Project:
        """Send only the provided fields; last write wins."""
        current = self.require(project_id)
        changes = patch.provided()

        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Project title is required")

        merged = current.model_copy(update=changes)
        status = completion_status(merged)
        now = datetime.now(timezone.utc)

        row = patch.to_row()
        row["status"] = status.value
        row["updated_at"] = now.isoformat()

        stored = await self.db.update(
            self.TABLE_NAME,
            {"id": project_id, "user_id": self.user_id},
            row
        )
        if stored is None:
            raise BackendError(f"Failed to update project {project_id}")

        updated = merged.model_copy(update={"status": status, "updated_at": now})
        self.cache.replace(updated)
        return updated

    async def remove(self, project_id: str) -> None:
        """Hard delete. Irreversible."""
        self.require(project_id)

        deleted = await self.db.delete(
            self.TABLE_NAME,
            {"id": project_id, "user_id": self.user_id}
        )
        if not deleted:
            raise BackendError(f"Failed to delete project {project_id}")

        self.cache.discard(project_id)

    async def sync_display_order(self, project_order: Sequence[str]) -> List[Project]:
        """Persist ``display_order`` so the public portfolio follows the owner's order."""
        ordered = order_projects(self.cache.items, project_order)

        for position, project in enumerate(ordered):
            if project.display_order == position:
                continue
            stored = await self.db.update(
                self.TABLE_NAME,
                {"id": project.id, "user_id": self.user_id},
                {"display_order": position}
            )
            if stored is None:
                logger.warning(f"Could not persist display order for {project.id}")
                continue
            self.cache.replace(project.model_copy(update={"display_order": position}))

        return order_projects(self.cache.items, project_order)
