"""Portfolio settings repository - one upserted row per account."""

import logging
from datetime import datetime, timezone
from typing import List

from src.core.database import DatabaseService
from src.core.exceptions import BackendError
from src.models import PortfolioSettings, PortfolioSettingsUpdate
from src.repositories.cache import RecordCache

logger = logging.getLogger(__name__)


class PortfolioSettingsRepository:
    """
    Template, colour, font, columns and project order.

    Writes always upsert keyed by ``user_id``, so an account never ends up
    with two settings rows.
    """

    TABLE_NAME = "portfolio_settings"

    def __init__(self, db: DatabaseService, user_id: str):
        self.db = db
        self.user_id = user_id
        self.cache: RecordCache[PortfolioSettings] = RecordCache("portfolio_settings")

    @property
    def current(self) -> PortfolioSettings:
        return self.cache.value or PortfolioSettings()

    async def load(self) -> PortfolioSettings:
        """Singleton fetch, defaults when no row exists or the fetch fails."""
        row = await self.db.select_one(self.TABLE_NAME, {"user_id": self.user_id})
        settings = PortfolioSettings.from_row(row) if row else PortfolioSettings()
        self.cache.set(settings, kind="loaded")
        return settings

    async def ensure_loaded(self) -> PortfolioSettings:
        if not self.cache.loaded:
            return await self.load()
        return self.current

    async def update(self, patch: PortfolioSettingsUpdate) -> PortfolioSettings:
        current = await self.ensure_loaded()
        now = datetime.now(timezone.utc)
        merged = PortfolioSettings.model_validate(
            {**current.model_dump(), **patch.provided(), "updated_at": now}
        )

        row = merged.to_row()
        row["user_id"] = self.user_id
        row["updated_at"] = now.isoformat()

        stored = await self.db.upsert(self.TABLE_NAME, row, on_conflict="user_id")
        if stored is None:
            raise BackendError("Failed to save portfolio settings")

        self.cache.set(merged)
        logger.info(f"Saved portfolio settings for {self.user_id}: {sorted(patch.model_fields_set)}")
        return merged

    async def reorder_projects(self, project_order: List[str]) -> PortfolioSettings:
        return await self.update(PortfolioSettingsUpdate(project_order=project_order))
