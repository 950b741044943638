"""Profile repository - onboarding data, plan and proposal counter."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from src.core.database import DatabaseService
from src.core.exceptions import BackendError
from src.models import OnboardingUpdate, Profile
from src.repositories.cache import RecordCache

logger = logging.getLogger(__name__)


class ProfileRepository:
    """The single ``profiles`` row of one account."""

    TABLE_NAME = "profiles"

    def __init__(self, db: DatabaseService, user_id: str):
        self.db = db
        self.user_id = user_id
        self.cache: RecordCache[Profile] = RecordCache("profile")

    @property
    def current(self) -> Profile:
        """Cached profile, or an empty free-plan profile before loading."""
        return self.cache.value or Profile(user_id=self.user_id)

    async def load(self) -> Profile:
        """Singleton fetch; falls back to defaults when missing or unreachable."""
        row = await self.db.select_one(self.TABLE_NAME, {"user_id": self.user_id})
        profile = Profile.from_row(row) if row else Profile(user_id=self.user_id)
        self.cache.set(profile, kind="loaded")
        return profile

    async def ensure_loaded(self) -> Profile:
        if not self.cache.loaded:
            return await self.load()
        return self.current

    async def _write(self, updates: Dict[str, Any]) -> None:
        updates["updated_at"] = datetime.now(timezone.utc).isoformat()
        stored = await self.db.update(self.TABLE_NAME, {"user_id": self.user_id}, updates)
        if stored is None:
            raise BackendError("Failed to update profile")

    async def update_onboarding(self, patch: OnboardingUpdate) -> Profile:
        profile = await self.ensure_loaded()
        await self._write(patch.to_row())

        onboarding = profile.onboarding.model_copy(
            update={name: getattr(patch, name) or "" for name in patch.model_fields_set}
        )
        updated = profile.model_copy(update={"onboarding": onboarding})
        self.cache.set(updated)
        return updated

    async def save_generated_profile(self, text: str) -> Profile:
        """Cache the AI-written bio once generated."""
        profile = await self.ensure_loaded()
        await self._write({"bio": text})

        onboarding = profile.onboarding.model_copy(update={"generated_profile": text})
        updated = profile.model_copy(update={"onboarding": onboarding})
        self.cache.set(updated)
        return updated

    async def complete_onboarding(self) -> Profile:
        profile = await self.ensure_loaded()
        await self._write({"onboarding_complete": True})

        onboarding = profile.onboarding.model_copy(update={"is_complete": True})
        updated = profile.model_copy(update={"onboarding": onboarding})
        self.cache.set(updated)
        return updated

    async def increment_proposal_count(self) -> int:
        """Bump the quota counter after a proposal was created."""
        profile = await self.ensure_loaded()
        count = profile.proposal_count + 1

        stored = await self.db.update(
            self.TABLE_NAME,
            {"user_id": self.user_id},
            {"proposal_count": count}
        )
        if stored is None:
            logger.warning(f"Proposal counter not persisted for {self.user_id}")

        self.cache.set(profile.model_copy(update={"proposal_count": count}))
        return count
