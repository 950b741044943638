"""Proposal repository - quota, budget totals and publishing."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from src.core.database import DatabaseService
from src.core.exceptions import BackendError, NotFoundError, QuotaExceededError, ValidationError
from src.models import (
    Proposal,
    ProposalDraft,
    ProposalQuota,
    ProposalStatus,
    ProposalUpdate,
    ShareLink,
)
from src.repositories.cache import ListCache
from src.repositories.profiles import ProfileRepository
from src.services.share import proposal_share_url
from src.views import proposal_total, recompute_budget_items
from src.views import proposal_status

logger = logging.getLogger(__name__)


class ProposalRepository:
    """
    Proposals owned by one account.

    The free-plan quota is checked here before any write. It is advisory:
    the real boundary is the backend's row policy.
    """

    TABLE_NAME = "proposals"

    def __init__(
        self,
        db: DatabaseService,
        user_id: str,
        profiles: ProfileRepository,
        free_limit: int = 5
    ):
        self.db = db
        self.user_id = user_id
        self.profiles = profiles
        self.free_limit = free_limit
        self.cache: ListCache[Proposal] = ListCache("proposals")

    # ===========================================
    # Quota
    # ===========================================

    @property
    def can_create_proposal(self) -> bool:
        profile = self.profiles.current
        return profile.is_pro or profile.proposal_count < self.free_limit

    @property
    def remaining_proposals(self) -> Optional[int]:
        """None for unlimited (pro)."""
        profile = self.profiles.current
        if profile.is_pro:
            return None
        return max(0, self.free_limit - profile.proposal_count)

    async def quota(self) -> ProposalQuota:
        profile = await self.profiles.ensure_loaded()
        return ProposalQuota(
            can_create=self.can_create_proposal,
            remaining=self.remaining_proposals,
            plan=profile.plan.value,
            proposal_count=profile.proposal_count,
        )

    # ===========================================
    # Read Operations
    # ===========================================

    async def list(self) -> List[Proposal]:
        """All proposals of the account, newest first."""
        rows = await self.db.select(
            self.TABLE_NAME,
            {"user_id": self.user_id},
            order_by="created_at",
            desc=True
        )
        proposals = [Proposal.from_row(row) for row in rows]
        self.cache.replace_all(proposals)
        return proposals

    async def ensure_loaded(self) -> List[Proposal]:
        if not self.cache.loaded:
            return await self.list()
        return self.cache.items

    def get_by_id(self, proposal_id: str) -> Optional[Proposal]:
        """Cache lookup only."""
        return self.cache.get(proposal_id)

    def require(self, proposal_id: str) -> Proposal:
        proposal = self.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError(f"Proposal not found: {proposal_id}")
        return proposal

    # ===========================================
    # Write Operations
    # ===========================================

    async def create(self, draft: ProposalDraft) -> Proposal:
        """Check quota, insert, bump the profile counter, prepend to cache."""
        await self.profiles.ensure_loaded()
        if not self.can_create_proposal:
            raise QuotaExceededError("Proposal limit reached. Upgrade to Pro for unlimited proposals.")

        if not draft.title.strip():
            raise ValidationError("Proposal title is required")

        items = recompute_budget_items(draft.budget_items)
        row = draft.to_row()
        row["budget_items"] = [item.to_json() for item in items]
        row["total_value"] = proposal_total(items)
        row["status"] = ProposalStatus.DRAFT.value
        row["user_id"] = self.user_id

        stored = await self.db.insert(self.TABLE_NAME, row)
        if stored is None:
            raise BackendError("Failed to create proposal")

        await self.profiles.increment_proposal_count()

        proposal = Proposal.from_row(stored)
        self.cache.prepend(proposal)
        logger.info(f"Created proposal {proposal.id} (total {proposal.total_value})")
        return proposal

    async def update(self, proposal_id: str, patch: ProposalUpdate) -> Proposal:
        """Partial update; budget changes always recompute ``total_value``."""
        current = self.require(proposal_id)
        changes = patch.provided()

        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Proposal title is required")

        row: Dict[str, Any] = patch.model_dump(
            mode="json",
            include=set(changes) - {"budget_items"}
        )
        if "budget_items" in changes:
            items = recompute_budget_items(changes["budget_items"] or [])
            changes["budget_items"] = items
            changes["total_value"] = proposal_total(items)
            row["budget_items"] = [item.to_json() for item in items]
            row["total_value"] = changes["total_value"]

        return await self._write(current, row, changes)

    async def remove(self, proposal_id: str) -> None:
        self.require(proposal_id)

        deleted = await self.db.delete(
            self.TABLE_NAME,
            {"id": proposal_id, "user_id": self.user_id}
        )
        if not deleted:
            raise BackendError(f"Failed to delete proposal {proposal_id}")

        self.cache.discard(proposal_id)

    async def duplicate(self, proposal_id: str) -> Proposal:
        """Copy as a fresh draft without share token. Counts against the quota."""
        original = self.require(proposal_id)
        draft = ProposalDraft(
            **original.model_dump(include=set(ProposalDraft.model_fields) - {"title"}),
            title=f"{original.title} (cópia)",
        )
        return await self.create(draft)

    async def publish(self, proposal_id: str) -> ShareLink:
        """Issue (or reuse) the share token and move draft to sent."""
        current = self.require(proposal_id)
        change = proposal_status.publish(current.status, current.share_token)

        proposal = current
        if change.updates:
            proposal = await self._write(
                current,
                dict(change.updates),
                {"status": change.status, "share_token": change.share_token}
            )
            logger.info(f"Published proposal {proposal_id}")

        return ShareLink(
            share_token=change.share_token,
            share_url=proposal_share_url(change.share_token),
            status=proposal.status,
        )

    async def _write(
        self,
        current: Proposal,
        row: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Proposal:
        now = datetime.now(timezone.utc)
        row["updated_at"] = now.isoformat()

        stored = await self.db.update(
            self.TABLE_NAME,
            {"id": current.id, "user_id": self.user_id},
            row
        )
        if stored is None:
            raise BackendError(f"Failed to update proposal {current.id}")

        updated = current.model_copy(update={**changes, "updated_at": now})
        self.cache.replace(updated)
        return updated
