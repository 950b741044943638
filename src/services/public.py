"""Public share views - proposals by token, portfolios by username."""

import logging
from typing import List, NamedTuple, Optional

from src.core.database import DatabaseService
from src.core.exceptions import BackendError, NotFoundError
from src.models import (
    AnalyticsEvent,
    AnalyticsEventType,
    PortfolioSettings,
    Profile,
    Project,
    ProjectStatus,
    Proposal,
    ProposalProjectSummary,
    ProposalStatus,
    PublicPortfolio,
    PublicProposal,
    ResourceType,
)
from src.services.analytics import AnalyticsService
from src.views import proposal_status

logger = logging.getLogger(__name__)


class ResolvedPortfolio(NamedTuple):
    """A public portfolio plus the owner's presentation settings."""
    portfolio: PublicPortfolio
    settings: PortfolioSettings


class PublicViewService:
    """
    Unauthenticated reads behind share links.

    Both lookups are single queries on an unguessable or public key. Unknown
    keys raise ``NotFoundError``, which the routes render as a 404 page.
    """

    def __init__(self, db: DatabaseService, analytics: Optional[AnalyticsService] = None):
        self.db = db
        self.analytics = analytics or AnalyticsService(db)

    # ===========================================
    # Proposals
    # ===========================================

    async def _proposal_by_token(self, share_token: str) -> Proposal:
        row = await self.db.select_one("proposals", {"share_token": share_token})
        if not row:
            raise NotFoundError("Proposal not found")
        return Proposal.from_row(row)

    async def _project_summaries(self, proposal: Proposal) -> List[ProposalProjectSummary]:
        """Referenced projects in the proposal's own order; missing ids are dropped."""
        rows = await self.db.select_in(
            "projects",
            "id",
            proposal.project_ids,
            columns="id,user_id,title,description,images"
        )
        by_id = {
            row["id"]: row for row in rows
            if row.get("user_id") in (None, proposal.user_id)
        }
        return [
            ProposalProjectSummary(
                id=row["id"],
                title=row.get("title") or "",
                description=row.get("description"),
                images=row.get("images") or [],
            )
            for row in (by_id.get(pid) for pid in proposal.project_ids)
            if row is not None
        ]

    async def _apply(self, proposal: Proposal, change: proposal_status.StatusChange) -> Proposal:
        if not change.updates:
            return proposal

        stored = await self.db.update(
            "proposals",
            {"id": proposal.id},
            dict(change.updates)
        )
        if stored is None:
            raise BackendError(f"Failed to update proposal {proposal.id}")

        return proposal.model_copy(
            update={"status": change.status, "viewed_at": change.viewed_at or proposal.viewed_at}
        )

    async def resolve_proposal(
        self,
        share_token: str,
        user_agent: Optional[str] = None
    ) -> PublicProposal:
        """
        Load a shared proposal and record the visit.

        The first resolution while ``sent`` moves it to ``viewed``. A failure
        to persist that transition is logged and does not hide the proposal.
        """
        proposal = await self._proposal_by_token(share_token)

        change = proposal_status.mark_viewed(proposal.status, proposal.viewed_at)
        try:
            proposal = await self._apply(proposal, change)
        except BackendError as e:
            logger.error(f"Could not mark proposal {proposal.id} as viewed: {e.message}")

        if proposal.user_id:
            await self.analytics.track(
                proposal.user_id,
                AnalyticsEvent(
                    event_type=AnalyticsEventType.PROPOSAL_VIEW,
                    resource_type=ResourceType.PROPOSAL,
                    resource_id=proposal.id,
                    source="public",
                    user_agent=user_agent,
                )
            )

        projects = await self._project_summaries(proposal)
        return PublicProposal.from_proposal(proposal, projects)

    async def _decide(self, share_token: str, target: ProposalStatus) -> PublicProposal:
        proposal = await self._proposal_by_token(share_token)
        change = proposal_status.decide(proposal.status, target)
        proposal = await self._apply(proposal, change)
        logger.info(f"Proposal {proposal.id} {target.value} by client")

        projects = await self._project_summaries(proposal)
        return PublicProposal.from_proposal(proposal, projects)

    async def accept_proposal(self, share_token: str) -> PublicProposal:
        return await self._decide(share_token, ProposalStatus.ACCEPTED)

    async def reject_proposal(self, share_token: str) -> PublicProposal:
        return await self._decide(share_token, ProposalStatus.REJECTED)

    # ===========================================
    # Portfolios
    # ===========================================

    async def resolve_portfolio(
        self,
        username: str,
        user_agent: Optional[str] = None
    ) -> ResolvedPortfolio:
        """Profile by username with its complete projects only, by display order."""
        row = await self.db.select_one("profiles", {"username": username})
        if not row:
            raise NotFoundError(f"Portfolio not found: {username}")
        profile = Profile.from_row(row)

        project_rows = await self.db.select(
            "projects",
            {"user_id": profile.user_id, "status": ProjectStatus.COMPLETE.value},
            order_by="display_order"
        )
        projects = [Project.from_row(r) for r in project_rows]

        settings_row = await self.db.select_one("portfolio_settings", {"user_id": profile.user_id})
        settings = PortfolioSettings.from_row(settings_row) if settings_row else PortfolioSettings()

        await self.analytics.track(
            profile.user_id,
            AnalyticsEvent(
                event_type=AnalyticsEventType.PORTFOLIO_VIEW,
                resource_type=ResourceType.PORTFOLIO,
                source="public",
                user_agent=user_agent,
                metadata={"username": username},
            )
        )

        portfolio = PublicPortfolio(
            username=username,
            profile=profile.to_portfolio_profile(),
            projects=projects,
        )
        return ResolvedPortfolio(portfolio, settings)
