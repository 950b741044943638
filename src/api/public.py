"""Public API Routes - share links that need no sign-in."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import HTMLResponse

from src.api.deps import get_public_views
from src.core.exceptions import NotFoundError
from src.models import ColorMode, PublicPortfolio, PublicProposal
from src.rendering import render_not_found, render_portfolio, render_proposal_document
from src.services.public import PublicViewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public", tags=["public"])


def _not_found_page(heading: str, message: str, color_mode: ColorMode) -> HTMLResponse:
    document = render_not_found(heading, message, color_mode)
    return HTMLResponse(document.html, status_code=404)


# ===========================================
# Proposals
# ===========================================

@router.get("/proposals/{share_token}", response_model=PublicProposal, summary="Shared proposal")
async def get_public_proposal(
    share_token: str,
    user_agent: Optional[str] = Header(None),
    views: PublicViewService = Depends(get_public_views)
):
    """First view of a sent proposal marks it as viewed."""
    return await views.resolve_proposal(share_token, user_agent=user_agent)


@router.get("/proposals/{share_token}/page", response_class=HTMLResponse, summary="Shared proposal page")
async def public_proposal_page(
    share_token: str,
    color_mode: ColorMode = Query(ColorMode.LIGHT),
    user_agent: Optional[str] = Header(None),
    views: PublicViewService = Depends(get_public_views)
):
    try:
        proposal = await views.resolve_proposal(share_token, user_agent=user_agent)
    except NotFoundError:
        logger.warning(f"Unknown proposal token requested: {share_token[:6]}...")
        return _not_found_page(
            "Proposta não encontrada",
            "O link pode estar incorreto ou a proposta foi removida.",
            color_mode
        )
    return HTMLResponse(render_proposal_document(proposal, color_mode).html)


@router.post("/proposals/{share_token}/accept", response_model=PublicProposal, summary="Accept proposal")
async def accept_proposal(
    share_token: str,
    views: PublicViewService = Depends(get_public_views)
):
    return await views.accept_proposal(share_token)


@router.post("/proposals/{share_token}/reject", response_model=PublicProposal, summary="Reject proposal")
async def reject_proposal(
    share_token: str,
    views: PublicViewService = Depends(get_public_views)
):
    return await views.reject_proposal(share_token)


# ===========================================
# Portfolios
# ===========================================

@router.get("/portfolios/{username}", response_model=PublicPortfolio, summary="Public portfolio")
async def get_public_portfolio(
    username: str,
    user_agent: Optional[str] = Header(None),
    views: PublicViewService = Depends(get_public_views)
):
    """Only complete projects, in the owner's display order."""
    resolved = await views.resolve_portfolio(username, user_agent=user_agent)
    return resolved.portfolio


@router.get("/portfolios/{username}/page", response_class=HTMLResponse, summary="Public portfolio page")
async def public_portfolio_page(
    username: str,
    color_mode: ColorMode = Query(ColorMode.LIGHT),
    user_agent: Optional[str] = Header(None),
    views: PublicViewService = Depends(get_public_views)
):
    try:
        resolved = await views.resolve_portfolio(username, user_agent=user_agent)
    except NotFoundError:
        return _not_found_page(
            "Portfólio não encontrado",
            f"O usuário @{username} não existe ou não tem um portfólio público.",
            color_mode
        )

    document = render_portfolio(
        resolved.portfolio.projects,
        resolved.portfolio.profile,
        resolved.settings,
        color_mode
    )
    return HTMLResponse(document.html)
