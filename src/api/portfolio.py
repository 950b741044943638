"""Portfolio API Routes - settings, preview, export and share link."""

import logging

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from src.api.deps import get_session
from src.core.exceptions import NotFoundError
from src.models import (
    ColorMode,
    PortfolioSettings,
    PortfolioSettingsUpdate,
    PortfolioStats,
    ProjectOrderUpdate,
)
from src.rendering import RenderedDocument, export_filename, export_pdf, render_portfolio
from src.repositories.session import AccountSession
from src.services.share import portfolio_share_url
from src.views import portfolio_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


class PortfolioShareResponse(BaseModel):
    username: str
    share_url: str


async def _render(session: AccountSession, color_mode: ColorMode) -> RenderedDocument:
    projects = await session.projects.ensure_loaded()
    settings = await session.settings.ensure_loaded()
    profile = await session.profiles.ensure_loaded()
    return render_portfolio(projects, profile.to_portfolio_profile(), settings, color_mode)


@router.get("/settings", response_model=PortfolioSettings, summary="Get portfolio settings")
async def get_settings_route(session: AccountSession = Depends(get_session)):
    """Defaults are returned when the account has never saved settings."""
    return await session.settings.ensure_loaded()


@router.patch("/settings", response_model=PortfolioSettings, summary="Update portfolio settings")
async def update_settings(
    patch: PortfolioSettingsUpdate,
    session: AccountSession = Depends(get_session)
):
    return await session.settings.update(patch)


@router.put("/order", response_model=PortfolioSettings, summary="Reorder projects")
async def reorder_projects(
    body: ProjectOrderUpdate,
    session: AccountSession = Depends(get_session)
):
    """Save the explicit order and mirror it into each project's display order."""
    settings = await session.settings.reorder_projects(body.project_order)
    await session.projects.ensure_loaded()
    await session.projects.sync_display_order(body.project_order)
    return settings


@router.get("/preview", response_class=HTMLResponse, summary="Preview current template")
async def preview(
    color_mode: ColorMode = Query(ColorMode.LIGHT),
    session: AccountSession = Depends(get_session)
):
    document = await _render(session, color_mode)
    return HTMLResponse(document.html)


@router.get("/export", summary="Export portfolio as PDF")
async def export(
    color_mode: ColorMode = Query(ColorMode.LIGHT),
    session: AccountSession = Depends(get_session)
):
    document = await _render(session, color_mode)
    filename = export_filename(session.profiles.current.onboarding.name)
    pdf = export_pdf(document.html)
    logger.info(f"Exported {filename} for {session.user_id}")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/share", response_model=PortfolioShareResponse, summary="Public portfolio link")
async def share(session: AccountSession = Depends(get_session)):
    profile = await session.profiles.ensure_loaded()
    if not profile.username:
        raise NotFoundError("Set a username to share the portfolio")
    return PortfolioShareResponse(
        username=profile.username,
        share_url=portfolio_share_url(profile.username),
    )


@router.get("/stats", response_model=PortfolioStats, summary="Dashboard counters")
async def stats(session: AccountSession = Depends(get_session)):
    projects = await session.projects.ensure_loaded()
    proposals = await session.proposals.ensure_loaded()
    return portfolio_stats(projects, proposals)
