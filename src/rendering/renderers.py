"""
Portfolio template renderers.

Four interchangeable views over the same ``(projects, profile, settings,
color_mode)`` input. None of them mutates or drops domain data, so switching
``settings.template`` is lossless.
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, NamedTuple, Optional, Protocol, Sequence

import markdown
from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup, escape
from pydantic import BaseModel

from src.models import (
    ColorMode,
    PortfolioProfile,
    PortfolioSettings,
    Project,
    ProposalStatus,
    PublicProposal,
    TemplateKind,
)
from src.rendering.slides import SlideDeck, build_slides
from src.views import order_projects, parse_video_url

logger = logging.getLogger(__name__)


class Palette(NamedTuple):
    background: str
    text: str
    muted: str
    card: str
    border: str


PALETTES: Dict[ColorMode, Palette] = {
    ColorMode.LIGHT: Palette("#FFFFFF", "#111827", "#6B7280", "#F9FAFB", "#E5E7EB"),
    ColorMode.DARK: Palette("#0A0A0F", "#F9FAFB", "#9CA3AF", "#16161F", "#27272F"),
}

STATUS_LABELS = {
    ProposalStatus.DRAFT: "Rascunho",
    ProposalStatus.SENT: "Enviada",
    ProposalStatus.VIEWED: "Visualizada",
    ProposalStatus.ACCEPTED: "Aceita",
    ProposalStatus.REJECTED: "Recusada",
}

GALLERY_TECHNOLOGIES = 3
ONEPAGE_SKILLS = 10


class RenderedDocument(BaseModel):
    """Output of a renderer: a standalone HTML page."""
    template: str
    title: str
    html: str


# ===========================================
# Jinja environment
# ===========================================

def markdown_filter(text: Optional[str]) -> Markup:
    """Render user text as markdown after escaping any raw HTML in it."""
    if not text:
        return Markup("")
    html = markdown.markdown(str(escape(text)), extensions=["nl2br"])
    return Markup(html)


def brl_filter(value: Optional[float]) -> str:
    """Format as Brazilian reais, e.g. ``R$ 1.234,50``."""
    formatted = f"{value or 0:,.2f}"
    return "R$ " + formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def quantity_filter(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}".replace(".", ",")


@lru_cache()
def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("src.rendering", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["markdown"] = markdown_filter
    env.filters["brl"] = brl_filter
    env.filters["quantity"] = quantity_filter
    return env


def _page(template_name: str, **context: Any) -> str:
    return get_environment().get_template(template_name).render(**context)


def _base_context(
    title: str,
    template: str,
    primary_color: str,
    font: str,
    color_mode: ColorMode
) -> Dict[str, Any]:
    return {
        "title": title,
        "template": template,
        "primary_color": primary_color,
        "font": font,
        "palette": PALETTES[ColorMode(color_mode)],
    }


# ===========================================
# Renderers
# ===========================================

class PortfolioRenderer(Protocol):
    """Capability shared by every template."""

    kind: TemplateKind

    def render(
        self,
        projects: Sequence[Project],
        profile: PortfolioProfile,
        settings: PortfolioSettings,
        color_mode: ColorMode = ColorMode.LIGHT
    ) -> RenderedDocument:
        ...


def _portfolio_page(
    kind: TemplateKind,
    template_name: str,
    profile: PortfolioProfile,
    settings: PortfolioSettings,
    color_mode: ColorMode,
    **context: Any
) -> RenderedDocument:
    """Page chrome common to all templates around a template-specific context."""
    title = f"{profile.name or 'Portfólio'} - Portfólio"
    page_context = _base_context(
        title,
        kind.value,
        settings.primary_color,
        settings.font,
        color_mode
    )
    html = _page(
        template_name,
        profile=profile,
        columns=settings.columns,
        **page_context,
        **context
    )
    return RenderedDocument(template=kind.value, title=title, html=html)


def _videos(projects: Sequence[Project]) -> List[Dict[str, Any]]:
    videos = []
    for project in projects:
        video = parse_video_url(project.video_url)
        if video.embeddable:
            videos.append({"project": project, "video": video})
    return videos


class CaseStudyRenderer:
    """Every project in full: hero image, all four stages, sub-gallery, video."""

    kind = TemplateKind.CASE

    def render(self, projects, profile, settings, color_mode=ColorMode.LIGHT):
        items = []
        for project in projects:
            gallery = project.images[1:]
            items.append({
                "project": project,
                "cover": project.images[0] if project.images else None,
                "stages": [
                    {"name": name, "title": stage.title, "description": stage.description}
                    for name, stage in project.stages.items()
                    if stage.description.strip()
                ],
                "gallery": gallery,
                "gallery_columns": max(1, min(settings.columns, len(gallery))),
                "video": parse_video_url(project.video_url),
            })
        return _portfolio_page(
            self.kind, "case.html", profile, settings, color_mode,
            items=items
        )


class GalleryRenderer:
    """Image-first grid of every project image. Stage narratives are not shown."""

    kind = TemplateKind.GALLERY

    def render(self, projects, profile, settings, color_mode=ColorMode.LIGHT):
        tiles = [
            {
                "project": project,
                "image": image,
                "technologies": project.technologies[:GALLERY_TECHNOLOGIES],
            }
            for project in projects
            for image in project.images
        ]
        return _portfolio_page(
            self.kind, "gallery.html", profile, settings, color_mode,
            tiles=tiles,
            videos=_videos(projects),
            video_columns=min(settings.columns, 2)
        )


class SlidesRenderer:
    """Linear deck: intro, one slide per project, one per secondary image."""

    kind = TemplateKind.SLIDES

    def render(self, projects, profile, settings, color_mode=ColorMode.LIGHT, index=0):
        deck = SlideDeck(build_slides(projects), index)
        return _portfolio_page(
            self.kind, "slides.html", profile, settings, color_mode,
            slides=deck.slides,
            current_index=deck.index,
            videos={item["project"].id: item["video"] for item in _videos(projects)}
        )


class OnePageRenderer:
    """Compact landing page with skills, a project grid and a footer."""

    kind = TemplateKind.ONEPAGE

    def render(self, projects, profile, settings, color_mode=ColorMode.LIGHT):
        skills: List[str] = []
        for project in projects:
            for tech in project.technologies:
                if tech not in skills:
                    skills.append(tech)

        items = [
            {
                "project": project,
                "cover": project.images[0] if project.images else None,
                "summary": project.description,
            }
            for project in projects
        ]
        return _portfolio_page(
            self.kind, "onepage.html", profile, settings, color_mode,
            skills=skills[:ONEPAGE_SKILLS],
            items=items,
            videos=_videos(projects),
            year=datetime.now().year
        )


RENDERERS: Dict[TemplateKind, PortfolioRenderer] = {
    TemplateKind.CASE: CaseStudyRenderer(),
    TemplateKind.GALLERY: GalleryRenderer(),
    TemplateKind.SLIDES: SlidesRenderer(),
    TemplateKind.ONEPAGE: OnePageRenderer(),
}


def render_portfolio(
    projects: Sequence[Project],
    profile: PortfolioProfile,
    settings: PortfolioSettings,
    color_mode: ColorMode = ColorMode.LIGHT
) -> RenderedDocument:
    """Order projects by ``settings.project_order`` and dispatch on ``settings.template``."""
    ordered = order_projects(projects, settings.project_order)
    renderer = RENDERERS[TemplateKind(settings.template)]
    logger.debug(f"Rendering {len(ordered)} projects with '{renderer.kind.value}'")
    return renderer.render(ordered, profile, settings, color_mode)


# ===========================================
# Proposals and fallbacks
# ===========================================

def render_proposal_document(
    proposal: PublicProposal,
    color_mode: ColorMode = ColorMode.LIGHT
) -> RenderedDocument:
    """Client-facing proposal page, also the source of the PDF export."""
    title = proposal.title or "Proposta"
    context = _base_context(
        title,
        "proposal",
        proposal.primary_color,
        "DM Sans",
        color_mode
    )
    html = _page(
        "proposal.html",
        proposal=proposal,
        status_label=STATUS_LABELS[proposal.status],
        **context
    )
    return RenderedDocument(template="proposal", title=title, html=html)


def render_not_found(
    heading: str = "Página não encontrada",
    message: str = "O link pode estar incorreto ou o conteúdo não está mais disponível.",
    color_mode: ColorMode = ColorMode.LIGHT
) -> RenderedDocument:
    context = _base_context(heading, "not-found", "#8B5CF6", "DM Sans", color_mode)
    html = _page("not_found.html", heading=heading, message=message, **context)
    return RenderedDocument(template="not-found", title=heading, html=html)
