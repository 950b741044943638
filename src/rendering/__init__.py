"""Rendering - portfolio templates, proposal documents and PDF export."""

from src.rendering.renderers import (
    RENDERERS,
    RenderedDocument,
    render_portfolio,
    render_proposal_document,
    render_not_found,
)
from src.rendering.slides import Slide, SlideDeck, build_slides
from src.rendering.export import export_pdf, export_filename

__all__ = [
    "RENDERERS",
    "RenderedDocument",
    "render_portfolio",
    "render_proposal_document",
    "render_not_found",
    "Slide",
    "SlideDeck",
    "build_slides",
    "export_pdf",
    "export_filename",
]
