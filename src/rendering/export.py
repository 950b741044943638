"""PDF export of rendered documents."""

import logging
import re
import unicodedata

from src.core.exceptions import ExportError

logger = logging.getLogger(__name__)


def export_filename(name: str) -> str:
    """``portfolio-<slug>.pdf`` from the owner's name."""
    normalized = unicodedata.normalize("NFKD", name or "").encode("ascii", "ignore").decode()
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return f"portfolio-{slug or 'portfolio'}.pdf"


def export_pdf(html: str, base_url: str = None) -> bytes:
    """
    Render an HTML document to PDF bytes.

    Uses WeasyPrint, one page per printed page of the document.

    Raises:
        ExportError: If WeasyPrint is unavailable or rendering fails
    """
    try:
        from weasyprint import HTML
    except ImportError as e:
        logger.error(f"Missing dependency for PDF generation: {e}")
        raise ExportError("PDF export is not available") from e

    try:
        pdf = HTML(string=html, base_url=base_url).write_pdf()
    except Exception as e:
        logger.error(f"Failed to generate PDF: {e}")
        raise ExportError("Failed to generate PDF") from e

    logger.info(f"Generated PDF ({len(pdf)} bytes)")
    return pdf
