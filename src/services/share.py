"""Public share links."""

from urllib.parse import quote

from src.core.config import get_settings


def _base_url() -> str:
    return get_settings().PUBLIC_BASE_URL.rstrip("/")


def proposal_share_url(share_token: str) -> str:
    """Client-facing link for a published proposal."""
    return f"{_base_url()}/p/{quote(share_token, safe='')}"


def portfolio_share_url(username: str) -> str:
    """Public portfolio link for an account's username."""
    return f"{_base_url()}/u/{quote(username, safe='')}"
