"""Derived-view functions - pure computations over domain records."""

from src.views.derived import (
    completion_checks,
    completion_percentage,
    status_checks,
    completion_status,
    order_projects,
    budget_item_total,
    recompute_budget_items,
    proposal_total,
    portfolio_stats,
)
from src.views.video import (
    VideoInfo,
    parse_video_url,
    video_embed_url,
    video_thumbnail_url,
    is_valid_video_url,
)

__all__ = [
    "completion_checks",
    "completion_percentage",
    "status_checks",
    "completion_status",
    "order_projects",
    "budget_item_total",
    "recompute_budget_items",
    "proposal_total",
    "portfolio_stats",
    "VideoInfo",
    "parse_video_url",
    "video_embed_url",
    "video_thumbnail_url",
    "is_valid_video_url",
]
