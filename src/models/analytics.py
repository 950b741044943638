"""Analytics event models."""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from src.models.enums import AnalyticsEventType, ResourceType


class AnalyticsEvent(BaseModel):
    """A single insert-only analytics row."""
    event_type: AnalyticsEventType
    resource_type: ResourceType
    resource_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    source: Optional[str] = None
    user_agent: Optional[str] = None


class DailyViews(BaseModel):
    day: str
    views: int = 0


class AnalyticsSummary(BaseModel):
    """Owner dashboard numbers."""
    total_views: int = 0
    total_clicks: int = 0
    unique_visitors: int = 0
    views_last_7_days: List[DailyViews] = Field(default_factory=list)
