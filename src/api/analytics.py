"""Analytics API Routes - event tracking and the owner summary."""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from src.api.deps import get_analytics, get_current_user_id
from src.models import AnalyticsEvent, AnalyticsSummary
from src.services.analytics import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


class TrackResponse(BaseModel):
    tracked: bool


@router.post("/events", response_model=TrackResponse, status_code=202, summary="Track event")
async def track_event(
    event: AnalyticsEvent,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    analytics: AnalyticsService = Depends(get_analytics)
):
    """Insert-only; a lost event never fails the request."""
    if not event.user_agent:
        event = event.model_copy(update={"user_agent": request.headers.get("user-agent")})
    tracked = await analytics.track(user_id, event)
    return TrackResponse(tracked=tracked)


@router.get("/summary", response_model=AnalyticsSummary, summary="Analytics summary")
async def summary(
    user_id: str = Depends(get_current_user_id),
    analytics: AnalyticsService = Depends(get_analytics)
):
    return await analytics.summary(user_id)
