"""Insert-only analytics events and the owner summary."""

import logging
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Optional

from src.core.database import DatabaseService
from src.models import (
    AnalyticsEvent,
    AnalyticsEventType,
    AnalyticsSummary,
    DailyViews,
)

logger = logging.getLogger(__name__)

VIEW_EVENTS = {AnalyticsEventType.PORTFOLIO_VIEW.value, AnalyticsEventType.PROPOSAL_VIEW.value}


class AnalyticsService:
    """
    Records events and aggregates them.

    Tracking never raises: a lost event is logged and otherwise ignored.
    """

    TABLE_NAME = "analytics_events"

    def __init__(self, db: DatabaseService):
        self.db = db

    async def track(self, user_id: str, event: AnalyticsEvent) -> bool:
        """Insert one event for the account that owns the resource."""
        row = event.model_dump(mode="json")
        row["user_id"] = user_id

        stored = await self.db.insert(self.TABLE_NAME, row)
        if stored is None:
            logger.error(f"Error tracking {event.event_type.value} for {user_id}")
            return False
        return True

    async def summary(self, user_id: str, now: Optional[datetime] = None) -> AnalyticsSummary:
        """Totals plus views per day for the last seven days (oldest first)."""
        rows = await self.db.select(
            self.TABLE_NAME,
            {"user_id": user_id},
            columns="event_type,user_agent,created_at"
        )

        now = now or datetime.now(timezone.utc)
        today = now.date()
        by_day = OrderedDict(
            ((today - timedelta(days=offset)).isoformat(), 0)
            for offset in range(6, -1, -1)
        )

        views = 0
        clicks = 0
        visitors = set()
        for row in rows:
            event_type = row.get("event_type")
            if event_type == AnalyticsEventType.PROJECT_CLICK.value:
                clicks += 1
            if event_type not in VIEW_EVENTS:
                continue

            views += 1
            visitors.add(row.get("user_agent"))

            created_at = row.get("created_at")
            if created_at:
                day = datetime.fromisoformat(str(created_at).replace("Z", "+00:00")).date().isoformat()
                if day in by_day:
                    by_day[day] += 1

        return AnalyticsSummary(
            total_views=views,
            total_clicks=clicks,
            unique_visitors=len(visitors),
            views_last_7_days=[DailyViews(day=day, views=count) for day, count in by_day.items()],
        )
