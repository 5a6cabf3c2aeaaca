"""Feed queries: ranked global feed, home feed and per-user feeds."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..models import Ui
from ..repositories import UiRepository
from ..schemas.ui import FeedMode, TimeRange, UserFeedMode

logger = logging.getLogger(__name__)

TIME_WINDOWS = {
    TimeRange.HOUR: timedelta(hours=1),
    TimeRange.DAY: timedelta(hours=24),
    TimeRange.WEEK: timedelta(days=7),
    TimeRange.MONTH: timedelta(days=30),
}


def clamp_page(start: int, limit: int) -> tuple[int, int]:
    """Normalize offset/limit: no negative offset, 1 <= limit <= FEED_MAX_LIMIT."""
    return max(start, 0), min(max(limit, 1), settings.feed_max_limit)


class FeedService:
    """Read-only listings of UIs with owner info attached (no revisions)."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UiRepository(db)

    def list_uis(
        self,
        mode: FeedMode = FeedMode.LATEST,
        start: int = 0,
        limit: int = 20,
        time_range: TimeRange = TimeRange.ALL,
        now: Optional[datetime] = None,
    ) -> List[Ui]:
        """Global feed page.

        ``latest`` ignores ``time_range``. Ranked modes sort by their counter
        descending, oldest first among ties, and keep only UIs created inside
        the window.
        """
        mode, time_range = FeedMode(mode), TimeRange(time_range)
        start, limit = clamp_page(start, limit)

        if mode == FeedMode.MOST_LIKED:
            order_by = [Ui.likes_count.desc(), Ui.created_at.asc()]
        elif mode == FeedMode.MOST_VIEWED:
            order_by = [Ui.view_count.desc(), Ui.created_at.asc()]
        else:
            order_by = [Ui.created_at.desc()]

        created_since = None
        if mode != FeedMode.LATEST and time_range in TIME_WINDOWS:
            created_since = (now or datetime.now(timezone.utc)) - TIME_WINDOWS[time_range]

        logger.debug(
            "Listing feed",
            extra={"mode": mode.value, "start": start, "limit": limit, "time_range": time_range.value},
        )
        return self.repo.list_ranked(order_by, start, limit, created_since=created_since)

    def get_home_feed(self) -> List[Ui]:
        """Most recently updated UIs, fixed page size."""
        return self.repo.list_recently_updated(settings.home_feed_size)

    def get_user_feed(
        self,
        user_id: str,
        start: int = 0,
        limit: int = 20,
        mode: UserFeedMode = UserFeedMode.OWN,
    ) -> List[Ui]:
        """A user's own UIs (newest first) or the UIs they liked (most recent like first)."""
        if not user_id:
            return []
        start, limit = clamp_page(start, limit)
        if UserFeedMode(mode) == UserFeedMode.LIKED:
            return self.repo.list_liked_by(user_id, start, limit)
        return self.repo.list_by_owner(user_id, start, limit)
