"""Unit tests for FeedService — ranked, home and per-user feeds."""

from datetime import datetime, timedelta, timezone

import pytest

from website_editor.core.config import settings
from website_editor.models import Like
from website_editor.schemas.ui import FeedMode, TimeRange, UserFeedMode
from website_editor.services import EngagementService, FeedService
from website_editor.services.feed_service import clamp_page
from tests.conftest import make_ui, make_user

NOW = datetime.now(timezone.utc)


def _ago(**kwargs) -> datetime:
    return NOW - timedelta(**kwargs)


@pytest.fixture()
def users(db):
    return [make_user(db, user_id) for user_id in ("alice", "bob", "carol")]


def _prompts(uis):
    return [ui.prompt for ui in uis]


class TestClampPage:

    def test_negative_start(self):
        assert clamp_page(-5, 10) == (0, 10)

    def test_limit_capped(self):
        assert clamp_page(0, 10_000) == (0, settings.feed_max_limit)

    def test_limit_at_least_one(self):
        assert clamp_page(0, 0) == (0, 1)


class TestLatest:

    def test_newest_first(self, db, users):
        make_ui(db, "alice", prompt="old", created_at=_ago(days=3))
        make_ui(db, "alice", prompt="new", created_at=_ago(hours=1))
        make_ui(db, "bob", prompt="mid", created_at=_ago(days=1))
        assert _prompts(FeedService(db).list_uis(FeedMode.LATEST)) == ["new", "mid", "old"]

    def test_time_range_ignored(self, db, users):
        make_ui(db, "alice", prompt="ancient", created_at=_ago(days=90))
        uis = FeedService(db).list_uis(FeedMode.LATEST, time_range=TimeRange.HOUR, now=NOW)
        assert _prompts(uis) == ["ancient"]

    def test_pagination(self, db, users):
        for i in range(5):
            make_ui(db, "alice", prompt=f"ui-{i}", created_at=_ago(minutes=10 - i))
        page = FeedService(db).list_uis(FeedMode.LATEST, start=1, limit=2)
        assert _prompts(page) == ["ui-3", "ui-2"]

    def test_owner_attached(self, db, users):
        make_ui(db, "bob")
        (ui,) = FeedService(db).list_uis()
        assert ui.owner.user_id == "bob"


class TestMostLiked:

    def test_orders_by_likes_then_oldest(self, db, users):
        a = make_ui(db, "alice", prompt="two likes", created_at=_ago(hours=5))
        b = make_ui(db, "alice", prompt="one like old", created_at=_ago(hours=4))
        c = make_ui(db, "alice", prompt="one like new", created_at=_ago(hours=3))
        make_ui(db, "alice", prompt="none", created_at=_ago(hours=2))
        svc = EngagementService(db)
        svc.toggle_like("bob", a.id)
        svc.toggle_like("carol", a.id)
        svc.toggle_like("bob", b.id)
        svc.toggle_like("bob", c.id)

        uis = FeedService(db).list_uis(FeedMode.MOST_LIKED, time_range=TimeRange.ALL)
        assert _prompts(uis) == ["two likes", "one like old", "one like new", "none"]

    def test_day_window_excludes_older(self, db, users):
        old = make_ui(db, "alice", prompt="old favourite", created_at=_ago(days=2))
        fresh = make_ui(db, "alice", prompt="fresh", created_at=_ago(hours=2))
        svc = EngagementService(db)
        svc.toggle_like("bob", old.id)
        svc.toggle_like("carol", old.id)
        svc.toggle_like("bob", fresh.id)

        uis = FeedService(db).list_uis(FeedMode.MOST_LIKED, time_range=TimeRange.DAY, now=NOW)
        assert _prompts(uis) == ["fresh"]

    @pytest.mark.parametrize("time_range, expected", [
        (TimeRange.HOUR, ["30m"]),
        (TimeRange.DAY, ["5h", "30m"]),
        (TimeRange.WEEK, ["3d", "5h", "30m"]),
        (TimeRange.MONTH, ["20d", "3d", "5h", "30m"]),
        (TimeRange.ALL, ["60d", "20d", "3d", "5h", "30m"]),
    ])
    def test_windows(self, db, users, time_range, expected):
        for label, delta in [
            ("60d", timedelta(days=60)),
            ("20d", timedelta(days=20)),
            ("3d", timedelta(days=3)),
            ("5h", timedelta(hours=5)),
            ("30m", timedelta(minutes=30)),
        ]:
            make_ui(db, "alice", prompt=label, created_at=NOW - delta)
        uis = FeedService(db).list_uis(FeedMode.MOST_LIKED, time_range=time_range, now=NOW)
        # No likes anywhere: every UI ties, oldest first.
        assert _prompts(uis) == expected


class TestMostViewed:

    def test_orders_by_views(self, db, users):
        a = make_ui(db, "alice", prompt="few", created_at=_ago(hours=3))
        b = make_ui(db, "alice", prompt="many", created_at=_ago(hours=2))
        svc = EngagementService(db)
        svc.increment_view_count(a.id)
        for _ in range(3):
            svc.increment_view_count(b.id)
        assert _prompts(FeedService(db).list_uis("most_viewed", time_range="7d", now=NOW)) == ["many", "few"]


class TestHomeFeed:

    def test_most_recently_updated_first_and_capped(self, db, users):
        for i in range(settings.home_feed_size + 3):
            make_ui(db, "alice", prompt=f"ui-{i}", created_at=_ago(hours=100 - i))
        uis = FeedService(db).get_home_feed()
        assert len(uis) == settings.home_feed_size
        assert uis[0].prompt == f"ui-{settings.home_feed_size + 2}"


class TestUserFeed:

    def test_own_uis_newest_first(self, db, users):
        make_ui(db, "alice", prompt="first", created_at=_ago(days=2))
        make_ui(db, "alice", prompt="second", created_at=_ago(days=1))
        make_ui(db, "bob", prompt="not alice")
        uis = FeedService(db).get_user_feed("alice", mode=UserFeedMode.OWN)
        assert _prompts(uis) == ["second", "first"]

    def test_liked_uis_most_recent_like_first(self, db, users):
        x = make_ui(db, "alice", prompt="x")
        y = make_ui(db, "alice", prompt="y")
        make_ui(db, "alice", prompt="unliked")
        svc = EngagementService(db)
        svc.toggle_like("bob", x.id)
        svc.toggle_like("bob", y.id)
        db.query(Like).filter(Like.ui_id == x.id).update({Like.created_at: _ago(hours=1)})
        db.query(Like).filter(Like.ui_id == y.id).update({Like.created_at: _ago(hours=2)})
        db.commit()

        uis = FeedService(db).get_user_feed("bob", mode="likedUI")
        assert _prompts(uis) == ["x", "y"]

    def test_empty_user_id(self, db, users):
        assert FeedService(db).get_user_feed("") == []

    def test_unknown_user_has_empty_feed(self, db, users):
        assert FeedService(db).get_user_feed("nobody") == []
