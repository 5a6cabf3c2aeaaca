"""Unit tests for EngagementService — like toggling and view counting."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from website_editor.exceptions import UiNotFoundError
from website_editor.models import Like, Ui
from website_editor.repositories import LikeRepository, UiRepository
from website_editor.services import EngagementService
from tests.conftest import make_ui, make_user


@pytest.fixture()
def ui(db):
    for user_id in ("owner", "u1", "u2", "u3"):
        make_user(db, user_id)
    return make_ui(db, owner_id="owner")


def _like_rows(db, ui_id, user_id=None):
    query = db.query(Like).filter(Like.ui_id == ui_id)
    if user_id is not None:
        query = query.filter(Like.user_id == user_id)
    return query.count()


def _likes_count(db, ui_id):
    db.expire_all()
    return db.get(Ui, ui_id).likes_count


class TestToggleLike:

    def test_first_toggle_likes(self, db, ui):
        assert EngagementService(db).toggle_like("u1", ui.id) is True
        assert _likes_count(db, ui.id) == 1
        assert _like_rows(db, ui.id, "u1") == 1

    def test_second_toggle_unlikes(self, db, ui):
        svc = EngagementService(db)
        assert svc.toggle_like("u1", ui.id) is True
        assert svc.toggle_like("u1", ui.id) is False
        assert _likes_count(db, ui.id) == 0
        assert _like_rows(db, ui.id, "u1") == 0

    def test_counter_matches_like_rows(self, db, ui):
        svc = EngagementService(db)
        for user_id in ("u1", "u2", "u3"):
            svc.toggle_like(user_id, ui.id)
        svc.toggle_like("u2", ui.id)
        assert _likes_count(db, ui.id) == 2
        assert _like_rows(db, ui.id) == 2

    def test_concurrent_insert_counts_as_liked(self, db, ui, monkeypatch):
        """A like inserted between the delete and the insert is not counted twice."""
        svc = EngagementService(db)
        real_delete = LikeRepository.delete

        def delete_then_race(repo, user_id, ui_id):
            removed = real_delete(repo, user_id, ui_id)
            repo.db.add(Like(user_id=user_id, ui_id=ui_id))
            repo.db.flush()
            UiRepository(repo.db).adjust_likes_count(ui_id, 1)
            return removed

        monkeypatch.setattr(LikeRepository, "delete", delete_then_race)
        assert svc.toggle_like("u1", ui.id) is True
        assert _likes_count(db, ui.id) == 1
        assert db.query(Like).count() == 1

    def test_missing_ui(self, db, ui):
        with pytest.raises(UiNotFoundError):
            EngagementService(db).toggle_like("u1", "missing")


class TestIncrementViewCount:

    def test_increments(self, db, ui):
        svc = EngagementService(db)
        svc.increment_view_count(ui.id)
        svc.increment_view_count(ui.id)
        db.expire_all()
        assert db.get(Ui, ui.id).view_count == 2

    def test_missing_ui_is_logged_not_raised(self, db, ui, caplog):
        with caplog.at_level(logging.WARNING, logger="website_editor.services.engagement_service"):
            EngagementService(db).increment_view_count("missing")
        assert any(
            getattr(record, "ui_id", None) == "missing" for record in caplog.records
        )
        db.expire_all()
        assert db.get(Ui, ui.id).view_count == 0

    def test_storage_failure_is_swallowed(self, db, ui, monkeypatch):
        def boom(repo, ui_id):
            raise OperationalError("UPDATE ui", {}, Exception("database is locked"))

        monkeypatch.setattr(UiRepository, "increment_view_count", boom)
        EngagementService(db).increment_view_count(ui.id)
        db.expire_all()
        assert db.get(Ui, ui.id).view_count == 0
