"""Engagement counters: likes and views.

Counters live on the UI row and only move through single-statement
``col = col +/- 1`` updates, committed together with the Like row change
they describe. Nothing here recounts the likes table.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import DatabaseError
from ..repositories import LikeRepository, UiRepository

logger = logging.getLogger(__name__)


class EngagementService:
    """Like toggling and view counting for UIs."""

    def __init__(self, db: Session):
        self.db = db
        self.ui_repo = UiRepository(db)
        self.like_repo = LikeRepository(db)

    def toggle_like(self, user_id: str, ui_id: str) -> bool:
        """Flip the user's like on a UI. Returns True if the UI is now liked.

        The delete is the existence check: one conditional statement decides
        which branch runs, so two racing requests cannot both unlike. A unique
        violation on insert means a concurrent request already liked the UI;
        that counts as liked and the counter is left alone.

        Raises:
            UiNotFoundError: the UI does not exist.
            DatabaseError: storage failure; nothing is persisted.
        """
        self.ui_repo.get_by_id(ui_id)

        try:
            if self.like_repo.delete(user_id, ui_id):
                self.ui_repo.adjust_likes_count(ui_id, -1)
                liked = False
            else:
                savepoint = self.db.begin_nested()
                try:
                    self.like_repo.insert(user_id, ui_id)
                    savepoint.commit()
                    self.ui_repo.adjust_likes_count(ui_id, 1)
                except IntegrityError:
                    savepoint.rollback()
                    logger.info(
                        "Concurrent like detected, treating as liked",
                        extra={"ui_id": ui_id, "user_id": user_id},
                    )
                liked = True
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to toggle like",
                extra={"operation": "toggle_like", "ui_id": ui_id, "user_id": user_id},
                exc_info=True,
            )
            raise DatabaseError("Failed to toggle like", e) from e

        logger.debug("Like toggled", extra={"ui_id": ui_id, "user_id": user_id, "liked": liked})
        return liked

    def increment_view_count(self, ui_id: str) -> None:
        """Add one view. Best effort: failures are logged, never raised."""
        try:
            matched = self.ui_repo.increment_view_count(ui_id)
            self.db.commit()
            if not matched:
                logger.warning(
                    "View for unknown UI ignored",
                    extra={"operation": "increment_view_count", "ui_id": ui_id},
                )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(
                "Failed to record view: %s", e,
                extra={"operation": "increment_view_count", "ui_id": ui_id},
            )
