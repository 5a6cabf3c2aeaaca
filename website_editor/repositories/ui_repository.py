"""UI repository for database operations."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Query, joinedload, selectinload

from ..models import Ui, SubPrompt, Like
from ..models._time import utcnow
from ..exceptions import UiNotFoundError
from .base import BaseRepository


class UiRepository(BaseRepository[Ui]):
    """Repository for the UI aggregate root and its counters."""

    model_class = Ui
    not_found_error = UiNotFoundError

    # get_by_id and get_by_id_optional are inherited from BaseRepository.

    def get_with_revisions(self, ui_id: str) -> Optional[Ui]:
        """UI with owner and every SubPrompt + Code eagerly loaded."""
        return (
            self.db.query(Ui)
            .options(
                joinedload(Ui.owner),
                selectinload(Ui.subprompts).joinedload(SubPrompt.code),
            )
            .filter(Ui.id == ui_id)
            .first()
        )

    def create(
        self,
        owner_id: str,
        ui_type: str,
        prompt: str,
        preview_image: str = "",
        public: bool = True,
        forked_from: Optional[str] = None,
    ) -> Ui:
        """Insert a UI row with zeroed counters. Flushes, never commits."""
        db_ui = Ui(
            owner_id=owner_id,
            ui_type=ui_type,
            prompt=prompt,
            preview_image=preview_image,
            public=public,
            view_count=0,
            likes_count=0,
            forked_from=forked_from,
        )
        self.db.add(db_ui)
        self.db.flush()
        return db_ui

    def delete(self, db_ui: Ui) -> None:
        """Delete the UI. SubPrompts, Code and Likes go with it (ON DELETE CASCADE)."""
        self.db.delete(db_ui)
        self.db.flush()

    def touch(self, ui_id: str) -> None:
        """Bump updated_at without loading the row."""
        self.db.query(Ui).filter(Ui.id == ui_id).update(
            {Ui.updated_at: utcnow()}, synchronize_session=False
        )

    # --- Counters: single-statement atomic updates ---

    def increment_view_count(self, ui_id: str) -> int:
        """``view_count = view_count + 1``. Returns the number of rows matched."""
        return self.db.query(Ui).filter(Ui.id == ui_id).update(
            {Ui.view_count: Ui.view_count + 1}, synchronize_session=False
        )

    def adjust_likes_count(self, ui_id: str, delta: int) -> int:
        """``likes_count = likes_count + delta``. Returns the number of rows matched."""
        return self.db.query(Ui).filter(Ui.id == ui_id).update(
            {Ui.likes_count: Ui.likes_count + delta}, synchronize_session=False
        )

    # --- Feed queries ---

    def _listing_query(self) -> Query:
        return self.db.query(Ui).options(joinedload(Ui.owner))

    def list_ranked(
        self,
        order_by: list,
        skip: int,
        limit: int,
        created_since: Optional[datetime] = None,
    ) -> List[Ui]:
        """Page of UIs in the given order, optionally limited to recent ones."""
        query = self._listing_query()
        if created_since is not None:
            query = query.filter(Ui.created_at >= created_since)
        return query.order_by(*order_by).offset(skip).limit(limit).all()

    def list_recently_updated(self, limit: int) -> List[Ui]:
        return self._listing_query().order_by(Ui.updated_at.desc()).limit(limit).all()

    def list_by_owner(self, owner_id: str, skip: int, limit: int) -> List[Ui]:
        return (
            self._listing_query()
            .filter(Ui.owner_id == owner_id)
            .order_by(Ui.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_liked_by(self, user_id: str, skip: int, limit: int) -> List[Ui]:
        """UIs the user liked, most recently liked first."""
        return (
            self._listing_query()
            .join(Like, Like.ui_id == Ui.id)
            .filter(Like.user_id == user_id)
            .order_by(Like.created_at.desc(), Ui.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.db.query(Ui).count()
