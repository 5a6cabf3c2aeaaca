"""Like repository for database operations."""

from sqlalchemy.orm import Session

from ..models import Like


class LikeRepository:
    """Insert/delete primitives for likes. Uniqueness is enforced by the database."""

    def __init__(self, db: Session):
        self.db = db

    def delete(self, user_id: str, ui_id: str) -> int:
        """Delete the user's like on a UI in one statement. Returns rows removed (0 or 1)."""
        return (
            self.db.query(Like)
            .filter(Like.user_id == user_id, Like.ui_id == ui_id)
            .delete(synchronize_session=False)
        )

    def insert(self, user_id: str, ui_id: str) -> Like:
        """Insert a like. Raises IntegrityError if the pair already exists."""
        like = Like(user_id=user_id, ui_id=ui_id)
        self.db.add(like)
        self.db.flush()
        return like
