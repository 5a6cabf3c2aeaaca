"""Repository for user lookups."""

from typing import Optional
from sqlalchemy.orm import Session
from ..models import User


class UserRepository:
    """Read access to users plus the insert used for seeding."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.user_id == user_id).first()

    def create(self, user_id: str, first_name: str = "", image_url: Optional[str] = None) -> User:
        user = User(user_id=user_id, first_name=first_name, image_url=image_url, is_active=True)
        self.db.add(user)
        self.db.flush()
        return user
