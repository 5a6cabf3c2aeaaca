"""Seed the development user on startup.

With authentication disabled every request acts as ``DEV_USER_ID``; UIs and
likes reference users by foreign key, so that row has to exist. Idempotent.
"""

import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def seed_dev_user(db: Session, user_id: str) -> bool:
    """Create the development user if missing.

    Args:
        db: An open SQLAlchemy session.
        user_id: Id requests act as while auth is disabled.

    Returns:
        True if the user was created, False if it already existed.
    """
    from ..repositories.user_repository import UserRepository

    repo = UserRepository(db)
    if repo.get(user_id) is not None:
        logger.debug("Development user %s already present", user_id)
        return False

    repo.create(user_id, first_name="Developer")
    db.commit()
    logger.info("Seeded development user %s", user_id)
    return True
