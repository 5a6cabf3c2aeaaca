"""Like model."""

import uuid

from sqlalchemy import Column, Index, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base
from ._time import utcnow


class Like(Base):
    """At most one row per (user, UI)."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "ui_id", name="uq_likes_user_ui"),
        Index("ix_likes_ui_id", "ui_id"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(50), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    ui_id = Column(String(36), ForeignKey("ui.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    ui = relationship("Ui", back_populates="likes")
