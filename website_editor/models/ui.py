"""UI model: the top-level generated design and its engagement counters."""

import uuid

from sqlalchemy import Column, Index, String, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base
from ._time import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class Ui(Base):
    """Main UI table.

    ``likes_count`` and ``view_count`` are denormalized so feeds can rank
    without touching the likes table. They are only ever changed with
    atomic ``col = col +/- 1`` updates.
    """

    __tablename__ = "ui"
    __table_args__ = (
        Index("ix_ui_owner_id", "owner_id"),
        Index("ix_ui_created_at", "created_at"),
        Index("ix_ui_updated_at", "updated_at"),
        Index("ix_ui_likes_count", "likes_count"),
        Index("ix_ui_view_count", "view_count"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String(50), ForeignKey("users.user_id"), nullable=False)

    # Target framework/library tag for the generated code (e.g. "shadcn", "nextui")
    ui_type = Column(String(100), nullable=False)
    prompt = Column(Text, nullable=False)
    public = Column(Boolean, nullable=False, default=True)
    preview_image = Column(Text, nullable=False, default="")

    view_count = Column(Integer, nullable=False, default=0)
    likes_count = Column(Integer, nullable=False, default=0)

    # Plain reference: deleting the source leaves forks untouched.
    forked_from = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="uis")
    subprompts = relationship(
        "SubPrompt",
        back_populates="ui",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SubPrompt.created_at",
    )
    likes = relationship("Like", back_populates="ui", cascade="all, delete-orphan", passive_deletes=True)
