"""Revision models: SubPrompt nodes and their Code payloads."""

import uuid

from sqlalchemy import Column, Index, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base
from ._time import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class SubPrompt(Base):
    """One node in a UI's revision tree."""

    __tablename__ = "sub_prompts"
    __table_args__ = (
        # Concurrent allocators surface as a violation here and retry.
        UniqueConstraint("ui_id", "sub_id", name="uq_sub_prompts_ui_sub_id"),
        Index("ix_sub_prompts_ui_id", "ui_id"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    ui_id = Column(String(36), ForeignKey("ui.id", ondelete="CASCADE"), nullable=False)

    # Tree position, see core.revision_path
    sub_id = Column(String(255), nullable=False)
    sub_prompt = Column(Text, nullable=False)
    model_id = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    ui = relationship("Ui", back_populates="subprompts")
    code = relationship(
        "Code",
        back_populates="subprompt",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Code(Base):
    """Generated source for exactly one revision. Never updated in place."""

    __tablename__ = "code"

    id = Column(String(36), primary_key=True, default=_new_id)
    sub_prompt_id = Column(
        String(36),
        ForeignKey("sub_prompts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    code = Column(Text, nullable=False)

    subprompt = relationship("SubPrompt", back_populates="code")
