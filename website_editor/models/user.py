"""User model.

Accounts are owned by the external identity system; this service only reads
them to resolve the authenticated user and to embed owner info in feeds.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.orm import relationship

from ..database import Base
from ._time import utcnow


class User(Base):
    """Owner of UIs and author of likes."""

    __tablename__ = "users"

    user_id = Column(String(50), primary_key=True)
    first_name = Column(String(255), nullable=False, default="")
    image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    uis = relationship("Ui", back_populates="owner")
