"""UI and feed schemas."""

from enum import Enum
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List

from .revision import SubPromptResponse


class FeedMode(str, Enum):
    """Ordering of the global feed."""
    LATEST = "latest"
    MOST_LIKED = "most_liked"
    MOST_VIEWED = "most_viewed"


class TimeRange(str, Enum):
    """Creation-time window for ranked feeds."""
    HOUR = "1h"
    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"


class UserFeedMode(str, Enum):
    """Which of a user's UIs to list."""
    OWN = "ownUI"
    LIKED = "likedUI"


class OwnerInfo(BaseModel):
    """Minimal public info about a UI's owner."""
    user_id: str
    first_name: str
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class UiResponse(BaseModel):
    """UI metadata and counters, as listed in feeds."""
    id: str
    ui_type: str
    owner_id: str
    owner: Optional[OwnerInfo] = None
    prompt: str
    public: bool
    preview_image: str
    view_count: int
    likes_count: int
    forked_from: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UiDetailResponse(UiResponse):
    """UI with its full revision tree."""
    subprompts: List[SubPromptResponse] = []


class UiListResponse(BaseModel):
    """Feed page."""
    uis: List[UiResponse]


class UiUpdate(BaseModel):
    """Editable UI fields. Omitted fields are left unchanged."""
    img: Optional[str] = None
    prompt: Optional[str] = None


class UiUpdateResponse(BaseModel):
    id: str
    img: str
    prompt: str


class LikeResponse(BaseModel):
    liked: bool


class DeleteResponse(BaseModel):
    success: bool = True
