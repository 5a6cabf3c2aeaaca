"""Pydantic schemas for API validation."""

from .revision import (
    CodeResponse,
    SubPromptCreate,
    SubPromptResponse,
)
from .ui import (
    FeedMode,
    TimeRange,
    UserFeedMode,
    OwnerInfo,
    UiResponse,
    UiDetailResponse,
    UiListResponse,
    UiUpdate,
    UiUpdateResponse,
    LikeResponse,
    DeleteResponse,
)

__all__ = [
    "CodeResponse",
    "SubPromptCreate",
    "SubPromptResponse",
    "FeedMode",
    "TimeRange",
    "UserFeedMode",
    "OwnerInfo",
    "UiResponse",
    "UiDetailResponse",
    "UiListResponse",
    "UiUpdate",
    "UiUpdateResponse",
    "LikeResponse",
    "DeleteResponse",
]
