"""Data access repositories."""

from .base import BaseRepository
from .ui_repository import UiRepository
from .subprompt_repository import SubPromptRepository, CodeRepository
from .like_repository import LikeRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UiRepository",
    "SubPromptRepository",
    "CodeRepository",
    "LikeRepository",
    "UserRepository",
]
