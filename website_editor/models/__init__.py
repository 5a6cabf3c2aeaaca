"""Database models."""

from .user import User
from .ui import Ui
from .revision import SubPrompt, Code
from .like import Like

__all__ = [
    "User", "Ui", "SubPrompt", "Code", "Like",
]
