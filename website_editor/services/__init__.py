"""Business logic services."""

from .subprompt_service import SubPromptService
from .ui_service import UiService
from .engagement_service import EngagementService
from .feed_service import FeedService

__all__ = ["SubPromptService", "UiService", "EngagementService", "FeedService"]
