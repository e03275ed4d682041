# itembot/models/__init__.py
"""
Store record models.
Exports every pydantic record model for convenient imports throughout the
application.

Models exported:
- User: user account, access code and daily usage counters
- PostScenario, Plan, Report, Caption, PostIdea: generated content
- BroadcastMessage: global admin message
- ActivityLog: bounded activity log entry
- UserChatHistory, UserStoryHistory, UserImageHistory: per-user histories
- StoreState: the root aggregate holding every collection
"""
from .base import StoreRecord, Timestamp, to_ms
from .user import User, is_user_admin
from .content import PostScenario, Plan, Report, Caption, PostIdea, BroadcastMessage
from .activity import ActivityLog
from .history import (
    ChatMessage,
    UserChatHistory,
    StoryItem,
    UserStoryHistory,
    ImageItem,
    UserImageHistory,
)
from .state import StoreState, COLLECTIONS, USER_OWNED_COLLECTIONS
