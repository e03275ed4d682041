# itembot/models/state.py
"""
Root aggregate of the persistent store.

`StoreState` is the whole state graph: a mapping from collection name to an
ordered list of records. It is always loaded and saved as one unit.
"""
from typing import Dict, List, Type

from pydantic import BaseModel, Field

from .activity import ActivityLog
from .base import StoreRecord
from .content import BroadcastMessage, Caption, Plan, PostIdea, PostScenario, Report
from .history import UserChatHistory, UserImageHistory, UserStoryHistory
from .user import User


class StoreState(BaseModel):
    users: List[User] = Field(default_factory=list)
    post_scenarios: List[PostScenario] = Field(default_factory=list)
    plans: List[Plan] = Field(default_factory=list)
    reports: List[Report] = Field(default_factory=list)
    captions: List[Caption] = Field(default_factory=list)
    post_ideas: List[PostIdea] = Field(default_factory=list)
    broadcasts: List[BroadcastMessage] = Field(default_factory=list)
    activity_logs: List[ActivityLog] = Field(default_factory=list)
    chat_history: List[UserChatHistory] = Field(default_factory=list)
    story_history: List[UserStoryHistory] = Field(default_factory=list)
    image_history: List[UserImageHistory] = Field(default_factory=list)


# Collection name -> record model, in blob field order
COLLECTIONS: Dict[str, Type[StoreRecord]] = {
    "users": User,
    "post_scenarios": PostScenario,
    "plans": Plan,
    "reports": Report,
    "captions": Caption,
    "post_ideas": PostIdea,
    "broadcasts": BroadcastMessage,
    "activity_logs": ActivityLog,
    "chat_history": UserChatHistory,
    "story_history": UserStoryHistory,
    "image_history": UserImageHistory,
}

# Collections whose records reference a user via `user_id` (cascade targets)
USER_OWNED_COLLECTIONS = [name for name in COLLECTIONS if name != "users" and name != "broadcasts"]
