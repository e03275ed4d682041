# itembot/models/history.py
"""
Per-user histories: chat transcript, generated stories and images.

Each history collection holds at most one record per `user_id`. Story and
image histories are bounded (newest first) by the history repository.
"""
from typing import List

from pydantic import Field

from .base import StoreRecord


class ChatMessage(StoreRecord):
    role: str  # "user" or "model"
    text: str = ""


class UserChatHistory(StoreRecord):
    user_id: int
    messages: List[ChatMessage] = Field(default_factory=list)


class StoryItem(StoreRecord):
    id: int
    content: str = ""


class UserStoryHistory(StoreRecord):
    user_id: int
    stories: List[StoryItem] = Field(default_factory=list)


class ImageItem(StoreRecord):
    id: int
    url: str = ""  # data: URL (base64 payload + MIME type)


class UserImageHistory(StoreRecord):
    user_id: int
    images: List[ImageItem] = Field(default_factory=list)
