# itembot/repositories/history.py
"""
Per-user chat, story and image histories.

Chat history is replaced wholesale on save. Story and image histories are
newest first and keep only the HISTORY_LIMIT most recent items.
"""
from typing import List

from itembot.core.db import Store
from itembot.models import (
    ChatMessage,
    ImageItem,
    StoryItem,
    UserChatHistory,
    UserImageHistory,
    UserStoryHistory,
)

HISTORY_LIMIT = 10


def get_chat_history(store: Store, user_id: int) -> List[ChatMessage]:
    history = next((h for h in store.load().chat_history if h.user_id == user_id), None)
    return history.messages if history is not None else []


def save_chat_history(store: Store, user_id: int, messages: List[ChatMessage]) -> None:
    state = store.load()
    history = next((h for h in state.chat_history if h.user_id == user_id), None)
    if history is not None:
        history.messages = list(messages)
    else:
        state.chat_history.append(UserChatHistory(user_id=user_id, messages=list(messages)))
    store.save(state)


def get_story_history(store: Store, user_id: int) -> List[StoryItem]:
    history = next((h for h in store.load().story_history if h.user_id == user_id), None)
    return history.stories if history is not None else []


def save_story_history(store: Store, user_id: int, story_content: str) -> StoryItem:
    state = store.load()
    history = next((h for h in state.story_history if h.user_id == user_id), None)
    if history is None:
        history = UserStoryHistory(user_id=user_id)
        state.story_history.append(history)
    story = StoryItem(id=store.next_id(history.stories), content=story_content)
    history.stories.insert(0, story)
    del history.stories[HISTORY_LIMIT:]
    store.save(state)
    return story


def get_image_history(store: Store, user_id: int) -> List[ImageItem]:
    history = next((h for h in store.load().image_history if h.user_id == user_id), None)
    return history.images if history is not None else []


def save_image_history(store: Store, user_id: int, image_url: str) -> ImageItem:
    state = store.load()
    history = next((h for h in state.image_history if h.user_id == user_id), None)
    if history is None:
        history = UserImageHistory(user_id=user_id)
        state.image_history.append(history)
    image = ImageItem(id=store.next_id(history.images), url=image_url)
    history.images.insert(0, image)
    del history.images[HISTORY_LIMIT:]
    store.save(state)
    return image
