# itembot/core/usage.py
"""
Daily usage tracking.

Each user carries three counters (story, image, chat) that belong to the
calendar day stored in `last_request_date`. Whenever a read finds that day is
not today (in the reference timezone), the counters are zeroed and the date
advanced before anything else looks at them.

This module only counts and reports. Rejecting requests over the limit is up
to the caller that talks to the generation backend (see
`itembot.services.generation`), which consults `has_remaining_quota` first.
"""
import datetime as dt
from typing import Dict, Literal, Optional

from itembot.models import User
from .activity import log_activity
from .db import Store


UsageKind = Literal["story", "image", "chat"]

# kind -> counter attribute on User
COUNTER_FIELDS: Dict[str, str] = {
    "story": "story_requests",
    "image": "image_requests",
    "chat": "chat_messages",
}

# Per-day limits shown to users
DISPLAY_LIMITS: Dict[str, int] = {
    "story": 1,
    "image": 5,
    "chat": 10,
}

_ACTION_TEMPLATES: Dict[str, str] = {
    "story": "Generated a story scenario ({count}/{limit}).",
    "image": "Generated an image ({count}/{limit}).",
    "chat": "Sent a chat message ({count}/{limit}).",
}


def check_and_roll_if_new_day(user: User, today: dt.date) -> bool:
    """
    Zero all counters if the user's quota window is not today.

    Returns:
        True if the user was modified (caller must persist)
    """
    if user.last_request_date == today:
        return False
    user.story_requests = 0
    user.image_requests = 0
    user.chat_messages = 0
    user.last_request_date = today
    return True


def _counter_field(kind: str) -> str:
    try:
        return COUNTER_FIELDS[kind]
    except KeyError:
        raise ValueError(f"Unknown usage kind: {kind!r}") from None


def increment_usage(store: Store, user_id: int, kind: UsageKind) -> Optional[User]:
    """
    Count one action of `kind` for a user and log it.

    Rolls the quota window first, so the first action of a new day counts
    as 1 regardless of yesterday's total.

    Returns:
        The updated user, or None if the user does not exist
    """
    field = _counter_field(kind)
    state = store.load()
    user = next((u for u in state.users if u.user_id == user_id), None)
    if user is None:
        return None

    check_and_roll_if_new_day(user, store.today())
    count = getattr(user, field) + 1
    setattr(user, field, count)
    store.save(state)

    log_activity(store, user_id, _ACTION_TEMPLATES[kind].format(count=count, limit=DISPLAY_LIMITS[kind]))
    return user


def get_usage(store: Store, user_id: int) -> Optional[Dict[str, Dict[str, int]]]:
    """
    Read a user's counters for today, rolling the window if needed.

    Returns:
        {kind: {"used": n, "limit": display_limit}} or None for unknown users
    """
    state = store.load()
    user = next((u for u in state.users if u.user_id == user_id), None)
    if user is None:
        return None
    if check_and_roll_if_new_day(user, store.today()):
        store.save(state)
    return {
        kind: {"used": getattr(user, field), "limit": DISPLAY_LIMITS[kind]}
        for kind, field in COUNTER_FIELDS.items()
    }


def has_remaining_quota(store: Store, user_id: int, kind: UsageKind) -> bool:
    """True if the user has not yet reached today's display limit for `kind`."""
    _counter_field(kind)
    usage = get_usage(store, user_id)
    if usage is None:
        return False
    return usage[kind]["used"] < usage[kind]["limit"]
