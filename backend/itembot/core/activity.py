# itembot/core/activity.py
"""
Bounded activity log.

Append-only record of what non-admin users do, newest first, capped at
ACTIVITY_LOG_LIMIT entries (the oldest entry is evicted on append).
"""
import logging
from typing import List, Optional

from itembot.models import ActivityLog, is_user_admin
from .db import Store

logger = logging.getLogger("uvicorn.error")

ACTIVITY_LOG_LIMIT = 100


def log_activity(store: Store, user_id: int, action: str) -> Optional[ActivityLog]:
    """
    Record an action for a user.

    Skipped silently when the user does not exist or is the admin (admin
    actions are never logged).

    Args:
        store: Store handle
        user_id: Acting user
        action: Human-readable description of the action

    Returns:
        The new entry, or None if nothing was logged
    """
    state = store.load()
    user = next((u for u in state.users if u.user_id == user_id), None)
    if user is None or is_user_admin(user_id):
        return None

    entry = ActivityLog(
        id=store.next_id(state.activity_logs),
        user_id=user_id,
        user_full_name=user.full_name,  # Snapshot, not a live reference
        action=action,
        timestamp=store.now(),
    )
    state.activity_logs.insert(0, entry)
    # Drop the oldest (tail) entries beyond the bound
    del state.activity_logs[ACTIVITY_LOG_LIMIT:]
    store.save(state)
    return entry


def get_activity_logs(store: Store) -> List[ActivityLog]:
    """Return the whole log in stored (newest-first) order."""
    return store.load().activity_logs
