# itembot/models/activity.py
from .base import StoreRecord, Timestamp


class ActivityLog(StoreRecord):
    """
    One entry of the bounded activity log.

    `user_full_name` is a snapshot taken when the action happened; renaming
    the user later does not rewrite history.
    """
    id: int
    user_id: int
    user_full_name: str = ""
    action: str = ""
    timestamp: Timestamp
