# itembot/models/user.py
"""
User account record.

Users are identified by a stable integer `user_id`. Exactly one user carries
the reserved admin identifier (see `is_user_admin`); the admin is recognised
by that identifier, never by access code alone.
"""
import datetime as dt
from typing import Optional

from itembot.config import settings
from .base import StoreRecord


class User(StoreRecord):
    """
    User account with daily usage counters.

    The three counters are only meaningful for `last_request_date`; the usage
    tracker zeroes them whenever that date differs from today.
    """
    user_id: int  # Stable unique identifier
    full_name: str = ""
    access_code: str = ""  # Plaintext login code, unique among verified users
    is_verified: bool = False
    story_requests: int = 0
    image_requests: int = 0
    chat_messages: int = 0
    last_request_date: Optional[dt.date] = None  # Quota window (calendar day)
    about_info: Optional[str] = None  # Free-text profile fed to AI prompts

    @classmethod
    def fresh(
        cls,
        user_id: int,
        full_name: str,
        access_code: str,
        today: dt.date,
        about_info: Optional[str] = None,
    ) -> "User":
        """Build a verified user with zeroed counters for `today`."""
        return cls(
            user_id=user_id,
            full_name=full_name,
            access_code=access_code,
            is_verified=True,
            story_requests=0,
            image_requests=0,
            chat_messages=0,
            last_request_date=today,
            about_info=about_info,
        )


def is_user_admin(user_id: int) -> bool:
    """Return True if `user_id` is the reserved admin identity."""
    return user_id == settings.admin_user_id
