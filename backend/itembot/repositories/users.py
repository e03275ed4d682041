# itembot/repositories/users.py
"""
User repository: session/login lookups and operator-side account management.
"""
import logging
from typing import List, Optional, Union

from itembot.core.activity import log_activity
from itembot.core.db import Store
from itembot.core.notifications import forget_user
from itembot.core.usage import check_and_roll_if_new_day
from itembot.models import USER_OWNED_COLLECTIONS, User, is_user_admin
from itembot.schemas.admin import OperationResult

logger = logging.getLogger("uvicorn.error")

__all__ = [
    "is_user_admin",
    "verify_access_code",
    "get_all_users",
    "get_user_by_id",
    "add_user",
    "delete_user",
    "update_user_about",
]


def verify_access_code(store: Store, code: Union[str, int], is_session_login: bool = False) -> Optional[User]:
    """
    Resolve a verified user from an access code or a session.

    For a session login `code` is the user's id (as text or int) restored
    from an earlier session; otherwise it is the plaintext access code.
    The user's quota window is rolled if the day changed. Only manual logins
    are written to the activity log.

    Returns:
        The verified user, or None
    """
    state = store.load()
    user: Optional[User]
    if is_session_login:
        try:
            user_id = int(str(code).strip())
        except ValueError:
            return None
        user = next((u for u in state.users if u.user_id == user_id and u.is_verified), None)
    else:
        user = next((u for u in state.users if u.access_code == code and u.is_verified), None)

    if user is None:
        return None

    if check_and_roll_if_new_day(user, store.today()):
        store.save(state)
    if not is_session_login:
        log_activity(store, user.user_id, "Logged in to the app.")
    return user


def get_all_users(store: Store) -> List[User]:
    """All users except the admin, in stored order."""
    return [u for u in store.load().users if not is_user_admin(u.user_id)]


def get_user_by_id(store: Store, user_id: int) -> Optional[User]:
    return next((u for u in store.load().users if u.user_id == user_id), None)


def add_user(store: Store, full_name: str, access_code: str) -> OperationResult:
    """
    Create a verified user (operator action).

    Returns:
        OperationResult with success=False if the access code is already taken
        or either value is blank; never raises for these cases.
    """
    full_name = (full_name or "").strip()
    access_code = (access_code or "").strip()
    if not full_name or not access_code:
        return OperationResult(success=False, message="Full name and access code are required.")

    state = store.load()
    if any(u.access_code == access_code for u in state.users):
        return OperationResult(success=False, message="This access code is already in use.")

    user = User.fresh(
        user_id=store.next_id(state.users, field="user_id"),
        full_name=full_name,
        access_code=access_code,
        today=store.today(),
        about_info="",
    )
    state.users.append(user)
    store.save(state)
    return OperationResult(success=True, message=f"User '{full_name}' was added successfully.")


def delete_user(store: Store, user_id: int) -> bool:
    """
    Delete a user and everything keyed by their id, in one save.

    Every user-owned collection is filtered even when the user record itself
    is already gone, so orphaned records can still be cleaned up. The admin
    account cannot be deleted.

    Returns:
        True if any record (the user or something they owned) was removed
    """
    if is_user_admin(user_id):
        logger.warning("[users] Refusing to delete the admin account.")
        return False

    state = store.load()
    removed = 0
    for name in ["users", *USER_OWNED_COLLECTIONS]:
        records = getattr(state, name)
        kept = [r for r in records if r.user_id != user_id]
        removed += len(records) - len(kept)
        setattr(state, name, kept)
    if removed:
        store.save(state)

    forget_user(store, user_id)
    return removed > 0


def update_user_about(store: Store, user_id: int, about: str) -> bool:
    state = store.load()
    user = next((u for u in state.users if u.user_id == user_id), None)
    if user is None:
        return False
    user.about_info = about
    store.save(state)
    return True
