# itembot/core/bootstrap.py
"""
Bootstrap module for application initialization.
Runs once at startup, before any other store access, and heals the reserved
accounts: exactly one well-formed admin and a demo user must exist.
"""
import logging
from typing import List

from itembot.config import settings
from itembot.models import StoreState, User, is_user_admin
from .db import Store, StoreFatalError

logger = logging.getLogger("uvicorn.error")


def _new_admin(store: Store) -> User:
    return User.fresh(
        user_id=settings.admin_user_id,
        full_name=settings.admin_full_name,
        access_code=settings.admin_access_code,
        today=store.today(),
    )


def _new_demo(store: Store, users: List[User]) -> User:
    return User.fresh(
        user_id=store.next_id(users, field="user_id"),
        full_name=settings.demo_full_name,
        access_code=settings.demo_access_code,
        today=store.today(),
        about_info=settings.demo_about,
    )


def _heal(store: Store, state: StoreState) -> bool:
    """
    Enforce the reserved-account invariants in place.

    Returns:
        True if the state was modified
    """
    changed = False
    admin_code = settings.admin_access_code

    # The admin is identified by its reserved id; keep only the first record
    admins = [u for u in state.users if is_user_admin(u.user_id)]
    admin = admins[0] if admins else None
    if len(admins) > 1:
        state.users = [u for u in state.users if not is_user_admin(u.user_id) or u is admin]
        logger.warning("[bootstrap] Removed %d duplicate admin record(s).", len(admins) - 1)
        changed = True

    # Anyone else holding the admin access code is an impostor
    impostors = [u for u in state.users if u.access_code == admin_code and not is_user_admin(u.user_id)]
    if impostors:
        state.users = [u for u in state.users if u.access_code != admin_code or is_user_admin(u.user_id)]
        logger.warning("[bootstrap] Removed %d conflicting user(s) with admin access code.", len(impostors))
        changed = True

    if admin is not None:
        if admin.access_code != admin_code or not admin.is_verified:
            logger.warning("[bootstrap] Admin user found but is invalid. Correcting...")
            admin.access_code = admin_code
            admin.is_verified = True
            changed = True
    else:
        logger.warning("[bootstrap] Admin user not found, creating a new admin.")
        state.users.append(_new_admin(store))
        changed = True

    if not any(u.access_code == settings.demo_access_code for u in state.users):
        logger.warning("[bootstrap] Demo user not found, creating a new one.")
        state.users.append(_new_demo(store, state.users))
        changed = True

    return changed


def _hard_reset(store: Store) -> StoreState:
    """Discard the blob and write a minimal admin + demo state."""
    try:
        store.clear()
        admin = _new_admin(store)
        state = StoreState(users=[admin])
        state.users.append(_new_demo(store, state.users))
        store.write(state)
    except Exception as e:
        logger.critical("[bootstrap] FATAL: Could not reset the store. The application cannot run correctly.")
        raise StoreFatalError("Store initialization failed and the reset failed too") from e
    return state


def initialize_db(store: Store) -> StoreState:
    """
    Self-heal the reserved accounts.

    Steps:
      1. Load the state
      2. Collapse duplicate admin records, drop impostors holding the admin code
      3. Correct an invalid admin in place, or create one
      4. Create the demo user if no user holds the demo access code
      5. Persist only if something changed

    If anything above raises, the store is hard-reset to admin + demo only.

    Returns:
        StoreState: The healed state

    Raises:
        StoreFatalError: If the hard reset also fails
    """
    try:
        state = store.load()
        if _heal(store, state):
            store.save(state)
        return state
    except Exception:
        logger.exception("[bootstrap] Critical error during store initialization. Attempting to reset store.")
        return _hard_reset(store)
