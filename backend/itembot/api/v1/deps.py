# itembot/api/v1/deps.py
from fastapi import Depends, Header, HTTPException, status

from itembot.core.db import Store, get_store
from itembot.models import User, is_user_admin
from itembot.repositories.users import verify_access_code
from itembot.services.ai_base import GenerationBackend
from itembot.services.gemini_client import gemini_service


def get_store_dep() -> Store:
    """FastAPI dependency returning the process-wide store (overridable in tests)."""
    return get_store()


def get_backend_dep() -> GenerationBackend:
    """FastAPI dependency returning the generation backend (overridable in tests)."""
    return gemini_service


def get_current_user(
    x_user_id: str | None = Header(default=None),
    store: Store = Depends(get_store_dep),
) -> User:
    """
    FastAPI dependency to get the current session user.

    The session is the user id returned by the login endpoint, sent back in
    the `X-User-Id` header. It is resolved as a session login, so it rolls
    the quota window but is not written to the activity log.

    Raises:
        HTTPException (401): If no session is provided (AUTH_REQUIRED)
        HTTPException (401): If the session does not match a verified user (AUTH_INVALID_SESSION)
    """
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")
    user = verify_access_code(store, x_user_id, is_session_login=True)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_SESSION")
    return user


def require_admin(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current user is the administrator.

    Raises:
        HTTPException (403): If user is not the admin (FORBIDDEN_ADMIN_ONLY)
        HTTPException (401): If user is not authenticated (from get_current_user)
    """
    if not is_user_admin(current.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="FORBIDDEN_ADMIN_ONLY")
    return current


def user_to_dict(u: User) -> dict:
    """
    Convert a User record to the API representation (no access code).
    """
    return {
        "id": u.user_id,
        "fullName": u.full_name,
        "isAdmin": is_user_admin(u.user_id),
        "storyRequests": u.story_requests,
        "imageRequests": u.image_requests,
        "chatMessages": u.chat_messages,
        "lastRequestDate": u.last_request_date.isoformat() if u.last_request_date else None,
        "about": u.about_info,
    }
