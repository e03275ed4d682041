# itembot/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status

from itembot.api.v1.deps import get_current_user, get_store_dep, user_to_dict
from itembot.core.db import Store
from itembot.models import User
from itembot.repositories.users import update_user_about, verify_access_code
from itembot.schemas.auth import AboutIn, AccessCodeLoginIn, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: AccessCodeLoginIn, store: Store = Depends(get_store_dep)):
    """
    Log in with an access code.

    Looks up a verified user by plaintext access code, rolls their daily
    quota window and records the login in the activity log.

    Returns:
        dict: Response containing:
            - success: bool (always True on success)
            - data: dict with:
                - user: User information
                - sessionId: str to send back as the X-User-Id header

    Raises:
        HTTPException (401): If no verified user has this code
    """
    user = verify_access_code(store, payload.accessCode.strip())
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail={"code": "AUTH_INVALID_CODE", "message": "Access code is not valid"})
    return {"success": True, "data": {"user": UserOut(**user_to_dict(user)).model_dump(),
                                      "sessionId": str(user.user_id)}}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    """Return the current session user."""
    return {"success": True, "data": UserOut(**user_to_dict(user)).model_dump()}


@router.put("/me/about")
def update_about(body: AboutIn, user: User = Depends(get_current_user), store: Store = Depends(get_store_dep)):
    """
    Update the current user's profile text.
    The text personalises every generated story, caption and chat reply.
    """
    update_user_about(store, user.user_id, body.about)
    return {"success": True, "data": {"ok": True}}
