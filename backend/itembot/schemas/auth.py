# itembot/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for access-code login and the current user.
"""
from typing import Optional

from pydantic import BaseModel

__all__ = ["AccessCodeLoginIn", "AboutIn", "UserOut"]


class AccessCodeLoginIn(BaseModel):
    """
    Request model for access-code login.
    Access codes are plaintext lookups, not secrets.
    """
    accessCode: str  # Code handed out by the admin


class AboutIn(BaseModel):
    """Request model for editing the user's profile text."""
    about: str  # Free text used to personalise generated content


class UserOut(BaseModel):
    """
    User information returned by auth and admin endpoints.
    Omits the access code.
    """
    id: int  # User identifier (also the session id)
    fullName: str
    isAdmin: bool = False
    storyRequests: int = 0
    imageRequests: int = 0
    chatMessages: int = 0
    lastRequestDate: Optional[str] = None  # ISO calendar day of the quota window
    about: Optional[str] = None
