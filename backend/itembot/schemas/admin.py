# itembot/schemas/admin.py
"""
Pydantic schemas for admin endpoints.
Defines request models for user management and content publishing, and the
structured result returned by operations that report failure instead of raising.
"""
from pydantic import BaseModel, Field

__all__ = ["OperationResult", "AddUserIn", "ScenarioIn", "ContentIn", "BroadcastIn"]


class OperationResult(BaseModel):
    """Outcome of an operation that reports failure instead of raising."""
    success: bool
    message: str


class AddUserIn(BaseModel):
    """Request model for creating a user (admin only)."""
    fullName: str = Field(min_length=1)
    accessCode: str = Field(min_length=1)  # Must not be used by another user


class ScenarioIn(BaseModel):
    """Request model for assigning a post scenario to a user."""
    scenarioNumber: int = Field(ge=0)
    content: str


class ContentIn(BaseModel):
    """Request model for plan and report bodies."""
    content: str


class BroadcastIn(BaseModel):
    """Request model for a global admin broadcast."""
    message: str = Field(min_length=1)
