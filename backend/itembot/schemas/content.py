# itembot/schemas/content.py
"""
Pydantic schemas for user content endpoints.
"""
from pydantic import BaseModel, Field

__all__ = ["IdeaIn"]


class IdeaIn(BaseModel):
    """Request model for submitting a post idea."""
    ideaText: str = Field(min_length=1)
