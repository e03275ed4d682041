# itembot/schemas/generation.py
"""
Pydantic schemas for AI generation endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

__all__ = ["StoryIn", "ChatIn", "ImageIn", "ImageEditIn", "ImageOut", "NewsSource", "NewsOut"]


class StoryIn(BaseModel):
    """Request model for story scenario generation."""
    idea: str = Field(min_length=1)  # Raw idea typed or dictated by the user


class ChatIn(BaseModel):
    message: str = Field(min_length=1)


class ImageIn(BaseModel):
    prompt: str = Field(min_length=1)


class ImageEditIn(BaseModel):
    """Request model for editing an uploaded image."""
    prompt: str = Field(min_length=1)
    imageData: str  # Base64 payload, without the data: prefix
    mimeType: str = "image/jpeg"


class ImageOut(BaseModel):
    url: str  # data: URL
    mimeType: str


class NewsSource(BaseModel):
    uri: str
    title: Optional[str] = None


class NewsOut(BaseModel):
    """Daily algorithm-news article with its web sources."""
    date: str
    article: str
    sources: List[NewsSource] = []
