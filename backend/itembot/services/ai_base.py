"""
Generation Backend Abstract Interface

Unified interface for the generative-AI backend used by story, caption,
chat, image and news features. The store never talks to the backend
directly; `itembot.services.generation` sits in between.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from itembot.models import ChatMessage

# Shown when the backend cannot be reached or is not configured
AI_INIT_ERROR = "The AI service is currently unavailable. Please ask the administrator to check it."


class GenerationError(Exception):
    """The backend failed to produce output; the message is user-presentable."""


@dataclass
class ImagePayload:
    """Generated image: base64 payload plus MIME type"""
    data: str
    mime_type: str = "image/jpeg"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass
class NewsResult:
    """Search-grounded article"""
    text: str
    sources: List[Dict[str, Optional[str]]] = field(default_factory=list)  # [{"uri", "title"}]


class GenerationBackend(ABC):
    """Generation Backend Abstract Base Class"""

    @abstractmethod
    async def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        """Return the complete text for `prompt`."""
        pass

    @abstractmethod
    def stream_text(self, prompt: str) -> AsyncIterator[str]:
        """
        Stream text for `prompt`.

        Returns a finite, single-consumer iterator of fragments whose
        concatenation is the full result. It cannot be restarted.
        """
        pass

    @abstractmethod
    async def chat(self, history: List[ChatMessage], message: str, system_instruction: Optional[str] = None) -> str:
        """Reply to `message` given the prior conversation."""
        pass

    @abstractmethod
    async def generate_image(self, prompt: str) -> ImagePayload:
        pass

    @abstractmethod
    async def edit_image(self, prompt: str, image: ImagePayload) -> ImagePayload:
        pass

    @abstractmethod
    async def search_news(self, prompt: str) -> NewsResult:
        """Answer `prompt` with web search grounding."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if backend is configured"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., "Gemini API")"""
        pass
