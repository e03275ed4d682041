"""
Services Module

Provides the generative-AI collaborator and the flows built on it:
- Generation backend interface and the Gemini API implementation
- Quota-gated generation flows that persist final results to the store
- Daily algorithm-news cache
"""

from .ai_base import (
    AI_INIT_ERROR,
    GenerationBackend,
    GenerationError,
    ImagePayload,
    NewsResult,
)
from .gemini_client import GeminiService, gemini_service
from .generation import GenerationService, QuotaExceededError
from .news_cache import get_algorithm_news, clear_news_cache

__all__ = [
    # Backend interface
    "AI_INIT_ERROR",
    "GenerationBackend",
    "GenerationError",
    "ImagePayload",
    "NewsResult",
    # Gemini
    "GeminiService",
    "gemini_service",
    # Flows
    "GenerationService",
    "QuotaExceededError",
    "get_algorithm_news",
    "clear_news_cache",
]
