"""
Daily algorithm-news cache.

The article is fetched from the backend at most once per calendar day and
kept as `{date, article, sources}` under a side key of the store.
"""
import json
import logging
from typing import Any, Dict, Optional

from itembot.config import settings
from itembot.core.db import Store
from .ai_base import GenerationBackend

logger = logging.getLogger("uvicorn.error")

NEWS_PROMPT = (
    "As a social media expert, use Google Search to find the latest Instagram algorithm changes and news "
    "from the past week. Present the results as a list of key items. For each item write a short, clear "
    "headline in <b> tags, then explain it practically for content creators in the next paragraph. Leave a "
    "blank line between items. Skip any introduction or conclusion. Do not use * or #."
)


def _read_cache(store: Store) -> Optional[Dict[str, Any]]:
    raw = store.get_item(settings.news_cache_key)
    if raw is None:
        return None
    try:
        cached = json.loads(raw)
    except ValueError:
        cached = None
    if not isinstance(cached, dict):
        logger.warning("[news] Cached article is corrupted; discarding it.")
        store.remove_item(settings.news_cache_key)
        return None
    return cached


async def get_algorithm_news(store: Store, backend: GenerationBackend, force_refresh: bool = False) -> Dict[str, Any]:
    """
    Return today's article, fetching it if the cache is stale or missing.

    Raises:
        GenerationError: If a fetch was needed and the backend failed
    """
    today = store.today().isoformat()
    if not force_refresh:
        cached = _read_cache(store)
        if cached and cached.get("date") == today and cached.get("article"):
            return {"date": today, "article": cached["article"], "sources": cached.get("sources") or []}

    result = await backend.search_news(NEWS_PROMPT)
    entry = {"date": today, "article": result.text, "sources": result.sources}
    store.set_item(settings.news_cache_key, json.dumps(entry))
    return entry


def clear_news_cache(store: Store) -> None:
    store.remove_item(settings.news_cache_key)
