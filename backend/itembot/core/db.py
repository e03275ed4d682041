# itembot/core/db.py
"""
Persistent store handle.

The whole application state lives in one JSON blob under a single key of an
unreliable key/value medium (see `itembot.core.storage`). This module is the
only place that talks to that medium for the state blob:

- load(): read, parse and sanitize the blob; corruption self-heals silently
- save(): serialize the entire state back; write failures are best-effort
- side keys (notification bookkeeping, news cache) go through get_item/set_item

Every repository call is a complete load -> mutate -> save cycle. There is no
lock or version check: when two execution contexts save stale copies, the
last write wins.
"""
import datetime as dt
import json
import logging
from typing import Any, Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from itembot.config import settings
from itembot.models.state import COLLECTIONS, StoreState
from .storage import FileStorage, KeyValueStorage

logger = logging.getLogger("uvicorn.error")

Clock = Callable[[], dt.datetime]


class StoreFatalError(RuntimeError):
    """The store could not be brought into a usable state."""


def utc_now() -> dt.datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        dt.datetime: Current UTC datetime with timezone awareness
    """
    return dt.datetime.now(dt.timezone.utc)


def sanitize_state(parsed: dict) -> StoreState:
    """
    Build a StoreState from a parsed blob, collection by collection.

    - a collection that is missing or not a list becomes empty
    - list elements that are not objects (null, numbers, strings, lists) are dropped
    - objects whose required fields (ids, timestamps) are missing or invalid are
      dropped; any other invalid field falls back to its default (see StoreRecord)

    One broken collection never invalidates its siblings.
    """
    collections: dict[str, list] = {}
    for name, model in COLLECTIONS.items():
        raw = parsed.get(name)
        if raw is None:
            collections[name] = []
            continue
        if not isinstance(raw, list):
            logger.warning("[store] Collection %r is not a list (%s); resetting it.", name, type(raw).__name__)
            collections[name] = []
            continue
        records = []
        dropped = 0
        for item in raw:
            if not isinstance(item, dict):
                dropped += 1
                continue
            try:
                records.append(model.model_validate(item))
            except ValidationError:
                dropped += 1
        if dropped:
            logger.warning("[store] Dropped %d malformed record(s) from %r.", dropped, name)
        collections[name] = records
    return StoreState(**collections)


class Store:
    """
    Explicit handle over the persistent blob.

    Args:
        storage: Backing key/value medium
        key: Name of the slot holding the state blob
        clock: Callable returning an aware "now"; injectable for tests
        timezone: IANA name of the reference timezone that defines "today"
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: Optional[str] = None,
        clock: Optional[Clock] = None,
        timezone: Optional[str] = None,
    ):
        self.storage = storage
        self.key = key or settings.db_key
        self.clock = clock or utc_now
        self.tz = ZoneInfo(timezone or settings.reference_timezone)

    # -------- time --------
    def now(self) -> dt.datetime:
        return self.clock()

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)

    def today(self) -> dt.date:
        """Current calendar day in the reference timezone."""
        return self.now().astimezone(self.tz).date()

    def next_id(self, records: Sequence[Any], field: str = "id") -> int:
        """
        Generate a fresh identifier for a new record.

        Millisecond timestamp, bumped above the largest identifier already in
        `records` so two records created in the same millisecond never collide
        and ids keep increasing with creation order.
        """
        candidate = self.now_ms()
        existing = [getattr(r, field) for r in records]
        if existing:
            candidate = max(candidate, max(existing) + 1)
        return candidate

    # -------- state blob --------
    def load(self) -> StoreState:
        """
        Read the state blob.

        Returns:
            StoreState: Sanitized state. An absent blob yields the empty state;
            an unreadable, unparsable or non-object blob is discarded and the
            empty state returned. Never raises.
        """
        try:
            raw = self.storage.get_item(self.key)
        except Exception:
            logger.exception("[store] Backing medium unreadable; using an empty store.")
            return StoreState()

        if raw is None:
            return StoreState()

        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            # Pathologically nested input is treated like any unparsable blob
            parsed = None
        if not isinstance(parsed, dict):
            logger.error("[store] Failed to parse or validate the store blob (not an object). Resetting store.")
            self._discard_quietly()
            return StoreState()

        return sanitize_state(parsed)

    def save(self, state: StoreState) -> None:
        """
        Persist the full state, best-effort.

        Failures (medium full or inaccessible) are logged and swallowed; the
        caller is not informed and does not retry.
        """
        try:
            self.storage.set_item(self.key, state.model_dump_json())
        except Exception:
            logger.exception("[store] Failed to save the store. Storage might be full or permissions are denied.")

    def write(self, state: StoreState) -> None:
        """Persist the full state, raising StoreFatalError on failure."""
        try:
            self.storage.set_item(self.key, state.model_dump_json())
        except Exception as e:
            raise StoreFatalError(f"Could not write the store: {e}") from e

    def clear(self) -> None:
        """Remove the state blob, raising StoreFatalError on failure."""
        try:
            self.storage.remove_item(self.key)
        except Exception as e:
            raise StoreFatalError(f"Could not clear the store: {e}") from e

    def _discard_quietly(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except Exception:
            logger.exception("[store] Could not discard the corrupted store blob.")

    # -------- side keys --------
    def get_item(self, key: str) -> Optional[str]:
        """Read a side key; an unreadable medium reads as absent."""
        try:
            return self.storage.get_item(key)
        except Exception:
            logger.exception("[store] Could not read side key %r.", key)
            return None

    def set_item(self, key: str, value: str) -> None:
        """Write a side key, best-effort like save()."""
        try:
            self.storage.set_item(key, value)
        except Exception:
            logger.exception("[store] Could not write side key %r.", key)

    def remove_item(self, key: str) -> None:
        try:
            self.storage.remove_item(key)
        except Exception:
            logger.exception("[store] Could not remove side key %r.", key)


# Process-wide store (created by init_db at startup)
_store: Optional[Store] = None


def init_db(storage: Optional[KeyValueStorage] = None) -> Store:
    """
    Create the process-wide store.

    This function should be called during application startup, before
    bootstrap. Without an explicit medium the store lives in a directory
    backed medium at `settings.storage_dir`.
    """
    global _store
    _store = Store(storage if storage is not None else FileStorage(settings.storage_dir))
    return _store


def get_store() -> Store:
    """Return the process-wide store, creating it on first use."""
    if _store is None:
        return init_db()
    return _store


def close_db() -> None:
    """Drop the process-wide store handle (application shutdown)."""
    global _store
    _store = None
