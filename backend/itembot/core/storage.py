# itembot/core/storage.py
"""
Key/value backing medium for the persistent store.

The medium stores opaque text values under string keys and knows nothing
about their shape. Any interpretation (parsing, sanitizing, recovery)
happens in `itembot.core.db.Store`.

Implementations raise OSError when the medium itself fails (disk full,
permission denied); they never swallow errors.
"""
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote


class KeyValueStorage(ABC):
    """Abstract key/value medium (a localStorage-like slot map)."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for `key`, or None if the key is absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove `key`; removing an absent key is not an error."""
        pass


class MemoryStorage(KeyValueStorage):
    """
    In-process dictionary medium.

    Used by the test-suite and as the in-memory fake behind an isolated
    `Store`. Values are kept as text so corruption scenarios can be
    reproduced by writing arbitrary strings.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage(KeyValueStorage):
    """
    Directory-backed medium: one file per key.

    Key names are percent-encoded to produce safe file names. Writes go
    through a temporary file in the same directory followed by os.replace(),
    so a crash mid-write never leaves a half-written value behind.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}.blob"

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        target = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".blob")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, target)
        except BaseException:
            # Leave no temp files behind on failure
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
