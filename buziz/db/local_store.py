"""
Local key-value persistence.

A synchronous string-to-string store with the same shape as a browser's
localStorage. Values are JSON strings; callers serialize and parse them.
When a path is given the whole store is mirrored to a JSON file after every
write, otherwise it lives in memory only.
"""
import json
import logging
import os
import tempfile
import threading
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """
    localStorage-style key-value store.
    """

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the store.

        Args:
            path: JSON file to load from and mirror to, or None for memory only
        """
        self.path = path
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as fh:
                self._items = json.load(fh)
            logger.info(f"Loaded {len(self._items)} local keys from {path}")

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
            self._flush()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if self._items.pop(key, None) is not None:
                self._flush()

    def keys(self) -> List[str]:
        return list(self._items.keys())

    def clear(self) -> None:
        with self._lock:
            self._items = {}
            self._flush()

    def __len__(self) -> int:
        return len(self._items)

    def _flush(self) -> None:
        if not self.path:
            return

        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".buziz-", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(self._items, fh)
        os.replace(tmp_path, self.path)
