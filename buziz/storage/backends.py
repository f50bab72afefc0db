"""
Storage backends behind a single key-value interface.
"""
import json
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from buziz.db.kv_store import KVRepository
from buziz.db.local_store import LocalStore


class StorageBackend(ABC):
    """
    Asynchronous key-value interface shared by remote and local persistence.
    Values are JSON-compatible Python objects.
    """

    name: str = "backend"

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the backend cannot serve requests. Must not write."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the value under key, or None."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Overwrite the value under key."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    async def items_with_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        """Return (key, value) pairs for every key starting with prefix."""

    async def get_list(self, key: str) -> List[Any]:
        """Return the sequence stored under key, or an empty list."""
        value = await self.get(key)
        return value if value is not None else []


class RemoteBackend(StorageBackend):
    """
    MongoDB-backed key-value store.
    """

    name = "remote"

    def __init__(self, repository: Optional[KVRepository] = None):
        self.repository = repository or KVRepository()

    async def ping(self) -> None:
        await self.repository.ping()

    async def get(self, key: str) -> Optional[Any]:
        return await self.repository.get(key)

    async def set(self, key: str, value: Any) -> None:
        await self.repository.set(key, value)

    async def delete(self, key: str) -> None:
        await self.repository.delete(key)

    async def items_with_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        return await self.repository.find_by_prefix(prefix)


class LocalBackend(StorageBackend):
    """
    Local persistence. Every value is stored as its JSON serialization.
    """

    name = "local"

    def __init__(self, store: Optional[LocalStore] = None):
        self.store = store if store is not None else LocalStore()

    async def ping(self) -> None:
        return None

    async def get(self, key: str) -> Optional[Any]:
        raw = self.store.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self.store.set_item(key, json.dumps(value))

    async def delete(self, key: str) -> None:
        self.store.remove_item(key)

    async def items_with_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        keys = sorted(k for k in self.store.keys() if k.startswith(prefix))
        return [(k, json.loads(self.store.get_item(k))) for k in keys]
