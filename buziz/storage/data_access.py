"""
Data access layer with a sticky fallback from remote to local persistence.

Every domain operation is expressed as a coroutine function taking a
StorageBackend. ``DataAccess.run`` decides which backend serves it:

* the first call checks that the remote backend is reachable; if not, the
  fallback engages before the operation runs;
* if the remote backend raises while serving an operation, the fallback
  engages and the operation is run again, once, against local persistence;
* once engaged, the fallback stays engaged for the lifetime of the
  DataAccess instance.

HTTPException is a domain outcome, not a storage failure, and always
propagates unchanged.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from fastapi import HTTPException

from buziz.storage.backends import LocalBackend, StorageBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORAGE_MODES = ("auto", "remote", "local")


class DataAccess:
    """
    Chooses the backend for each operation and owns the fallback state.
    """

    def __init__(
            self,
            remote: Optional[StorageBackend],
            local: LocalBackend,
            mode: str = "auto",
            health_check: bool = True
    ):
        """
        Initialize the data access layer.

        Args:
            remote: Remote backend, may be None when mode is "local"
            local: Local persistence backend
            mode: One of "auto", "remote" or "local"
            health_check: Ping the remote backend before its first use
        """
        if mode not in STORAGE_MODES:
            raise ValueError(f"Storage mode must be one of: {', '.join(STORAGE_MODES)}")
        if remote is None and mode != "local":
            raise ValueError("A remote backend is required unless mode is 'local'")

        self.remote = remote
        self.local = local
        self.mode = mode
        self.health_check = health_check

        self._use_local = mode == "local"
        self._checked = mode == "local" or not health_check
        self._check_lock = asyncio.Lock()

    @property
    def using_local(self) -> bool:
        return self._use_local

    @property
    def active_backend(self) -> StorageBackend:
        return self.local if self._use_local else self.remote

    def fall_back(self, reason: str) -> None:
        """
        Switch to local persistence for the rest of this instance's life.

        Args:
            reason: Human-readable cause, logged once
        """
        if self.mode == "remote" or self._use_local:
            return
        logger.warning(f"Remote storage unavailable ({reason}), falling back to local storage")
        self._use_local = True

    async def ensure_checked(self) -> None:
        """Run the one-time reachability check if it has not run yet."""
        if self._checked:
            return

        async with self._check_lock:
            if self._checked:
                return
            try:
                await self.remote.ping()
                logger.info("Remote storage reachable")
            except Exception as e:
                if self.mode == "remote":
                    raise
                self.fall_back(f"health check failed: {e}")
            finally:
                self._checked = True

    async def run(self, operation: Callable[[StorageBackend], Awaitable[T]], description: str = "operation") -> T:
        """
        Run an operation against the active backend.

        Args:
            operation: Coroutine function receiving the backend to use
            description: Name used in log messages

        Returns:
            Whatever the operation returns
        """
        await self.ensure_checked()

        if self._use_local:
            return await operation(self.local)

        try:
            return await operation(self.remote)
        except HTTPException:
            raise
        except Exception as e:
            if self.mode == "remote":
                raise
            self.fall_back(f"{description} failed: {e}")

        return await operation(self.local)
