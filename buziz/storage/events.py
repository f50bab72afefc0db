"""
In-process change feed.

Writers publish an event per office whenever they persist a collection;
readers subscribe to an office and receive those events as they happen
instead of polling the store.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Any, AsyncIterator, Dict, Optional, Set

logger = logging.getLogger(__name__)


class ChangeFeed:
    """
    Fan-out of change events to per-office subscribers.
    """

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscribers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)

    def subscriber_count(self, office_id: str) -> int:
        return len(self._subscribers.get(office_id, ()))

    def publish(self, office_id: str, event: Dict[str, Any]) -> None:
        """
        Deliver an event to every subscriber of an office.
        A subscriber whose queue is full misses the event.

        Args:
            office_id: Office the event belongs to
            event: JSON-compatible event payload
        """
        for queue in list(self._subscribers.get(office_id, ())):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Dropping change event for slow subscriber of office {office_id}")

    async def subscribe(
            self,
            office_id: str,
            heartbeat: Optional[float] = None
    ) -> AsyncIterator[Optional[Dict[str, Any]]]:
        """
        Yield events for an office until the consumer stops iterating.

        Args:
            office_id: Office to watch
            heartbeat: If set, yield None after this many idle seconds so the
                consumer gets a chance to run between events
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers[office_id].add(queue)
        try:
            while True:
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=heartbeat)
                except asyncio.TimeoutError:
                    event = None
                yield event
        finally:
            self._subscribers[office_id].discard(queue)
            if not self._subscribers[office_id]:
                del self._subscribers[office_id]
