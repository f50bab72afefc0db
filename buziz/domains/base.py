"""
Shared plumbing for domain services.
"""
from typing import Optional

from buziz.storage.data_access import DataAccess
from buziz.storage.events import ChangeFeed


class BaseService:
    """
    Holds the data access layer and the change feed a service writes to.
    """

    def __init__(self, data_access: DataAccess, feed: Optional[ChangeFeed] = None):
        """
        Initialize the service.

        Args:
            data_access: Data access layer choosing the storage backend
            feed: Change feed notified after writes, optional
        """
        self.data_access = data_access
        self.feed = feed

    def publish(self, office_id: str, data_type: str, action: str, version: Optional[int] = None) -> None:
        if self.feed is None:
            return
        self.feed.publish(office_id, {
            "officeId": office_id,
            "type": data_type,
            "action": action,
            "version": version,
        })
