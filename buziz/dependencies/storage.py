# buziz/dependencies/storage.py
import logging

from fastapi import Depends, Request

from buziz.core.config import settings
from buziz.db.local_store import LocalStore
from buziz.domains.clock.service import ClockService
from buziz.domains.data.service import DataService
from buziz.domains.employees.service import EmployeeService
from buziz.domains.offices.service import OfficeService
from buziz.domains.roles.service import RoleService
from buziz.domains.shifts.service import ShiftService
from buziz.domains.subscriptions.service import SubscriptionService
from buziz.storage.backends import LocalBackend, RemoteBackend
from buziz.storage.data_access import DataAccess
from buziz.storage.events import ChangeFeed

logger = logging.getLogger(__name__)


def build_data_access() -> DataAccess:
    """
    Build the data access layer from settings.
    """
    local = LocalBackend(LocalStore(settings.LOCAL_STORAGE_PATH or None))
    remote = RemoteBackend() if settings.STORAGE_MODE != "local" else None
    return DataAccess(remote=remote, local=local, mode=settings.STORAGE_MODE)


def get_data_access(request: Request) -> DataAccess:
    return request.app.state.data_access


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def get_office_service(
        data_access: DataAccess = Depends(get_data_access),
        feed: ChangeFeed = Depends(get_change_feed)
) -> OfficeService:
    return OfficeService(data_access, feed)


def get_employee_service(
        data_access: DataAccess = Depends(get_data_access),
        feed: ChangeFeed = Depends(get_change_feed)
) -> EmployeeService:
    return EmployeeService(data_access, feed)


def get_role_service(
        data_access: DataAccess = Depends(get_data_access),
        feed: ChangeFeed = Depends(get_change_feed)
) -> RoleService:
    return RoleService(data_access, feed)


def get_clock_service(
        data_access: DataAccess = Depends(get_data_access),
        feed: ChangeFeed = Depends(get_change_feed)
) -> ClockService:
    return ClockService(data_access, feed)


def get_data_service(
        data_access: DataAccess = Depends(get_data_access),
        feed: ChangeFeed = Depends(get_change_feed)
) -> DataService:
    return DataService(data_access, feed)


def get_shift_service(
        data_access: DataAccess = Depends(get_data_access),
        feed: ChangeFeed = Depends(get_change_feed)
) -> ShiftService:
    return ShiftService(data_access, feed)


def get_subscription_service(data_access: DataAccess = Depends(get_data_access)) -> SubscriptionService:
    return SubscriptionService(data_access)
