# buziz/dependencies/auth.py
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from buziz.core.permissions import can_manage_roles, can_manage_shifts
from buziz.core.security import bearer_scheme, decode_access_token
from buziz.dependencies.storage import get_office_service
from buziz.domains.offices.service import OfficeService


async def get_current_user_id(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """
    Get the authenticated user id from the bearer token
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


async def get_office_member(
        office_id: str,
        user_id: str = Depends(get_current_user_id),
        office_service: OfficeService = Depends(get_office_service)
) -> Dict[str, Any]:
    """
    Dependency requiring the caller to be an employee of the office in the path
    """
    employee = await office_service.get_member(user_id, office_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this office",
        )
    return employee


async def get_role_manager(
        office_id: str,
        employee: Dict[str, Any] = Depends(get_office_member),
        office_service: OfficeService = Depends(get_office_service)
) -> Dict[str, Any]:
    """
    Dependency requiring the caller to be allowed to manage roles
    """
    details = await office_service.get_office(office_id)
    if not can_manage_roles(employee, details["roles"]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only creators and head managers can manage roles",
        )
    return employee


async def get_shift_manager(
        office_id: str,
        employee: Dict[str, Any] = Depends(get_office_member),
        office_service: OfficeService = Depends(get_office_service)
) -> Dict[str, Any]:
    """
    Dependency requiring the caller to be allowed to manage shifts
    """
    details = await office_service.get_office(office_id)
    if not can_manage_shifts(employee, details["roles"]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions to manage shifts",
        )
    return employee
