"""
Office capability strings and default roles.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class Capability(str, Enum):
    """Capabilities a role can grant within an office"""
    ALL = "all"
    MANAGE_ROLES = "manage_roles"
    MANAGE_STAFF = "manage_staff"
    MANAGE_SHIFTS = "manage_shifts"
    VIEW_SHIFTS = "view_shifts"
    MANAGE_TASKS = "manage_tasks"
    VIEW_TASKS = "view_tasks"
    MANAGE_INVENTORY = "manage_inventory"
    VIEW_INVENTORY = "view_inventory"
    MANAGE_SUPPLIERS = "manage_suppliers"
    MANAGE_MEETINGS = "manage_meetings"
    VIEW_REPORTS = "view_reports"
    MANAGE_ANNOUNCEMENTS = "manage_announcements"
    CLOCK_IN_OUT = "clock_in_out"


CAPABILITIES = [capability.value for capability in Capability]

OWNER_ROLE = "Owner"
DEFAULT_MEMBER_ROLE = "Cashier"

# Roles every new office starts with
DEFAULT_ROLES: List[Dict[str, Any]] = [
    {
        "name": OWNER_ROLE,
        "permissions": [Capability.ALL.value],
        "color": "#FFD700",
    },
    {
        "name": "Manager",
        "permissions": [
            Capability.MANAGE_SHIFTS.value,
            Capability.MANAGE_TASKS.value,
            Capability.VIEW_INVENTORY.value,
        ],
        "color": "#4169E1",
    },
    {
        "name": DEFAULT_MEMBER_ROLE,
        "permissions": [Capability.VIEW_SHIFTS.value, Capability.VIEW_TASKS.value],
        "color": "#32CD32",
    },
    {
        "name": "Technician",
        "permissions": [Capability.VIEW_SHIFTS.value, Capability.MANAGE_TASKS.value],
        "color": "#FF4500",
    },
]


def has_capability(permissions: Iterable[str], capability: str) -> bool:
    """
    Check whether a permission set grants a capability.

    Args:
        permissions: Capability strings held by a role
        capability: Capability to check

    Returns:
        True on an exact match or when the set holds the "all" wildcard
    """
    permissions = set(permissions or [])
    return Capability.ALL.value in permissions or capability in permissions


def employee_permissions(employee: Dict[str, Any], roles: List[Dict[str, Any]]) -> List[str]:
    """
    Resolve an employee's permissions through their role name.

    Args:
        employee: Employee record
        roles: Office roles

    Returns:
        Permissions of the matching role, or an empty list
    """
    role = find_role_by_name(roles, employee.get("role"))
    return list(role.get("permissions", [])) if role else []


def find_role_by_name(roles: List[Dict[str, Any]], name: Optional[str]) -> Optional[Dict[str, Any]]:
    for role in roles:
        if role.get("name") == name:
            return role
    return None


def _is_privileged(employee: Dict[str, Any], roles: List[Dict[str, Any]], capability: Capability) -> bool:
    if employee.get("isCreator") or employee.get("isHeadManager"):
        return True
    return has_capability(employee_permissions(employee, roles), capability.value)


def can_manage_roles(employee: Dict[str, Any], roles: List[Dict[str, Any]]) -> bool:
    """Creators, head managers and holders of manage_roles may edit roles."""
    return _is_privileged(employee, roles, Capability.MANAGE_ROLES)


def can_manage_staff(employee: Dict[str, Any], roles: List[Dict[str, Any]]) -> bool:
    """Creators, head managers and holders of manage_staff may edit other employees."""
    return _is_privileged(employee, roles, Capability.MANAGE_STAFF)


def can_manage_shifts(employee: Dict[str, Any], roles: List[Dict[str, Any]]) -> bool:
    return _is_privileged(employee, roles, Capability.MANAGE_SHIFTS)
