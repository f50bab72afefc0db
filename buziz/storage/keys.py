"""
Storage key layout.
"""


def office_key(office_id: str) -> str:
    return f"office:{office_id}"


def collection_key(office_id: str, data_type: str) -> str:
    return f"office:{office_id}:{data_type}"


def version_key(office_id: str, data_type: str) -> str:
    return f"office:{office_id}:{data_type}:version"


def employee_key(employee_id: str) -> str:
    return f"employee:{employee_id}"


def active_clock_key(employee_id: str) -> str:
    return f"employee:{employee_id}:active-clock"


def membership_prefix(user_id: str) -> str:
    return f"user:{user_id}:employee:"


def membership_key(user_id: str, office_id: str) -> str:
    return f"{membership_prefix(user_id)}{office_id}"


def current_office_key(user_id: str) -> str:
    return f"buziz:current-office:{user_id}"


def subscription_key(user_id: str) -> str:
    return f"buziz:subscription:{user_id}"


def is_office_record_key(key: str) -> bool:
    """True for ``office:{id}`` and False for any of its sub-keys."""
    return key.startswith("office:") and key.count(":") == 1
