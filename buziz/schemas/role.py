"""
Role schema models for validation.
"""
from typing import List, Optional

from pydantic import Field, field_validator

from buziz.core.permissions import CAPABILITIES
from buziz.schemas.base import CamelModel


def _validate_permissions(permissions: List[str]) -> List[str]:
    unknown = [p for p in permissions if p not in CAPABILITIES]
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(unknown)}")
    if "all" in permissions:
        return ["all"]
    return list(dict.fromkeys(permissions))


class RoleBase(CamelModel):
    """Base role schema with common fields."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: Optional[str] = "#4169E1"


class RoleCreate(RoleBase):
    """Schema for creating roles."""
    permissions: List[str] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a role name")
        return v

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v: List[str]) -> List[str]:
        return _validate_permissions(v)


class RoleUpdate(CamelModel):
    """Schema for updating roles."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    permissions: Optional[List[str]] = Field(default=None, min_length=1)

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _validate_permissions(v) if v is not None else v

    model_config = {
        "extra": "ignore"
    }


class RoleResponse(RoleBase):
    """Schema for role responses."""
    id: str
    office_id: Optional[str] = None
    permissions: List[str]
