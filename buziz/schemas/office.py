"""
Office and employee schema models for validation.
"""
from typing import List, Optional

from pydantic import Field, field_validator

from buziz.schemas.base import CamelModel
from buziz.schemas.role import RoleResponse


class OfficeCreate(CamelModel):
    """Schema for creating an office."""
    name: str = Field(..., min_length=1, description="Creator's display name")
    office_name: str = Field(..., min_length=1)


class OfficeJoin(CamelModel):
    """Schema for joining an office by code."""
    office_code: str
    name: str = Field(..., min_length=1)

    @field_validator("office_code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 6 or not v.isalnum():
            raise ValueError("Office code must be 6 letters or digits")
        return v


class OfficeUpdate(CamelModel):
    """Schema for renaming an office."""
    name: str = Field(..., min_length=1)


class CurrentOfficeUpdate(CamelModel):
    office_id: str


class OfficeResponse(CamelModel):
    id: str
    code: str
    creator_id: str
    name: str


class EmployeeResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    office_id: Optional[str] = None
    name: str
    employee_number: str
    role: str
    is_creator: bool = False
    is_head_manager: bool = False
    pay_rate: float = 0


class EmployeeUpdate(CamelModel):
    """Schema for updating employees."""
    name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = None
    is_head_manager: Optional[bool] = None
    pay_rate: Optional[float] = None

    @field_validator("pay_rate")
    @classmethod
    def validate_pay_rate(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Pay rate must not be negative")
        return v

    model_config = {
        "extra": "ignore"
    }


class EmployeeUpdateResponse(CamelModel):
    employee: EmployeeResponse
    employees: List[EmployeeResponse]


class OfficeCreateResponse(CamelModel):
    office: OfficeResponse
    employee: EmployeeResponse
    roles: List[RoleResponse]


class OfficeDetails(CamelModel):
    office: OfficeResponse
    employees: List[EmployeeResponse]
    roles: List[RoleResponse]


class OfficeMembership(OfficeDetails):
    employee: EmployeeResponse


class UserOfficesResponse(CamelModel):
    offices: List[OfficeMembership]
