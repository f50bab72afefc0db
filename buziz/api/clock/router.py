"""
Clock-in/out API routes.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from buziz.core.permissions import can_manage_staff
from buziz.dependencies.auth import get_current_user_id, get_office_member
from buziz.dependencies.storage import get_clock_service, get_employee_service, get_office_service
from buziz.domains.clock.service import ClockService
from buziz.domains.employees.service import EmployeeService
from buziz.domains.offices.service import OfficeService
from buziz.schemas.clock import ClockEntryResponse, ClockHistoryResponse, ClockRequest, ClockStatusResponse

router = APIRouter()


async def _authorize_clock(
        user_id: str,
        employee_id: str,
        office_id: str,
        office_service: OfficeService
) -> Dict[str, Any]:
    """
    Allow employees to clock themselves, and staff managers to clock anyone
    in their office.
    """
    caller = await office_service.get_member(user_id, office_id)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this office"
        )
    if caller["id"] == employee_id:
        return caller

    details = await office_service.get_office(office_id)
    if not any(e.get("id") == employee_id for e in details["employees"]):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found"
        )
    if not can_manage_staff(caller, details["roles"]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions to clock this employee"
        )
    return caller


@router.post("/in", response_model=ClockEntryResponse)
async def clock_in(
        clock_data: ClockRequest,
        user_id: str = Depends(get_current_user_id),
        clock_service: ClockService = Depends(get_clock_service),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Clock an employee in.

    Args:
        clock_data: Employee and office IDs
        user_id: Current user from token

    Returns:
        The open clock entry

    Raises:
        HTTPException: If the employee is already clocked in
    """
    await _authorize_clock(user_id, clock_data.employee_id, clock_data.office_id, office_service)

    try:
        return await clock_service.clock_in(clock_data.employee_id, clock_data.office_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error clocking in: {str(e)}"
        )


@router.post("/out", response_model=ClockEntryResponse)
async def clock_out(
        clock_data: ClockRequest,
        user_id: str = Depends(get_current_user_id),
        clock_service: ClockService = Depends(get_clock_service),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Clock an employee out and record hours and wages.

    Args:
        clock_data: Employee and office IDs
        user_id: Current user from token

    Returns:
        The completed clock entry

    Raises:
        HTTPException: If there is no active clock-in
    """
    await _authorize_clock(user_id, clock_data.employee_id, clock_data.office_id, office_service)

    try:
        return await clock_service.clock_out(clock_data.employee_id, clock_data.office_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error clocking out: {str(e)}"
        )


@router.get("/status/{employee_id}", response_model=ClockStatusResponse)
async def get_clock_status(
        employee_id: str,
        user_id: str = Depends(get_current_user_id),
        clock_service: ClockService = Depends(get_clock_service),
        employee_service: EmployeeService = Depends(get_employee_service),
        office_service: OfficeService = Depends(get_office_service)
):
    """Get the employee's open clock entry, if any."""
    employee = await employee_service.get_employee(employee_id)
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found"
        )
    if await office_service.get_member(user_id, employee["officeId"]) is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this office"
        )

    return await clock_service.get_clock_status(employee_id)


@router.get("/history/{office_id}", response_model=ClockHistoryResponse)
async def get_clock_history(
        office_id: str,
        employee: dict = Depends(get_office_member),
        clock_service: ClockService = Depends(get_clock_service)
):
    """Get every clock entry of an office, oldest first."""
    try:
        return await clock_service.get_clock_history(office_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching clock history: {str(e)}"
        )
