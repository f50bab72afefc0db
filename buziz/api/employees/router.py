"""
Employee API routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from buziz.core.permissions import can_manage_staff
from buziz.dependencies.auth import get_current_user_id
from buziz.dependencies.storage import get_employee_service, get_office_service
from buziz.domains.employees.service import EmployeeService
from buziz.domains.offices.service import OfficeService
from buziz.schemas.office import EmployeeUpdate, EmployeeUpdateResponse

router = APIRouter()


@router.put("/{employee_id}", response_model=EmployeeUpdateResponse)
async def update_employee(
        employee_id: str,
        employee_data: EmployeeUpdate,
        user_id: str = Depends(get_current_user_id),
        employee_service: EmployeeService = Depends(get_employee_service),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Update an employee's name, role, head manager flag or pay rate.

    Employees may edit their own name. Every other change needs the
    creator, a head manager or the manage_staff capability, and only the
    creator or a head manager may grant or revoke head manager status.

    Args:
        employee_id: Employee ID
        employee_data: Fields to change
        user_id: Current user from token

    Returns:
        Updated employee and the office employee list

    Raises:
        HTTPException: If the employee is not found or the caller lacks permission
    """
    try:
        employee = await employee_service.get_employee(employee_id)
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )

        office_id = employee["officeId"]
        caller = await office_service.get_member(user_id, office_id)
        if caller is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not a member of this office"
            )

        updates = employee_data.model_dump(by_alias=True, exclude_none=True)
        editing_self = caller["id"] == employee_id and set(updates) <= {"name"}
        if not editing_self:
            details = await office_service.get_office(office_id)
            if not can_manage_staff(caller, details["roles"]):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Not enough permissions to update this employee"
                )
            if "isHeadManager" in updates and not (caller.get("isCreator") or caller.get("isHeadManager")):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Only the creator or a head manager can change head manager status"
                )

        return await employee_service.update_employee(employee_id, updates)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating employee: {str(e)}"
        )
