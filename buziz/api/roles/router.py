"""
Role API routes.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from buziz.dependencies.auth import get_office_member, get_role_manager
from buziz.dependencies.storage import get_role_service
from buziz.domains.roles.service import RoleService
from buziz.schemas.role import RoleCreate, RoleResponse, RoleUpdate

router = APIRouter()


@router.get("/{office_id}", response_model=List[RoleResponse])
async def get_roles(
        office_id: str,
        employee: dict = Depends(get_office_member),
        role_service: RoleService = Depends(get_role_service)
):
    """
    Get all roles of an office.

    Args:
        office_id: Office ID
        employee: Caller's employee record

    Returns:
        List of roles
    """
    try:
        return await role_service.get_roles(office_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching roles: {str(e)}"
        )


@router.post("/{office_id}", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
        office_id: str,
        role_data: RoleCreate,
        employee: dict = Depends(get_role_manager),
        role_service: RoleService = Depends(get_role_service)
):
    """
    Create a new role.

    Args:
        office_id: Office ID
        role_data: Role creation data
        employee: Caller, who must be able to manage roles

    Returns:
        Created role

    Raises:
        HTTPException: If a role with the same name exists
    """
    try:
        return await role_service.create_role(office_id, role_data.model_dump(by_alias=True))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating role: {str(e)}"
        )


@router.put("/{office_id}/{role_id}", response_model=RoleResponse)
async def update_role(
        office_id: str,
        role_id: str,
        role_data: RoleUpdate,
        employee: dict = Depends(get_role_manager),
        role_service: RoleService = Depends(get_role_service)
):
    """
    Update a role.

    Args:
        office_id: Office ID
        role_id: Role ID
        role_data: Fields to change
        employee: Caller, who must be able to manage roles

    Returns:
        Updated role

    Raises:
        HTTPException: If the role is not found or the change is not allowed
    """
    try:
        updated_role = await role_service.update_role(
            office_id, role_id, role_data.model_dump(by_alias=True, exclude_unset=True)
        )
        if not updated_role:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Role not found"
            )
        return updated_role
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating role: {str(e)}"
        )


@router.delete("/{office_id}/{role_id}", response_model=Dict[str, Any])
async def delete_role(
        office_id: str,
        role_id: str,
        employee: dict = Depends(get_role_manager),
        role_service: RoleService = Depends(get_role_service)
):
    """
    Delete a role that no employee holds.

    Args:
        office_id: Office ID
        role_id: Role ID
        employee: Caller, who must be able to manage roles

    Returns:
        Success message

    Raises:
        HTTPException: If the role is not found, is the Owner role or is in use
    """
    try:
        deleted = await role_service.delete_role(office_id, role_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Role not found"
            )
        return {"message": "Role deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting role: {str(e)}"
        )
