"""
Recurring shift pattern routes.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from buziz.dependencies.auth import get_office_member, get_shift_manager
from buziz.dependencies.storage import get_shift_service
from buziz.domains.shifts.service import ShiftService
from buziz.schemas.shift import GenerateShiftsRequest, RecurringPatternCreate, RecurringPatternResponse

router = APIRouter()


@router.get("/{office_id}/patterns", response_model=List[RecurringPatternResponse])
async def get_patterns(
        office_id: str,
        employee: dict = Depends(get_office_member),
        shift_service: ShiftService = Depends(get_shift_service)
):
    """Get every recurring pattern of an office."""
    try:
        return await shift_service.get_patterns(office_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching recurring patterns: {str(e)}"
        )


@router.post("/{office_id}/patterns", response_model=RecurringPatternResponse, status_code=status.HTTP_201_CREATED)
async def create_pattern(
        office_id: str,
        pattern_data: RecurringPatternCreate,
        employee: dict = Depends(get_shift_manager),
        shift_service: ShiftService = Depends(get_shift_service)
):
    """
    Create a recurring pattern. Shifts are materialized by the generate route.

    Args:
        office_id: Office ID
        pattern_data: Pattern fields
        employee: Caller, who must be able to manage shifts

    Returns:
        Created pattern
    """
    try:
        return await shift_service.create_pattern(
            office_id, pattern_data.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating recurring pattern: {str(e)}"
        )


@router.delete("/{office_id}/patterns/{pattern_id}", response_model=Dict[str, Any])
async def delete_pattern(
        office_id: str,
        pattern_id: str,
        remove_future_shifts: bool = Query(False, alias="removeFutureShifts"),
        employee: dict = Depends(get_shift_manager),
        shift_service: ShiftService = Depends(get_shift_service)
):
    """
    Delete a recurring pattern, optionally removing the future shifts it made.
    """
    try:
        return await shift_service.delete_pattern(office_id, pattern_id, remove_future_shifts)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting recurring pattern: {str(e)}"
        )


@router.post("/{office_id}/generate", response_model=Dict[str, Any])
async def generate_recurring_shifts(
        office_id: str,
        generate_data: Optional[GenerateShiftsRequest] = None,
        employee: dict = Depends(get_office_member),
        shift_service: ShiftService = Depends(get_shift_service)
):
    """
    Materialize recurring patterns into concrete shifts.

    Any member may trigger generation; it only adds shifts that are
    missing, so running it repeatedly is harmless.

    Args:
        office_id: Office ID
        generate_data: Optional reference date and horizon

    Returns:
        Generated shifts, their count and the shifts collection version
    """
    generate_data = generate_data or GenerateShiftsRequest()
    try:
        return await shift_service.generate_recurring_shifts(office_id, generate_data.today, generate_data.horizon_days)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generating recurring shifts: {str(e)}"
        )
