"""
Office API routes for creating, joining and inspecting offices.
"""
import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from buziz.dependencies.auth import get_current_user_id, get_office_member
from buziz.dependencies.storage import get_change_feed, get_office_service
from buziz.domains.offices.service import OfficeService
from buziz.schemas.office import (
    CurrentOfficeUpdate, OfficeCreate, OfficeCreateResponse, OfficeDetails,
    OfficeJoin, OfficeMembership, OfficeResponse, OfficeUpdate, UserOfficesResponse
)
from buziz.storage.events import ChangeFeed

router = APIRouter()

# Idle seconds between keep-alive comments on the event stream
HEARTBEAT_SECONDS = 15.0


@router.post("", response_model=OfficeCreateResponse)
async def create_office(
        office_data: OfficeCreate,
        user_id: str = Depends(get_current_user_id),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Create a new office owned by the caller.

    Args:
        office_data: Creator name and office name
        user_id: Current user from token

    Returns:
        Office, creator employee and default roles
    """
    try:
        return await office_service.create_office(user_id, office_data.name, office_data.office_name)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating office: {str(e)}"
        )


@router.get("", response_model=UserOfficesResponse)
async def get_user_offices(
        user_id: str = Depends(get_current_user_id),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Get every office the caller belongs to.
    """
    try:
        return await office_service.get_user_offices(user_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching offices: {str(e)}"
        )


@router.post("/join", response_model=OfficeMembership)
async def join_office(
        join_data: OfficeJoin,
        user_id: str = Depends(get_current_user_id),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Join an office by its 6-character code.

    Args:
        join_data: Office code and display name
        user_id: Current user from token

    Returns:
        Office, new employee, all employees and roles

    Raises:
        HTTPException: If the code matches no office or the caller is already a member
    """
    try:
        return await office_service.join_office(user_id, join_data.office_code, join_data.name)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error joining office: {str(e)}"
        )


@router.get("/current", response_model=Dict[str, Any])
async def get_current_office(
        user_id: str = Depends(get_current_user_id),
        office_service: OfficeService = Depends(get_office_service)
):
    """Get the office the caller last created, joined or selected."""
    return {"officeId": await office_service.get_current_office(user_id)}


@router.put("/current", response_model=Dict[str, Any])
async def set_current_office(
        selection: CurrentOfficeUpdate,
        user_id: str = Depends(get_current_user_id),
        office_service: OfficeService = Depends(get_office_service)
):
    """Select the office the caller is working in."""
    return {"officeId": await office_service.set_current_office(user_id, selection.office_id)}


@router.get("/{office_id}", response_model=OfficeDetails)
async def get_office(
        office_id: str,
        employee: dict = Depends(get_office_member),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Get an office with its employees and roles.

    Args:
        office_id: Office ID
        employee: Caller's employee record in the office

    Returns:
        Office details
    """
    try:
        return await office_service.get_office(office_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching office: {str(e)}"
        )


@router.patch("/{office_id}", response_model=OfficeResponse)
async def rename_office(
        office_id: str,
        office_data: OfficeUpdate,
        employee: dict = Depends(get_office_member),
        office_service: OfficeService = Depends(get_office_service)
):
    """
    Rename an office. Only the creator or a head manager may do this.
    """
    if not (employee.get("isCreator") or employee.get("isHeadManager")):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only creators and head managers can rename the office"
        )

    try:
        return await office_service.update_office_name(office_id, office_data.name)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating office: {str(e)}"
        )


@router.get("/{office_id}/events")
async def stream_office_events(
        office_id: str,
        request: Request,
        employee: dict = Depends(get_office_member),
        feed: ChangeFeed = Depends(get_change_feed)
):
    """
    Stream change events for an office as Server-Sent Events.

    A keep-alive comment is sent when the office is idle, which is also when
    a closed connection gets noticed and the subscription released.
    """
    async def event_stream():
        events = feed.subscribe(office_id, heartbeat=HEARTBEAT_SECONDS)
        try:
            async for event in events:
                if await request.is_disconnected():
                    break
                if event is None:
                    yield ": keep-alive\n\n"
                else:
                    yield f"data: {json.dumps(event)}\n\n"
        finally:
            await events.aclose()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"}
    )
