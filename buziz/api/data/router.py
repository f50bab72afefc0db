"""
Generic office collection routes.

Writes accept an optional ``If-Match`` header carrying the collection
version last read; a stale version is answered with 409.
"""
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Path, status
from pydantic import ValidationError

from buziz.dependencies.auth import get_office_member, get_shift_manager
from buziz.dependencies.storage import get_data_service, get_office_service
from buziz.domains.data.service import DATA_TYPE_PATTERN, SERVICE_OWNED_TYPES, DataService
from buziz.domains.offices.service import OfficeService
from buziz.schemas.data import DataResponse, DataUpdate, DataWriteResponse, RecordWriteResponse
from buziz.schemas.shift import RecurringPatternResponse

router = APIRouter()

DataType = Annotated[str, Path(pattern=DATA_TYPE_PATTERN, description="Collection type, e.g. shifts or tasks")]


def parse_if_match(if_match: Optional[str] = Header(default=None)) -> Optional[int]:
    """
    Read the expected collection version from the If-Match header.
    Quotes are stripped so both 3 and "3" are accepted.
    """
    if if_match is None:
        return None
    try:
        return int(if_match.strip().strip('"'))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="If-Match must be a collection version number"
        )


async def get_collection_writer(
        office_id: str,
        data_type: DataType,
        employee: Dict[str, Any] = Depends(get_office_member),
        office_service: OfficeService = Depends(get_office_service)
) -> Dict[str, Any]:
    """
    Dependency guarding generic collection writes.

    Employees, roles and clock history have dedicated routes that keep
    their invariants; recurring patterns need the manage_shifts capability.
    """
    if data_type in SERVICE_OWNED_TYPES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"'{data_type}' can only be changed through its own routes"
        )
    if data_type == "recurring-shifts":
        return await get_shift_manager(office_id, employee, office_service)
    return employee


def validate_patterns(data_type: str, records: List[Dict[str, Any]]) -> None:
    """Reject recurring patterns the shift expander could not use."""
    if data_type != "recurring-shifts":
        return
    try:
        for record in records:
            RecurringPatternResponse.model_validate(record)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid recurring pattern: {e.errors()[0]['msg']}"
        )


@router.get("/{office_id}/{data_type}", response_model=DataResponse)
async def get_data(
        office_id: str,
        data_type: DataType,
        employee: dict = Depends(get_office_member),
        data_service: DataService = Depends(get_data_service)
):
    """
    Get a whole collection. Collections never written return an empty list.
    """
    try:
        return await data_service.get_data(office_id, data_type)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching {data_type}: {str(e)}"
        )


@router.put("/{office_id}/{data_type}", response_model=DataWriteResponse)
async def update_data(
        office_id: str,
        data_type: DataType,
        payload: DataUpdate,
        expected_version: Optional[int] = Depends(parse_if_match),
        employee: dict = Depends(get_collection_writer),
        data_service: DataService = Depends(get_data_service)
):
    """
    Replace a whole collection.

    Args:
        office_id: Office ID
        payload: Full new collection
        data_type: Collection type
        expected_version: Version from If-Match, if sent

    Returns:
        Stored data and the new version

    Raises:
        HTTPException: 409 if the collection changed since the caller read it
    """
    try:
        validate_patterns(data_type, payload.data)
        return await data_service.update_data(office_id, data_type, payload.data, expected_version)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating {data_type}: {str(e)}"
        )


@router.post("/{office_id}/{data_type}", response_model=DataWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_data(
        office_id: str,
        data_type: DataType,
        record: Dict[str, Any] = Body(...),
        employee: dict = Depends(get_collection_writer),
        data_service: DataService = Depends(get_data_service)
):
    """
    Append one record to a collection.
    """
    try:
        validate_patterns(data_type, [record])
        return await data_service.create_data(office_id, data_type, record)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating {data_type} record: {str(e)}"
        )


@router.put("/{office_id}/{data_type}/{record_id}", response_model=RecordWriteResponse)
async def update_record(
        office_id: str,
        data_type: DataType,
        record_id: str,
        updates: Dict[str, Any] = Body(...),
        expected_version: Optional[int] = Depends(parse_if_match),
        employee: dict = Depends(get_collection_writer),
        data_service: DataService = Depends(get_data_service)
):
    """
    Merge fields into one record of a collection.
    """
    try:
        return await data_service.update_record(office_id, data_type, record_id, updates, expected_version)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating {data_type} record: {str(e)}"
        )


@router.delete("/{office_id}/{data_type}/{record_id}", response_model=RecordWriteResponse)
async def delete_record(
        office_id: str,
        data_type: DataType,
        record_id: str,
        expected_version: Optional[int] = Depends(parse_if_match),
        employee: dict = Depends(get_collection_writer),
        data_service: DataService = Depends(get_data_service)
):
    """
    Remove one record from a collection.
    """
    try:
        return await data_service.delete_record(office_id, data_type, record_id, expected_version)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting {data_type} record: {str(e)}"
        )
