"""
Schemas for generic office collections.
"""
from typing import Any, Dict, List, Optional

from buziz.schemas.base import CamelModel


class DataUpdate(CamelModel):
    """Full replacement of a collection."""
    data: List[Any]


class DataResponse(CamelModel):
    data: List[Any]
    version: int = 0


class DataWriteResponse(CamelModel):
    success: bool = True
    data: List[Any]
    version: int


class RecordWriteResponse(CamelModel):
    success: bool = True
    record: Optional[Dict[str, Any]] = None
    version: int
