"""
Subscription schema models for validation.
"""
from typing import Literal, Optional

from pydantic import Field

from buziz.schemas.base import CamelModel


class SubscriptionCreate(CamelModel):
    plan: Literal["starter", "professional", "enterprise"]
    order_id: str = Field(..., min_length=1)


class SubscriptionResponse(CamelModel):
    plan: str
    order_id: str
    status: str
    start_date: str
    trial_ends_at: Optional[str] = None
    next_billing_date: str
    amount: float
    office_count: int = 0
