"""
Subscription routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from buziz.dependencies.auth import get_current_user_id
from buziz.dependencies.storage import get_subscription_service
from buziz.domains.subscriptions.service import SubscriptionService
from buziz.schemas.subscription import SubscriptionCreate, SubscriptionResponse

router = APIRouter()


@router.get("", response_model=Optional[SubscriptionResponse])
async def get_subscription(
        user_id: str = Depends(get_current_user_id),
        subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """Get the caller's subscription, or null if they never subscribed."""
    return await subscription_service.get_subscription(user_id)


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def activate_subscription(
        subscription_data: SubscriptionCreate,
        user_id: str = Depends(get_current_user_id),
        subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Record a subscription after the payment provider captured the order.

    Args:
        subscription_data: Plan and order ID
        user_id: Current user from token

    Returns:
        Subscription record
    """
    try:
        return await subscription_service.activate_subscription(
            user_id, subscription_data.plan, subscription_data.order_id
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error activating subscription: {str(e)}"
        )
