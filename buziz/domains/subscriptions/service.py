"""
Subscription records created after a payment is captured.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from fastapi import HTTPException, status

from buziz.domains.base import BaseService
from buziz.storage import keys
from buziz.storage.backends import StorageBackend
from buziz.storage.data_access import DataAccess
from buziz.utils.datetime_handler import DateTimeHandler

logger = logging.getLogger(__name__)

TRIAL_DAYS = 14
BILLING_PERIOD_DAYS = 30

PLANS: Dict[str, Dict[str, Any]] = {
    "starter": {"name": "Starter", "price": 9, "hasTrial": True, "maxMembers": 10},
    "professional": {"name": "Professional", "price": 29, "hasTrial": False, "maxMembers": 50},
    "enterprise": {"name": "Enterprise", "price": 99, "hasTrial": False, "maxMembers": None},
}


class SubscriptionService(BaseService):
    """
    Stores the subscription a user bought.
    """

    def __init__(
            self,
            data_access: DataAccess,
            clock: Callable[[], datetime] = DateTimeHandler.get_current_datetime
    ):
        super().__init__(data_access)
        self.clock = clock

    async def get_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        async def operation(backend: StorageBackend) -> Optional[Dict[str, Any]]:
            return await backend.get(keys.subscription_key(user_id))

        return await self.data_access.run(operation, "get subscription")

    async def activate_subscription(self, user_id: str, plan: str, order_id: str) -> Dict[str, Any]:
        """
        Record a subscription for a captured payment order.

        Args:
            user_id: Paying user
            plan: Plan key
            order_id: Order ID returned by the payment provider

        Returns:
            Subscription record

        Raises:
            HTTPException: If the plan is unknown
        """
        details = PLANS.get(plan)
        if details is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown plan '{plan}'"
            )

        start = self.clock()
        trial_ends_at = start + timedelta(days=TRIAL_DAYS) if details["hasTrial"] else None
        next_billing = trial_ends_at or start + timedelta(days=BILLING_PERIOD_DAYS)

        subscription = {
            "plan": plan,
            "orderId": order_id,
            "status": "trial" if details["hasTrial"] else "active",
            "startDate": DateTimeHandler.to_iso(start),
            "trialEndsAt": DateTimeHandler.to_iso(trial_ends_at) if trial_ends_at else None,
            "nextBillingDate": DateTimeHandler.to_iso(next_billing),
            "amount": details["price"],
            "officeCount": 0,
        }

        async def operation(backend: StorageBackend) -> None:
            await backend.set(keys.subscription_key(user_id), subscription)

        await self.data_access.run(operation, "activate subscription")
        logger.info(f"Activated {plan} subscription for user {user_id} ({subscription['status']})")
        return subscription
