"""
Tests for subscriptions
"""
import asyncio
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException, status

from buziz.domains.subscriptions.service import SubscriptionService

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_starter_plan_starts_a_trial(data_access):
    service = SubscriptionService(data_access, clock=lambda: START)
    subscription = asyncio.run(service.activate_subscription("user-1", "starter", "ORDER-1"))

    assert subscription["status"] == "trial"
    assert subscription["amount"] == 9
    assert subscription["startDate"] == "2026-03-01T12:00:00.000Z"
    assert subscription["trialEndsAt"] == "2026-03-15T12:00:00.000Z"
    assert subscription["nextBillingDate"] == subscription["trialEndsAt"]
    assert asyncio.run(service.get_subscription("user-1")) == subscription


def test_paid_plan_is_active_immediately(data_access):
    service = SubscriptionService(data_access, clock=lambda: START)
    subscription = asyncio.run(service.activate_subscription("user-1", "professional", "ORDER-2"))

    assert subscription["status"] == "active"
    assert subscription["trialEndsAt"] is None
    assert subscription["nextBillingDate"] == "2026-03-31T12:00:00.000Z"


def test_unknown_plan(data_access):
    service = SubscriptionService(data_access)
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.activate_subscription("user-1", "platinum", "ORDER-3"))
    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


def test_subscription_routes(client, auth_headers):
    headers = auth_headers("user-1")

    response = client.get("/api/v1/subscription", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None

    response = client.post(
        "/api/v1/subscription",
        json={"plan": "enterprise", "orderId": "ORDER-4"},
        headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["plan"] == "enterprise"
    assert response.json()["amount"] == 99

    # Subscriptions belong to the user who bought them
    response = client.get("/api/v1/subscription", headers=auth_headers("user-2"))
    assert response.json() is None
