"""
Tests for clock-in/out and wage calculation
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException, status

from buziz.dependencies.storage import get_clock_service
from buziz.domains.clock.service import ClockService
from buziz.domains.employees.service import EmployeeService
from buziz.domains.offices.service import OfficeService
from buziz.main import app


class FakeClock:
    """Clock that only moves when told to"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def _setup_employee(data_access, pay_rate):
    async def _run():
        created = await OfficeService(data_access).create_office("user-1", "Olivia", "Cafe")
        employee = created["employee"]
        await EmployeeService(data_access).update_employee(employee["id"], {"payRate": pay_rate})
        return employee["id"], created["office"]["id"]

    return asyncio.run(_run())


def test_clock_out_computes_hours_and_wages(data_access):
    """Two hours at 20 per hour earns 40"""
    employee_id, office_id = _setup_employee(data_access, 20)
    clock = FakeClock(datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc))
    service = ClockService(data_access, clock=clock)

    async def _run():
        started = await service.clock_in(employee_id, office_id)
        clock.advance(hours=2)
        finished = await service.clock_out(employee_id, office_id)
        status_after = await service.get_clock_status(employee_id)
        history = await service.get_clock_history(office_id)
        return started, finished, status_after, history

    started, finished, status_after, history = asyncio.run(_run())

    assert started["clockEntry"]["clockIn"] == "2026-01-05T09:00:00.000Z"
    assert started["clockEntry"]["clockOut"] is None

    entry = finished["clockEntry"]
    assert entry["id"] == started["clockEntry"]["id"]
    assert entry["clockOut"] == "2026-01-05T11:00:00.000Z"
    assert entry["hoursWorked"] == 2.0
    assert entry["wagesEarned"] == 40.0

    assert status_after["activeClock"] is None
    assert len(history["clockHistory"]) == 1
    assert history["clockHistory"][0]["wagesEarned"] == 40.0


def test_wages_are_rounded(data_access):
    employee_id, office_id = _setup_employee(data_access, 15)
    clock = FakeClock(datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc))
    service = ClockService(data_access, clock=clock)

    async def _run():
        await service.clock_in(employee_id, office_id)
        clock.advance(minutes=50)
        return await service.clock_out(employee_id, office_id)

    entry = asyncio.run(_run())["clockEntry"]
    assert entry["hoursWorked"] == 0.83
    assert entry["wagesEarned"] == 12.5


def test_clock_out_without_clock_in(data_access):
    employee_id, office_id = _setup_employee(data_access, 20)
    service = ClockService(data_access)

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.clock_out(employee_id, office_id))

    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
    assert exc_info.value.detail == "No active clock-in found"


def test_double_clock_in_rejected(data_access):
    employee_id, office_id = _setup_employee(data_access, 20)
    service = ClockService(data_access)

    async def _run():
        await service.clock_in(employee_id, office_id)
        await service.clock_in(employee_id, office_id)

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(_run())

    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


def test_clock_routes(client, auth_headers, office, joined):
    office_id = office["office"]["id"]
    member_id = joined["employee"]["id"]
    body = {"employeeId": member_id, "officeId": office_id}

    response = client.post("/api/v1/clock/out", json=body, headers=auth_headers("user-member"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post("/api/v1/clock/in", json=body, headers=auth_headers("user-member"))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["clockEntry"]["employeeId"] == member_id

    response = client.get(f"/api/v1/clock/status/{member_id}", headers=auth_headers("user-owner"))
    assert response.json()["activeClock"]["employeeId"] == member_id

    response = client.post("/api/v1/clock/out", json=body, headers=auth_headers("user-member"))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["clockEntry"]["clockOut"] is not None

    response = client.get(f"/api/v1/clock/history/{office_id}", headers=auth_headers("user-owner"))
    assert len(response.json()["clockHistory"]) == 1


def test_members_cannot_clock_others(client, auth_headers, office, joined):
    body = {"employeeId": office["employee"]["id"], "officeId": office["office"]["id"]}
    response = client.post("/api/v1/clock/in", json=body, headers=auth_headers("user-member"))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    # The owner can clock in a member
    body = {"employeeId": joined["employee"]["id"], "officeId": office["office"]["id"]}
    response = client.post("/api/v1/clock/in", json=body, headers=auth_headers("user-owner"))
    assert response.status_code == status.HTTP_200_OK


def test_clock_history_passes_service_errors_through(client, auth_headers, office):
    class UnavailableClock:
        async def get_clock_history(self, office_id):
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable")

    app.dependency_overrides[get_clock_service] = lambda: UnavailableClock()
    response = client.get(f"/api/v1/clock/history/{office['office']['id']}", headers=auth_headers("user-owner"))

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
