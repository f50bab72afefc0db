"""
Tests for generic office collections
"""
import asyncio

from fastapi import status

from buziz.domains.data.service import DataService


def test_get_data_defaults_to_empty(data_access):
    result = asyncio.run(DataService(data_access).get_data("no-such-office", "tasks"))
    assert result == {"data": [], "version": 0}


def test_replace_and_read_collection(client, auth_headers, office):
    office_id = office["office"]["id"]
    headers = auth_headers("user-owner")

    response = client.get(f"/api/v1/data/{office_id}/tasks", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"data": [], "version": 0}

    tasks = [{"id": "t1", "title": "Restock cups"}, {"id": "t2", "title": "Clean machine"}]
    response = client.put(f"/api/v1/data/{office_id}/tasks", json={"data": tasks}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["version"] == 1

    response = client.get(f"/api/v1/data/{office_id}/tasks", headers=headers)
    assert response.json() == {"data": tasks, "version": 1}


def test_stale_if_match_is_rejected(client, auth_headers, office):
    office_id = office["office"]["id"]
    headers = auth_headers("user-owner")

    client.put(f"/api/v1/data/{office_id}/inventory", json={"data": [{"id": "a"}]}, headers=headers)

    response = client.put(
        f"/api/v1/data/{office_id}/inventory",
        json={"data": [{"id": "b"}]},
        headers={**headers, "If-Match": "1"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["version"] == 2

    # A writer still holding version 1 loses
    response = client.put(
        f"/api/v1/data/{office_id}/inventory",
        json={"data": [{"id": "c"}]},
        headers={**headers, "If-Match": "1"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.get(f"/api/v1/data/{office_id}/inventory", headers=headers)
    assert response.json() == {"data": [{"id": "b"}], "version": 2}


def test_malformed_if_match(client, auth_headers, office):
    office_id = office["office"]["id"]
    response = client.put(
        f"/api/v1/data/{office_id}/tasks",
        json={"data": []},
        headers={**auth_headers("user-owner"), "If-Match": "latest"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_record_routes(client, auth_headers, office):
    office_id = office["office"]["id"]
    headers = auth_headers("user-owner")

    response = client.post(f"/api/v1/data/{office_id}/suppliers", json={"name": "Bean Co"}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    record_id = response.json()["data"][0]["id"]
    assert record_id

    response = client.put(
        f"/api/v1/data/{office_id}/suppliers/{record_id}",
        json={"phone": "555-0100", "id": "ignored"},
        headers=headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["record"] == {"id": record_id, "name": "Bean Co", "phone": "555-0100"}

    response = client.delete(f"/api/v1/data/{office_id}/suppliers/missing", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.delete(f"/api/v1/data/{office_id}/suppliers/{record_id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["version"] == 3

    response = client.get(f"/api/v1/data/{office_id}/suppliers", headers=headers)
    assert response.json()["data"] == []


def test_invalid_data_type(client, auth_headers, office):
    office_id = office["office"]["id"]
    response = client.get(f"/api/v1/data/{office_id}/Bad_Type", headers=auth_headers("user-owner"))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_data_requires_membership(client, auth_headers, office):
    office_id = office["office"]["id"]
    response = client.get(f"/api/v1/data/{office_id}/tasks", headers=auth_headers("user-stranger"))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_service_owned_collections_are_read_only(client, auth_headers, office, joined):
    office_id = office["office"]["id"]
    member = auth_headers("user-member")
    owner = auth_headers("user-owner")
    owner_role_id = next(r["id"] for r in office["roles"] if r["name"] == "Owner")

    response = client.delete(f"/api/v1/data/{office_id}/roles/{owner_role_id}", headers=member)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.put(
        f"/api/v1/data/{office_id}/employees",
        json={"data": [{"id": joined["employee"]["id"], "role": "Owner", "isHeadManager": True}]},
        headers=member
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    # Not even the owner may bypass the dedicated routes
    response = client.post(f"/api/v1/data/{office_id}/clock-history", json={"employeeId": "x"}, headers=owner)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.put(
        f"/api/v1/data/{office_id}/roles/{owner_role_id}",
        json={"permissions": ["view_shifts"]},
        headers=owner
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.get(f"/api/v1/roles/{office_id}", headers=owner)
    assert len(response.json()) == 4
    assert any(r["name"] == "Owner" and r["permissions"] == ["all"] for r in response.json())

    # Reads still work
    response = client.get(f"/api/v1/data/{office_id}/employees", headers=member)
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()["data"]) == 2


def test_recurring_shifts_need_shift_managers(client, auth_headers, office, joined):
    office_id = office["office"]["id"]
    pattern = {
        "id": "p1",
        "title": "Opening",
        "startTime": "07:00",
        "endTime": "11:00",
        "assignedTo": joined["employee"]["id"],
        "daysOfWeek": [1],
        "startDate": "2026-01-05",
    }

    response = client.put(
        f"/api/v1/data/{office_id}/recurring-shifts",
        json={"data": [pattern]},
        headers=auth_headers("user-member")
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post(
        f"/api/v1/data/{office_id}/recurring-shifts",
        json=pattern,
        headers=auth_headers("user-member")
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.put(
        f"/api/v1/data/{office_id}/recurring-shifts",
        json={"data": [pattern]},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_200_OK

    # Other collections stay open to every member
    response = client.post(f"/api/v1/data/{office_id}/tasks", json={"title": "Mop"}, headers=auth_headers("user-member"))
    assert response.status_code == status.HTTP_201_CREATED


def test_malformed_recurring_shifts_are_rejected(client, auth_headers, office):
    office_id = office["office"]["id"]
    headers = auth_headers("user-owner")

    response = client.put(
        f"/api/v1/data/{office_id}/recurring-shifts",
        json={"data": [{"id": "p1", "daysOfWeek": ["mon"], "startDate": 5}]},
        headers=headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = client.post(f"/api/v1/data/{office_id}/recurring-shifts", json={"title": "x"}, headers=headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = client.get(f"/api/v1/data/{office_id}/recurring-shifts", headers=headers)
    assert response.json() == {"data": [], "version": 0}
