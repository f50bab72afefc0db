"""
Tests for office roles
"""
from fastapi import HTTPException, status

from buziz.core.permissions import can_manage_roles, can_manage_shifts, has_capability
from buziz.dependencies.storage import get_role_service
from buziz.main import app


def _role_id(office, name):
    return next(r["id"] for r in office["roles"] if r["name"] == name)


def test_list_roles(client, auth_headers, office, joined):
    office_id = office["office"]["id"]
    response = client.get(f"/api/v1/roles/{office_id}", headers=auth_headers("user-member"))
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 4


def test_create_role(client, auth_headers, office):
    office_id = office["office"]["id"]
    response = client.post(
        f"/api/v1/roles/{office_id}",
        json={"name": "Barista", "permissions": ["view_shifts", "clock_in_out"], "color": "#8B4513"},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_201_CREATED
    role = response.json()
    assert role["name"] == "Barista"
    assert role["permissions"] == ["view_shifts", "clock_in_out"]
    assert role["officeId"] == office_id

    response = client.post(
        f"/api/v1/roles/{office_id}",
        json={"name": "Barista", "permissions": ["view_shifts"]},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_role_validation(client, auth_headers, office):
    office_id = office["office"]["id"]

    response = client.post(
        f"/api/v1/roles/{office_id}",
        json={"name": "Empty", "permissions": []},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = client.post(
        f"/api/v1/roles/{office_id}",
        json={"name": "Hacker", "permissions": ["launch_rockets"]},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_members_cannot_manage_roles(client, auth_headers, office, joined):
    office_id = office["office"]["id"]
    response = client.post(
        f"/api/v1/roles/{office_id}",
        json={"name": "Boss", "permissions": ["all"]},
        headers=auth_headers("user-member")
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_owner_role_is_protected(client, auth_headers, office):
    office_id = office["office"]["id"]
    owner_id = _role_id(office, "Owner")

    response = client.delete(f"/api/v1/roles/{office_id}/{owner_id}", headers=auth_headers("user-owner"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(
        f"/api/v1/roles/{office_id}/{owner_id}",
        json={"name": "Boss"},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(
        f"/api/v1/roles/{office_id}/{owner_id}",
        json={"color": "#000000"},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["color"] == "#000000"


def test_role_in_use_cannot_be_deleted(client, auth_headers, office, joined):
    office_id = office["office"]["id"]
    cashier_id = _role_id(office, "Cashier")

    response = client.delete(f"/api/v1/roles/{office_id}/{cashier_id}", headers=auth_headers("user-owner"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "1 employee(s)" in response.json()["detail"]

    client.put(
        f"/api/v1/employees/{joined['employee']['id']}",
        json={"role": "Manager"},
        headers=auth_headers("user-owner")
    )

    response = client.delete(f"/api/v1/roles/{office_id}/{cashier_id}", headers=auth_headers("user-owner"))
    assert response.status_code == status.HTTP_200_OK

    response = client.get(f"/api/v1/roles/{office_id}", headers=auth_headers("user-owner"))
    assert "Cashier" not in [r["name"] for r in response.json()]


def test_update_unknown_role(client, auth_headers, office):
    office_id = office["office"]["id"]
    response = client.put(
        f"/api/v1/roles/{office_id}/missing",
        json={"color": "#000000"},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_capability_checks():
    roles = [
        {"name": "Owner", "permissions": ["all"]},
        {"name": "Supervisor", "permissions": ["manage_roles"]},
        {"name": "Cashier", "permissions": ["view_shifts"]},
    ]
    assert has_capability(["all"], "manage_inventory")
    assert not has_capability(["view_shifts"], "manage_shifts")

    assert can_manage_roles({"role": "Supervisor"}, roles)
    assert can_manage_roles({"role": "Cashier", "isHeadManager": True}, roles)
    assert not can_manage_roles({"role": "Cashier"}, roles)

    assert can_manage_shifts({"role": "Cashier", "isCreator": True}, roles)
    assert not can_manage_shifts({"role": "Supervisor"}, roles)


def test_list_roles_passes_service_errors_through(client, auth_headers, office):
    class UnavailableRoles:
        async def get_roles(self, office_id):
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable")

    app.dependency_overrides[get_role_service] = lambda: UnavailableRoles()
    response = client.get(f"/api/v1/roles/{office['office']['id']}", headers=auth_headers("user-owner"))

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["detail"] == "Store unavailable"
