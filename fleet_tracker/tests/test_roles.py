"""
Integration tests for role management.
"""

import pytest

from fleet_tracker.app.models.role import Role


async def _create(client, headers, **fields):
    payload = {"name": "Supervisor", "permissions": ["users:read"]}
    payload.update(fields)
    return await client.post("/v1/admin/roles", headers=headers, json=payload)


@pytest.mark.asyncio
async def test_available_permissions_grouped(client, admin_headers):
    response = await client.get("/v1/admin/roles/permissions", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert "users:read" in data["permissions"]
    assert "users:read" in data["grouped"]["users"]


@pytest.mark.asyncio
async def test_create_role_and_fetch(client, admin_headers):
    response = await _create(client, admin_headers, description="Shift supervisor")
    assert response.status_code == 201
    role = response.json()["data"]["role"]
    assert role["permissions"] == ["users:read"]
    assert role["isSystem"] is False

    response = await client.get(f"/v1/admin/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["role"]["name"] == "Supervisor"


@pytest.mark.asyncio
async def test_role_name_is_unique_case_insensitively(client, admin_headers):
    await _create(client, admin_headers)
    response = await _create(client, admin_headers, name="supervisor")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_permission_rejected(client, admin_headers):
    response = await _create(client, admin_headers, permissions=["rockets:launch"])
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_single_default_role(client, admin_headers):
    first = (await _create(client, admin_headers, name="First", isDefault=True)).json()["data"]["role"]
    second = (await _create(client, admin_headers, name="Second", isDefault=True)).json()["data"]["role"]

    response = await client.get("/v1/admin/roles/default", headers=admin_headers)
    assert response.json()["data"]["role"]["id"] == second["id"]

    response = await client.get(f"/v1/admin/roles/{first['id']}", headers=admin_headers)
    assert response.json()["data"]["role"]["isDefault"] is False


@pytest.mark.asyncio
async def test_update_role(client, admin_headers):
    role = (await _create(client, admin_headers)).json()["data"]["role"]
    response = await client.put(
        f"/v1/admin/roles/{role['id']}",
        headers=admin_headers,
        json={"permissions": ["users:read", "reports:export"]},
    )
    assert response.status_code == 200
    assert response.json()["data"]["role"]["permissions"] == ["users:read", "reports:export"]


@pytest.mark.asyncio
async def test_system_role_is_immutable(client, admin_headers, db_session):
    role = Role(name="Super Admin", permissions=[], is_system=True)
    db_session.add(role)
    await db_session.commit()

    response = await client.put(f"/v1/admin/roles/{role.id}", headers=admin_headers, json={"name": "Renamed"})
    assert response.status_code == 403
    assert response.json()["message"] == "Cannot modify system role"

    response = await client.delete(f"/v1/admin/roles/{role.id}", headers=admin_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_role_with_assigned_users(client, admin_headers, make_user):
    role = (await _create(client, admin_headers)).json()["data"]["role"]
    await make_user("member@example.com", role_id=role["id"])

    response = await client.get(f"/v1/admin/roles/{role['id']}/users", headers=admin_headers)
    assert response.json()["data"]["count"] == 1

    response = await client.delete(f"/v1/admin/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete role. 1 user(s) are assigned to this role."


@pytest.mark.asyncio
async def test_delete_unassigned_role(client, admin_headers):
    role = (await _create(client, admin_headers)).json()["data"]["role"]
    response = await client.delete(f"/v1/admin/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.get(f"/v1/admin/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 404
