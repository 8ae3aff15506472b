"""
Integration tests for anomaly reporting: client-reported missing loading
points and the admin reports.
"""

import pytest


@pytest.mark.asyncio
async def test_report_missing_loading_point(client, auth_headers):
    response = await client.post(
        "/v1/stage/missing-loading-point",
        headers=auth_headers,
        json={"vehicleNumber": "ab12", "projectName": "Project 1"},
    )
    assert response.status_code == 201
    entry = response.json()["data"]["entry"]
    assert entry["vehicleNumber"] == "AB12"
    assert entry["reason"] == "Loading point entry missing"


@pytest.mark.asyncio
async def test_admin_missing_loading_report(client, auth_headers, admin_headers, user):
    for vehicle in ("A1", "B2"):
        await client.post(
            "/v1/stage/missing-loading-point", headers=auth_headers, json={"vehicleNumber": vehicle}
        )

    response = await client.get("/v1/admin/missing-loading-points?limit=1", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["entries"]) == 1
    assert data["entries"][0]["vehicleNumber"] == "B2"
    assert data["entries"][0]["user"] == {"id": user.id, "name": user.name, "email": user.email}
    assert data["pagination"] == {"total": 2, "limit": 1, "skip": 0, "hasMore": True}


@pytest.mark.asyncio
async def test_admin_missing_unloading_report(
    client, auth_headers, admin_headers, loading_point_payload
):
    response = await client.post("/v1/stage/loading-point-data", headers=auth_headers, json=loading_point_payload())
    trip_id = response.json()["data"]["trip"]["id"]
    await client.post(
        "/v1/stage/loading-point-data",
        headers=auth_headers,
        json=loading_point_payload(previousTripReason="driver swapped"),
    )

    response = await client.get("/v1/admin/missing-unloading-points", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"]["limit"] == 50
    (entry,) = data["entries"]
    assert entry["tripId"] == trip_id
    assert entry["reason"] == "driver swapped"
    assert entry["previousSelectionType"] == "loading_point"
    assert entry["tripEndTime"] is not None


@pytest.mark.asyncio
async def test_anomaly_reports_require_admin(client, auth_headers):
    response = await client.get("/v1/admin/missing-loading-points", headers=auth_headers)
    assert response.status_code == 403
