"""
Integration tests for device telemetry ingestion and retrieval.
"""

import pytest


def _sample(**overrides) -> dict:
    sample = {
        "latitude": 19.07,
        "longitude": 72.87,
        "accuracy": 5.0,
        "speed": 12.5,
        "batteryLevel": 80,
        "activity": "driving",
    }
    sample.update(overrides)
    return sample


@pytest.mark.asyncio
async def test_record_single_location(client, auth_headers, user):
    response = await client.post("/v1/telemetry", headers=auth_headers, json=_sample())
    assert response.status_code == 201
    location = response.json()["data"]["location"]
    assert location["userId"] == user.id
    assert location["activity"] == "driving"
    assert location["timestamp"] is not None


@pytest.mark.asyncio
async def test_out_of_range_sample_rejected(client, auth_headers):
    response = await client.post("/v1/telemetry", headers=auth_headers, json=_sample(latitude=91))
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "latitude"

    response = await client.post("/v1/telemetry", headers=auth_headers, json=_sample(batteryLevel=101))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_batch_limits(client, auth_headers):
    response = await client.post("/v1/telemetry/batch", headers=auth_headers, json={"locations": []})
    assert response.status_code == 400
    assert response.json()["message"] == "Locations array is required"

    response = await client.post(
        "/v1/telemetry/batch", headers=auth_headers, json={"locations": [_sample()] * 101}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Maximum 100 locations per batch"


@pytest.mark.asyncio
async def test_batch_then_list_and_latest(client, auth_headers, other_auth_headers):
    samples = [
        _sample(latitude=1.0, timestamp="2024-05-01T10:00:00Z"),
        _sample(latitude=2.0, timestamp="2024-05-02T10:00:00Z"),
        _sample(latitude=3.0, timestamp="2024-05-03T10:00:00Z"),
    ]
    response = await client.post("/v1/telemetry/batch", headers=auth_headers, json={"locations": samples})
    assert response.status_code == 201
    assert response.json()["data"]["count"] == 3

    response = await client.get("/v1/telemetry?limit=2", headers=auth_headers)
    data = response.json()["data"]
    assert [l["latitude"] for l in data["locations"]] == [3.0, 2.0]
    assert data["pagination"] == {"total": 3, "limit": 2, "skip": 0, "hasMore": True}

    response = await client.get(
        "/v1/telemetry?startDate=2024-05-02T00:00:00Z&endDate=2024-05-02T23:59:59Z", headers=auth_headers
    )
    assert [l["latitude"] for l in response.json()["data"]["locations"]] == [2.0]

    response = await client.get("/v1/telemetry/latest", headers=auth_headers)
    assert response.json()["data"]["location"]["latitude"] == 3.0

    response = await client.get("/v1/telemetry/latest", headers=other_auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "No location data found"


@pytest.mark.asyncio
async def test_list_limit_bounds(client, auth_headers):
    response = await client.get("/v1/telemetry?limit=1001", headers=auth_headers)
    assert response.status_code == 400
