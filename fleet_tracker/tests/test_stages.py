"""
Integration tests for stage capture: way bridge and loading point entries
open trips, unloading point entries close them.
"""

import pytest
from sqlalchemy import select, func

from fleet_tracker.app.models.enums import TripStatus
from fleet_tracker.app.models.missing_entries import MissingLoadingPointEntry, MissingUnloadingPointEntry
from fleet_tracker.app.models.qr_vehicle import QRVehicle
from fleet_tracker.app.models.trip import Trip
from fleet_tracker.app.models.way_bridge_data import WayBridgeData


async def _count(db_session, model) -> int:
    return await db_session.scalar(select(func.count()).select_from(model))


@pytest.mark.asyncio
async def test_way_bridge_entry_starts_trip(client, auth_headers, way_bridge_payload):
    response = await client.post("/v1/stage/way-bridge-data", headers=auth_headers, json=way_bridge_payload())
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["wayBridgeData"]["netWeight"] == 15000
    assert data["wayBridgeData"]["tripId"] == data["trip"]["id"]
    assert data["trip"]["selectionType"] == "way_bridge"
    assert data["trip"]["selectionName"] == "Way Bridge 1"
    assert data["endedPreviousTrip"] is None


@pytest.mark.asyncio
async def test_net_weight_always_matches(client, auth_headers, way_bridge_payload, db_session):
    for index, (gross, tare) in enumerate(((30000.5, 12000.25), (1000, 1000), (0, 0))):
        response = await client.post(
            "/v1/stage/way-bridge-data",
            headers=auth_headers,
            json=way_bridge_payload(vehicle_number=f"NW{index}", qr_code=f"NWQ{index}", grossWeight=gross, tareWeight=tare),
        )
        assert response.status_code == 201

    rows = (await db_session.execute(select(WayBridgeData))).scalars().all()
    assert len(rows) == 3
    for row in rows:
        assert row.net_weight == row.gross_weight - row.tare_weight


@pytest.mark.asyncio
async def test_tare_above_gross_rejected(client, auth_headers, way_bridge_payload):
    response = await client.post(
        "/v1/stage/way-bridge-data",
        headers=auth_headers,
        json=way_bridge_payload(grossWeight=100, tareWeight=200),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_reference_writes_nothing(client, auth_headers, options, way_bridge_payload, db_session):
    response = await client.post(
        "/v1/stage/way-bridge-data",
        headers=auth_headers,
        json=way_bridge_payload(loadingPointId=options["unloading_point"]),
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid loading point"
    assert await _count(db_session, Trip) == 0
    assert await _count(db_session, WayBridgeData) == 0


@pytest.mark.asyncio
async def test_supersede_requires_reason_then_cancels_previous(
    client, auth_headers, other_auth_headers, loading_point_payload, way_bridge_payload, db_session
):
    response = await client.post(
        "/v1/stage/loading-point-data",
        headers=auth_headers,
        json=loading_point_payload(vehicle_number="XYZ1"),
    )
    assert response.status_code == 201
    first_trip = response.json()["data"]["trip"]
    assert first_trip["selectionType"] == "loading_point"

    # A different user picks the vehicle up at the way bridge
    response = await client.post(
        "/v1/stage/way-bridge-data", headers=other_auth_headers, json=way_bridge_payload(vehicle_number="XYZ1")
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Reason for ending previous trip is required"
    assert body["errors"][0]["field"] == "previousTripReason"
    assert await _count(db_session, MissingUnloadingPointEntry) == 0

    response = await client.post(
        "/v1/stage/way-bridge-data",
        headers=other_auth_headers,
        json=way_bridge_payload(vehicle_number="XYZ1", previousTripReason="forgot to unload"),
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["endedPreviousTrip"]["id"] == first_trip["id"]
    assert data["endedPreviousTrip"]["status"] == "cancelled"
    assert "forgot to unload" in data["endedPreviousTrip"]["notes"]

    previous = await db_session.get(Trip, first_trip["id"])
    assert previous.status == TripStatus.CANCELLED

    entries = (await db_session.execute(select(MissingUnloadingPointEntry))).scalars().all()
    assert len(entries) == 1
    assert entries[0].trip_id == first_trip["id"]
    assert entries[0].reason == "forgot to unload"
    assert entries[0].previous_selection_name == "Loading Point 1"

    active = (await db_session.execute(
        select(Trip).where(Trip.vehicle_number == "XYZ1", Trip.status == TripStatus.ACTIVE)
    )).scalars().all()
    assert len(active) == 1


@pytest.mark.asyncio
async def test_blank_reason_is_rejected(client, auth_headers, loading_point_payload):
    await client.post("/v1/stage/loading-point-data", headers=auth_headers, json=loading_point_payload())
    response = await client.post(
        "/v1/stage/loading-point-data",
        headers=auth_headers,
        json=loading_point_payload(previousTripReason="   "),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_reference_does_not_close_previous_trip(
    client, auth_headers, options, loading_point_payload, db_session
):
    response = await client.post("/v1/stage/loading-point-data", headers=auth_headers, json=loading_point_payload())
    trip_id = response.json()["data"]["trip"]["id"]

    response = await client.post(
        "/v1/stage/loading-point-data",
        headers=auth_headers,
        json=loading_point_payload(previousTripReason="restart", projectId=options["way_bridge"]),
    )
    assert response.status_code == 400

    db_session.expire_all()
    trip = await db_session.get(Trip, trip_id)
    assert trip.status == TripStatus.ACTIVE
    assert await _count(db_session, MissingUnloadingPointEntry) == 0


@pytest.mark.asyncio
async def test_stage_entry_backfills_transporter(client, auth_headers, options, way_bridge_payload, db_session):
    await client.post(
        "/v1/qr/associate-vehicle", headers=auth_headers, json={"qrCode": "QR-001", "vehicleNumber": "MH12AB1234"}
    )
    response = await client.post("/v1/stage/way-bridge-data", headers=auth_headers, json=way_bridge_payload())
    assert response.status_code == 201

    qr_vehicle = (await db_session.execute(select(QRVehicle).where(QRVehicle.qr_code == "QR-001"))).scalar_one()
    assert qr_vehicle.transporter_id == options["transporter"]


@pytest.mark.asyncio
async def test_unloading_completes_trip(client, auth_headers, other_auth_headers, way_bridge_payload, unloading_payload):
    response = await client.post("/v1/stage/way-bridge-data", headers=auth_headers, json=way_bridge_payload())
    trip_id = response.json()["data"]["trip"]["id"]

    # Any authenticated user may close the trip
    response = await client.post(
        "/v1/stage/unloading-point-data",
        headers=other_auth_headers,
        json=unloading_payload(trip_id, grossWeight=25000, tareWeight=10000),
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["unloadingPointData"]["netWeight"] == 15000
    assert data["trip"]["status"] == "completed"

    response = await client.post(
        "/v1/stage/unloading-point-data", headers=auth_headers, json=unloading_payload(trip_id)
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Trip not found or already closed"


@pytest.mark.asyncio
async def test_unloading_without_loading_stage_logs_anomaly(
    client, auth_headers, trip_start_payload, unloading_payload, db_session
):
    response = await client.post("/v1/trips/start", headers=auth_headers, json=trip_start_payload())
    trip_id = response.json()["data"]["trip"]["id"]

    response = await client.post(
        "/v1/stage/unloading-point-data", headers=auth_headers, json=unloading_payload(trip_id)
    )
    assert response.status_code == 201

    entries = (await db_session.execute(select(MissingLoadingPointEntry))).scalars().all()
    assert len(entries) == 1
    assert entries[0].vehicle_number == "MH12AB1234"
    assert entries[0].unloading_point_name == "Unloading Point 1"


@pytest.mark.asyncio
async def test_stage_history_is_scoped_to_caller(
    client, auth_headers, other_auth_headers, way_bridge_payload
):
    await client.post("/v1/stage/way-bridge-data", headers=auth_headers, json=way_bridge_payload())

    response = await client.get("/v1/stage/way-bridge-data", headers=auth_headers)
    assert response.json()["data"]["pagination"]["total"] == 1

    response = await client.get("/v1/stage/way-bridge-data", headers=other_auth_headers)
    assert response.json()["data"]["data"] == []
