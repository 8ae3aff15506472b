"""
Concurrency Tests.

The partial unique index on active trips is the last line of defence when
two requests both pass the "no active trip" read for the same vehicle.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from fleet_tracker.app.models.enums import SelectionType, TripStatus
from fleet_tracker.app.models.trip import Trip
from fleet_tracker.app.models.way_bridge_data import WayBridgeData
from fleet_tracker.app.services import stages as stage_service


def _trip(user_id: int, options: dict, status: TripStatus = TripStatus.ACTIVE) -> Trip:
    return Trip(
        user_id=user_id,
        vehicle_number="RACE1",
        project_id=options["project"],
        project_name="Project 1",
        selection_type=SelectionType.UNLOADING_POINT,
        selection_id=options["unloading_point"],
        selection_name="Unloading Point 1",
        status=status,
    )


@pytest.mark.asyncio
async def test_store_rejects_second_active_trip_for_vehicle(db_session, user, other_user, options):
    db_session.add(_trip(user.id, options))
    await db_session.commit()

    db_session.add(_trip(other_user.id, options))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_closed_trips_do_not_block(db_session, user, options):
    db_session.add_all([
        _trip(user.id, options, TripStatus.COMPLETED),
        _trip(user.id, options, TripStatus.CANCELLED),
        _trip(user.id, options, TripStatus.ACTIVE),
    ])
    await db_session.commit()


@pytest.mark.asyncio
async def test_start_trip_on_busy_vehicle_is_conflict(client, auth_headers, other_auth_headers, trip_start_payload):
    response = await client.post("/v1/trips/start", headers=auth_headers, json=trip_start_payload())
    assert response.status_code == 201

    response = await client.post(
        "/v1/trips/start", headers=other_auth_headers, json=trip_start_payload(qr_code="QR-OTHER")
    )
    assert response.status_code == 409
    assert response.json()["errorCode"] == "ERR_CONFLICT"


@pytest.mark.asyncio
async def test_stale_read_in_stage_workflow_is_conflict(
    client, auth_headers, other_auth_headers, way_bridge_payload, db_session, monkeypatch
):
    """A stage entry that missed a concurrent trip is rolled back as a whole."""
    response = await client.post("/v1/stage/way-bridge-data", headers=auth_headers, json=way_bridge_payload())
    assert response.status_code == 201

    async def stale_lookup(db, vehicle_number):
        return None

    monkeypatch.setattr(stage_service, "find_active_trip_for_vehicle", stale_lookup)

    response = await client.post(
        "/v1/stage/way-bridge-data", headers=other_auth_headers, json=way_bridge_payload(qr_code="QR-LATE")
    )
    assert response.status_code == 409

    active = (await db_session.execute(
        select(Trip).where(Trip.vehicle_number == "MH12AB1234", Trip.status == TripStatus.ACTIVE)
    )).scalars().all()
    assert len(active) == 1
    records = (await db_session.execute(select(WayBridgeData))).scalars().all()
    assert len(records) == 1
