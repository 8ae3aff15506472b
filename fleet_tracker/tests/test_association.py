"""
Integration tests for QR code, vehicle and transporter association.
"""

import pytest
from sqlalchemy import select

from fleet_tracker.app.models.qr_vehicle import QRVehicle


@pytest.mark.asyncio
async def test_unknown_qr_has_no_vehicle(client, auth_headers):
    response = await client.post("/v1/qr/check", headers=auth_headers, json={"qrCode": "QR-NEW"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["hasVehicle"] is False
    assert data["qrCode"] == "QR-NEW"


@pytest.mark.asyncio
async def test_associate_then_check(client, auth_headers):
    response = await client.post(
        "/v1/qr/associate-vehicle",
        headers=auth_headers,
        json={"qrCode": "QR-1", "vehicleNumber": " mh12ab1234 "},
    )
    assert response.status_code == 200
    assert response.json()["data"]["vehicleNumber"] == "MH12AB1234"

    response = await client.post("/v1/qr/check", headers=auth_headers, json={"qrCode": "QR-1"})
    data = response.json()["data"]
    assert data["hasVehicle"] is True
    assert data["vehicleNumber"] == "MH12AB1234"
    assert data["transporterId"] is None


@pytest.mark.asyncio
async def test_reassociation_overwrites_vehicle(client, auth_headers, db_session):
    for vehicle in ("AA01", "BB02"):
        await client.post(
            "/v1/qr/associate-vehicle", headers=auth_headers, json={"qrCode": "QR-1", "vehicleNumber": vehicle}
        )

    rows = (await db_session.execute(select(QRVehicle).where(QRVehicle.qr_code == "QR-1"))).scalars().all()
    assert len(rows) == 1
    assert rows[0].vehicle_number == "BB02"


@pytest.mark.asyncio
async def test_assign_transporter_without_qr_creates_synthetic_code(client, auth_headers, options):
    response = await client.post(
        "/v1/qr/assign-transporter",
        headers=auth_headers,
        json={"vehicleNumber": "kl07cd9999", "transporterId": options["transporter"]},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["qrCode"] == "VEHICLE_KL07CD9999"
    assert data["transporterName"] == "Transporter 1"

    response = await client.get("/v1/qr/check-vehicle/kl07cd9999", headers=auth_headers)
    data = response.json()["data"]
    assert data["hasTransporter"] is True
    assert data["transporterId"] == options["transporter"]


@pytest.mark.asyncio
async def test_assign_transporter_finds_existing_by_vehicle(client, auth_headers, options, db_session):
    await client.post(
        "/v1/qr/associate-vehicle", headers=auth_headers, json={"qrCode": "QR-9", "vehicleNumber": "TN01"}
    )
    response = await client.post(
        "/v1/qr/assign-transporter",
        headers=auth_headers,
        json={"vehicleNumber": "TN01", "transporterId": options["transporter"]},
    )
    assert response.json()["data"]["qrCode"] == "QR-9"
    rows = (await db_session.execute(select(QRVehicle))).scalars().all()
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_assign_transporter_rejects_wrong_option_type(client, auth_headers, options):
    response = await client.post(
        "/v1/qr/assign-transporter",
        headers=auth_headers,
        json={"vehicleNumber": "TN01", "transporterId": options["project"]},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid transporter"


@pytest.mark.asyncio
async def test_combined_associate(client, auth_headers, options):
    response = await client.post(
        "/v1/qr/associate",
        headers=auth_headers,
        json={"qrCode": "QR-7", "vehicleNumber": "ka05", "transporterId": options["transporter"]},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["vehicleNumber"] == "KA05"
    assert data["transporterId"] == options["transporter"]


@pytest.mark.asyncio
async def test_vehicle_without_transporter(client, auth_headers):
    response = await client.get("/v1/qr/check-vehicle/ZZ99", headers=auth_headers)
    data = response.json()["data"]
    assert data["hasTransporter"] is False
    assert data["vehicleNumber"] == "ZZ99"
