"""
Integration tests for unloading point photo upload, retrieval and removal.
"""

import threading

import pytest

from fleet_tracker.app.models.unloading_point_data import UnloadingPointData

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


@pytest.fixture
async def unloading_entry(db_session, user, options):
    entry = UnloadingPointData(
        user_id=user.id,
        vehicle_number="MH12AB1234",
        unloading_point_id=options["unloading_point"],
        unloading_point_name="Unloading Point 1",
        project_id=options["project"],
        project_name="Project 1",
    )
    db_session.add(entry)
    await db_session.commit()
    await db_session.refresh(entry)
    return entry


def _stored_files(image_storage):
    folder = image_storage.base_dir / "unloading_point"
    return sorted(folder.iterdir()) if folder.exists() else []


async def _upload(client, headers, entry_id, filename="photo.jpg", content=JPEG_BYTES, content_type="image/jpeg"):
    return await client.post(
        f"/v1/images/unloading-point/{entry_id}",
        headers=headers,
        files={"image": (filename, content, content_type)},
    )


@pytest.mark.asyncio
async def test_upload_and_fetch_by_filename(client, auth_headers, unloading_entry, image_storage):
    response = await _upload(client, auth_headers, unloading_entry.id)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["unloadingPointDataId"] == unloading_entry.id
    assert data["imagePath"].startswith("unloading_point/")
    assert data["imagePath"].endswith(".jpg")
    assert len(_stored_files(image_storage)) == 1

    filename = data["imagePath"].split("/")[-1]
    response = await client.get(f"/v1/images/unloading-point/{filename}")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == JPEG_BYTES


@pytest.mark.asyncio
async def test_upload_writes_file_off_the_event_loop(client, auth_headers, unloading_entry, image_storage, monkeypatch):
    save = image_storage.save
    threads = []

    def recording_save(*args, **kwargs):
        threads.append(threading.get_ident())
        return save(*args, **kwargs)

    monkeypatch.setattr(image_storage, "save", recording_save)
    response = await _upload(client, auth_headers, unloading_entry.id)
    assert response.status_code == 200
    assert len(threads) == 1
    assert threads[0] != threading.get_ident()


@pytest.mark.asyncio
async def test_upload_for_missing_entry_removes_file(client, auth_headers, image_storage):
    response = await _upload(client, auth_headers, 9999)
    assert response.status_code == 404
    assert response.json()["message"] == "Unloading point data entry not found"
    assert _stored_files(image_storage) == []


@pytest.mark.asyncio
async def test_upload_replaces_previous_image(client, auth_headers, unloading_entry, image_storage, db_session):
    first = (await _upload(client, auth_headers, unloading_entry.id)).json()["data"]["imagePath"]
    second = (await _upload(client, auth_headers, unloading_entry.id, filename="second.png",
                            content_type="image/png")).json()["data"]["imagePath"]

    assert first != second
    assert [p.name for p in _stored_files(image_storage)] == [second.split("/")[-1]]

    await db_session.refresh(unloading_entry)
    assert unloading_entry.image_path == second


@pytest.mark.asyncio
async def test_upload_requires_file(client, auth_headers, unloading_entry):
    response = await client.post(
        f"/v1/images/unloading-point/{unloading_entry.id}", headers=auth_headers, data={"other": "x"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "No image file provided"


@pytest.mark.asyncio
async def test_upload_rejects_non_image(client, auth_headers, unloading_entry, image_storage):
    response = await _upload(
        client, auth_headers, unloading_entry.id, filename="notes.txt", content=b"hello", content_type="text/plain"
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid file type: text/plain")
    assert _stored_files(image_storage) == []


@pytest.mark.asyncio
async def test_upload_accepts_untyped_mobile_photo(client, auth_headers, unloading_entry):
    response = await _upload(
        client, auth_headers, unloading_entry.id, filename="IMG_0001.HEIC", content_type="application/octet-stream"
    )
    assert response.status_code == 200
    assert response.json()["data"]["imagePath"].endswith(".heic")


@pytest.mark.asyncio
async def test_upload_too_large(client, auth_headers, unloading_entry, image_storage):
    image_storage.max_bytes = 1024 * 1024
    response = await _upload(client, auth_headers, unloading_entry.id, content=b"x" * (1024 * 1024 + 1))
    assert response.status_code == 400
    assert response.json()["message"] == "File too large. Maximum size is 1MB."
    assert _stored_files(image_storage) == []


@pytest.mark.asyncio
async def test_upload_requires_authentication(client, unloading_entry):
    response = await _upload(client, {}, unloading_entry.id)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_fetch_unknown_filename(client):
    response = await client.get("/v1/images/unloading-point/missing.jpg")
    assert response.status_code == 404
    assert response.json()["message"] == "Image not found"


@pytest.mark.asyncio
async def test_admin_fetch_by_id(client, auth_headers, admin_headers, unloading_entry):
    response = await client.get(f"/v1/images/unloading-point/by-id/{unloading_entry.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "No image available for this entry"

    await _upload(client, auth_headers, unloading_entry.id)
    response = await client.get(f"/v1/images/unloading-point/by-id/{unloading_entry.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.content == JPEG_BYTES

    response = await client.get(f"/v1/images/unloading-point/by-id/{unloading_entry.id}", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_delete_image(client, auth_headers, admin_headers, unloading_entry, image_storage):
    response = await client.delete(f"/v1/images/unloading-point/{unloading_entry.id}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No image to delete"

    await _upload(client, auth_headers, unloading_entry.id)
    response = await client.delete(f"/v1/images/unloading-point/{unloading_entry.id}", headers=admin_headers)
    assert response.status_code == 200
    assert _stored_files(image_storage) == []
