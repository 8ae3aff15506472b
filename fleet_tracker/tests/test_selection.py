"""
Integration tests for saved selections.
"""

import pytest


@pytest.mark.asyncio
async def test_selection_options_grouped(client, auth_headers, options):
    response = await client.get("/v1/selection/options", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert [o["id"] for o in data["projects"]] == [options["project"]]
    assert [o["id"] for o in data["wayBridges"]] == [options["way_bridge"]]


@pytest.mark.asyncio
async def test_save_and_get_active_selection(client, auth_headers, options):
    response = await client.get("/v1/selection/active", headers=auth_headers)
    assert response.json()["data"]["selection"] is None

    response = await client.post(
        "/v1/selection",
        headers=auth_headers,
        json={"projectId": options["project"], "selectionType": "loading_point", "selectionId": options["loading_point"]},
    )
    assert response.status_code == 201
    selection = response.json()["data"]["selection"]
    assert selection["project"]["name"] == "Project 1"
    assert selection["selection"]["name"] == "Loading Point 1"

    response = await client.get("/v1/selection/active", headers=auth_headers)
    assert response.json()["data"]["selection"]["id"] == selection["id"]


@pytest.mark.asyncio
async def test_new_selection_deactivates_previous(client, auth_headers, options):
    first = (await client.post(
        "/v1/selection",
        headers=auth_headers,
        json={"projectId": options["project"], "selectionType": "loading_point", "selectionId": options["loading_point"]},
    )).json()["data"]["selection"]
    second = (await client.post(
        "/v1/selection",
        headers=auth_headers,
        json={"projectId": options["project"], "selectionType": "way_bridge", "selectionId": options["way_bridge"]},
    )).json()["data"]["selection"]

    response = await client.get("/v1/selection/history", headers=auth_headers)
    history = {s["id"]: s["isActive"] for s in response.json()["data"]["selections"]}
    assert history == {first["id"]: False, second["id"]: True}


@pytest.mark.asyncio
async def test_selection_type_must_match_option(client, auth_headers, options):
    response = await client.post(
        "/v1/selection",
        headers=auth_headers,
        json={"projectId": options["project"], "selectionType": "unloading_point", "selectionId": options["loading_point"]},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid selection"


@pytest.mark.asyncio
async def test_deactivate_is_owner_only(client, auth_headers, other_auth_headers, options):
    selection = (await client.post(
        "/v1/selection",
        headers=auth_headers,
        json={"projectId": options["project"], "selectionType": "way_bridge", "selectionId": options["way_bridge"]},
    )).json()["data"]["selection"]

    response = await client.put(f"/v1/selection/{selection['id']}/deactivate", headers=other_auth_headers)
    assert response.status_code == 404

    response = await client.put(f"/v1/selection/{selection['id']}/deactivate", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["selection"]["isActive"] is False
