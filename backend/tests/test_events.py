"""
Tests for the event and sport JSON endpoints.
"""

import pytest
from httpx import AsyncClient


def payload(**overrides) -> dict:
    body = {
        "eventName": "Lakers vs Celtics",
        "sportType": "Basketball",
        "dateTime": "2026-12-01T19:30:00+00:00",
        "description": "Season opener at home",
        "venues": ["Crypto Arena"],
    }
    body.update(overrides)
    return body


async def create(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post("/api/v1/events/", json=payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient, test_user, auth_headers):
    """Authenticated user can create an event; sport and venue appear on first use."""
    response = await client.post("/api/v1/events/", json=payload(), headers=auth_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    event = body["data"]
    assert event["name"] == "Lakers vs Celtics"
    assert event["sport"]["name"] == "basketball"
    assert [v["name"] for v in event["venues"]] == ["Crypto Arena"]
    assert event["venue_ids"] == [event["venues"][0]["id"]]
    assert event["created_by"] == test_user.id


@pytest.mark.asyncio
async def test_create_event_accepts_snake_case(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/events/",
        json={
            "event_name": "Derby",
            "sport_type": "soccer",
            "date_time": "2026-11-02T15:00:00Z",
            "description": "City derby",
            "venues": ["Old Trafford"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_event_unauthenticated(client: AsyncClient, db_session):
    response = await client.post("/api/v1/events/", json=payload())
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "You must be logged in to create an event",
        "code": "AUTHENTICATION_REQUIRED",
    }


@pytest.mark.asyncio
async def test_create_event_without_venues(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/events/", json=payload(venues=[]), headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_events_newest_first(client: AsyncClient, auth_headers):
    await create(client, auth_headers, eventName="Older", dateTime="2026-01-01T10:00:00Z")
    await create(client, auth_headers, eventName="Newer", dateTime="2026-06-01T10:00:00Z")

    response = await client.get("/api/v1/events/")
    assert response.status_code == 200
    names = [e["name"] for e in response.json()["data"]]
    assert names == ["Newer", "Older"]


@pytest.mark.asyncio
async def test_list_events_filters(client: AsyncClient, auth_headers):
    await create(client, auth_headers, eventName="Lakers vs Celtics", sportType="Basketball")
    await create(client, auth_headers, eventName="Yankees vs Red Sox", sportType="Baseball")

    response = await client.get("/api/v1/events/", params={"search": "LAKERS"})
    assert [e["name"] for e in response.json()["data"]] == ["Lakers vs Celtics"]

    response = await client.get("/api/v1/events/", params={"sport_type": "baseball"})
    assert [e["name"] for e in response.json()["data"]] == ["Yankees vs Red Sox"]

    response = await client.get("/api/v1/events/", params={"sport_type": "curling"})
    assert response.json() == {"success": True, "data": []}


@pytest.mark.asyncio
async def test_get_event_by_id(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers)

    response = await client.get(f"/api/v1/events/{created['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == created["id"]


@pytest.mark.asyncio
async def test_get_nonexistent_event(client: AsyncClient, db_session):
    response = await client.get("/api/v1/events/99999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Event not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_update_event_replaces_fields(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers, venues=["Court A", "Court B"])

    response = await client.put(
        f"/api/v1/events/{created['id']}",
        json=payload(eventName="Rescheduled", sportType="Tennis", venues=["Court C"]),
        headers=auth_headers,
    )
    assert response.status_code == 200
    event = response.json()["data"]
    assert event["name"] == "Rescheduled"
    assert event["sport"]["name"] == "tennis"
    assert [v["name"] for v in event["venues"]] == ["Court C"]


@pytest.mark.asyncio
async def test_update_event_by_other_user(client: AsyncClient, auth_headers, other_auth_headers):
    created = await create(client, auth_headers)

    response = await client.put(
        f"/api/v1/events/{created['id']}", json=payload(eventName="Hijacked"), headers=other_auth_headers
    )
    assert response.status_code == 403
    assert response.json()["error"] == "You don't have permission to edit this event"

    unchanged = await client.get(f"/api/v1/events/{created['id']}")
    assert unchanged.json()["data"]["name"] == "Lakers vs Celtics"


@pytest.mark.asyncio
async def test_delete_event(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers)

    response = await client.delete(f"/api/v1/events/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    missing = await client.get(f"/api/v1/events/{created['id']}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_event_by_other_user(client: AsyncClient, auth_headers, other_auth_headers):
    created = await create(client, auth_headers)

    response = await client.delete(f"/api/v1/events/{created['id']}", headers=other_auth_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "You don't have permission to delete this event"


@pytest.mark.asyncio
async def test_delete_nonexistent_event(client: AsyncClient, auth_headers):
    response = await client.delete("/api/v1/events/99999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_sports_sorted(client: AsyncClient, auth_headers):
    await create(client, auth_headers, sportType="Tennis")
    await create(client, auth_headers, sportType="basketball")
    await create(client, auth_headers, sportType="BASKETBALL")

    response = await client.get("/api/v1/sports/")
    assert response.status_code == 200
    assert [s["name"] for s in response.json()["data"]] == ["basketball", "tennis"]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["cache"] == {"status": "disabled"}
