"""Tests for the public food API endpoints."""
import pytest

from httpx import AsyncClient, ASGITransport


API_BASE_URL = "http://test/api/food"


@pytest.mark.asyncio
async def test_claim_meal(test_app, participant_factory):
    """POST /claim claims a meal and returns the participant's meal map."""
    await participant_factory("T01-M1", member_name="Asha")

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        response = await client.post("/claim", json={"participantId": " t01-m1 ", "mealType": "Lunch"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Lunch claimed successfully!"
    assert data["meal_type"] == "lunch"
    assert data["participant"]["participant_id"] == "T01-M1"
    assert data["participant"]["member_name"] == "Asha"
    assert data["claimed_at"].endswith("Z")
    assert data["meals"]["lunch"]["claimed"] is True
    assert data["meals"]["lunch"]["claimed_at"] == data["claimed_at"]
    assert data["meals"]["breakfast"] == {"claimed": False, "claimed_at": None}


@pytest.mark.asyncio
async def test_claim_twice_returns_conflict(test_app, participant_factory):
    await participant_factory("T01-M1")

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        first = await client.post("/claim", json={"participant_id": "T01-M1", "meal_type": "dinner"})
        second = await client.post("/claim", json={"participant_id": "T01-M1", "meal_type": "dinner"})

    assert first.status_code == 200
    assert second.status_code == 409
    data = second.json()
    assert data["success"] is False
    assert data["detail"] == "already_claimed"
    assert data["message"].startswith("Dinner already claimed at")
    assert data["claimed_at"] == first.json()["claimed_at"]
    assert data["participant"]["participant_id"] == "T01-M1"


@pytest.mark.asyncio
async def test_claim_unknown_participant(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        response = await client.post("/claim", json={"participant_id": "T99-M1", "meal_type": "lunch"})

    assert response.status_code == 404
    data = response.json()
    assert data["detail"] == "not_found"
    assert data["message"] == "Participant ID not found. Please verify your ID."


@pytest.mark.asyncio
@pytest.mark.parametrize("payload, message", [
    ({}, "Participant ID and meal type are required"),
    ({"participant_id": "T01-M1"}, "Participant ID and meal type are required"),
    ({"participant_id": "T01-M1", "meal_type": "snack"}, "Invalid meal type. Must be breakfast, lunch, or dinner"),
    ({"participantId": 123, "mealType": "lunch"}, "Participant ID must be text"),
    ({"participantId": "T01-M1", "mealType": ["lunch"]}, "Meal type must be text"),
])
async def test_claim_validation_errors(test_app, participant_factory, payload, message):
    await participant_factory("T01-M1")

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        response = await client.post("/claim", json=payload)

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "validation_error"
    assert data["message"] == message


@pytest.mark.asyncio
async def test_get_participant(test_app, participant_factory):
    await participant_factory("T03-M2", team_name="Segfault Society", member_name="Dev")

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        response = await client.get("/participant/t03-m2")
        missing = await client.get("/participant/T03-M4")

    assert response.status_code == 200
    participant = response.json()["participant"]
    assert participant["participant_id"] == "T03-M2"
    assert participant["team_id"] == "T03"
    assert participant["team_name"] == "Segfault Society"
    assert participant["member_number"] == 2
    assert set(participant["meals"]) == {"breakfast", "lunch", "dinner"}

    assert missing.status_code == 404
    assert missing.json()["detail"] == "not_found"


@pytest.mark.asyncio
async def test_stats(test_app, participant_factory):
    await participant_factory("T01-M1")
    await participant_factory("T01-M2", member_name="Ravi")

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        await client.post("/claim", json={"participant_id": "T01-M1", "meal_type": "breakfast"})
        response = await client.get("/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total": 2,
        "breakfast": {"claimed": 1, "pending": 1, "percentage": 50},
        "lunch": {"claimed": 0, "pending": 2, "percentage": 0},
        "dinner": {"claimed": 0, "pending": 2, "percentage": 0},
    }


@pytest.mark.asyncio
async def test_recent_claims(test_app, participant_factory):
    await participant_factory("T01-M1")
    await participant_factory("T01-M2", member_name="Ravi")

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as client:
        await client.post("/claim", json={"participant_id": "T01-M1", "meal_type": "breakfast"})
        await client.post("/claim", json={"participant_id": "T01-M2", "meal_type": "breakfast"})
        await client.post("/claim", json={"participant_id": "T01-M1", "meal_type": "lunch"})

        limited = await client.get("/recent", params={"limit": "2"})
        fallback = await client.get("/recent", params={"limit": "lots"})

    assert limited.status_code == 200
    data = limited.json()
    assert data["count"] == 2
    assert [(claim["participant_id"], claim["meal_type"]) for claim in data["claims"]] == [
        ("T01-M1", "lunch"),
        ("T01-M2", "breakfast"),
    ]
    assert data["claims"][0]["member_name"] == "Asha"

    assert fallback.status_code == 200
    assert fallback.json()["count"] == 3


@pytest.mark.asyncio
async def test_health(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"
