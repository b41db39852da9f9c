"""
Event endpoint tests: event creation with participants, logistics
attachment, logistics-by-date queries and cost recomputation over HTTP.
"""
import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_participant(client: AsyncClient, payload: dict) -> int:
    resp = await client.post("/api/v1/participants", json=payload)
    assert resp.status_code == 201
    return resp.json()["id"]


async def _create_event(
    client: AsyncClient, participant_id: int, description: str, date_debut: str = "2026-05-10"
) -> dict:
    resp = await client.post(
        f"/api/v1/events?participant_id={participant_id}",
        json={"description": description, "date_debut": date_debut, "date_fin": date_debut},
    )
    assert resp.status_code == 201
    return resp.json()


async def _add_log(client: AsyncClient, description_event: str, **fields) -> dict:
    payload = {"description": "Item", "reserve": True, "prix_unit": 1.0, "quantite": 1}
    payload.update(fields)
    resp = await client.post(
        "/api/v1/events/logistics",
        params={"description_event": description_event},
        json=payload,
    )
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Create events
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_event_for_participant(async_client: AsyncClient, organiser_payload: dict):
    participant_id = await _create_participant(async_client, organiser_payload)
    resp = await async_client.post(
        f"/api/v1/events?participant_id={participant_id}",
        json={
            "description": "Test Event",
            "date_debut": "2026-05-10",
            "date_fin": "2026-05-11",
            "cost": 1000.0,
        },
    )
    assert resp.status_code == 201
    event = resp.json()
    assert event["description"] == "Test Event"
    assert event["date_debut"] == "2026-05-10"
    assert event["cost"] == 1000.0
    assert [p["id"] for p in event["participants"]] == [participant_id]


@pytest.mark.asyncio
async def test_create_event_for_unknown_participant(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/events?participant_id=99999", json={"description": "Ghost"}
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_event_with_participant_ids(async_client: AsyncClient):
    ids = [
        await _create_participant(async_client, {"nom": "A", "prenom": "a", "tache": "INVITE"}),
        await _create_participant(async_client, {"nom": "B", "prenom": "b", "tache": "SERVEUR"}),
    ]
    resp = await async_client.post(
        "/api/v1/events", json={"description": "Team", "participant_ids": ids}
    )
    assert resp.status_code == 201
    assert sorted(p["id"] for p in resp.json()["participants"]) == sorted(ids)


@pytest.mark.asyncio
async def test_create_event_with_unknown_participant_id(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/events", json={"description": "Team", "participant_ids": [99999]}
    )
    assert resp.status_code == 404
    assert (await async_client.get("/api/v1/events")).json() == []


@pytest.mark.asyncio
async def test_create_event_rejects_participant_id_with_participant_ids(
    async_client: AsyncClient, organiser_payload: dict
):
    participant_id = await _create_participant(async_client, organiser_payload)
    resp = await async_client.post(
        f"/api/v1/events?participant_id={participant_id}",
        json={"description": "Both", "participant_ids": [participant_id]},
    )
    assert resp.status_code == 422
    assert (await async_client.get("/api/v1/events")).json() == []


@pytest.mark.asyncio
async def test_create_event_missing_description(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/events", json={"participant_ids": []})
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_and_get_event(async_client: AsyncClient, organiser_payload: dict):
    participant_id = await _create_participant(async_client, organiser_payload)
    created = await _create_event(async_client, participant_id, "Listed")

    listing = await async_client.get("/api/v1/events")
    assert listing.status_code == 200
    assert [e["id"] for e in listing.json()] == [created["id"]]

    detail = await async_client.get(f"/api/v1/events/{created['id']}")
    assert detail.status_code == 200
    assert detail.json()["participants"][0]["nom"] == "Tounsi"
    assert detail.json()["logistics"] == []


@pytest.mark.asyncio
async def test_get_event_not_found(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/events/99999")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Logistics
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_add_logistics_to_event(async_client: AsyncClient, organiser_payload: dict):
    participant_id = await _create_participant(async_client, organiser_payload)
    event = await _create_event(async_client, participant_id, "Test Event")

    item = await _add_log(async_client, "Test Event", description="Test Logistics")
    assert item["event_id"] == event["id"]

    detail = (await async_client.get(f"/api/v1/events/{event['id']}")).json()
    assert [i["description"] for i in detail["logistics"]] == ["Test Logistics"]


@pytest.mark.asyncio
async def test_add_logistics_to_unknown_event(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/events/logistics",
        params={"description_event": "Nothing"},
        json={"description": "Orphan"},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_logistics_by_dates(async_client: AsyncClient, organiser_payload: dict):
    participant_id = await _create_participant(async_client, organiser_payload)
    await _create_event(async_client, participant_id, "Spring", date_debut="2026-04-15")
    await _create_event(async_client, participant_id, "Summer", date_debut="2026-07-15")
    await _add_log(async_client, "Spring", description="Reserved", reserve=True)
    await _add_log(async_client, "Spring", description="Pending", reserve=False)
    await _add_log(async_client, "Summer", description="Later", reserve=True)

    resp = await async_client.get(
        "/api/v1/events/logistics",
        params={"date_debut": "2026-04-01", "date_fin": "2026-04-30"},
    )
    assert resp.status_code == 200
    assert [i["description"] for i in resp.json()] == ["Reserved"]


@pytest.mark.asyncio
async def test_logistics_by_dates_rejects_inverted_period(async_client: AsyncClient):
    resp = await async_client.get(
        "/api/v1/events/logistics",
        params={"date_debut": "2026-04-30", "date_fin": "2026-04-01"},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_logistics_by_dates_requires_both_bounds(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/events/logistics", params={"date_debut": "2026-04-01"})
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Cost recomputation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_recompute_costs_with_default_participant(
    async_client: AsyncClient, organiser_payload: dict
):
    participant_id = await _create_participant(async_client, organiser_payload)
    event = await _create_event(async_client, participant_id, "Gala")
    await _add_log(async_client, "Gala", reserve=True, prix_unit=100.0, quantite=5)

    resp = await async_client.post("/api/v1/events/costs/recompute")
    assert resp.status_code == 204

    detail = (await async_client.get(f"/api/v1/events/{event['id']}")).json()
    assert detail["cost"] == pytest.approx(500.0)


@pytest.mark.asyncio
async def test_recompute_costs_with_explicit_criteria(async_client: AsyncClient):
    server = {"nom": "Jebali", "prenom": "Karim", "tache": "SERVEUR"}
    participant_id = await _create_participant(async_client, server)
    event = await _create_event(async_client, participant_id, "Dinner")
    await _add_log(async_client, "Dinner", reserve=True, prix_unit=20.0, quantite=3)
    await _add_log(async_client, "Dinner", reserve=False, prix_unit=1000.0, quantite=1)

    # The default participant is not on this event.
    await async_client.post("/api/v1/events/costs/recompute")
    assert (await async_client.get(f"/api/v1/events/{event['id']}")).json()["cost"] == 0.0

    resp = await async_client.post("/api/v1/events/costs/recompute", json=server)
    assert resp.status_code == 204
    detail = (await async_client.get(f"/api/v1/events/{event['id']}")).json()
    assert detail["cost"] == pytest.approx(60.0)


@pytest.mark.asyncio
async def test_recompute_costs_without_matches(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/events/costs/recompute",
        json={"nom": "Nobody", "prenom": "Here", "tache": ""},
    )
    assert resp.status_code == 204


# ---------------------------------------------------------------------------
# Metrics & health
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_metrics_report_counts_and_total_cost(
    async_client: AsyncClient, organiser_payload: dict
):
    participant_id = await _create_participant(async_client, organiser_payload)
    await _create_event(async_client, participant_id, "Gala")
    await _add_log(async_client, "Gala", reserve=True, prix_unit=100.0, quantite=5)
    await async_client.post("/api/v1/events/costs/recompute")

    resp = await async_client.get("/api/v1/metrics")
    assert resp.status_code == 200
    metrics = resp.json()
    assert metrics["total_events"] == 1
    assert metrics["total_participants"] == 1
    assert metrics["total_logistics"] == 1
    assert metrics["total_cost"] == pytest.approx(500.0)
    assert "hit_rate" in metrics["cache_info"]


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
