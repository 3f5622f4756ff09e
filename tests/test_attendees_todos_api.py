"""Tests for attendee and todo routes."""

import pytest


@pytest.fixture
async def event_id(admin_client, afternoon_event) -> str:
    response = await admin_client.post("/api/events", json=afternoon_event)
    return response.json()["id"]


class TestAttendees:
    async def test_create_defaults_to_attending(self, admin_client, event_id):
        response = await admin_client.post(
            f"/api/events/{event_id}/attendees",
            json={"name": "Pat", "email": "pat@example.com"},
        )
        assert response.status_code == 201
        assert response.json()["status"] == "attending"
        assert response.json()["event_id"] == event_id

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "pat@example.com"},
            {"name": "Pat"},
            {"name": "Pat", "email": "pat@example.com", "status": "sometimes"},
        ],
    )
    async def test_create_validation(self, admin_client, event_id, payload):
        response = await admin_client.post(f"/api/events/{event_id}/attendees", json=payload)
        assert response.status_code == 400

    async def test_listed_by_name(self, admin_client, event_id):
        for name in ("Zed", "Alma", "Moe"):
            await admin_client.post(
                f"/api/events/{event_id}/attendees",
                json={"name": name, "email": f"{name.lower()}@example.com"},
            )

        attendees = (await admin_client.get(f"/api/events/{event_id}/attendees")).json()
        assert [a["name"] for a in attendees] == ["Alma", "Moe", "Zed"]

    async def test_update_status(self, admin_client, event_id):
        attendee = (
            await admin_client.post(
                f"/api/events/{event_id}/attendees",
                json={"name": "Pat", "email": "pat@example.com"},
            )
        ).json()
        url = f"/api/events/{event_id}/attendees/{attendee['id']}"

        response = await admin_client.put(url, json={"status": "declined"})
        assert response.status_code == 200
        assert response.json()["status"] == "declined"
        assert response.json()["name"] == "Pat"

        assert (await admin_client.get(url)).json()["status"] == "declined"

        response = await admin_client.put(url, json={"status": None, "name": "Patty"})
        assert response.status_code == 200
        assert response.json()["status"] == "declined"
        assert response.json()["name"] == "Patty"

    async def test_missing_attendee(self, admin_client, event_id):
        url = f"/api/events/{event_id}/attendees/nope"
        assert (await admin_client.get(url)).status_code == 404
        assert (await admin_client.put(url, json={"name": "x"})).status_code == 404
        assert (await admin_client.delete(url)).status_code == 404


class TestTodos:
    async def test_create(self, admin_client, event_id):
        response = await admin_client.post(
            f"/api/events/{event_id}/todos",
            json={"title": "Fix gate", "description": "Hinge is loose"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["completed"] is False
        assert body["assigned_attendee_id"] is None

    async def test_title_required(self, admin_client, event_id):
        response = await admin_client.post(f"/api/events/{event_id}/todos", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Title is required"

    async def test_open_todos_listed_first(self, admin_client, event_id):
        ids = []
        for title in ("First", "Second", "Third"):
            response = await admin_client.post(
                f"/api/events/{event_id}/todos", json={"title": title}
            )
            ids.append(response.json()["id"])

        await admin_client.put(
            f"/api/events/{event_id}/todos/{ids[0]}", json={"completed": True}
        )

        todos = (await admin_client.get(f"/api/events/{event_id}/todos")).json()
        assert [t["title"] for t in todos] == ["Second", "Third", "First"]
        assert todos[-1]["completed"] is True

    async def test_assign_and_clear(self, admin_client, event_id):
        attendee = (
            await admin_client.post(
                f"/api/events/{event_id}/attendees",
                json={"name": "Pat", "email": "pat@example.com"},
            )
        ).json()
        todo = (
            await admin_client.post(
                f"/api/events/{event_id}/todos",
                json={"title": "Feed goats", "assigned_attendee_id": attendee["id"]},
            )
        ).json()
        assert todo["assigned_attendee_name"] == "Pat"

        url = f"/api/events/{event_id}/todos/{todo['id']}"
        response = await admin_client.put(url, json={"assigned_attendee_id": None})
        assert response.json()["assigned_attendee_id"] is None
        assert response.json()["title"] == "Feed goats"

    async def test_assign_attendee_from_other_event(
        self, admin_client, event_id, weekend_event
    ):
        other = (await admin_client.post("/api/events", json=weekend_event)).json()
        stranger = (
            await admin_client.post(
                f"/api/events/{other['id']}/attendees",
                json={"name": "Kim", "email": "kim@example.com"},
            )
        ).json()

        response = await admin_client.post(
            f"/api/events/{event_id}/todos",
            json={"title": "Feed goats", "assigned_attendee_id": stranger["id"]},
        )
        assert response.status_code == 404

    async def test_delete(self, admin_client, event_id):
        todo = (
            await admin_client.post(f"/api/events/{event_id}/todos", json={"title": "Mow"})
        ).json()
        url = f"/api/events/{event_id}/todos/{todo['id']}"

        assert (await admin_client.delete(url)).status_code == 204
        assert (await admin_client.get(url)).status_code == 404
