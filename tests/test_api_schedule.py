"""Tests for the schedule endpoints."""

import pytest

from appointly.domain.scheduling.router import get_suggestion_service
from appointly.domain.scheduling.schemas import WeeklyScheduleConfig
from appointly.errors import Unavailable
from appointly.main import app
from appointly.models import Setting

from .helpers import rule, week


class StubSuggestions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.roles = []

    async def suggest(self, role):
        self.roles.append(role)
        if self.error:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_default_schedule_is_served_without_login(client):
    response = await client.get("/api/schedule")

    assert response.status_code == 200
    data = response.json()
    assert data["slotDuration"] == 30
    days = {d["day"]: d for d in data["weeklySchedule"]}
    assert list(days) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    assert days["Monday"]["isEnabled"] is True
    assert (days["Monday"]["startTime"], days["Monday"]["endTime"]) == ("09:00", "17:00")
    assert days["Saturday"]["isEnabled"] is False
    assert (days["Saturday"]["startTime"], days["Saturday"]["endTime"]) == ("09:00", "13:00")


@pytest.mark.asyncio
async def test_update_requires_login(client):
    response = await client.put("/api/schedule", json={"weeklySchedule": week()})

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["owner", "manager", "leader", "employee"])
async def test_every_staff_role_can_update(client, make_user, role):
    _, headers = make_user(role)
    payload = {"weeklySchedule": week(Monday={"startTime": "08:00"}), "slotDuration": 60}

    response = await client.put("/api/schedule", json=payload, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["slotDuration"] == 60
    assert data["weeklySchedule"][0]["startTime"] == "08:00"
    assert data["updatedAt"] is not None


@pytest.mark.asyncio
async def test_update_is_persisted(client, owner):
    _, headers = owner
    payload = {
        "weeklySchedule": week(Saturday={"isEnabled": True, "startTime": "10:00", "endTime": "12:00"})
    }
    await client.put("/api/schedule", json=payload, headers=headers)

    response = await client.get("/api/schedule")

    saturday = response.json()["weeklySchedule"][5]
    assert saturday["isEnabled"] is True
    assert saturday["startTime"] == "10:00"


@pytest.mark.asyncio
async def test_update_keeps_slot_duration_when_omitted(client, owner):
    _, headers = owner
    await client.put("/api/schedule", json={"weeklySchedule": week(), "slotDuration": 45}, headers=headers)

    response = await client.put("/api/schedule", json={"weeklySchedule": week()}, headers=headers)

    assert response.json()["slotDuration"] == 45


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "weekly",
    [
        week()[:6],
        week(Monday={"startTime": "18:00"}),
        week(Monday={"startTime": "9am"}),
        week(Monday={"overbookingRules": [rule("09:00", "10:00", 0)]}),
    ],
)
async def test_invalid_schedule_is_rejected(client, owner, weekly):
    _, headers = owner

    response = await client.put("/api/schedule", json={"weeklySchedule": weekly}, headers=headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_rejected_update_leaves_schedule_unchanged(client, owner):
    _, headers = owner
    await client.put("/api/schedule", json={"weeklySchedule": week(Monday={"startTime": "10:00"})}, headers=headers)

    await client.put("/api/schedule", json={"weeklySchedule": week()[:5]}, headers=headers)

    response = await client.get("/api/schedule")
    assert response.json()["weeklySchedule"][0]["startTime"] == "10:00"


@pytest.mark.asyncio
async def test_invalid_stored_schedule_falls_back_to_default(client, db_session):
    db_session.add(Setting(key="schedule", value={"weeklySchedule": "broken"}))
    db_session.commit()

    response = await client.get("/api/schedule")

    assert response.status_code == 200
    assert len(response.json()["weeklySchedule"]) == 7


@pytest.mark.asyncio
async def test_slots_report_capacity_and_remaining(client, owner):
    _, headers = owner
    weekly = week(Monday={"overbookingRules": [rule("09:00", "12:00", 2), rule("10:00", "11:00", 5)]})
    await client.put("/api/schedule", json={"weeklySchedule": weekly}, headers=headers)
    await client.post(
        "/api/bookings",
        json={"customerName": "Ana", "customerEmail": "ana@example.com", "day": "Monday", "time": "10:30"},
    )

    response = await client.get("/api/schedule/slots")

    assert response.status_code == 200
    data = response.json()
    assert data["Saturday"] == []
    monday = {s["time"]: s for s in data["Monday"]}
    assert len(monday) == 16
    assert monday["10:30"] == {"time": "10:30", "capacity": 5, "booked": 1, "remaining": 4}
    assert monday["09:30"]["capacity"] == 2
    assert monday["13:00"]["capacity"] == 1


@pytest.mark.asyncio
async def test_suggest_requires_login(client):
    response = await client.post("/api/schedule/suggest", json={"role": "dentist"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_suggest_without_api_key_is_unavailable(client, employee):
    _, headers = employee

    response = await client.post("/api/schedule/suggest", json={"role": "dentist"}, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"available": False, "suggestion": None}


@pytest.mark.asyncio
async def test_suggest_returns_suggestion(client, employee):
    _, headers = employee
    suggestion = WeeklyScheduleConfig(slotDuration=20, weeklySchedule=week())
    stub = StubSuggestions(result=suggestion)
    app.dependency_overrides[get_suggestion_service] = lambda: stub

    response = await client.post("/api/schedule/suggest", json={"role": "barber"}, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is True
    assert data["suggestion"]["slotDuration"] == 20
    assert stub.roles == ["barber"]


@pytest.mark.asyncio
async def test_suggest_failure_degrades_to_unavailable(client, employee):
    _, headers = employee
    stub = StubSuggestions(error=Unavailable("timed out"))
    app.dependency_overrides[get_suggestion_service] = lambda: stub

    response = await client.post("/api/schedule/suggest", json={"role": "barber"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_suggest_does_not_change_stored_schedule(client, employee):
    _, headers = employee
    suggestion = WeeklyScheduleConfig(slotDuration=20, weeklySchedule=week(Monday={"startTime": "06:00"}))
    app.dependency_overrides[get_suggestion_service] = lambda: StubSuggestions(result=suggestion)

    await client.post("/api/schedule/suggest", json={"role": "baker"}, headers=headers)

    response = await client.get("/api/schedule")
    assert response.json()["slotDuration"] == 30
    assert response.json()["weeklySchedule"][0]["startTime"] == "09:00"


@pytest.mark.asyncio
async def test_suggest_requires_role(client, employee):
    _, headers = employee

    response = await client.post("/api/schedule/suggest", json={"role": ""}, headers=headers)

    assert response.status_code == 400
