import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import dumps as dumps_router
from api.routes import events as events_router
from settings import settings


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(events_router, "SessionLocal", session_factory)
    monkeypatch.setattr(dumps_router, "SessionLocal", session_factory)
    app = FastAPI()
    app.include_router(events_router.router, prefix="/events")
    app.include_router(dumps_router.router, prefix="/events/{event_id}")
    return TestClient(app)


def _create(client, **overrides):
    body = {"title": "Picnic", "date": "2025-05-05", "start_time": "10:00", "end_time": "15:00"}
    body.update(overrides)
    resp = client.post("/events", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_and_get_event(client):
    created = _create(client, memo="bring snacks")
    assert created["title"] == "Picnic"
    assert created["photo_count"] == 0

    resp = client.get(f"/events/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["memo"] == "bring snacks"


def test_create_event_validation_error(client):
    resp = client.post("/events", json={"title": "Picnic", "date": "tomorrow"})
    assert resp.status_code == 400
    assert "date" in resp.json()["detail"]


def test_list_events_by_day(client):
    _create(client, title="Later", date="2025-05-06")
    _create(client, title="Afternoon", start_time="14:00", end_time=None)
    _create(client, title="Morning", start_time="08:00", end_time=None)

    titles = [e["title"] for e in client.get("/events").json()]
    assert titles == ["Later", "Morning", "Afternoon"]
    day = client.get("/events", params={"date": "2025-05-06"}).json()
    assert [e["title"] for e in day] == ["Later"]


def test_get_missing_event_is_404(client):
    assert client.get("/events/nope").status_code == 404
    assert client.get("/events/nope/photos").status_code == 404
    assert client.delete("/events/nope").status_code == 404


def test_photos_append_cap_and_remove(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_PHOTOS_PER_EVENT", 5)
    event = _create(client)
    url = f"/events/{event['id']}/photos"

    resp = client.post(url, json={"photos": ["p0", "p1", "p2"]})
    assert resp.json()["photos"] == ["p0", "p1", "p2"]

    resp = client.post(url, json={"photos": ["p1", "p3", "p4", "p5"]})
    data = resp.json()
    assert data["photos"] == ["p0", "p1", "p2", "p3", "p4"]
    assert data["limit"] == 5

    resp = client.delete(f"{url}/1")
    assert resp.json()["photos"] == ["p0", "p2", "p3", "p4"]
    assert client.delete(f"{url}/9").status_code == 404

    resp = client.put(url, json={"photos": ["z"]})
    assert resp.json()["count"] == 1
    assert client.get(f"/events/{event['id']}").json()["photo_count"] == 1


def test_delete_event_cascades_dump(client, monkeypatch):
    monkeypatch.setattr(settings, "CASCADE_DELETE", True)
    event = _create(client)
    client.post(f"/events/{event['id']}/photos", json={"photos": [f"p{i}" for i in range(4)]})
    assert client.post(f"/events/{event['id']}/dump", json={}).status_code == 200

    assert client.delete(f"/events/{event['id']}").json() == {"status": "deleted"}
    assert client.get(f"/events/{event['id']}").status_code == 404
    assert client.get(f"/events/{event['id']}/dump").status_code == 404


def test_events_report_whether_they_have_a_dump(client):
    with_dump = _create(client, title="Composed")
    _create(client, title="Plain", date="2025-05-04")
    client.post(f"/events/{with_dump['id']}/photos", json={"photos": [f"p{i}" for i in range(4)]})
    assert client.post(f"/events/{with_dump['id']}/dump", json={}).status_code == 200

    listed = {e["title"]: e["has_dump"] for e in client.get("/events").json()}
    assert listed == {"Composed": True, "Plain": False}
    assert client.get(f"/events/{with_dump['id']}").json()["has_dump"] is True
    assert with_dump["has_dump"] is False
