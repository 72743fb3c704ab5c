from datetime import datetime, timedelta, timezone

from looptimer.db.models import SharedTimer
from looptimer.db.session import get_session

TIMER_DATA = {"items": [{"id": "1", "name": "Work", "duration": 30, "type": "work"}]}


def _share(client, **payload):
    response = client.post("/shared", json=payload)
    assert response.status_code == 201
    return response.json()


def test_share_saved_timer_and_count_views(client, login):
    timer = client.post("/timers", json={"name": "Morning", "data": TIMER_DATA}).json()
    shared = _share(client, timerId=timer["id"])

    assert shared["name"] == "Morning"
    assert shared["viewCount"] == 0
    assert shared["expiresAt"] is None

    login(None)
    first = client.get(f"/shared/{shared['id']}")
    second = client.get(f"/shared/{shared['id']}")

    assert first.status_code == 200
    assert first.json()["viewCount"] == 1
    assert second.json()["viewCount"] == 2
    assert second.json()["data"]["items"][0]["name"] == "Work"


def test_share_unsaved_config_with_expiry(client):
    shared = _share(client, name="Quick", data=TIMER_DATA, expiresInDays=7)

    assert shared["expiresAt"] is not None


def test_share_needs_timer_or_name_and_data(client):
    assert client.post("/shared", json={"name": "Only a name"}).status_code == 422
    assert client.post("/shared", json={"name": "X", "data": TIMER_DATA, "expiresInDays": 0}).status_code == 422


def test_cannot_share_another_users_timer(client, login):
    timer = client.post("/timers", json={"name": "Mine", "data": TIMER_DATA}).json()

    login("someone_else")
    response = client.post("/shared", json={"timerId": timer["id"]})

    assert response.status_code == 404


def test_unknown_share_is_not_found(client):
    response = client.get("/shared/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "SHARED_TIMER_NOT_FOUND"


def test_expired_share_is_gone(client):
    shared = _share(client, name="Old", data=TIMER_DATA, expiresInDays=1)
    with get_session() as session:
        session.get(SharedTimer, shared["id"]).expires_at = datetime.now(timezone.utc) - timedelta(days=1)

    response = client.get(f"/shared/{shared['id']}")
    clone = client.post(f"/shared/{shared['id']}/clone")

    assert response.status_code == 410
    assert response.json()["detail"]["code"] == "SHARED_TIMER_EXPIRED"
    assert clone.status_code == 410


def test_clone_shared_timer_into_own_timers(client, login):
    shared = _share(client, name="Leg Day", data=TIMER_DATA)

    login("friend")
    cloned = client.post(f"/shared/{shared['id']}/clone")
    renamed = client.post(f"/shared/{shared['id']}/clone", json={"name": "My Leg Day"})

    assert cloned.status_code == 201
    assert cloned.json()["name"] == "Leg Day"
    assert renamed.json()["name"] == "My Leg Day"
    assert {t["name"] for t in client.get("/timers").json()} == {"Leg Day", "My Leg Day"}
