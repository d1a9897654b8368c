"""Tests for adding exercises and fetching exercise logs."""

from datetime import datetime, timedelta, timezone

import pytest

from exercise_tracker_api.app.core.errors import PersistenceError


def add(client, user_id, **fields):
    return client.post(f"/api/users/{user_id}/exercises", json=fields).json()


def test_register_add_and_fetch_log(client):
    user = client.post("/api/users", json={"username": "alice"}).json()
    uid = user["id"]

    added = add(client, uid, description="run", duration="30", date="2024-01-01")
    assert added == {
        "id": uid,
        "username": "alice",
        "date": "Mon Jan 01 2024",
        "duration": 30,
        "description": "run",
    }

    log = client.get(f"/api/users/{uid}/logs").json()
    assert log == {
        "id": uid,
        "username": "alice",
        "count": 1,
        "log": [{"description": "run", "duration": 30, "date": "Mon Jan 01 2024"}],
    }


def test_added_date_matches_logged_date(client, alice):
    added = add(client, alice["id"], description="swim", duration=45, date="2023-07-04T08:15:00")
    log = client.get(f"/api/users/{alice['id']}/logs").json()
    assert added["date"] == "Tue Jul 04 2023"
    assert log["log"][0]["date"] == added["date"]


def test_add_exercise_with_form_body(client, alice):
    resp = client.post(
        f"/api/users/{alice['id']}/exercises",
        data={"description": "row", "duration": "20", "date": "2024-03-10"},
    )
    assert resp.json()["duration"] == 20
    assert resp.json()["date"] == "Sun Mar 10 2024"


def test_add_exercise_defaults_to_today(client, alice):
    before = datetime.now(timezone.utc)
    added = add(client, alice["id"], description="walk", duration=10)
    after = datetime.now(timezone.utc)
    assert added["date"] in {before.strftime("%a %b %d %Y"), after.strftime("%a %b %d %Y")}


def test_add_exercise_keeps_fractional_duration(client, alice):
    added = add(client, alice["id"], description="stretch", duration="12.5", date="2024-01-01")
    assert added["duration"] == 12.5
    log = client.get(f"/api/users/{alice['id']}/logs").json()
    assert log["log"][0]["duration"] == 12.5


def test_add_exercise_unknown_user(client):
    resp = client.post(
        "/api/users/does-not-exist/exercises", json={"description": "run", "duration": 30}
    )
    assert resp.status_code == 200
    assert resp.json() == {"error": "User not found"}


def test_add_exercise_non_numeric_duration(client, alice, store):
    body = add(client, alice["id"], description="run", duration="abc")
    assert body == {"error": "Duration must be a number"}
    assert store.exercises.find() == []


@pytest.mark.parametrize(
    "fields",
    [
        {"duration": 30},
        {"description": "run"},
        {"description": "", "duration": 30},
        {"description": "run", "duration": ""},
    ],
)
def test_add_exercise_missing_fields(client, alice, fields):
    assert add(client, alice["id"], **fields) == {"error": "Description and duration are required"}


def test_add_exercise_invalid_date(client, alice, store):
    body = add(client, alice["id"], description="run", duration=30, date="yesterday-ish")
    assert body == {"error": "Invalid date format"}
    assert store.exercises.find() == []


def test_add_exercise_store_failure(client, alice, store, monkeypatch):
    def broken_create(document):
        raise PersistenceError("disk full")

    monkeypatch.setattr(store.exercises, "create", broken_create)
    resp = client.post(
        f"/api/users/{alice['id']}/exercises", json={"description": "run", "duration": 30}
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "Server error adding exercise"}


def test_duration_is_stored_as_number(client, alice, store):
    add(client, alice["id"], description="run", duration="30", date="2024-01-01")
    (doc,) = store.exercises.find({"userId": alice["id"]})
    assert isinstance(doc["duration"], (int, float))
    assert doc["duration"] == 30


@pytest.fixture
def january(client, alice):
    """Three exercises for alice spread over January and February 2024."""
    uid = alice["id"]
    add(client, uid, description="a", duration=10, date="2024-01-01")
    add(client, uid, description="b", duration=20, date="2024-01-15T18:30:00")
    add(client, uid, description="c", duration=30, date="2024-02-01")
    return uid


def test_log_limit(client, january):
    log = client.get(f"/api/users/{january}/logs", params={"limit": 2}).json()
    assert log["count"] == 2
    assert [entry["description"] for entry in log["log"]] == ["a", "b"]


@pytest.mark.parametrize("limit", ["0", "abc", "-1", ""])
def test_log_limit_without_positive_number_is_unlimited(client, january, limit):
    log = client.get(f"/api/users/{january}/logs", params={"limit": limit}).json()
    assert log["count"] == 3


def test_log_date_range(client, january):
    log = client.get(
        f"/api/users/{january}/logs", params={"from": "2024-01-05", "to": "2024-01-31"}
    ).json()
    assert log["count"] == 1
    assert log["log"] == [{"description": "b", "duration": 20, "date": "Mon Jan 15 2024"}]


def test_log_date_range_is_inclusive(client, january):
    log = client.get(
        f"/api/users/{january}/logs", params={"from": "2024-01-01", "to": "2024-01-15"}
    ).json()
    assert [entry["description"] for entry in log["log"]] == ["a", "b"]


def test_log_from_only(client, january):
    log = client.get(f"/api/users/{january}/logs", params={"from": "2024-01-15"}).json()
    assert [entry["description"] for entry in log["log"]] == ["b", "c"]


def test_log_to_only_with_limit(client, january):
    log = client.get(
        f"/api/users/{january}/logs", params={"to": "2024-12-31", "limit": "1"}
    ).json()
    assert log["count"] == 1
    assert log["log"][0]["description"] == "a"


def test_log_only_contains_own_exercises(client, january):
    bob = client.post("/api/users", json={"username": "bob"}).json()
    add(client, bob["id"], description="bob's run", duration=5, date="2024-01-10")
    log = client.get(f"/api/users/{january}/logs").json()
    assert log["count"] == 3
    assert all(entry["description"] != "bob's run" for entry in log["log"])


def test_log_invalid_from(client, january):
    resp = client.get(f"/api/users/{january}/logs", params={"from": "not-a-date"})
    assert resp.status_code == 200
    assert resp.json() == {"error": "Invalid 'from' date format"}


def test_log_invalid_to(client, january):
    resp = client.get(f"/api/users/{january}/logs", params={"to": "31/31/2024"})
    assert resp.json() == {"error": "Invalid 'to' date format"}


def test_log_unknown_user(client):
    resp = client.get("/api/users/nobody/logs", params={"from": "not-a-date"})
    assert resp.json() == {"error": "User not found"}


def test_log_empty(client, alice):
    log = client.get(f"/api/users/{alice['id']}/logs").json()
    assert log == {"id": alice["id"], "username": "alice", "count": 0, "log": []}


def test_log_store_failure(client, january, store, monkeypatch):
    def broken_find(filter=None, limit=0):
        raise PersistenceError("disk on fire")

    monkeypatch.setattr(store.exercises, "find", broken_find)
    resp = client.get(f"/api/users/{january}/logs")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Server error fetching exercise log"}


def test_log_entries_today_are_within_open_range(client, alice):
    add(client, alice["id"], description="now", duration=1)
    today = datetime.now(timezone.utc).date()
    log = client.get(
        f"/api/users/{alice['id']}/logs",
        params={
            "from": (today - timedelta(days=1)).isoformat(),
            "to": (today + timedelta(days=1)).isoformat(),
        },
    ).json()
    assert log["count"] == 1


@pytest.mark.parametrize("duration", ["1e20", "123456789012345678901234567890", 10**30])
def test_add_exercise_with_huge_duration(client, alice, duration):
    resp = client.post(
        f"/api/users/{alice['id']}/exercises",
        json={"description": "ultra", "duration": duration, "date": "2024-01-01"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert "error" not in body
    assert body["duration"] == float(duration)
    log = client.get(f"/api/users/{alice['id']}/logs").json()
    assert log["log"][0]["duration"] == float(duration)


@pytest.mark.parametrize("limit", ["1e20", "99999999999999999999999999"])
def test_log_huge_limit_is_capped(client, january, limit):
    resp = client.get(f"/api/users/{january}/logs", params={"limit": limit})
    assert resp.status_code == 200
    assert resp.json()["count"] == 3


def test_add_exercise_unknown_user_reported_before_bad_date(client):
    resp = client.post(
        "/api/users/does-not-exist/exercises",
        json={"description": "run", "duration": 30, "date": "not-a-date"},
    )
    assert resp.json() == {"error": "User not found"}


def test_add_exercise_missing_fields_reported_before_unknown_user(client):
    resp = client.post("/api/users/does-not-exist/exercises", json={"description": "run"})
    assert resp.json() == {"error": "Description and duration are required"}


def test_add_exercise_early_year_is_zero_padded(client, alice):
    added = add(client, alice["id"], description="ancient", duration=5, date="0099-01-01")
    assert added["date"] == "Thu Jan 01 0099"
    log = client.get(f"/api/users/{alice['id']}/logs").json()
    assert log["log"][0]["date"] == "Thu Jan 01 0099"
