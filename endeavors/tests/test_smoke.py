from endeavors.db import get_conn
from endeavors.repository import tier_repo


def _h(u):
    return {"X-User-Id": str(u["id"])}


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "higher-endeavors-api"


def test_tier_continuum(client):
    with get_conn() as conn:
        tier_repo.upsert(conn, 2, "Fit")
        tier_repo.upsert(conn, 1, "Healthy")
    res = client.get("/api/tier-continuum").json()
    assert res["success"] is True
    assert [t["tier_continuum_name"] for t in res["tiers"]] == ["Healthy", "Fit"]


def test_exercises_library_and_custom(client, user, other_user, library):
    assert client.post("/api/user-exercises", json={"exercise_name": "Banded Squat"}, headers=_h(user)).status_code == 201
    dup = client.post("/api/user-exercises", json={"exercise_name": "Banded Squat"}, headers=_h(user))
    assert dup.status_code == 400
    client.post("/api/user-exercises", json={"exercise_name": "Secret Squat"}, headers=_h(other_user))

    items = client.get("/api/exercises", params={"q": "Squat"}, headers=_h(user)).json()["items"]
    names = [i["name"] for i in items]
    assert "Back Squat" in names and "Banded Squat" in names
    assert "Secret Squat" not in names
    assert {i["source"] for i in items} == {"library", "user"}


def test_settings_get_and_update(client, user, admin):
    cfg = client.get("/api/settings/get").json()
    assert cfg["pairing_group_size"] == 2 and cfg["default_load_unit"] == "lbs"

    assert client.post("/api/settings/update", json={"updates": {"pr_max_reps": 10}},
                       headers=_h(user)).status_code == 403
    res = client.post("/api/settings/update", json={"updates": {"pr_max_reps": 10}}, headers=_h(admin))
    assert res.status_code == 200 and res.json()["updated"] == ["pr_max_reps"]
    assert client.get("/api/settings/get").json()["pr_max_reps"] == 10

    bad = client.post("/api/settings/update", json={"updates": {"default_load_unit": "stone"}}, headers=_h(admin))
    assert bad.status_code == 400
    unknown = client.post("/api/settings/update", json={"updates": {"nope": 1}}, headers=_h(admin))
    assert unknown.status_code == 400


def test_pairing_group_size_setting_drives_renumber(client, admin):
    client.post("/api/settings/update", json={"updates": {"pairing_group_size": 3}}, headers=_h(admin))
    res = client.post("/api/resistance-training/pairings/renumber",
                      json={"exercises": [{"pairing": None}] * 4}).json()
    assert [e["pairing"] for e in res["exercises"]] == ["A1", "A2", "A3", "B1"]


def test_logs_search_admin_only(client, user, admin):
    client.post("/api/user-exercises", json={"exercise_name": "Logged Lift"}, headers=_h(user))
    assert client.get("/api/logs/search", headers=_h(user)).status_code == 403
    res = client.get("/api/logs/search", params={"action": "CREATE_USER_EXERCISE"}, headers=_h(admin)).json()
    assert res["total"] == 1
    assert "Logged Lift" in res["items"][0]["payload_json"]
