from __future__ import annotations

import pytest

from endeavors.db import get_conn

BASE = "/api/cme-sessions"


def _h(u):
    return {"X-User-Id": str(u["id"])}


@pytest.fixture()
def activities(tmp_db_path):
    from endeavors.repository import cme_repo
    with get_conn() as conn:
        return {
            "Outdoor Run": cme_repo.upsert_activity(conn, "Outdoor Run", "Running"),
            "Indoor Rowing": cme_repo.upsert_activity(conn, "Indoor Rowing", "Rowing", "Rowing Machine"),
        }


def _session(activities, **kw):
    body = {
        "session_name": "Aerobic Base",
        "macrocycle_phase": "Base",
        "focus_block": "Zone 2",
        "activities": [
            {"cme_activity_library_id": activities["Outdoor Run"],
             "intervals": [{"step_type": "Work", "duration": 40, "metrics": {"Distance": 6}}]},
            {"cme_activity_library_id": activities["Indoor Rowing"], "use_intervals": True, "intervals": [
                {"step_type": "Warm-Up", "duration": 5},
                {"is_block_header": True, "block_id": 1, "repeat_count": 4},
                {"step_type": "Work", "duration": 3, "is_repeat_block": True, "block_id": 1},
                {"step_type": "Recovery", "duration": 1, "is_repeat_block": True, "block_id": 1},
            ]},
        ],
    }
    body.update(kw)
    return body


def test_requires_user_header(client):
    assert client.get(BASE).status_code == 401


def test_create_get_list_session(client, user, activities):
    res = client.post(BASE, json=_session(activities), headers=_h(user))
    assert res.status_code == 201, res.text
    assert res.json()["activity_count"] == 2
    sid = res.json()["cme_session_id"]

    got = client.get(f"{BASE}/{sid}", headers=_h(user)).json()
    assert got["session_name"] == "Aerobic Base" and got["focus_block"] == "Zone 2"
    run, row = got["activities"]
    assert run["activity_name"] == "Outdoor Run" and run["activity_family"] == "Running"
    assert run["planned_steps"][0]["metrics"] == {"Distance": 6, "Duration": 40}
    assert run["actual_steps"] == [] and run["planned_duration"] == 40
    # warm-up plus four work/recovery repeats
    assert len(row["planned_steps"]) == 9
    assert row["planned_duration"] == 5 + 4 * 4

    items = client.get(BASE, headers=_h(user)).json()["items"]
    assert len(items) == 1
    assert items[0]["exercise_count"] == 2
    assert items[0]["exercise_summary"] == "Outdoor Run, Indoor Rowing"

    with get_conn() as conn:
        log = conn.execute(
            "SELECT result, entity_id FROM operation_log WHERE action='CREATE_CME_SESSION'"
        ).fetchone()
        assert log["result"] == "OK" and log["entity_id"] == str(sid)


def test_empty_session_summary(client, user):
    res = client.post(BASE, json={"session_name": "Rest Day"}, headers=_h(user))
    assert res.status_code == 201
    items = client.get(BASE, headers=_h(user)).json()["items"]
    assert items[0]["exercise_count"] == 0 and items[0]["exercise_summary"] == "No exercises"


def test_blank_name_and_unknown_activity_rejected(client, user, activities):
    assert client.post(BASE, json=_session(activities, session_name="  "), headers=_h(user)).status_code == 400

    body = _session(activities)
    body["activities"].append({"cme_activity_library_id": 98765, "intervals": []})
    assert client.post(BASE, json=body, headers=_h(user)).status_code == 400
    with get_conn() as conn:
        assert conn.execute("SELECT COUNT(1) AS c FROM cme_sessions").fetchone()["c"] == 0
        assert conn.execute("SELECT COUNT(1) AS c FROM cme_sessions_activities").fetchone()["c"] == 0


def test_update_replaces_activities(client, user, activities):
    sid = client.post(BASE, json=_session(activities), headers=_h(user)).json()["cme_session_id"]
    body = _session(activities, session_name="Tempo Run")
    body["activities"] = body["activities"][:1]
    res = client.put(f"{BASE}/{sid}", json=body, headers=_h(user))
    assert res.status_code == 200 and res.json()["activity_count"] == 1

    got = client.get(f"{BASE}/{sid}", headers=_h(user)).json()
    assert got["session_name"] == "Tempo Run"
    assert [a["activity_name"] for a in got["activities"]] == ["Outdoor Run"]
    assert got["updated_at"] is not None


def test_other_user_cannot_read_or_update(client, user, other_user, admin, activities):
    sid = client.post(BASE, json=_session(activities), headers=_h(user)).json()["cme_session_id"]
    assert client.get(f"{BASE}/{sid}", headers=_h(other_user)).status_code == 403
    assert client.put(f"{BASE}/{sid}", json=_session(activities), headers=_h(other_user)).status_code == 403
    assert client.get(f"{BASE}/{sid}", headers=_h(admin)).status_code == 200
    assert client.get(f"{BASE}/99999", headers=_h(user)).status_code == 404
    assert client.get(BASE, headers=_h(other_user)).json()["items"] == []


def test_record_actuals(client, user, activities):
    sid = client.post(BASE, json=_session(activities), headers=_h(user)).json()["cme_session_id"]
    run_id = client.get(f"{BASE}/{sid}", headers=_h(user)).json()["activities"][0]["cme_session_activity_id"]

    res = client.post(f"{BASE}/{sid}/actuals", json={
        "session_date": "2025-03-04",
        "activities": [{"cme_session_activity_id": run_id, "intervals": [
            {"duration": 42, "metrics": {"Distance": 6.2, "Pace": "6:46/km"},
             "heart_rate": {"type": "zone", "value": "2"}},
        ]}],
    }, headers=_h(user))
    assert res.status_code == 200, res.text
    assert res.json()["updated"] == 1

    got = client.get(f"{BASE}/{sid}", headers=_h(user)).json()
    assert got["start_date"] == "2025-03-04"
    step = got["activities"][0]["actual_steps"][0]
    assert step["actual_duration"] == 42 and step["actual_distance"] == 6.2
    assert step["actual_heart_rate"] == {"type": "zone", "value": "2", "min": None, "max": None}
    assert got["activities"][0]["actual_duration"] == 42
    # planned steps are untouched
    assert got["activities"][0]["planned_steps"][0]["duration"] == 40


def test_actuals_for_foreign_activity_rejected(client, user, activities):
    sid = client.post(BASE, json=_session(activities), headers=_h(user)).json()["cme_session_id"]
    other = client.post(BASE, json=_session(activities), headers=_h(user)).json()["cme_session_id"]
    foreign = client.get(f"{BASE}/{other}", headers=_h(user)).json()["activities"][0]["cme_session_activity_id"]
    own = client.get(f"{BASE}/{sid}", headers=_h(user)).json()["activities"][0]["cme_session_activity_id"]

    res = client.post(f"{BASE}/{sid}/actuals", json={"activities": [
        {"cme_session_activity_id": own, "intervals": [{"duration": 10}]},
        {"cme_session_activity_id": foreign, "intervals": [{"duration": 10}]},
    ]}, headers=_h(user))
    assert res.status_code == 400
    got = client.get(f"{BASE}/{sid}", headers=_h(user)).json()
    assert got["activities"][0]["actual_steps"] == []

    assert client.post(f"{BASE}/{sid}/actuals", json={"activities": []}, headers=_h(user)).status_code == 400


def test_activity_library_listing(client, user, activities):
    items = client.get("/api/cme-activities", headers=_h(user)).json()["items"]
    assert [(i["activity"], i["activity_family"]) for i in items] == [
        ("Indoor Rowing", "Rowing"), ("Outdoor Run", "Running"),
    ]


def test_templates_admin_only(client, user, admin, activities):
    body = {"template_name": "Healthy Zone 2", "activities": [
        {"cme_activity_library_id": activities["Outdoor Run"], "intervals": [{"duration": 30}]},
    ]}
    assert client.post("/api/cme-templates", json=body, headers=_h(user)).status_code == 403
    assert client.post("/api/cme-templates", json={**body, "activities": []}, headers=_h(admin)).status_code == 400
    assert client.post("/api/cme-templates", json={**body, "tier_continuum_id": 42},
                       headers=_h(admin)).status_code == 400

    res = client.post("/api/cme-templates", json=body, headers=_h(admin))
    assert res.status_code == 201, res.text
    tid = res.json()["cme_template_id"]

    items = client.get("/api/cme-templates", headers=_h(user)).json()["items"]
    assert [(t["template_name"], t["exercise_count"]) for t in items] == [("Healthy Zone 2", 1)]
    got = client.get(f"/api/cme-templates/{tid}", headers=_h(user)).json()
    assert got["activities"][0]["planned_duration"] == 30
    assert client.get("/api/cme-templates/999", headers=_h(user)).status_code == 404

    # template sessions stay out of the admin's own session list
    assert client.get(BASE, headers=_h(admin)).json()["items"] == []
