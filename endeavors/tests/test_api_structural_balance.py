from __future__ import annotations

from endeavors.db import get_conn

BASE = "/api/resistance-training"


def _h(u):
    return {"X-User-Id": str(u["id"])}


def test_reference_lifts_and_calculate(client, ref_lifts):
    items = client.get("/api/reference-lifts").json()["items"]
    assert [i["exercise_name"] for i in items][:2] == ["Back Squat", "Front Squat"]

    res = client.post("/api/structural-balance/calculate",
                      json={"master_lift_id": ref_lifts["Back Squat"], "master_load": 315})
    assert res.status_code == 200
    loads = {l["exercise_name"]: l["bal_lift_load"] for l in res.json()["lifts"]}
    # 315 * 85/100 = 267.75; 315 * 120/100 = 378; 315 * 0.75 = 236.25
    assert loads["Back Squat"] == 315
    assert loads["Front Squat"] == 268
    assert loads["Deadlift"] == 378
    assert loads["Bench Press"] == 236
    assert res.json()["load_unit"] == "lbs"


def test_calculate_unknown_master(client, ref_lifts):
    res = client.post("/api/structural-balance/calculate", json={"master_lift_id": 99999, "master_load": 100})
    assert res.status_code == 400


def test_calculate_negative_load_is_422(client, ref_lifts):
    res = client.post("/api/structural-balance/calculate",
                      json={"master_lift_id": ref_lifts["Back Squat"], "master_load": -5})
    assert res.status_code == 422


def test_save_and_list_balanced_lifts(client, user, ref_lifts):
    res = client.post("/api/balanced-lifts", headers=_h(user),
                      json={"master_lift_id": ref_lifts["Bench Press"], "master_load": 100, "load_unit": "kg", "reps": 3})
    assert res.status_code == 201
    assert res.json()["saved"] == len(ref_lifts)

    items = client.get("/api/balanced-lifts", headers=_h(user)).json()["items"]
    by_name = {i["exercise_name"]: i for i in items}
    # 100 * 100/75 = 133.33
    assert by_name["Back Squat"]["balanced_load"] == 133
    assert by_name["Back Squat"]["load_unit"] == "kg" and by_name["Back Squat"]["reps"] == 3
    with get_conn() as conn:
        n = conn.execute("SELECT COUNT(1) AS c FROM operation_log WHERE action='SAVE_BALANCED_LIFTS'").fetchone()["c"]
        assert n == 1


def _program_with_actuals(client, user, library, actuals_by_name):
    week = [
        {"exercise_source": "library", "exercise_library_id": library[name],
         "planned_sets": [{"reps": 5, "load": "100"}]}
        for name in actuals_by_name
    ]
    pid = client.post(f"{BASE}/programs", headers=_h(user), json={
        "program_name": "Test Block", "program_duration": 1, "weekly_exercises": [week],
    }).json()["program_id"]
    rows = client.get(f"{BASE}/programs/{pid}", headers=_h(user)).json()["weekly_exercises"][0]
    client.post(f"{BASE}/programs/{pid}/actuals", headers=_h(user), json={"exercises": [
        {"program_exercises_id": r["program_exercises_id"], "actual_sets": actuals_by_name[r["exercise_name"]]}
        for r in rows
    ]})
    return pid


def test_performance_records_convert_units(client, user, library):
    _program_with_actuals(client, user, library, {
        "Back Squat": [{"reps": 5, "load": "100", "loadUnit": "kg"}, {"reps": 5, "load": "200", "loadUnit": "lbs"}],
    })
    recs = client.get(f"{BASE}/performance-records", headers=_h(user)).json()["items"]
    assert len(recs) == 1
    assert abs(recs[0]["max_load"] - 220.462) < 1e-9
    assert recs[0]["program_name"] == "Test Block"


def test_structural_balance_analysis(client, user, library, ref_lifts):
    _program_with_actuals(client, user, library, {
        "Back Squat": [{"reps": 5, "load": "200", "loadUnit": "lbs"}],
        "Front Squat": [{"reps": 5, "load": "120", "loadUnit": "lbs"}],
        "Bench Press": [{"reps": 5, "load": "150", "loadUnit": "lbs"}],
    })
    res = client.get("/api/structural-balance-analysis", headers=_h(user)).json()
    assert len(res["performance_records"]) == 3
    grouped = res["imbalances_by_exercise"]
    assert "Front Squat" in grouped
    assert all(i["severity"] == "red" for i in grouped["Front Squat"])
    # squat/bench sits exactly on the reference ratio
    assert not any(i["compared_exercise"] == "Bench Press" for i in grouped.get("Back Squat", []))
