def _h(u):
    return {"X-User-Id": str(u["id"])}


def test_defaults_created_on_first_read(client, user):
    res = client.get("/api/user-settings", headers=_h(user))
    assert res.status_code == 200
    s = res.json()
    assert s["general"]["heightUnit"] == "ft_in"
    assert s["general"]["weightUnit"] == "lbs"
    assert s["general"]["sidebarExpandMode"] == "hover"
    assert s["general"]["notificationsEmail"] is True
    assert s["general"]["notificationsText"] is False
    assert s["fitness"] == {} and s["nutrition"] == {}


def test_partial_update_merges(client, user):
    h = _h(user)
    res = client.put("/api/user-settings", headers=h, json={
        "general": {"weightUnit": "kgs", "timeFormat": "24h", "notificationsEmail": False},
        "fitness": {"resistanceTraining": {"loadUnit": "kg", "trackRPE": True}},
    })
    assert res.status_code == 200, res.text
    s = client.get("/api/user-settings", headers=h).json()
    assert s["general"]["weightUnit"] == "kgs"
    assert s["general"]["timeFormat"] == "24h"
    assert s["general"]["notificationsEmail"] is False
    assert s["general"]["temperatureUnit"] == "F"
    assert s["fitness"]["resistanceTraining"]["trackRPE"] is True

    client.put("/api/user-settings", headers=h, json={"health": {"restingHeartRate": 55}})
    s = client.get("/api/user-settings", headers=h).json()
    assert s["fitness"]["resistanceTraining"]["loadUnit"] == "kg"
    assert s["health"] == {"restingHeartRate": 55}


def test_invalid_enum_is_422(client, user):
    res = client.put("/api/user-settings", headers=_h(user), json={"general": {"timeFormat": "36h"}})
    assert res.status_code == 422


def test_settings_are_per_user(client, user, other_user):
    client.put("/api/user-settings", headers=_h(user), json={"general": {"language": "es"}})
    assert client.get("/api/user-settings", headers=_h(other_user)).json()["general"]["language"] == "en"
