from looptimer.timers.constants import COLOR_SCHEMES, DEFAULT_ALARM, DEFAULT_COLORS


def test_get_creates_defaults(client):
    response = client.get("/user/preferences")

    assert response.status_code == 200
    assert response.json() == {
        "colors": DEFAULT_COLORS,
        "defaultAlarm": DEFAULT_ALARM,
        "isSound": True,
        "isSpeakNames": True,
    }


def test_partial_updates_keep_other_fields(client):
    client.put("/user/preferences", json={"colors": COLOR_SCHEMES["forest"]})
    client.post("/user/preferences", json={"isSound": False})
    response = client.put("/user/preferences", json={"defaultAlarm": "none"})

    assert response.status_code == 200
    assert response.json() == {
        "colors": COLOR_SCHEMES["forest"],
        "defaultAlarm": "none",
        "isSound": False,
        "isSpeakNames": True,
    }
    assert client.get("/user/preferences").json() == response.json()


def test_unknown_alarm_is_rejected(client):
    response = client.put("/user/preferences", json={"defaultAlarm": "siren"})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "INVALID_PREFERENCES"
    assert detail["details"] == ["Invalid defaultAlarm: siren"]


def test_colors_need_all_keys(client):
    colors = {key: value for key, value in DEFAULT_COLORS.items() if key != "nestedLoop"}

    response = client.put("/user/preferences", json={"colors": colors})

    assert response.status_code == 400
    assert response.json()["detail"]["details"] == ["Missing color for nestedLoop"]
    assert client.get("/user/preferences").json()["colors"] == DEFAULT_COLORS


def test_apply_preferences_resets_item_colors(client):
    client.put("/user/preferences", json={"colors": COLOR_SCHEMES["sunset"], "isSpeakNames": False})
    config = {
        "items": [{"id": "1", "name": "Work", "duration": 20, "type": "work", "color": "#123456", "sound": "bell-1x"}],
        "defaultAlarm": "beep-1x",
    }

    response = client.post("/user/preferences/apply", json={"data": config})

    assert response.status_code == 200
    body = response.json()
    assert body["colors"] == COLOR_SCHEMES["sunset"]
    assert body["defaultAlarm"] == DEFAULT_ALARM
    assert body["speakNames"] is False
    assert body["items"][0]["color"] is None
    assert body["items"][0]["sound"] == "bell-1x"
