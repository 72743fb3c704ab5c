import json

from looptimer.ai.routes import get_completion
from looptimer.config.settings import settings
from looptimer.main import app
from looptimer.timers.constants import DEFAULT_COLORS

VALID_WORKOUT = {
    "items": [{"id": "1", "loops": 2, "items": [{"id": "2", "name": "SQUATS", "duration": 40, "type": "work"}]}],
    "colors": DEFAULT_COLORS,
    "defaultAlarm": "beep-2x",
    "speakNames": True,
}


def _use_model(*answers):
    remaining = list(answers)

    async def complete(prompt: str) -> str:
        return remaining.pop(0)

    app.dependency_overrides[get_completion] = lambda: complete


def test_generate_workout(client):
    _use_model(json.dumps({"isExerciseRelated": True, "reason": "ok"}), json.dumps(VALID_WORKOUT))

    response = client.post("/ai/generate-workout", json={"prompt": "leg day"})

    assert response.status_code == 200
    assert response.json() == {"config": VALID_WORKOUT, "attempt": 1}


def test_generate_workout_with_current_config(client):
    _use_model(json.dumps({"isExerciseRelated": True, "reason": "ok"}), "oops", json.dumps(VALID_WORKOUT))
    current = {"items": [{"id": "1", "name": "PLANK", "duration": 60, "type": "work"}]}

    response = client.post("/ai/generate-workout", json={"prompt": "add squats", "currentConfig": current})

    assert response.status_code == 200
    assert response.json()["attempt"] == 2


def test_non_exercise_prompt_is_rejected(client):
    _use_model(json.dumps({"isExerciseRelated": False, "reason": "Not a workout"}))

    response = client.post("/ai/generate-workout", json={"prompt": "write a poem"})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "NOT_EXERCISE_RELATED"


def test_exhausted_retries_return_invalid_json(client):
    _use_model(json.dumps({"isExerciseRelated": True, "reason": "ok"}), "bad", "bad", '{"items": []}')

    response = client.post("/ai/generate-workout", json={"prompt": "hiit"})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "VALIDATION_FAILED"
    assert detail["invalidJson"] == '{"items": []}'
    assert "items: Items array cannot be empty" in detail["details"]


def test_empty_prompt_is_rejected(client):
    _use_model()

    response = client.post("/ai/generate-workout", json={"prompt": "  "})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_PROMPT"


def test_missing_api_key_returns_503(client, monkeypatch):
    monkeypatch.setattr(settings, "ai_provider", "groq")
    monkeypatch.setattr(settings, "groq_api_key", "")

    response = client.post("/ai/generate-workout", json={"prompt": "leg day"})

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "AI_UNAVAILABLE"


def test_cost_estimate(client):
    response = client.get("/ai/cost-estimate", params={"prompt": "20 minute tabata"})

    assert response.status_code == 200
    body = response.json()
    assert body["model"] == settings.ai_model
    assert body["total_cost"] > 0
    assert client.get("/ai/cost-estimate", params={"model": "unknown"}).status_code == 400
