import time

import pytest
from fastapi.testclient import TestClient

from scenequiz.app import create_app
from scenequiz.errors import ServiceError

from conftest import ScriptedProvider, make_round

ROUND = make_round(("There is a dog", True), ("There are three apples", False))


def wait_until_loaded(client, attempts=100):
    for _ in range(attempts):
        view = client.get("/api/state").json()
        if view["phase"] != "loading":
            return view
        time.sleep(0.01)
    pytest.fail("round never finished loading")


@pytest.fixture
def client():
    with TestClient(create_app(provider=ScriptedProvider(ROUND))) as c:
        yield c


def test_home_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "There Is / There Are" in response.text


def test_state_without_session(client):
    assert client.get("/api/state").json()["phase"] == "start"


def test_full_round(client):
    response = client.post("/api/start")
    assert response.status_code == 200
    assert response.json()["phase"] == "loading"

    view = wait_until_loaded(client)
    assert view["phase"] == "playing"
    assert view["sentence"] == "There is a dog"
    assert view["question_number"] == 1
    assert view["total_questions"] == 2
    assert view["image"].startswith("data:image/png;base64,")

    view = client.post("/api/answer", data={"choice": "true"}).json()
    assert view["phase"] == "show_result"
    assert view["last_judgment_correct"] is True
    assert view["score"] == 1

    duplicate = client.post("/api/answer", data={"choice": "true"})
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Already answered"

    view = client.post("/api/advance").json()
    assert view["phase"] == "playing"
    assert view["last_judgment_correct"] is None
    assert view["is_last_question"] is True

    client.post("/api/answer", data={"choice": "true"})
    view = client.post("/api/advance").json()
    assert view["phase"] == "game_over"
    assert view["score"] == 1
    assert view["score_percentage"] == 50
    assert [a["is_correct"] for a in view["answers"]] == [True, False]


def test_rejected_transitions(client):
    assert client.post("/api/answer", data={"choice": "true"}).status_code == 401
    assert client.post("/api/advance").status_code == 401

    client.post("/api/start")
    wait_until_loaded(client)

    response = client.post("/api/start")
    assert response.status_code == 400
    assert response.json()["phase"] == "playing"

    response = client.post("/api/advance")
    assert response.status_code == 400


def test_restart_mid_round(client):
    client.post("/api/start")
    wait_until_loaded(client)
    client.post("/api/answer", data={"choice": "false"})

    response = client.post("/api/start", data={"restart": "true"})
    assert response.status_code == 200
    assert response.json()["score"] == 0

    view = wait_until_loaded(client)
    assert view["phase"] == "playing"
    assert view["answers"] == []


def test_failure_surfaces_as_error_and_retry_recovers():
    provider = ScriptedProvider(ServiceError(), ROUND)
    with TestClient(create_app(provider=provider)) as client:
        client.post("/api/start")
        view = wait_until_loaded(client)
        assert view["phase"] == "error"
        assert view["error_message"] == ServiceError.default_message
        assert view["image"] is None

        client.post("/api/start")
        assert wait_until_loaded(client)["phase"] == "playing"


def test_reset_drops_session(client):
    client.post("/api/start")
    wait_until_loaded(client)
    assert client.post("/api/reset").json() == {"status": "success"}
    assert client.get("/api/state").json()["phase"] == "start"


def test_scene_summary(client):
    scenes = client.get("/api/scenes").json()
    assert sum(s["count"] for s in scenes) >= 1


def test_page_script_offers_new_picture(client):
    script = client.get("/static/game.js")
    assert script.status_code == 200
    assert 'restart: "true"' in script.text
    assert "New Picture" in script.text
