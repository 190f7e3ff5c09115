"""End-to-end tests of the HTTP surface.

The app runs in-process via ``TestClient``; sessions are built with a
manual ticker and generation uses a fake generator, so nothing touches the
network or waits on real time.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

import api.session as session
from api.app import create_app
from api.routes import get_generator_factory
from api.sample_questions import SAMPLE_QUESTIONS
from jee_cbt.errors import GenerationFailed
from jee_cbt.services.test_flow import TestSession
from tests.helpers import FakeTickerFactory, questions_payload, solution_payload
from tests.test_generation import FakeGenerator


@pytest.fixture
def tickers(monkeypatch: pytest.MonkeyPatch) -> FakeTickerFactory:
    factory = FakeTickerFactory()
    monkeypatch.setattr(session, "OPENAI_API_KEY", "")
    monkeypatch.setattr(
        session,
        "session_factory",
        lambda: TestSession(time_limit_s=3, ticker_factory=factory),
    )
    return factory


@pytest.fixture
def client(tickers: FakeTickerFactory):
    app = create_app()
    with TestClient(app) as c:
        yield c


def _upload(client: TestClient, path: str, payload: object):
    data = json.dumps(payload).encode("utf-8")
    return client.post(path, files={"file": ("data.json", data, "application/json")})


def test_initial_state_is_ingestion(client: TestClient) -> None:
    res = client.get("/api/state")
    assert res.status_code == 200
    body = res.json()
    assert body["mode"] == "ingestion"
    assert body["timeRemainingText"] == "00:00:03"
    assert "jee_session" in res.cookies


def test_upload_start_answer_submit_and_grade(client: TestClient) -> None:
    assert _upload(client, "/api/upload-questions", questions_payload(2)).json()["count"] == 2
    assert _upload(client, "/api/upload-answer-key", {"1": "A", "2": "B"}).status_code == 200
    assert client.get("/api/state").json()["mode"] == "pre_test"

    assert client.post("/api/start-test").status_code == 200
    assert client.post("/api/select-answer", json={"option": "A"}).status_code == 200
    assert client.post("/api/navigate", json={"direction": "next"}).json()["index"] == 1

    cancelled = client.post("/api/submit-test", json={"confirmed": False}).json()
    assert cancelled["completed"] is False
    assert client.get("/api/state").json()["mode"] == "question_answer"

    assert client.post("/api/submit-test", json={"confirmed": True}).json()["completed"] is True
    assert client.get("/api/state").json()["mode"] == "analysis"

    results = client.get("/api/results").json()
    assert results["graded"] is True
    assert results["results"]["percentage"] == "50.0"
    assert results["results"]["subjectWise"]["Physics"] == {"correct": 1, "total": 1}

    assert client.post("/api/select-answer", json={"option": "B"}).status_code == 409


def test_invalid_uploads_are_rejected_without_losing_state(client: TestClient) -> None:
    _upload(client, "/api/upload-questions", questions_payload(3))

    res = _upload(client, "/api/upload-questions", [])
    assert res.status_code == 422
    assert "Invalid question format" in res.json()["detail"]

    bad_json = client.post(
        "/api/upload-questions",
        files={"file": ("q.json", b"{oops", "application/json")},
    )
    assert bad_json.status_code == 422

    assert _upload(client, "/api/upload-answer-key", ["A"]).status_code == 422
    assert _upload(client, "/api/upload-solutions", {"1": "A"}).status_code == 422
    assert client.get("/api/state").json()["total"] == 3


def test_sample_test_review_and_solutions(client: TestClient) -> None:
    res = client.post("/api/start-sample-test")
    assert res.json()["total"] == len(SAMPLE_QUESTIONS)

    client.post("/api/start-test")
    client.post("/api/submit-test", json={"confirmed": True})

    assert client.post("/api/review").status_code == 200
    state = client.get("/api/state").json()
    assert state["mode"] == "question_answer"
    assert state["readOnly"] is True

    assert client.post("/api/solutions").status_code == 200
    assert client.get("/api/state").json()["mode"] == "solutions"
    rows = client.get("/api/solutions").json()["solutions"]
    assert len(rows) == len(SAMPLE_QUESTIONS)
    assert all(r["isCorrect"] is False for r in rows)

    assert client.post("/api/back-to-analysis").status_code == 200
    assert client.get("/api/state").json()["mode"] == "analysis"


def test_solutions_and_generation_locked_during_test(client: TestClient) -> None:
    client.app.dependency_overrides[get_generator_factory] = lambda: (lambda api_key: FakeGenerator(3))
    client.post("/api/set-api-key", json={"api_key": "sk-test"})
    _upload(client, "/api/upload-questions", questions_payload(2))
    _upload(client, "/api/upload-solutions", [solution_payload(1, "B")])
    client.post("/api/start-test")
    client.post("/api/select-answer", json={"option": "C"})

    assert client.get("/api/solutions").status_code == 409
    assert client.post("/api/solutions").status_code == 409
    assert client.post("/api/back-to-analysis").status_code == 409

    client.post("/api/toggle-topic", json={"topic_id": "mechanics"})
    assert client.post("/api/generate").status_code == 409

    state = client.get("/api/state").json()
    assert state["mode"] == "question_answer"
    assert state["total"] == 2
    assert state["answeredCount"] == 1


def test_countdown_expiry_through_api(client: TestClient, tickers: FakeTickerFactory) -> None:
    _upload(client, "/api/upload-questions", questions_payload(2))
    client.post("/api/start-test")

    tickers.last.fire(3)

    state = client.get("/api/state").json()
    assert state["mode"] == "analysis"
    assert state["timerPhase"] == "expired"
    assert state["timeRemainingText"] == "00:00:00"

    summary = client.get("/api/results").json()
    assert summary["graded"] is False
    assert summary["summary"] == {"attempted": 0, "unanswered": 2, "total": 2}


def test_out_of_range_jump_and_wrong_mode_requests(client: TestClient) -> None:
    _upload(client, "/api/upload-questions", questions_payload(2))
    assert client.post("/api/review").status_code == 409
    assert client.get("/api/results").status_code == 400
    client.post("/api/start-test")
    assert client.post("/api/start-test").status_code == 409
    assert client.post("/api/jump", json={"index": 5}).status_code == 404
    assert client.post("/api/jump", json={"index": 1}).json()["index"] == 1
    assert client.post("/api/select-answer", json={"option": "Z"}).status_code == 422


def test_generation_flow(client: TestClient) -> None:
    client.app.dependency_overrides[get_generator_factory] = lambda: (lambda api_key: FakeGenerator(4))

    assert client.post("/api/generate").status_code == 400  # no API key yet
    assert client.post("/api/set-api-key", json={"api_key": "nope"}).status_code == 400
    assert client.post("/api/set-api-key", json={"api_key": "sk-test"}).status_code == 200

    topics = client.get("/api/topics").json()
    assert [t["id"] for t in topics["subjects"]["Physics"]][:2] == ["mechanics", "thermodynamics"]

    client.post("/api/topic-selection", json={"show": True})
    assert client.get("/api/state").json()["mode"] == "topic_selection"
    assert client.post("/api/generate").status_code == 409  # no topics

    assert client.post("/api/toggle-topic", json={"topic_id": "optics"}).json()["selected"] is True
    assert client.post("/api/toggle-topic", json={"topic_id": "astrology"}).status_code == 404
    assert client.post("/api/question-count", json={"count": 15}).status_code == 200
    assert client.post("/api/question-count", json={"count": 4}).status_code == 422

    assert client.post("/api/generate").json()["total"] == 4
    state = client.get("/api/state").json()
    assert state["mode"] == "question_answer"
    assert state["testStarted"] is True
    assert state["generation"]["showTopicSelection"] is False


def test_generation_failure_maps_to_503(client: TestClient) -> None:
    class Broken:
        def generate(self, topics, number_of_questions):
            raise GenerationFailed("AI service error")

    client.app.dependency_overrides[get_generator_factory] = lambda: (lambda api_key: Broken())
    client.post("/api/set-api-key", json={"api_key": "sk-test"})
    client.post("/api/topic-selection", json={"show": True})
    client.post("/api/toggle-topic", json={"topic_id": "algebra"})

    res = client.post("/api/generate")
    assert res.status_code == 503
    state = client.get("/api/state").json()
    assert state["mode"] == "topic_selection"
    assert state["generation"]["isGenerating"] is False


def test_reset_tears_down_running_test(client: TestClient, tickers: FakeTickerFactory) -> None:
    _upload(client, "/api/upload-questions", questions_payload(2))
    _upload(client, "/api/upload-solutions", [solution_payload(1)])
    client.post("/api/start-test")
    running = tickers.last

    assert client.post("/api/reset").status_code == 200
    assert running.cancelled and running.joined
    assert client.get("/api/state").json()["mode"] == "ingestion"
