"""
Tests for the public survey routes.
"""
import json
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from sondage.core.config import settings
from sondage.api.routes.survey_routes import parse_exclude

if TYPE_CHECKING:
    from _pytest.monkeypatch import MonkeyPatch


def _submit(client: TestClient, question_id: int, text: str, **extra):
    return client.post("/api/answers", json={"question_id": question_id, "text": text, **extra})


def _answers(client: TestClient, question_id: int):
    return client.get(f"/api/admin/questions/{question_id}/answers").json()


def test_parse_exclude() -> None:
    """Test parsing of the exclusion list."""
    assert parse_exclude("[1, 2, 3]") == [1, 2, 3]
    assert parse_exclude('[1, "2", true, 3.5]') == [1]
    assert parse_exclude("not json") == []
    assert parse_exclude('{"a": 1}') == []


def test_next_question(client: TestClient) -> None:
    """Test that a seeded question is served."""
    response = client.get("/api/questions/next")
    assert response.status_code == 200
    data = response.json()
    assert isinstance(data["id"], int)
    assert data["text"]


def test_next_question_done_when_all_excluded(admin_client: TestClient) -> None:
    """Test the end-of-survey marker."""
    ids = [q["id"] for q in admin_client.get("/api/admin/questions").json()]
    response = admin_client.get("/api/questions/next", params={"exclude": json.dumps(ids)})
    assert response.json() == {"done": True}


def test_submit_answer_accepted(admin_client: TestClient, question_id: int) -> None:
    """Test that an answer is cleaned and stored."""
    response = _submit(admin_client, question_id, "  Le Kebab!! 😂", response_time=4.6)
    assert response.status_code == 200
    assert response.json() == {"ok": True, "answer": "kebab", "merged": False}

    data = _answers(admin_client, question_id)
    assert data["totalCount"] == 1
    assert data["answers"][0]["normalized"] == "kebab"

    questions = {q["id"]: q for q in admin_client.get("/api/admin/questions").json()}
    assert questions[question_id]["avg_time"] == 5


def test_submit_answer_merges_similar(admin_client: TestClient, question_id: int) -> None:
    """Test live deduplication through the API."""
    _submit(admin_client, question_id, "mcdo")
    response = _submit(admin_client, question_id, "MacDo")
    assert response.json() == {"ok": True, "answer": "mcdo", "merged": True}
    assert _answers(admin_client, question_id)["answers"][0]["count"] == 2


@pytest.mark.parametrize("text,reason", [
    ("  JSP lol!! 😂", "banned"),
    ("qsdfgh", "gibberish"),
    ("😂😂", "empty_or_oversize"),
    ("x" * 60, "empty_or_oversize"),
    ("   ", "empty_or_oversize"),
    ("", "empty_or_oversize"),
    ("a" * 201, "empty_or_oversize"),
])
def test_submit_answer_rejected(admin_client: TestClient, question_id: int, text: str, reason: str) -> None:
    """Test each rejection reason and the rejected counter."""
    response = _submit(admin_client, question_id, text)
    assert response.status_code == 400
    body = response.json()
    assert body["status_code"] == 400
    assert body["details"] == {"reason": reason}
    assert body["message"]

    questions = {q["id"]: q for q in admin_client.get("/api/admin/questions").json()}
    assert questions[question_id]["rejected_count"] == 1
    assert questions[question_id]["answer_count"] == 0


def test_submit_answer_question_full(
    admin_client: TestClient, question_id: int, monkeypatch: "MonkeyPatch"
) -> None:
    """Test that a full question answers 410 without counting a rejection."""
    monkeypatch.setattr(settings, "ANSWER_THRESHOLD", 1)
    assert _submit(admin_client, question_id, "pizza").status_code == 200

    response = _submit(admin_client, question_id, "sushi")
    assert response.status_code == 410
    assert response.json()["details"] == {"reason": "question_full"}

    questions = {q["id"]: q for q in admin_client.get("/api/admin/questions").json()}
    assert questions[question_id]["rejected_count"] == 0
    assert questions[question_id]["answer_count"] == 1


def test_submit_answer_validation(client: TestClient, question_id: int) -> None:
    """Test submissions missing a field."""
    assert client.post("/api/answers", json={"text": "pizza"}).status_code == 422
    assert client.post("/api/answers", json={"question_id": question_id}).status_code == 422


def test_submit_answer_unknown_question(client: TestClient) -> None:
    """Test that unknown questions are a 404."""
    assert _submit(client, 999999, "pizza").status_code == 404


def test_submit_answer_out_of_range_time(admin_client: TestClient, question_id: int) -> None:
    """Test that an implausible response time is dropped, not rejected."""
    response = _submit(admin_client, question_id, "pizza", response_time=600)
    assert response.status_code == 200
    questions = {q["id"]: q for q in admin_client.get("/api/admin/questions").json()}
    assert questions[question_id]["avg_time"] is None


def test_skip_question(admin_client: TestClient, question_id: int) -> None:
    """Test the skip counter."""
    assert admin_client.post(f"/api/questions/{question_id}/skip").json() == {"ok": True}
    assert admin_client.post("/api/questions/999999/skip").status_code == 404
    questions = {q["id"]: q for q in admin_client.get("/api/admin/questions").json()}
    assert questions[question_id]["skip_count"] == 1


@pytest.mark.parametrize("text", ["J'étais pas né", "J’étais pas né", "N’importe quoi"])
def test_submit_answer_banned_with_either_apostrophe(admin_client: TestClient, question_id: int, text: str) -> None:
    """Test that seeded banned phrases match straight and curly apostrophes."""
    response = _submit(admin_client, question_id, text)
    assert response.status_code == 400
    assert response.json()["details"] == {"reason": "banned"}
