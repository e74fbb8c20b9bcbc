import pytest
import requests

from prompty.models.models import Prompt
from prompty.routes import prompts as prompts_routes


def _create(client, **data):
    body = {"title": "Cinematic Fire!!", "modality": "cinematic", "user_prompt_template": "Flames"}
    body.update(data)
    return client.post("/api/v1/prompts", data=body)


def test_create_prompt(client, storage):
    resp = _create(client, expected_output_description="  Slow-motion embers  ")

    assert resp.status_code == 201
    data = resp.json()
    assert data["slug"] == "cinematic-fire"
    assert data["modality"] == "cinematic"
    assert data["expected_output_description"] == "Slow-motion embers"
    assert data["preview_url"] is None
    assert storage.uploads == []


def test_create_prompt_validation_error(client, db_session):
    resp = _create(client, title="", modality="audio")

    assert resp.status_code == 422
    assert resp.json()["detail"]["type"] == "INVALID_PROMPT"
    assert db_session.query(Prompt).count() == 0


def test_create_prompt_upload_failure(client, db_session, storage):
    storage.error = "Bucket not found"

    resp = client.post(
        "/api/v1/prompts",
        data={"title": "Fire", "modality": "visual", "user_prompt_template": "Burn"},
        files={"preview_image": ("fire.png", b"fake", "image/png")},
    )

    assert resp.status_code == 502
    assert resp.json()["detail"] == {"type": "PREVIEW_UPLOAD_FAILED", "message": "Bucket not found"}
    assert db_session.query(Prompt).count() == 0


def test_list_and_get_prompts(client):
    _create(client, title="First prompt")
    _create(client, title="Second prompt")

    resp = client.get("/api/v1/prompts")
    assert resp.status_code == 200
    assert {p["slug"] for p in resp.json()} == {"first-prompt", "second-prompt"}

    resp = client.get("/api/v1/prompts/second-prompt")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Second prompt"


def test_get_missing_prompt(client):
    resp = client.get("/api/v1/prompts/missing")
    assert resp.status_code == 404
    assert resp.json()["detail"]["type"] == "PROMPT_NOT_FOUND"


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_create_prompt_network_failure_is_bad_gateway(client, db_session, storage, monkeypatch):
    def unreachable(*args, **kwargs):
        raise requests.ConnectionError("Connection refused")

    monkeypatch.setattr(storage, "upload", unreachable)

    resp = client.post(
        "/api/v1/prompts",
        data={"title": "Fire", "modality": "visual", "user_prompt_template": "Burn"},
        files={"preview_image": ("fire.png", b"fake", "image/png")},
    )

    assert resp.status_code == 502
    assert resp.json()["detail"] == {"type": "PREVIEW_UPLOAD_FAILED", "message": "Connection refused"}
    assert db_session.query(Prompt).count() == 0


def test_create_prompt_records_failure_when_reading_upload_fails(client, monkeypatch):
    outcomes = []

    async def broken_read(upload):
        raise OSError("disk full")

    monkeypatch.setattr(prompts_routes, "read_preview_image", broken_read)
    monkeypatch.setattr(prompts_routes, "record_submission", lambda success: outcomes.append(success))

    with pytest.raises(OSError):
        client.post(
            "/api/v1/prompts",
            data={"title": "Fire", "modality": "visual", "user_prompt_template": "Burn"},
            files={"preview_image": ("fire.png", b"fake", "image/png")},
        )

    assert outcomes == [False]
