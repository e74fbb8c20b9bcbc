import asyncio
import io
from datetime import datetime, timedelta, timezone

import pytest
import requests
from sqlalchemy.exc import OperationalError
from starlette.datastructures import Headers, UploadFile

from prompty.models.models import Prompt
from prompty.repository.prompt_repository import PromptRepository
from prompty.schemas.prompts import PreviewImage
from prompty.services import prompt_service
from prompty.services.prompt_service import (
    build_prompt_create,
    create_prompt,
    get_prompt_by_slug,
    list_prompt_cards,
    preview_storage_path,
    read_preview_image,
    submit_prompt,
)
from prompty.utils.exceptions import (
    InvalidPreviewImageException,
    InvalidPromptException,
    PreviewUploadFailedException,
    PromptNotFoundException,
)

PNG = PreviewImage(filename="fire.png", content_type="image/png", data=b"\x89PNG fake")


def _submit(db_session, storage, **overrides):
    fields = {
        "title": "Cinematic Fire!!",
        "modality": "cinematic",
        "user_prompt_template": "  A {{subject}} engulfed in flames  ",
        "expected_output_description": "",
        "image": None,
    }
    fields.update(overrides)
    return submit_prompt(db_session, storage, **fields)


def _add(db_session, title, slug, minutes_ago, modality="visual", preview_url=None):
    prompt = Prompt(
        title=title,
        slug=slug,
        modality=modality,
        user_prompt_template=f"Template for {title}",
        preview_url=preview_url,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )
    db_session.add(prompt)
    db_session.commit()
    return prompt


def test_submission_without_image_never_uploads(db_session, storage):
    result = _submit(db_session, storage)

    assert result.success
    assert result.message == "Prompt added successfully."
    assert storage.uploads == []
    stored = db_session.query(Prompt).one()
    assert stored.slug == "cinematic-fire"
    assert stored.preview_url is None


def test_submission_trims_text_and_drops_blank_description(db_session, storage):
    _submit(db_session, storage, title="  Cinematic Fire!!  ", expected_output_description="   ")

    stored = db_session.query(Prompt).one()
    assert stored.title == "Cinematic Fire!!"
    assert stored.user_prompt_template == "A {{subject}} engulfed in flames"
    assert stored.expected_output_description is None


def test_submission_with_image_uploads_then_inserts(db_session, storage):
    result = _submit(db_session, storage, image=PNG)

    assert result.success
    assert len(storage.uploads) == 1
    upload = storage.uploads[0]
    assert upload["path"].startswith("cinematic-fire-")
    assert upload["path"].endswith(".png")
    assert upload["upsert"] is False
    stored = db_session.query(Prompt).one()
    assert stored.preview_url.endswith(upload["path"])


def test_upload_failure_prevents_insert(db_session, failing_storage):
    storage = failing_storage("The resource already exists")

    result = _submit(db_session, storage, image=PNG)

    assert not result.success
    assert result.message == "Error: The resource already exists"
    assert db_session.query(Prompt).count() == 0


def test_create_prompt_raises_on_upload_failure(db_session, failing_storage):
    storage = failing_storage("Bucket not found")
    prompt_data = build_prompt_create("Fire", "visual", "Burn it")

    with pytest.raises(PreviewUploadFailedException) as exc_info:
        create_prompt(db_session, storage, prompt_data, PNG)

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail["message"] == "Bucket not found"


def test_insert_failure_surfaces_backend_message(db_session, storage, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT INTO prompts", {}, Exception("permission denied for table prompts"))

    monkeypatch.setattr(db_session, "commit", failing_commit)

    result = _submit(db_session, storage)

    assert not result.success
    assert result.message == "Error: permission denied for table prompts"


def test_non_image_file_is_rejected_without_backend_calls(db_session, storage):
    text_file = PreviewImage(filename="notes.txt", content_type="text/plain", data=b"hi")

    with pytest.raises(InvalidPreviewImageException):
        create_prompt(db_session, storage, build_prompt_create("Fire", "visual", "Burn"), text_file)

    assert storage.uploads == []
    assert db_session.query(Prompt).count() == 0


def test_missing_fields_are_reported(db_session, storage):
    result = _submit(db_session, storage, title="   ", modality="")

    assert not result.success
    assert "Title is required" in result.message
    assert "Category must be one of" in result.message
    assert db_session.query(Prompt).count() == 0


def test_invalid_modality_raises():
    with pytest.raises(InvalidPromptException):
        build_prompt_create("Fire", "audio", "Burn")


def test_unexpected_failure_is_reported_generically(db_session, storage, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError()

    monkeypatch.setattr(prompt_service, "create_prompt", explode)

    result = _submit(db_session, storage)

    assert not result.success
    assert result.message == "Error: Unknown error"


def test_storage_path_defaults_extension():
    image = PreviewImage(filename="preview", content_type="image/jpeg", data=b"")
    assert preview_storage_path("fire", image, timestamp_ms=42) == "fire-42.jpg"
    assert preview_storage_path("fire", PNG, timestamp_ms=42) == "fire-42.png"


@pytest.mark.parametrize(
    "filename",
    ["fire.png#frag", "shot.x/../../other-bucket/evil", "a.p%2fng", "img.jpg?x=1", "weird.abcdefghijklmnop"],
)
def test_storage_path_ignores_unsafe_extension(filename):
    image = PreviewImage(filename=filename, content_type="image/png", data=b"")
    assert preview_storage_path("fire", image, timestamp_ms=42) == "fire-42.jpg"


def test_storage_path_lowercases_extension():
    image = PreviewImage(filename="SHOT.PNG", content_type="image/png", data=b"")
    assert preview_storage_path("fire", image, timestamp_ms=42) == "fire-42.png"


def test_network_error_during_upload_prevents_insert(db_session, storage, monkeypatch):
    def unreachable(*args, **kwargs):
        raise requests.ConnectionError("Max retries exceeded")

    monkeypatch.setattr(storage, "upload", unreachable)

    result = _submit(db_session, storage, image=PNG)

    assert not result.success
    assert result.message == "Error: Max retries exceeded"
    assert db_session.query(Prompt).count() == 0


def test_read_preview_image_releases_upload():
    upload = UploadFile(
        io.BytesIO(b"\x89PNG"),
        filename="fire.png",
        headers=Headers({"content-type": "image/png"}),
    )

    image = asyncio.run(read_preview_image(upload))

    assert image.filename == "fire.png"
    assert image.content_type == "image/png"
    assert image.data == b"\x89PNG"
    assert upload.file.closed


def test_read_preview_image_without_filename_is_no_image():
    upload = UploadFile(io.BytesIO(b""), filename="")

    assert asyncio.run(read_preview_image(upload)) is None
    assert upload.file.closed


def test_cards_are_listed_newest_first(db_session):
    _add(db_session, "Oldest", "oldest", minutes_ago=30)
    _add(db_session, "Newest", "newest", minutes_ago=1)
    _add(db_session, "Middle", "middle", minutes_ago=10, modality="audio")

    cards = list_prompt_cards(db_session)

    assert [card.title for card in cards] == ["Newest", "Middle", "Oldest"]
    assert cards[0].detail_url == "/prompts/newest"
    assert cards[1].modality_label == "audio"
    assert cards[1].modality_icon == "sparkles"


def test_card_hides_preview_from_unknown_host(db_session):
    _add(db_session, "Remote", "remote", minutes_ago=1, preview_url="https://cdn.example.com/a.png")

    cards = list_prompt_cards(db_session)

    assert cards[0].preview_url is None


def test_listing_failure_yields_no_cards(db_session, monkeypatch):
    def failing_get_all(self):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(PromptRepository, "get_all", failing_get_all)

    assert list_prompt_cards(db_session) == []


def test_detail_lookup_returns_newest_duplicate(db_session):
    _add(db_session, "Fire v1", "fire", minutes_ago=20)
    _add(db_session, "Fire v2", "fire", minutes_ago=2)

    assert get_prompt_by_slug(db_session, "fire").title == "Fire v2"


def test_detail_lookup_missing_slug(db_session):
    with pytest.raises(PromptNotFoundException):
        get_prompt_by_slug(db_session, "nope")
