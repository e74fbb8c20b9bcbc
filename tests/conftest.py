import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prompty.database import Base, get_db
from prompty.main import app
from prompty.models import models  # noqa: F401
from prompty.services.storage_service import get_storage_client
from prompty.utils.exceptions import StorageError

PUBLIC_BASE = "https://demo.supabase.co/storage/v1/object/public/prompt-outputs"


class FakeStorage:
    """Records uploads instead of talking to Supabase Storage."""

    def __init__(self, error=None):
        self.error = error
        self.uploads = []
        self.bucket = "prompt-outputs"

    def upload(self, path, data, content_type, cache_control="3600", upsert=False):
        self.uploads.append(
            {"path": path, "data": data, "content_type": content_type, "upsert": upsert}
        )
        if self.error:
            raise StorageError(self.error, status_code=400)
        return path

    def get_public_url(self, path):
        return f"{PUBLIC_BASE}/{path}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def failing_storage():
    def make(message):
        return FakeStorage(error=message)

    return make


@pytest.fixture
def client(db_session, storage):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_storage_client] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()
