import base64
from typing import Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api import models  # noqa: F401  registers tables on Base.metadata
from blog_api.app import create_app
from blog_api.auth import create_access_token
from blog_api.config import Settings
from blog_api.database import Base, get_db
from blog_api.repositories import UserRepository
from blog_api.storage import LocalBlobStorage, get_blob_storage

AUTHOR_ID = "507f1f77bcf86cd799439011"
OTHER_AUTHOR_ID = "507f191e810c19729de860ea"
MISSING_BLOG_ID = "5f1d7f1e2a3b4c5d6e7f8a9b"

PNG_PHOTO = "data:image/png;base64,iVBORw0KGgo="
PNG_BYTES = base64.b64decode("iVBORw0KGgo=")
JPEG_PHOTO = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8\xff\xe0fake-jpeg").decode()
JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


class InMemoryBlobStorage:
    """Blob storage kept in a dict"""

    def __init__(self):
        self.files: Dict[str, bytes] = {}

    async def write(self, filename: str, data: bytes) -> None:
        self.files[filename] = data

    def delete(self, filename: str) -> None:
        if filename not in self.files:
            raise FileNotFoundError(filename)
        del self.files[filename]

    def exists(self, filename: str) -> bool:
        return filename in self.files

    def read(self, filename: str) -> bytes:
        return self.files[filename]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        backend_server_path="http://testserver",
        storage_dir=str(tmp_path / "storage"),
        secret_key="test-secret-key",
    )


@pytest.fixture
def engine():
    """In-memory database shared by every session of one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(settings):
    return LocalBlobStorage(settings.storage_dir)


@pytest.fixture
def app(settings, session_factory, storage):
    app = create_app(settings)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: storage
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def test_user(db_session):
    """Create the acting user"""
    return UserRepository(db_session).create_user({
        "id": AUTHOR_ID,
        "name": "Test User",
        "username": "testuser",
        "email": "test@example.com",
    })


@pytest.fixture
def auth_headers(test_user, settings):
    """Get authorization headers"""
    token = create_access_token(test_user.id, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def blog_data():
    return {
        "title": "A",
        "author": AUTHOR_ID,
        "content": "hello",
        "photo": PNG_PHOTO,
    }


@pytest.fixture
def created_blog(client, auth_headers, blog_data):
    """Create a blog through the API and return its list view"""
    response = client.post("/blog", json=blog_data, headers=auth_headers)
    assert response.status_code == 201
    return response.json()["blog"]
