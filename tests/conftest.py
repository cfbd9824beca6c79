import pytest
from fastapi.testclient import TestClient

from src.api import dependencies
from src.api.main import app
from src.config.settings import get_settings
from src.infrastructure.db.database import configure_database
from src.infrastructure.storage.local_storage import LocalStorageService

BASE_URL = "http://localhost:8080/api/files"

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def storage(tmp_path):
    service = LocalStorageService(tmp_path / "storage", BASE_URL, "test-signing-secret")
    service.init()
    return service


def _reset():
    get_settings.cache_clear()
    dependencies.reset_singletons()


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("STORAGE_LOCATION", str(tmp_path / "uploads"))
    monkeypatch.setenv("STORAGE_BASE_URL", BASE_URL)
    monkeypatch.setenv("JWT_SECRET", "test-jwt-secret-with-enough-length-123")
    monkeypatch.setenv("PASSWORD_HASH_ITERATIONS", "1000")
    monkeypatch.setenv("UPLOAD_MAX_FILE_SIZE", "1024")
    _reset()
    configure_database(get_settings().database_url)

    with TestClient(app) as test_client:
        yield test_client

    _reset()


def register(client: TestClient, username: str, roles=None, password: str = "secret123") -> str:
    """Sign up + sign in, returning a bearer token."""
    body = {"username": username, "email": f"{username}@example.com", "password": password}
    if roles is not None:
        body["role"] = roles
    assert client.post("/api/auth/signup", json=body).status_code == 200
    response = client.post("/api/auth/signin", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
