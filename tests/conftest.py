from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.tmdb_client import TMDBClient
from app.db.session import Database
from app.main import create_app
from app.services.user_service import CredentialStore


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Cheap bcrypt, a fixed secret and the same-site development cookie policy"""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(settings, "SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    monkeypatch.setattr(settings, "COOKIE_NAME", "token")


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.connect()
    db.create_tables()
    yield db
    db.dispose()


def tmdb_handler(request: httpx.Request) -> httpx.Response:
    """Canned TMDB responses keyed by path"""
    path = request.url.path
    if path.endswith("/trending/all/week"):
        return httpx.Response(200, json={"page": 1, "results": [{"id": 550, "media_type": "movie"}]})
    if path.endswith("/search/multi"):
        return httpx.Response(
            200,
            json={"page": int(request.url.params["page"]), "results": [{"id": 1399, "media_type": "tv"}]},
        )
    if path.endswith("/movie/550"):
        return httpx.Response(200, json={"id": 550, "title": "Fight Club"})
    if path.endswith("/tv/1399/season/1"):
        return httpx.Response(200, json={"season_number": 1, "episodes": [{"episode_number": 1}]})
    if path.endswith("/movie/500"):
        return httpx.Response(500, json={"status_message": "boom"})
    return httpx.Response(404, json={"status_message": "not found"})


@pytest.fixture()
def tmdb() -> TMDBClient:
    return TMDBClient(api_key="test-key", base_url="https://tmdb.test/3", transport=httpx.MockTransport(tmdb_handler))


@pytest.fixture()
def app(database, tmdb):
    return create_app(database=database, tmdb=tmdb)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def store_calls(monkeypatch):
    """Record every credential store call made during a test"""
    calls = []
    for name in ("find_by_username_or_email", "find_by_username", "find_by_id", "insert"):
        original = getattr(CredentialStore, name)

        def wrapper(self, *args, _name=name, _original=original, **kwargs):
            calls.append(_name)
            return _original(self, *args, **kwargs)

        monkeypatch.setattr(CredentialStore, name, wrapper)
    return calls


def signup(client: TestClient, username: str, password: str = "secret1") -> dict:
    """Create an account; the client's cookie jar ends up holding its session"""
    r = client.post(
        "/api/auth/signup",
        json={"username": username, "email": f"{username}@x.com", "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()["user"]
