import mongomock
import pytest
from fastapi.testclient import TestClient

from novel_api.core.config import settings
from novel_api.core.database import get_db
from novel_api.core.security import create_access_token
from novel_api.main import app
from novel_api.services.user_service import ensure_user_indexes


@pytest.fixture
def db():
    client = mongomock.MongoClient(tz_aware=True)
    database = client[settings.DB_NAME]
    ensure_user_indexes(database)
    yield database
    client.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def novel_tree(tmp_path, monkeypatch):
    """A small file tree: one complete novel and one without chapters"""
    root = tmp_path / "Test_Novels"
    markdown = root / "Foo Novel" / "Markdown"
    markdown.mkdir(parents=True)
    (root / "Foo Novel" / "Cover.png").write_bytes(b"\x89PNG\r\n\x1a\nfake-image")
    for number in (2, 10, 1):
        (markdown / f"Foo Novel Chapter {number}.md").write_text(
            f"# Chapter {number}\n\nText of chapter {number}.", encoding="utf-8"
        )
    (markdown / "notes.txt").write_text("not a chapter", encoding="utf-8")
    (markdown / "Foo Novel Afterword.md").write_text("thanks", encoding="utf-8")
    (root / "Empty Novel").mkdir()
    monkeypatch.setattr(settings, "NOVEL_PATH", str(root))
    return root


@pytest.fixture
def auth_headers():
    def _headers(username: str, user_id: str = "user-1") -> dict:
        token = create_access_token({"sub": user_id, "username": username})
        return {"Authorization": f"Bearer {token}"}
    return _headers
