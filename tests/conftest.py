"""Shared fixtures: a temporary SQLite database per test."""

import json
from datetime import datetime
from typing import Any

import pytest

from content.store import ContentStore
from db.database import get_session, init_db, reset_engine
from db.models import Article


@pytest.fixture
def content_db(tmp_path, monkeypatch):
    """Use a temporary database for each test."""
    db_path = tmp_path / "test.db"
    # Patch in both config and db.database (which imports by value)
    monkeypatch.setattr("config.DB_PATH", db_path)
    monkeypatch.setattr("config.DATA_DIR", tmp_path)
    monkeypatch.setattr("db.database.DB_PATH", db_path)
    monkeypatch.setattr("db.database.DATA_DIR", tmp_path)

    # Reset engine/session so they use the new path
    reset_engine()
    init_db()

    yield db_path

    reset_engine()


@pytest.fixture
def store(content_db) -> ContentStore:
    return ContentStore()


def make_article(id: str, day: int | None = 1, **fields: Any) -> Article:
    """Article row with sensible defaults; ``day`` sets published_at in Jan 2026."""
    tags = fields.pop("tags", None)
    fields.setdefault("headline", f"Headline {id}")
    fields.setdefault("category", "Models")
    return Article(
        id=id,
        published_at=datetime(2026, 1, day, 12, 0) if day else None,
        tags=json.dumps(tags) if tags is not None else None,
        **fields,
    )


@pytest.fixture
def add_articles(content_db):
    def _add(*articles: Article) -> None:
        session = get_session()
        try:
            session.add_all(articles)
            session.commit()
        finally:
            session.close()

    return _add
