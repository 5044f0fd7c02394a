"""Tests for database migration idempotency."""

import pytest
from sqlalchemy import create_engine, text

from db.migrations import FTS_TABLE, _column_exists, _table_exists, run_migrations
from db.models import Base


@pytest.fixture
def engine(tmp_path):
    db_path = tmp_path / "test_migration.db"
    eng = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(eng)
    return eng


def test_migration_adds_columns(engine):
    """Columns should be added if they don't exist."""
    # SQLite can't drop indexed columns easily, so recreate the tables without them
    with engine.connect() as conn:
        conn.execute(text("DROP TABLE IF EXISTS articles"))
        conn.execute(text("DROP TABLE IF EXISTS model_scores"))
        conn.execute(text("""
            CREATE TABLE articles (
                id VARCHAR PRIMARY KEY,
                headline VARCHAR NOT NULL,
                category VARCHAR NOT NULL,
                tags VARCHAR,
                published_at DATETIME
            )
        """))
        conn.execute(text("""
            CREATE TABLE model_scores (
                id INTEGER PRIMARY KEY,
                name VARCHAR NOT NULL,
                company VARCHAR NOT NULL
            )
        """))
        conn.commit()

    assert not _column_exists(engine, "articles", "slug")
    assert not _column_exists(engine, "articles", "view_count")
    assert not _column_exists(engine, "model_scores", "vote_count")

    run_migrations(engine)

    assert _column_exists(engine, "articles", "slug")
    assert _column_exists(engine, "articles", "view_count")
    assert _column_exists(engine, "model_scores", "vote_count")


def test_migration_idempotent(engine):
    """Running migrations twice should not fail."""
    run_migrations(engine)
    run_migrations(engine)  # Should not raise

    assert _column_exists(engine, "articles", "view_count")
    assert _column_exists(engine, "model_scores", "vote_count")


def test_column_exists_check(engine):
    assert _column_exists(engine, "articles", "headline")
    assert _column_exists(engine, "articles", "tags")
    assert not _column_exists(engine, "articles", "nonexistent_column")


def test_fts_index_tracks_headlines(engine):
    run_migrations(engine)
    if not _table_exists(engine, FTS_TABLE):
        pytest.skip("SQLite build without FTS5")

    with engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO articles (id, headline, category, is_exclusive, is_featured, is_breaking) "
            "VALUES ('x1', 'Gemini lands on phones', 'Models', 0, 0, 0)"
        ))
        conn.execute(text("UPDATE articles SET headline = 'Gemini lands on laptops' WHERE id = 'x1'"))

    with engine.connect() as conn:
        hits = conn.execute(
            text(f"SELECT article_id FROM {FTS_TABLE} WHERE {FTS_TABLE} MATCH 'laptops'")
        ).all()
        stale = conn.execute(
            text(f"SELECT article_id FROM {FTS_TABLE} WHERE {FTS_TABLE} MATCH 'phones'")
        ).all()

    assert [h[0] for h in hits] == ["x1"]
    assert stale == []
