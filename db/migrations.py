"""Idempotent database migrations for fresh-daily.

SQLite doesn't support full ALTER TABLE, but does support ADD COLUMN
for nullable columns. Each migration checks if the column exists first.
The headline full-text index is optional: it is only created when the
SQLite build ships FTS5.
"""

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)

FTS_TABLE = "articles_fts"

_FTS_STATEMENTS = [
    f"CREATE VIRTUAL TABLE {FTS_TABLE} USING fts5(article_id UNINDEXED, headline)",
    f"""CREATE TRIGGER IF NOT EXISTS {FTS_TABLE}_ai AFTER INSERT ON articles BEGIN
        INSERT INTO {FTS_TABLE}(article_id, headline) VALUES (new.id, new.headline);
    END""",
    f"""CREATE TRIGGER IF NOT EXISTS {FTS_TABLE}_ad AFTER DELETE ON articles BEGIN
        DELETE FROM {FTS_TABLE} WHERE article_id = old.id;
    END""",
    f"""CREATE TRIGGER IF NOT EXISTS {FTS_TABLE}_au AFTER UPDATE OF headline ON articles BEGIN
        UPDATE {FTS_TABLE} SET headline = new.headline WHERE article_id = old.id;
    END""",
    f"INSERT INTO {FTS_TABLE}(article_id, headline) SELECT id, headline FROM articles",
]


def _column_exists(engine: Engine, table: str, column: str) -> bool:
    """Check if a column exists in the given table."""
    with engine.connect() as conn:
        result = conn.execute(text(f"PRAGMA table_info({table})"))
        columns = [row[1] for row in result]
        return column in columns


def _table_exists(engine: Engine, table: str) -> bool:
    with engine.connect() as conn:
        result = conn.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name"),
            {"name": table},
        )
        return result.first() is not None


def _ensure_headline_fts(engine: Engine) -> None:
    """Create the FTS5 headline index and its sync triggers, if possible."""
    if _table_exists(engine, FTS_TABLE):
        logger.debug("Table %s already exists, skipping", FTS_TABLE)
        return
    try:
        with engine.begin() as conn:
            for statement in _FTS_STATEMENTS:
                conn.execute(text(statement))
        logger.info("Created full-text index %s", FTS_TABLE)
    except OperationalError as e:
        logger.warning("Full-text search unavailable, using substring search: %s", e)


def run_migrations(engine: Engine) -> None:
    """Run all pending migrations idempotently."""
    migrations = [
        ("articles", "slug", "VARCHAR"),
        ("articles", "view_count", "INTEGER DEFAULT 0"),
        ("model_scores", "vote_count", "INTEGER DEFAULT 0"),
    ]

    with engine.connect() as conn:
        for table, column, col_type in migrations:
            if not _column_exists(engine, table, column):
                logger.info("Adding column %s.%s (%s)", table, column, col_type)
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))
                conn.commit()
            else:
                logger.debug("Column %s.%s already exists, skipping", table, column)

        # ADD COLUMN can't carry UNIQUE, so slug uniqueness lives in an index
        conn.execute(text("CREATE UNIQUE INDEX IF NOT EXISTS idx_articles_slug ON articles (slug)"))
        conn.commit()

    _ensure_headline_fts(engine)
