"""Content store: the query library over the relational backing store.

All reads degrade instead of raising. A store failure (any SQLAlchemyError)
is logged and turned into an empty list, ``None`` or a zero count. Columns
added by later migrations (slug, view_count, vote_count, the headline
full-text index) are detected once per store and the affected operations
switch to their simpler form when a column is absent. A row whose values
fail validation is skipped with a warning; a row missing id, headline or
category still raises.
"""

import json
import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import ValidationError
from sqlalchemy import ColumnElement, func, or_, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import SEARCH_RESULT_LIMIT, TAG_FREQUENCY_WINDOW
from content.domain import AIVoice, Article, ModelScore, Regulation, SubscribeError, TagCount, TimelineEvent
from content.mapping import (
    Row,
    article_from_row,
    model_from_row,
    parse_json_list,
    regulation_from_row,
    timeline_event_from_row,
    voice_from_row,
)
from content.validation import is_valid_email, normalize_email
from db import models
from db.database import get_engine, get_session
from db.migrations import FTS_TABLE, _column_exists, _table_exists

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_CATEGORIES = "all"

_RECENT = models.Article.published_at.desc().nulls_last()


@dataclass(frozen=True)
class Capabilities:
    """Optional schema features present in the backing store."""

    slugs: bool = False
    view_counts: bool = False
    model_votes: bool = False
    headline_fts: bool = False


def _has_tag(tag: str) -> ColumnElement[bool]:
    """Exact element test against the JSON-array tags column."""
    return func.instr(models.Article.tags, json.dumps(tag)) > 0


def _same_category(category: str) -> ColumnElement[bool]:
    return func.lower(models.Article.category) == category.strip().lower()


def _fts_query(query: str) -> str:
    """Quote every token so user input can't break FTS5 syntax. Tokens are ANDed."""
    return " ".join('"' + tok.replace('"', '""') + '"' for tok in query.split())


def _map_rows(operation: str, rows: Iterable[Any], mapper: Callable[[Row], T]) -> list[T]:
    """Map rows, skipping any whose values fail validation."""
    mapped = []
    for row in rows:
        try:
            mapped.append(mapper(row._mapping))
        except ValidationError as e:
            logger.warning("%s: skipping invalid row: %s", operation, e)
    return mapped


class ContentStore:
    """Read/write access to articles, models, regulations, timeline and voices."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        engine: Engine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine
        self._capabilities: Capabilities | None = None

    # --- Capability negotiation ---

    @property
    def capabilities(self) -> Capabilities:
        if self._capabilities is None:
            self._capabilities = self._detect_capabilities()
        return self._capabilities

    def refresh_capabilities(self) -> Capabilities:
        self._capabilities = None
        return self.capabilities

    def _detect_capabilities(self) -> Capabilities:
        engine = self._engine or get_engine()
        try:
            caps = Capabilities(
                slugs=_column_exists(engine, "articles", "slug"),
                view_counts=_column_exists(engine, "articles", "view_count"),
                model_votes=_column_exists(engine, "model_scores", "vote_count"),
                headline_fts=_table_exists(engine, FTS_TABLE),
            )
        except SQLAlchemyError as e:
            logger.warning("Capability check failed, assuming base schema: %s", e)
            caps = Capabilities()
        logger.info("Store capabilities: %s", caps)
        return caps

    # --- Internal helpers ---

    def _article_columns(self) -> list[Any]:
        skip = set()
        if not self.capabilities.slugs:
            skip.add("slug")
        if not self.capabilities.view_counts:
            skip.add("view_count")
        return [c for c in models.Article.__table__.columns if c.key not in skip]

    def _articles(
        self,
        operation: str,
        *criteria: ColumnElement[bool],
        order_by: Iterable[Any] = (_RECENT,),
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Article]:
        """Run an article query and map rows; store errors degrade to []."""
        session = self._session_factory()
        try:
            query = session.query(*self._article_columns())
            if criteria:
                query = query.filter(*criteria)
            query = query.order_by(*order_by)
            if offset:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)
            rows = query.all()
        except SQLAlchemyError as e:
            logger.warning("%s failed, returning empty result: %s", operation, e)
            return []
        finally:
            session.close()
        return _map_rows(operation, rows, article_from_row)

    def _one_article(self, operation: str, *criteria: ColumnElement[bool]) -> Article | None:
        found = self._articles(operation, *criteria, limit=1)
        return found[0] if found else None

    def _ordered_rows(
        self,
        operation: str,
        table: Any,
        order_by: Any,
        mapper: Callable[[Row], T],
        skip: Iterable[str] = (),
    ) -> list[T]:
        columns = [c for c in table.__table__.columns if c.key not in set(skip)]
        session = self._session_factory()
        try:
            rows = session.query(*columns).order_by(order_by).all()
        except SQLAlchemyError as e:
            logger.warning("%s failed, returning empty result: %s", operation, e)
            return []
        finally:
            session.close()
        return _map_rows(operation, rows, mapper)

    # --- Article reads ---

    def list_recent(self, limit: int = 20) -> list[Article]:
        return self._articles("list_recent", limit=limit)

    def list_by_category(self, category: str, limit: int = 20) -> list[Article]:
        """Case-insensitive substring match on category, newest first."""
        return self._articles(
            "list_by_category",
            models.Article.category.icontains(category.strip(), autoescape=True),
            limit=limit,
        )

    def list_by_tag(self, tag: str, limit: int = 30) -> list[Article]:
        return self._articles("list_by_tag", _has_tag(tag), limit=limit)

    def get_by_id(self, article_id: str) -> Article | None:
        return self._one_article("get_by_id", models.Article.id == article_id)

    def get_by_slug(self, slug: str) -> Article | None:
        if not self.capabilities.slugs:
            return None
        return self._one_article("get_by_slug", models.Article.slug == slug)

    def get_by_slug_or_id(self, slug_or_id: str) -> Article | None:
        """Slug first, then id, so links minted before slugs existed keep resolving."""
        article = self.get_by_slug(slug_or_id)
        if article is not None:
            return article
        return self.get_by_id(slug_or_id)

    def list_featured(self, limit: int = 3) -> list[Article]:
        return self._articles("list_featured", models.Article.is_featured.is_(True), limit=limit)

    def list_breaking(self, limit: int = 5) -> list[Article]:
        return self._articles("list_breaking", models.Article.is_breaking.is_(True), limit=limit)

    def list_hero(self, limit: int = 3) -> list[Article]:
        """Flagged articles that carry an image."""
        return self._articles(
            "list_hero",
            models.Article.image.is_not(None),
            models.Article.image != "",
            or_(
                models.Article.is_featured.is_(True),
                models.Article.is_breaking.is_(True),
                models.Article.is_exclusive.is_(True),
            ),
            limit=limit,
        )

    def list_paged(self, category: str, offset: int, page_size: int) -> list[Article]:
        """One page of articles. A short page means there is nothing after it."""
        criteria = []
        if category != ALL_CATEGORIES:
            criteria.append(_same_category(category))
        return self._articles("list_paged", *criteria, offset=max(offset, 0), limit=page_size)

    def list_most_popular(self, limit: int = 5) -> list[Article]:
        """Most viewed first; recency order when view counts aren't tracked."""
        if not self.capabilities.view_counts:
            return self.list_recent(limit)
        return self._articles(
            "list_most_popular",
            order_by=(func.coalesce(models.Article.view_count, 0).desc(), _RECENT),
            limit=limit,
        )

    def list_related_by_tags(
        self,
        tags: list[str],
        exclude_id: str,
        fallback_category: str,
        limit: int = 3,
    ) -> list[Article]:
        """Articles sharing any tag; same-category articles when none do."""
        not_self = models.Article.id != exclude_id
        if tags:
            overlap = or_(*(_has_tag(t) for t in tags))
            related = self._articles("list_related_by_tags", overlap, not_self, limit=limit)
            if related:
                return related
        return self._articles(
            "list_related_by_category",
            _same_category(fallback_category),
            not_self,
            limit=limit,
        )

    def tag_frequency(self, limit: int = 20) -> list[TagCount]:
        """Top tags across the most recent TAG_FREQUENCY_WINDOW articles."""
        session = self._session_factory()
        try:
            rows = (
                session.query(models.Article.tags)
                .filter(models.Article.tags.is_not(None))
                .order_by(_RECENT)
                .limit(TAG_FREQUENCY_WINDOW)
                .all()
            )
        except SQLAlchemyError as e:
            logger.warning("tag_frequency failed, returning empty result: %s", e)
            return []
        finally:
            session.close()

        counts = Counter[str]()
        for (raw,) in rows:
            counts.update(parse_json_list(raw))
        return [TagCount(tag=tag, count=count) for tag, count in counts.most_common(limit)]

    def search_headlines(self, query: str, limit: int = SEARCH_RESULT_LIMIT) -> list[Article]:
        """Full-text headline search, falling back to substring match."""
        query = query.strip()
        if not query:
            return []
        if self.capabilities.headline_fts:
            found = self._full_text_search(query, limit)
            if found:
                return found
        return self._articles(
            "search_headlines",
            models.Article.headline.icontains(query, autoescape=True),
            limit=limit,
        )

    def _full_text_search(self, query: str, limit: int) -> list[Article]:
        session = self._session_factory()
        try:
            ids = [
                row[0]
                for row in session.execute(
                    text(f"SELECT article_id FROM {FTS_TABLE} WHERE {FTS_TABLE} MATCH :q ORDER BY rank LIMIT :n"),
                    {"q": _fts_query(query), "n": limit},
                )
            ]
        except SQLAlchemyError as e:
            logger.warning("Full-text search failed for %r: %s", query, e)
            return []
        finally:
            session.close()
        if not ids:
            return []
        found = {a.id: a for a in self._articles("search_headlines", models.Article.id.in_(ids))}
        return [found[i] for i in ids if i in found]

    # --- Other entities ---

    def list_model_scores(self) -> list[ModelScore]:
        skip = () if self.capabilities.model_votes else ("vote_count",)
        return self._ordered_rows(
            "list_model_scores",
            models.ModelScore,
            models.ModelScore.score_overall.desc(),
            model_from_row,
            skip=skip,
        )

    def list_regulations(self) -> list[Regulation]:
        return self._ordered_rows(
            "list_regulations", models.Regulation, models.Regulation.sort_order.asc(), regulation_from_row
        )

    def list_timeline_events(self) -> list[TimelineEvent]:
        return self._ordered_rows(
            "list_timeline_events",
            models.TimelineEvent,
            models.TimelineEvent.sort_order.asc(),
            timeline_event_from_row,
        )

    def list_voices(self) -> list[AIVoice]:
        return self._ordered_rows("list_voices", models.AIVoice, models.AIVoice.sort_order.asc(), voice_from_row)

    def newsletter_stats(self) -> dict[str, int]:
        session = self._session_factory()
        try:
            total = session.query(func.count(models.Subscriber.id)).scalar()
        except SQLAlchemyError as e:
            logger.warning("newsletter_stats failed, reporting zero: %s", e)
            total = 0
        finally:
            session.close()
        return {"total": int(total or 0)}

    # --- Server-side procedures ---

    def _increment(self, operation: str, table: Any, column: Any, key: Any) -> bool:
        """Atomic ``col = coalesce(col, 0) + 1``. Returns whether a row was hit."""
        session = self._session_factory()
        try:
            result = session.execute(
                update(table).where(table.id == key).values({column: func.coalesce(column, 0) + 1})
            )
            session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("%s(%r) failed: %s", operation, key, e)
            return False
        finally:
            session.close()

    def increment_view_count(self, article_id: str) -> bool:
        if not self.capabilities.view_counts:
            logger.debug("view_count not available, skipping increment for %s", article_id)
            return False
        return self._increment("increment_view_count", models.Article, models.Article.view_count, article_id)

    def vote_for_model(self, model_id: int) -> bool:
        if not self.capabilities.model_votes:
            logger.debug("vote_count not available, skipping vote for %s", model_id)
            return False
        return self._increment("vote_for_model", models.ModelScore, models.ModelScore.vote_count, model_id)

    def insert_subscriber(self, email: str) -> SubscribeError | None:
        """Validate and store an email. Re-subscribing an address is a success."""
        email = normalize_email(email)
        if not is_valid_email(email):
            return SubscribeError.INVALID_EMAIL

        session = self._session_factory()
        try:
            session.add(models.Subscriber(email=email))
            session.commit()
            logger.info("New newsletter subscriber")
        except IntegrityError:
            session.rollback()
            logger.debug("Subscriber already present, treating as success")
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("insert_subscriber failed: %s", e)
            return SubscribeError.FAILED
        finally:
            session.close()
        return None
