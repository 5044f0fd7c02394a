"""Row -> domain mapping for the content store.

Every mapper takes one raw row (any mapping of column name to value) and
returns exactly one domain object. Optional columns that are missing or
NULL are coalesced to their defaults; missing required columns raise
ValueError so that schema drift is loud instead of silently blank.
"""

import json
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, get_args

from config import DEFAULT_READ_TIME
from content.domain import (
    AIVoice,
    Article,
    ArticleSource,
    ModelScore,
    Regulation,
    RegulationImpact,
    RegulationStatus,
    TimelineEvent,
    TimelineType,
    Trend,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


def _choice(value: Any, allowed: Any, default: str, field: str) -> str:
    """Case-insensitive match against a Literal's values; unknown values fall back to default."""
    choice = str(value or "").strip().lower()
    if choice in get_args(allowed):
        return choice
    if value:
        logger.warning("Unknown %s %r, using %r", field, value, default)
    return default


def _require(row: Row, *keys: str) -> None:
    missing = [k for k in keys if row.get(k) is None]
    if missing:
        raise ValueError(f"Row is missing required field(s): {', '.join(missing)}")


def parse_json_list(raw: Any) -> list[str]:
    """Parse a JSON array column to a list of strings."""
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(v) for v in raw if v]
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(v) for v in parsed if v]
        except (json.JSONDecodeError, TypeError):
            pass
    return []


def _as_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def format_display_date(value: Any) -> str | None:
    """Format a timestamp as "Mar 4, 2026". Unparseable values map to None."""
    dt = _as_datetime(value)
    if dt is None:
        return None
    return f"{dt:%b} {dt.day}, {dt.year}"


def article_from_row(row: Row) -> Article:
    _require(row, "id", "headline", "category")

    source = None
    if row.get("source_name"):
        source = ArticleSource(
            name=row["source_name"],
            url=row.get("source_url") or "",
            favicon=row.get("source_favicon") or None,
        )

    return Article(
        id=str(row["id"]),
        slug=row.get("slug") or None,
        headline=row["headline"],
        excerpt=row.get("excerpt"),
        summary=row.get("summary"),
        body=row.get("body"),
        image=row.get("image") or "",
        category=row["category"],
        author=row.get("author"),
        read_time=row.get("read_time") or DEFAULT_READ_TIME,
        published_at=format_display_date(row.get("published_at")),
        original_url=row.get("original_url"),
        is_exclusive=bool(row.get("is_exclusive")),
        is_featured=bool(row.get("is_featured")),
        is_breaking=bool(row.get("is_breaking")),
        source=source,
        tags=parse_json_list(row.get("tags")),
        key_points=parse_json_list(row.get("key_points")),
        why_it_matters=row.get("why_it_matters"),
        view_count=row.get("view_count") or 0,
    )


def model_from_row(row: Row) -> ModelScore:
    _require(row, "id", "name", "company")
    return ModelScore(
        id=row["id"],
        name=row["name"],
        company=row["company"],
        overall=row.get("score_overall") or 0.0,
        coding=row.get("score_coding") or 0.0,
        reasoning=row.get("score_reasoning") or 0.0,
        creative=row.get("score_creative") or 0.0,
        context_window=row.get("context_window") or "",
        highlight=row.get("highlight"),
        trend=_choice(row.get("trend"), Trend, "same", "trend"),
        vote_count=row.get("vote_count") or 0,
        updated_at=format_display_date(row.get("updated_at")),
    )


def regulation_from_row(row: Row) -> Regulation:
    _require(row, "id", "title", "region", "status", "impact")
    deadline = _as_datetime(row.get("deadline"))
    return Regulation(
        id=str(row["id"]),
        title=row["title"],
        region=row["region"],
        status=_choice(row["status"], RegulationStatus, "proposed", "regulation status"),
        impact=_choice(row["impact"], RegulationImpact, "medium", "regulation impact"),
        deadline=deadline.date() if deadline else None,
        description=row.get("description") or "",
        source_url=row.get("source_url"),
        sort_order=row.get("sort_order") or 0,
    )


def timeline_event_from_row(row: Row) -> TimelineEvent:
    _require(row, "year", "title", "type")
    return TimelineEvent(
        year=str(row["year"]),
        quarter=row.get("quarter"),
        title=row["title"],
        description=row.get("description") or "",
        type=_choice(row["type"], TimelineType, "present", "timeline type"),
        sort_order=row.get("sort_order") or 0,
    )


def voice_from_row(row: Row) -> AIVoice:
    _require(row, "name", "quote")
    return AIVoice(
        name=row["name"],
        title=row.get("title") or "",
        company=row.get("company") or "",
        avatar=row.get("avatar") or "",
        quote=row["quote"],
        article_link=row.get("article_link"),
    )


def article_path(article: Article) -> str:
    """Canonical URL path for an article, preferring slug over id."""
    return f"/article/{article.slug or article.id}"
