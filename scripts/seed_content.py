#!/usr/bin/env python3
"""Load articles, models, regulations, timeline events and voices into the DB.

Usage:
    python scripts/seed_content.py                 # built-in demo content
    python scripts/seed_content.py --file data.json

The JSON document has optional top-level lists: "articles", "models",
"regulations", "timeline", "voices". Rows whose key already exists are
skipped, so the script can be re-run safely (timeline and voice rows carry
no key of their own unless "id" is given).
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime, timedelta
from functools import partial
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import IntegrityError

from content.tags import normalize_tags, slugify, unique_slug
from db.database import get_session, init_db
from db.models import AIVoice, Article, ModelScore, Regulation, TimelineEvent

logger = logging.getLogger(__name__)

_NOW = datetime.utcnow()

DEMO_CONTENT: dict[str, list[dict[str, Any]]] = {
    "articles": [
        {
            "id": "a1",
            "headline": "OpenAI ships GPT-5 with native agent mode",
            "excerpt": "The new flagship folds tool use into the base model.",
            "image": "https://images.example.com/gpt5.jpg",
            "category": "Models",
            "author": "Dana Reyes",
            "published_at": (_NOW - timedelta(hours=2)).isoformat(),
            "is_featured": True,
            "is_breaking": True,
            "tags": ["openai", "gpt", "llm", "agents"],
            "key_points": ["Agent mode is on by default", "Context window doubles"],
            "why_it_matters": "Agentic workflows move from add-on to default.",
            "source_name": "OpenAI Blog",
            "source_url": "https://openai.com/blog",
        },
        {
            "id": "a2",
            "headline": "EU AI Act enforcement deadline approaches",
            "excerpt": "High-risk systems face audits from August.",
            "image": "",
            "category": "Regulation",
            "published_at": (_NOW - timedelta(days=1)).isoformat(),
            "tags": ["eu-ai-act", "regulation"],
        },
        {
            "id": "a3",
            "headline": "Anthropic's coding agent tops SWE-bench",
            "excerpt": "A new state of the art on real-world GitHub issues.",
            "image": "https://images.example.com/swe.jpg",
            "category": "AI Coding",
            "published_at": (_NOW - timedelta(days=2)).isoformat(),
            "is_exclusive": True,
            "tags": ["anthropic", "coding", "agents", "benchmarks"],
        },
        {
            "id": "a4",
            "headline": "Hospitals pilot LLM triage assistants",
            "category": "Healthcare",
            "published_at": (_NOW - timedelta(days=3)).isoformat(),
            "tags": ["healthcare", "llm"],
        },
    ],
    "models": [
        {"id": 1, "name": "GPT-5", "company": "OpenAI", "score_overall": 92.1, "score_coding": 90.4,
         "score_reasoning": 93.0, "score_creative": 88.2, "context_window": "400K", "trend": "up"},
        {"id": 2, "name": "Claude Opus", "company": "Anthropic", "score_overall": 91.7, "score_coding": 94.8,
         "score_reasoning": 91.2, "score_creative": 90.1, "context_window": "200K", "trend": "same"},
        {"id": 3, "name": "Gemini Ultra", "company": "Google", "score_overall": 90.3, "score_coding": 88.0,
         "score_reasoning": 92.5, "score_creative": 87.4, "context_window": "1M", "trend": "down"},
    ],
    "regulations": [
        {"id": "reg-1", "title": "EU AI Act: Full Enforcement", "region": "EU", "status": "enacted",
         "deadline": "2026-08-02", "impact": "high", "sort_order": 1,
         "description": "All high-risk AI systems must meet transparency and oversight requirements."},
        {"id": "reg-2", "title": "US AI Executive Order 2.0", "region": "US", "status": "pending",
         "impact": "high", "sort_order": 2,
         "description": "Safety evaluations for frontier models above a compute threshold."},
        {"id": "reg-3", "title": "China Deep Synthesis Rules v3", "region": "China", "status": "enacted",
         "deadline": "2026-06-01", "impact": "medium", "sort_order": 3,
         "description": "Deepfake labeling, algorithm registration and content traceability."},
    ],
    "timeline": [
        {"year": "2022", "quarter": "Q4", "title": "ChatGPT launches", "type": "past", "sort_order": 1},
        {"year": "2026", "title": "Agents go mainstream", "type": "present", "sort_order": 2},
        {"year": "2028", "title": "Frontier model audits", "type": "future", "sort_order": 3},
    ],
    "voices": [
        {"name": "Ada Park", "title": "Research Lead", "company": "Example Labs",
         "quote": "Evaluation is the bottleneck now, not training.", "sort_order": 1},
    ],
}


def _parse_dt(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


def _existing_slugs() -> set[str]:
    session = get_session()
    try:
        return {slug for (slug,) in session.query(Article.slug).filter(Article.slug.is_not(None))}
    finally:
        session.close()


def _article(data: dict[str, Any], taken: set[str] | None = None) -> Article:
    """Build an article row. Slugs already in ``taken`` get a -2, -3, ... suffix."""
    taken = set() if taken is None else taken
    slug = data.get("slug") or slugify(data["headline"]) or None
    if slug:
        slug = unique_slug(slug, taken)
        taken.add(slug)
    return Article(
        id=str(data["id"]),
        slug=slug,
        headline=data["headline"],
        excerpt=data.get("excerpt"),
        summary=data.get("summary"),
        body=data.get("body"),
        image=data.get("image"),
        category=data["category"],
        author=data.get("author"),
        read_time=data.get("read_time"),
        published_at=_parse_dt(data.get("published_at")),
        original_url=data.get("original_url"),
        is_exclusive=bool(data.get("is_exclusive")),
        is_featured=bool(data.get("is_featured")),
        is_breaking=bool(data.get("is_breaking")),
        source_name=data.get("source_name"),
        source_url=data.get("source_url"),
        source_favicon=data.get("source_favicon"),
        tags=json.dumps(normalize_tags(data.get("tags"))),
        key_points=json.dumps(data.get("key_points") or []),
        why_it_matters=data.get("why_it_matters"),
        view_count=int(data.get("view_count") or 0),
    )


def _regulation(data: dict[str, Any]) -> Regulation:
    row = dict(data)
    row["deadline"] = _parse_date(row.get("deadline"))
    return Regulation(**row)


BUILDERS = {
    "articles": _article,
    "models": lambda d: ModelScore(**d),
    "regulations": _regulation,
    "timeline": lambda d: TimelineEvent(**d),
    "voices": lambda d: AIVoice(**d),
}


def seed(content: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
    """Insert every row, skipping duplicates. Returns new-row counts per kind."""
    saved: dict[str, int] = {}
    builders = {**BUILDERS, "articles": partial(_article, taken=_existing_slugs())}
    for kind, build in builders.items():
        rows = content.get(kind, [])
        saved[kind] = 0
        for data in rows:
            session = get_session()
            try:
                session.add(build(data))
                session.commit()
                saved[kind] += 1
            except IntegrityError:
                session.rollback()
                logger.debug("Duplicate %s skipped: %s", kind, data.get("id") or data.get("title"))
            except Exception:
                session.rollback()
                logger.exception("Error saving %s row %s", kind, data.get("id") or data.get("title"))
            finally:
                session.close()
        logger.info("[%s] Saved %d new rows (of %d given)", kind, saved[kind], len(rows))
    return saved


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed fresh-daily content")
    parser.add_argument("--file", type=Path, help="JSON document to load (default: demo content)")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    content = json.loads(args.file.read_text(encoding="utf-8")) if args.file else DEMO_CONTENT
    init_db()
    saved = seed(content)
    logging.info("Done. New rows: %s", saved)


if __name__ == "__main__":
    main()
