#!/usr/bin/env python3
"""Backfill slugs and normalize tags for all existing articles."""

import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from content.mapping import parse_json_list
from content.tags import normalize_tags, slugify, unique_slug
from db.database import get_session, init_db
from db.models import Article

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def backfill(session) -> tuple[int, int]:
    """Returns (slugs added, tag lists rewritten)."""
    articles = session.query(Article).order_by(Article.published_at.asc().nulls_first()).all()
    taken = {a.slug for a in articles if a.slug}

    slugs_added = 0
    tags_updated = 0
    for article in articles:
        if not article.slug:
            base = slugify(article.headline) or article.id
            article.slug = unique_slug(base, taken)
            taken.add(article.slug)
            slugs_added += 1

        new_tags_json = json.dumps(normalize_tags(parse_json_list(article.tags)))
        if new_tags_json != article.tags:
            article.tags = new_tags_json
            tags_updated += 1

    session.commit()
    return slugs_added, tags_updated


def main() -> None:
    init_db()
    session = get_session()
    try:
        total = session.query(Article).count()
        logger.info("Backfilling slugs and tags for %d articles", total)
        slugs_added, tags_updated = backfill(session)
        logger.info("Added %d slugs, normalized tags on %d articles", slugs_added, tags_updated)

        # Verify
        missing = session.query(Article).filter(Article.slug.is_(None)).count()
        logger.info("Articles without slug: %d", missing)
    finally:
        session.close()


if __name__ == "__main__":
    main()
