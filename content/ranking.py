"""In-memory re-sorting and filtering of an already fetched batch.

All functions are pure: they return new lists and never touch the input.
"""

from typing import Literal

from config import CATEGORY_KEYWORDS
from content.domain import Article, ModelScore

SortKey = Literal["latest", "trending", "popular"]

Dimension = Literal["overall", "coding", "reasoning", "creative"]
DIMENSIONS: tuple[str, ...] = ("overall", "coding", "reasoning", "creative")


def sort_batch(articles: list[Article], key: SortKey = "latest") -> list[Article]:
    """Re-order a recency-sorted batch.

    latest keeps the input order, trending reverses it and popular moves
    featured articles to the front. sorted() is stable, so the original
    order survives within each group.
    """
    if key == "trending":
        return list(reversed(articles))
    if key == "popular":
        return sorted(articles, key=lambda a: not a.is_featured)
    if key == "latest":
        return list(articles)
    raise ValueError(f"Unknown sort key: {key!r}")


def matches_category(article: Article, slug: str) -> bool:
    """Loose section match: does the free-text category belong under slug?"""
    category = article.category.lower()
    slug = slug.lower()
    keywords = CATEGORY_KEYWORDS.get(slug, [slug])
    return any(kw in category for kw in keywords)


def filter_by_section(articles: list[Article], slug: str) -> list[Article]:
    return [a for a in articles if matches_category(a, slug)]


def score_for(model: ModelScore, dimension: Dimension) -> float:
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown score dimension: {dimension!r}")
    return getattr(model, dimension)


def rank_models(models: list[ModelScore], dimension: Dimension = "overall") -> list[ModelScore]:
    """Strict descending sort on one score; ties keep their input order."""
    return sorted(models, key=lambda m: score_for(m, dimension), reverse=True)
