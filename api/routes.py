"""API routes for fresh-daily."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import PAGE_SIZE, TAG_PAGE_SIZE
from content.domain import SubscribeError
from content.loaders import load_article, load_bookmarks, load_category, load_home, load_tag, regulation_view
from content.mutations import increment_view_count, subscribe_email
from content.ranking import Dimension, SortKey, rank_models
from content.store import ALL_CATEGORIES, ContentStore

router = APIRouter(prefix="/api")

_store = ContentStore()


def get_store() -> ContentStore:
    return _store


def _dump(items: list[BaseModel]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


class SubscribeRequest(BaseModel):
    email: str


@router.get("/health")
def health(store: ContentStore = Depends(get_store)) -> dict[str, Any]:
    """Healthcheck endpoint."""
    caps = store.capabilities
    return {
        "status": "ok",
        "service": "fresh-daily",
        "capabilities": {
            "slugs": caps.slugs,
            "view_counts": caps.view_counts,
            "model_votes": caps.model_votes,
            "headline_fts": caps.headline_fts,
        },
    }


@router.get("/home")
async def home(store: ContentStore = Depends(get_store)) -> dict[str, Any]:
    """All homepage sections, fetched concurrently."""
    page = await load_home(store)
    return {
        "hero": _dump(page.hero),
        "breaking": _dump(page.breaking),
        "featured": _dump(page.featured),
        "latest": _dump(page.latest),
        "most_popular": _dump(page.most_popular),
        "trending_tags": _dump(page.trending_tags),
        "timeline": _dump(page.timeline),
        "voices": _dump(page.voices),
        "models": _dump(page.models),
        "regulations": page.regulations,
    }


@router.get("/articles/latest")
def get_latest_articles(
    limit: int = Query(default=20, ge=1, le=200),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    return _dump(store.list_recent(limit))


@router.get("/articles/featured")
def get_featured_articles(
    limit: int = Query(default=3, ge=1, le=50),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    return _dump(store.list_featured(limit))


@router.get("/articles/breaking")
def get_breaking_articles(
    limit: int = Query(default=5, ge=1, le=50),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    return _dump(store.list_breaking(limit))


@router.get("/articles/hero")
def get_hero_articles(
    limit: int = Query(default=3, ge=1, le=20),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    return _dump(store.list_hero(limit))


@router.get("/articles/popular")
def get_popular_articles(
    limit: int = Query(default=5, ge=1, le=50),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """Most read articles; recency order if view counts aren't tracked yet."""
    return _dump(store.list_most_popular(limit))


@router.get("/articles/page")
def get_articles_page(
    category: str = Query(default=ALL_CATEGORIES),
    offset: int = Query(default=0, ge=0),
    size: int = Query(default=PAGE_SIZE, ge=1, le=100),
    store: ContentStore = Depends(get_store),
) -> dict[str, Any]:
    """Offset pagination for "load more". A short page marks the end."""
    articles = store.list_paged(category, offset, size)
    return {
        "category": category,
        "offset": offset,
        "size": size,
        "articles": _dump(articles),
        "end": len(articles) < size,
    }


@router.get("/articles/search")
def search_articles(
    q: str = Query(..., min_length=1),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """Headline search: full-text first, substring fallback."""
    return _dump(store.search_headlines(q))


@router.get("/articles/{slug_or_id}")
async def get_article(slug_or_id: str, store: ContentStore = Depends(get_store)) -> dict[str, Any]:
    """Article page: the article, its related reads, and one view counted."""
    page = await load_article(store, slug_or_id)
    if page is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"article": page.article.model_dump(mode="json"), "related": _dump(page.related)}


@router.get("/articles/{slug_or_id}/related")
def get_related_articles(
    slug_or_id: str,
    limit: int = Query(default=3, ge=1, le=20),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    article = store.get_by_slug_or_id(slug_or_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return _dump(store.list_related_by_tags(article.tags, article.id, article.category, limit))


@router.post("/articles/{article_id}/view", status_code=204)
def record_view(article_id: str, store: ContentStore = Depends(get_store)) -> Response:
    increment_view_count(store, article_id)
    return Response(status_code=204)


@router.get("/categories/{slug}")
async def get_category(
    slug: str,
    sort: SortKey = Query(default="latest"),
    store: ContentStore = Depends(get_store),
) -> dict[str, Any]:
    page = await load_category(store, slug, sort)
    return {"slug": slug, "sort": sort, "articles": _dump(page.articles)}


@router.get("/tags/popular")
def get_popular_tags(
    limit: int = Query(default=20, ge=1, le=100),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    return _dump(store.tag_frequency(limit))


@router.get("/tags/{tag}")
async def get_tag(
    tag: str,
    sort: SortKey = Query(default="latest"),
    limit: int = Query(default=TAG_PAGE_SIZE, ge=1, le=200),
    store: ContentStore = Depends(get_store),
) -> dict[str, Any]:
    page = await load_tag(store, tag, sort, limit)
    return {
        "tag": tag,
        "sort": sort,
        "articles": _dump(page.articles),
        "related_tags": page.related_tags,
    }


@router.get("/bookmarks")
async def get_bookmarks(
    ids: str = Query(default=""),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """Resolve a comma-separated list of bookmarked article ids."""
    article_ids = [i for i in (part.strip() for part in ids.split(",")) if i]
    return _dump(await load_bookmarks(store, article_ids))


@router.get("/models")
def get_models(
    dimension: Dimension = Query(default="overall"),
    store: ContentStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """Leaderboard ranked on one score dimension."""
    ranked = rank_models(store.list_model_scores(), dimension)
    out = []
    for rank, model in enumerate(ranked, start=1):
        data = model.model_dump(mode="json")
        data["rank"] = rank
        out.append(data)
    return out


@router.post("/models/{model_id}/vote", status_code=204)
def vote(model_id: int, store: ContentStore = Depends(get_store)) -> Response:
    # One-vote-per-client is enforced by the client's own ledger
    store.vote_for_model(model_id)
    return Response(status_code=204)


@router.get("/regulations")
def get_regulations(store: ContentStore = Depends(get_store)) -> list[dict[str, Any]]:
    return [regulation_view(r) for r in store.list_regulations()]


@router.get("/timeline")
def get_timeline(store: ContentStore = Depends(get_store)) -> list[dict[str, Any]]:
    return _dump(store.list_timeline_events())


@router.get("/voices")
def get_voices(store: ContentStore = Depends(get_store)) -> list[dict[str, Any]]:
    return _dump(store.list_voices())


@router.post("/newsletter/subscribe")
def subscribe(body: SubscribeRequest, store: ContentStore = Depends(get_store)) -> JSONResponse:
    error = subscribe_email(store, body.email)
    if error is None:
        return JSONResponse({"status": "subscribed"})
    status = 422 if error is SubscribeError.INVALID_EMAIL else 500
    return JSONResponse(
        {"status": "error", "reason": error.value, "detail": error.message, "field": "email"},
        status_code=status,
    )


@router.get("/newsletter/stats")
def newsletter_stats(store: ContentStore = Depends(get_store)) -> dict[str, int]:
    return store.newsletter_stats()
