"""Page loaders.

Each loader is called explicitly by the caller (route entry, parameter
change). Independent section fetches run concurrently in the thread pool
and every section degrades on its own: one empty section never blanks
the page.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from starlette.concurrency import run_in_threadpool

from config import CATEGORY_BATCH_SIZE, RELATED_TAG_LIMIT, TAG_PAGE_SIZE
from content.derived import days_remaining, deadline_progress
from content.domain import AIVoice, Article, ModelScore, Regulation, TagCount, TimelineEvent
from content.mutations import ViewTracker
from content.ranking import SortKey, filter_by_section, rank_models, sort_batch
from content.store import ContentStore

logger = logging.getLogger(__name__)


@dataclass
class HomePage:
    hero: list[Article] = field(default_factory=list)
    breaking: list[Article] = field(default_factory=list)
    featured: list[Article] = field(default_factory=list)
    latest: list[Article] = field(default_factory=list)
    most_popular: list[Article] = field(default_factory=list)
    trending_tags: list[TagCount] = field(default_factory=list)
    timeline: list[TimelineEvent] = field(default_factory=list)
    voices: list[AIVoice] = field(default_factory=list)
    models: list[ModelScore] = field(default_factory=list)
    regulations: list[dict] = field(default_factory=list)


@dataclass
class ArticlePage:
    article: Article
    related: list[Article] = field(default_factory=list)


@dataclass
class ListingPage:
    articles: list[Article] = field(default_factory=list)
    related_tags: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.articles


def regulation_view(regulation: Regulation) -> dict:
    """Regulation plus its live countdown fields."""
    data = regulation.model_dump(mode="json")
    data["days_remaining"] = days_remaining(regulation.deadline)
    data["progress"] = deadline_progress(regulation.deadline)
    return data


async def load_home(store: ContentStore) -> HomePage:
    (
        hero,
        breaking,
        featured,
        latest,
        most_popular,
        trending_tags,
        timeline,
        voices,
        models,
        regulations,
    ) = await asyncio.gather(
        run_in_threadpool(store.list_hero, 3),
        run_in_threadpool(store.list_breaking, 5),
        run_in_threadpool(store.list_featured, 3),
        run_in_threadpool(store.list_recent, 10),
        run_in_threadpool(store.list_most_popular, 5),
        run_in_threadpool(store.tag_frequency, 20),
        run_in_threadpool(store.list_timeline_events),
        run_in_threadpool(store.list_voices),
        run_in_threadpool(store.list_model_scores),
        run_in_threadpool(store.list_regulations),
    )
    return HomePage(
        hero=hero,
        breaking=breaking,
        featured=featured,
        latest=latest,
        most_popular=most_popular,
        trending_tags=trending_tags,
        timeline=timeline,
        voices=voices,
        models=rank_models(models),
        regulations=[regulation_view(r) for r in regulations],
    )


async def load_article(
    store: ContentStore,
    slug_or_id: str,
    views: ViewTracker | None = None,
    related_limit: int = 3,
) -> ArticlePage | None:
    """Resolve an article, count the view once and fetch related reads."""
    article = await run_in_threadpool(store.get_by_slug_or_id, slug_or_id)
    if article is None:
        return None

    views = views or ViewTracker(store)
    related, _ = await asyncio.gather(
        run_in_threadpool(
            store.list_related_by_tags, article.tags, article.id, article.category, related_limit
        ),
        run_in_threadpool(views.record, article.id),
    )
    return ArticlePage(article=article, related=related)


async def load_category(store: ContentStore, slug: str, sort: SortKey = "latest") -> ListingPage:
    """Recent batch filtered by the section heuristic, then re-sorted."""
    batch = await run_in_threadpool(store.list_recent, CATEGORY_BATCH_SIZE)
    return ListingPage(articles=sort_batch(filter_by_section(batch, slug), sort))


async def load_tag(
    store: ContentStore,
    tag: str,
    sort: SortKey = "latest",
    limit: int = TAG_PAGE_SIZE,
) -> ListingPage:
    articles, popular = await asyncio.gather(
        run_in_threadpool(store.list_by_tag, tag, limit),
        run_in_threadpool(store.tag_frequency, 30),
    )
    related_tags = [t.tag for t in popular if t.tag != tag][:RELATED_TAG_LIMIT]
    return ListingPage(articles=sort_batch(articles, sort), related_tags=related_tags)


async def load_bookmarks(store: ContentStore, article_ids: list[str]) -> list[Article]:
    """Resolve bookmarked ids in bookmark order; ids that no longer exist are dropped."""
    if not article_ids:
        return []
    found = await asyncio.gather(*(run_in_threadpool(store.get_by_id, i) for i in article_ids))
    missing = sum(1 for a in found if a is None)
    if missing:
        logger.debug("%d bookmarked article(s) no longer available", missing)
    return [a for a in found if a is not None]
