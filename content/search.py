"""Search overlay: cached article batch, fuzzy matching and debounced querying.

The overlay keeps one recent batch of articles per session and matches
typed queries against it in memory. When nothing in the batch matches,
it asks the store for a headline search instead. Keystrokes are
debounced, and a sequence number makes sure only the newest query ever
gets displayed.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Generic, TypeVar

from starlette.concurrency import run_in_threadpool

from config import SEARCH_CACHE_SIZE, SEARCH_DEBOUNCE_SECONDS, SEARCH_RESULT_LIMIT, TRENDING_TAG_LIMIT
from content.client_state import RecentSearches
from content.domain import Article, TagCount
from content.mapping import article_path
from content.store import ContentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def fuzzy_search(query: str, corpus: list[Article], limit: int = SEARCH_RESULT_LIMIT) -> list[Article]:
    """Every whitespace token must appear in the headline, category or tags.

    Case-insensitive. Matches come back in corpus order, capped at limit.
    """
    tokens = query.lower().split()
    if not tokens:
        return []
    matches = []
    for article in corpus:
        fields = [article.headline.lower(), article.category.lower(), *(t.lower() for t in article.tags)]
        if all(any(tok in field for field in fields) for tok in tokens):
            matches.append(article)
            if len(matches) >= limit:
                break
    return matches


class SessionCache(Generic[T]):
    """Loads a list once and keeps it for the rest of the session.

    No TTL and no invalidation. An empty load is not kept, so a failed
    first fetch is retried on the next open. Concurrent callers share
    a single load.
    """

    def __init__(self, loader: Callable[[], list[T]]) -> None:
        self._loader = loader
        self._items: list[T] | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._items is not None

    async def get(self) -> list[T]:
        if self._items is not None:
            return self._items
        async with self._lock:
            # Another caller may have finished loading while we waited
            if self._items is not None:
                return self._items
            items = await run_in_threadpool(self._loader)
            if items:
                self._items = items
            return items


class SearchIndexCache(SessionCache[Article]):
    """Session-scoped batch of recent articles used for in-memory search."""

    def __init__(self, store: ContentStore, size: int = SEARCH_CACHE_SIZE) -> None:
        super().__init__(lambda: store.list_recent(size))
        self.size = size


class SearchState(str, Enum):
    IDLE = "idle"
    TYPING = "typing"
    SEARCHING = "searching"
    RESULTS = "results"
    NO_RESULTS = "no_results"


class DebouncedSearch:
    """Debounced, last-keystroke-wins search driver.

    A keystroke restarts the debounce timer. Once a search is in flight it
    is left to finish, but its result is dropped if a newer keystroke
    arrived in the meantime. Search errors show up as NO_RESULTS.
    """

    def __init__(
        self,
        search: Callable[[str], Awaitable[list[Article]]],
        delay: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self._search = search
        self._delay = delay
        self._seq = 0
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self.state = SearchState.IDLE
        self.query = ""
        self.results: list[Article] = []
        self.completed: list[str] = []  # queries whose results were displayed

    def input(self, query: str) -> None:
        """Register a keystroke. Must be called from a running event loop."""
        self._cancel_timer()
        self._seq += 1
        self.query = query
        if not query.strip():
            self.state = SearchState.IDLE
            self.results = []
            return
        self.state = SearchState.TYPING
        task = asyncio.get_running_loop().create_task(self._run(self._seq, query))
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def close(self) -> None:
        self._cancel_timer()
        self._seq += 1
        self.state = SearchState.IDLE
        self.query = ""
        self.results = []

    async def wait(self) -> None:
        """Wait for every pending timer and in-flight search to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _run(self, seq: int, query: str) -> None:
        await asyncio.sleep(self._delay)
        if seq != self._seq:
            return
        # Past the debounce point: from here on this task is an in-flight search
        self._timer = None
        self.state = SearchState.SEARCHING
        try:
            results = await self._search(query)
        except Exception:
            logger.warning("Search for %r failed, showing no results", query, exc_info=True)
            results = []
        if seq != self._seq:
            logger.debug("Discarding stale results for %r", query)
            return
        self.results = results
        self.state = SearchState.RESULTS if results else SearchState.NO_RESULTS
        self.completed.append(query)


class SearchSession:
    """Everything the search overlay needs for one client session."""

    def __init__(
        self,
        store: ContentStore,
        recent: RecentSearches,
        cache: SearchIndexCache | None = None,
        delay: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self._store = store
        self.recent = recent
        self.cache = cache or SearchIndexCache(store)
        self.trending: SessionCache[TagCount] = SessionCache(lambda: store.tag_frequency(TRENDING_TAG_LIMIT))
        self.search = DebouncedSearch(self._lookup, delay)

    async def open(self) -> list[TagCount]:
        """Warm the article batch and return trending tags for the empty state."""
        _, trending = await asyncio.gather(self.cache.get(), self.trending.get())
        return trending

    def type(self, query: str) -> None:
        self.search.input(query)

    def close(self) -> None:
        self.search.close()

    def select(self, article: Article) -> str:
        """Remember the query that led here and return the article's path."""
        if self.search.query.strip():
            self.recent.add(self.search.query)
        return article_path(article)

    async def _lookup(self, query: str) -> list[Article]:
        corpus = await self.cache.get()
        matches = fuzzy_search(query, corpus)
        if matches:
            return matches
        return await run_in_threadpool(self._store.search_headlines, query)
