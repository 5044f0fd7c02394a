"""Client-local persisted state: bookmarks, vote flags, recent searches.

Everything here is owned by one client and written by that client only.
Persistence goes through a tiny string key-value interface so the same
logic works against browser storage, a cookie jar or a plain dict.
"""

import json
import logging
from typing import Protocol

from config import (
    BOOKMARKS_KEY,
    RECENT_SEARCH_LIMIT,
    RECENT_SEARCHES_KEY,
    SUBSCRIBED_KEY,
    VOTED_MODEL_KEY_PREFIX,
)

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


def _load_list(kv: KeyValueStore, key: str) -> list[str]:
    raw = kv.get(key)
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.debug("Ignoring corrupt value under %s", key)
        return []
    if not isinstance(parsed, list):
        return []
    return [str(v) for v in parsed]


class Bookmarks:
    """Ordered set of bookmarked article ids."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        self._ids = _load_list(kv, BOOKMARKS_KEY)

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def __contains__(self, article_id: str) -> bool:
        return article_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def toggle(self, article_id: str) -> bool:
        """Add or remove an id. Returns True if it is now bookmarked."""
        if article_id in self._ids:
            self._ids.remove(article_id)
            added = False
        else:
            self._ids.append(article_id)
            added = True
        self._save()
        return added

    def clear(self) -> None:
        self._ids = []
        self._save()

    def _save(self) -> None:
        self._kv.set(BOOKMARKS_KEY, json.dumps(self._ids))


class VoteLedger:
    """Per-model "already voted" flags plus the optimistic local vote delta.

    The flag is set as soon as a vote is issued and is never rolled back,
    so a failed vote call leaves the client believing it voted.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        self._local_delta: dict[int, int] = {}

    @staticmethod
    def _key(model_id: int) -> str:
        return f"{VOTED_MODEL_KEY_PREFIX}{model_id}"

    def has_voted(self, model_id: int) -> bool:
        return self._kv.get(self._key(model_id)) == "true"

    def mark_voted(self, model_id: int) -> None:
        self._kv.set(self._key(model_id), "true")
        self._local_delta[model_id] = self._local_delta.get(model_id, 0) + 1

    def local_delta(self, model_id: int) -> int:
        return self._local_delta.get(model_id, 0)

    def displayed_votes(self, model_id: int, server_count: int) -> int:
        return server_count + self.local_delta(model_id)


class RecentSearches:
    """Most-recent-first, de-duplicated, bounded list of free-text queries."""

    def __init__(self, kv: KeyValueStore, limit: int = RECENT_SEARCH_LIMIT) -> None:
        self._kv = kv
        self._limit = limit

    def items(self) -> list[str]:
        return _load_list(self._kv, RECENT_SEARCHES_KEY)

    def add(self, query: str) -> list[str]:
        query = query.strip()
        if not query:
            return self.items()
        updated = [query] + [q for q in self.items() if q != query]
        updated = updated[: self._limit]
        self._kv.set(RECENT_SEARCHES_KEY, json.dumps(updated))
        return updated


class SubscriptionFlag:
    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    @property
    def is_set(self) -> bool:
        return self._kv.get(SUBSCRIBED_KEY) == "true"

    def set(self) -> None:
        self._kv.set(SUBSCRIBED_KEY, "true")
