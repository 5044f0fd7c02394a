"""Tests for client-local persisted state."""

import json

from content.client_state import Bookmarks, InMemoryKeyValueStore, RecentSearches, SubscriptionFlag, VoteLedger
from config import BOOKMARKS_KEY, RECENT_SEARCHES_KEY


def test_bookmarks_toggle_and_persist():
    kv = InMemoryKeyValueStore()
    bookmarks = Bookmarks(kv)

    assert bookmarks.toggle("a1") is True
    assert bookmarks.toggle("a2") is True
    assert bookmarks.toggle("a1") is False
    assert "a2" in bookmarks
    assert "a1" not in bookmarks
    assert len(bookmarks) == 1

    reloaded = Bookmarks(kv)
    assert reloaded.ids == ["a2"]


def test_bookmarks_clear():
    kv = InMemoryKeyValueStore({BOOKMARKS_KEY: json.dumps(["a", "b"])})
    bookmarks = Bookmarks(kv)
    bookmarks.clear()
    assert bookmarks.ids == []
    assert json.loads(kv.get(BOOKMARKS_KEY)) == []


def test_corrupt_bookmarks_start_empty():
    kv = InMemoryKeyValueStore({BOOKMARKS_KEY: "{oops"})
    assert Bookmarks(kv).ids == []


def test_vote_ledger_persists_flag():
    kv = InMemoryKeyValueStore()
    ledger = VoteLedger(kv)
    assert not ledger.has_voted(5)

    ledger.mark_voted(5)
    assert ledger.has_voted(5)
    assert kv.get("freshdaily-voted-model-5") == "true"
    assert ledger.displayed_votes(5, 41) == 42
    assert ledger.displayed_votes(6, 41) == 41

    # Flag survives a reload, the optimistic delta does not
    reloaded = VoteLedger(kv)
    assert reloaded.has_voted(5)
    assert reloaded.local_delta(5) == 0


def test_recent_searches_most_recent_first_dedup_bounded():
    kv = InMemoryKeyValueStore()
    recent = RecentSearches(kv, limit=3)
    for query in ["gpt", "claude", "gemini", "gpt", "llama"]:
        recent.add(query)

    assert recent.items() == ["llama", "gpt", "gemini"]
    assert json.loads(kv.get(RECENT_SEARCHES_KEY)) == ["llama", "gpt", "gemini"]


def test_recent_searches_ignores_blank():
    recent = RecentSearches(InMemoryKeyValueStore())
    recent.add("  ")
    assert recent.items() == []


def test_subscription_flag():
    kv = InMemoryKeyValueStore()
    flag = SubscriptionFlag(kv)
    assert not flag.is_set
    flag.set()
    assert SubscriptionFlag(kv).is_set
