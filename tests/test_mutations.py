"""Tests for reader-triggered writes."""

from unittest.mock import MagicMock

import pytest

from content.client_state import InMemoryKeyValueStore, SubscriptionFlag, VoteLedger
from content.domain import SubscribeError
from content.mutations import ViewTracker, subscribe_email, vote_for_model
from tests.conftest import make_article


@pytest.mark.parametrize("email", ["", "   ", "not-an-email"])
def test_subscribe_rejects_without_touching_store(email):
    store = MagicMock()
    flag = SubscriptionFlag(InMemoryKeyValueStore())

    assert subscribe_email(store, email, flag) is SubscribeError.INVALID_EMAIL
    store.insert_subscriber.assert_not_called()
    assert not flag.is_set


def test_subscribe_success_sets_flag():
    store = MagicMock()
    store.insert_subscriber.return_value = None
    flag = SubscriptionFlag(InMemoryKeyValueStore())

    assert subscribe_email(store, "reader@example.com", flag) is None
    store.insert_subscriber.assert_called_once_with("reader@example.com")
    assert flag.is_set


def test_subscribe_store_failure_passes_through():
    store = MagicMock()
    store.insert_subscriber.return_value = SubscribeError.FAILED
    flag = SubscriptionFlag(InMemoryKeyValueStore())

    assert subscribe_email(store, "reader@example.com", flag) is SubscribeError.FAILED
    assert not flag.is_set


def test_subscribe_against_real_store(store):
    assert subscribe_email(store, "Reader@Example.com") is None
    assert subscribe_email(store, "reader@example.com") is None
    assert store.newsletter_stats() == {"total": 1}


def test_vote_once_per_client():
    store = MagicMock()
    store.vote_for_model.return_value = True
    ledger = VoteLedger(InMemoryKeyValueStore())

    assert vote_for_model(store, ledger, 3) is True
    assert vote_for_model(store, ledger, 3) is False
    store.vote_for_model.assert_called_once_with(3)
    assert ledger.displayed_votes(3, server_count=10) == 11


def test_failed_vote_keeps_local_flag():
    store = MagicMock()
    store.vote_for_model.return_value = False
    ledger = VoteLedger(InMemoryKeyValueStore())

    assert vote_for_model(store, ledger, 3) is True
    assert ledger.has_voted(3)
    assert vote_for_model(store, ledger, 3) is False


def test_view_tracker_counts_once(store, add_articles):
    add_articles(make_article("a1", view_count=0))
    views = ViewTracker(store)

    assert views.record("a1") is True
    assert views.record("a1") is False
    assert store.get_by_id("a1").view_count == 1

    # A new page load counts again
    ViewTracker(store).record("a1")
    assert store.get_by_id("a1").view_count == 2


def test_view_tracker_swallows_store_failure():
    store = MagicMock()
    store.increment_view_count.return_value = False
    assert ViewTracker(store).record("missing") is True
