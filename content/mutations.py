"""Reader-triggered writes: view counts, model votes, newsletter signup."""

import logging

from content.client_state import SubscriptionFlag, VoteLedger
from content.domain import SubscribeError
from content.store import ContentStore
from content.validation import looks_like_email

logger = logging.getLogger(__name__)


class ViewTracker:
    """Counts each article at most once per page load."""

    def __init__(self, store: ContentStore) -> None:
        self._store = store
        self._seen: set[str] = set()

    def record(self, article_id: str) -> bool:
        """Fire-and-forget increment. Returns False if already counted here."""
        if article_id in self._seen:
            return False
        self._seen.add(article_id)
        increment_view_count(self._store, article_id)
        return True


def increment_view_count(store: ContentStore, article_id: str) -> None:
    """Bump an article's view count. Never raises on store failure."""
    if not store.increment_view_count(article_id):
        logger.debug("View not recorded for %s", article_id)


def vote_for_model(store: ContentStore, ledger: VoteLedger, model_id: int) -> bool:
    """Cast at most one vote per model for this client.

    The local flag is set before the store call and is not rolled back if
    the call fails. Returns False when this client already voted.
    """
    if ledger.has_voted(model_id):
        return False
    ledger.mark_voted(model_id)
    if not store.vote_for_model(model_id):
        # Known gap: local and server counts now disagree until reload
        logger.warning("Vote for model %s not recorded by the store", model_id)
    return True


def subscribe_email(
    store: ContentStore,
    email: str,
    flag: SubscriptionFlag | None = None,
) -> SubscribeError | None:
    """Sign an address up for the newsletter. Returns None on success."""
    if not looks_like_email(email):
        return SubscribeError.INVALID_EMAIL
    error = store.insert_subscriber(email)
    if error is None and flag is not None:
        flag.set()
    return error
