from db.database import get_engine, get_session, init_db, reset_engine
from db.models import AIVoice, Article, ModelScore, Regulation, Subscriber, TimelineEvent

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
    "AIVoice",
    "Article",
    "ModelScore",
    "Regulation",
    "Subscriber",
    "TimelineEvent",
]
