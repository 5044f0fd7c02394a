from content.domain import AIVoice, Article, ArticleSource, ModelScore, Regulation, SubscribeError, TagCount, TimelineEvent
from content.store import ALL_CATEGORIES, Capabilities, ContentStore

__all__ = [
    "AIVoice",
    "ALL_CATEGORIES",
    "Article",
    "ArticleSource",
    "Capabilities",
    "ContentStore",
    "ModelScore",
    "Regulation",
    "SubscribeError",
    "TagCount",
    "TimelineEvent",
]
