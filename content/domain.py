"""Domain shapes returned by the content store."""

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

Trend = Literal["up", "down", "same"]
RegulationStatus = Literal["enacted", "pending", "proposed"]
RegulationImpact = Literal["high", "medium", "low"]
TimelineType = Literal["past", "present", "future"]


class ArticleSource(BaseModel):
    name: str
    url: str = ""
    favicon: str | None = None


class Article(BaseModel):
    """Published article as seen by readers."""

    id: str
    slug: str | None = None
    headline: str
    excerpt: str | None = None
    summary: str | None = None
    body: str | None = None
    image: str = ""
    category: str
    author: str | None = None
    read_time: str
    published_at: str | None = None  # display-formatted, e.g. "Mar 4, 2026"
    original_url: str | None = None
    is_exclusive: bool = False
    is_featured: bool = False
    is_breaking: bool = False
    source: ArticleSource | None = None
    tags: list[str] = Field(default_factory=list)
    key_points: list[str] = Field(default_factory=list)
    why_it_matters: str | None = None
    view_count: int = 0


class ModelScore(BaseModel):
    id: int
    name: str
    company: str
    overall: float
    coding: float
    reasoning: float
    creative: float
    context_window: str = ""
    highlight: str | None = None
    trend: Trend = "same"
    vote_count: int = 0
    updated_at: str | None = None


class Regulation(BaseModel):
    id: str
    title: str
    region: str
    status: RegulationStatus
    impact: RegulationImpact
    deadline: date | None = None
    description: str = ""
    source_url: str | None = None
    sort_order: int = 0


class TimelineEvent(BaseModel):
    year: str
    quarter: str | None = None
    title: str
    description: str = ""
    type: TimelineType
    sort_order: int = 0


class AIVoice(BaseModel):
    name: str
    title: str = ""
    company: str = ""
    avatar: str = ""
    quote: str
    article_link: str | None = None


class TagCount(BaseModel):
    tag: str
    count: int


class SubscribeError(str, Enum):
    """Why a newsletter signup failed."""

    INVALID_EMAIL = "invalid_email"
    FAILED = "failed"

    @property
    def message(self) -> str:
        if self is SubscribeError.INVALID_EMAIL:
            return "Please enter a valid email address."
        return "Something went wrong."
