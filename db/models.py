"""SQLAlchemy models for fresh-daily."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Article(Base):
    """Published article. Edited out-of-band; only view_count changes at runtime."""

    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    slug: Mapped[str | None] = mapped_column(String, nullable=True)
    headline: Mapped[str] = mapped_column(String, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text)
    summary: Mapped[str | None] = mapped_column(Text)
    body: Mapped[str | None] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String)
    category: Mapped[str] = mapped_column(String, nullable=False)
    author: Mapped[str | None] = mapped_column(String)
    read_time: Mapped[str | None] = mapped_column(String)
    published_at: Mapped[datetime | None] = mapped_column(DateTime)
    original_url: Mapped[str | None] = mapped_column(String)
    is_exclusive: Mapped[bool] = mapped_column(Boolean, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    is_breaking: Mapped[bool] = mapped_column(Boolean, default=False)
    source_name: Mapped[str | None] = mapped_column(String)
    source_url: Mapped[str | None] = mapped_column(String)
    source_favicon: Mapped[str | None] = mapped_column(String)
    tags: Mapped[str | None] = mapped_column(String)  # JSON array of slugs
    key_points: Mapped[str | None] = mapped_column(Text)  # JSON array
    why_it_matters: Mapped[str | None] = mapped_column(Text)
    view_count: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)

    __table_args__ = (
        Index("idx_category", "category"),
        Index("idx_published", "published_at"),
        Index("idx_articles_slug", "slug", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id!r}, slug={self.slug!r}, headline={self.headline!r})>"


class ModelScore(Base):
    """Benchmark standing of an AI model."""

    __tablename__ = "model_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    company: Mapped[str] = mapped_column(String, nullable=False)
    score_overall: Mapped[float] = mapped_column(Float, default=0.0)
    score_coding: Mapped[float] = mapped_column(Float, default=0.0)
    score_reasoning: Mapped[float] = mapped_column(Float, default=0.0)
    score_creative: Mapped[float] = mapped_column(Float, default=0.0)
    context_window: Mapped[str | None] = mapped_column(String)
    highlight: Mapped[str | None] = mapped_column(String)
    trend: Mapped[str] = mapped_column(String, default="same")  # up, down, same
    vote_count: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ModelScore(id={self.id}, name={self.name!r})>"


class Regulation(Base):
    """Tracked AI policy item."""

    __tablename__ = "regulations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    region: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)  # enacted, pending, proposed
    impact: Mapped[str] = mapped_column(String, nullable=False)  # high, medium, low
    deadline: Mapped[date | None] = mapped_column(Date)
    description: Mapped[str | None] = mapped_column(Text)
    source_url: Mapped[str | None] = mapped_column(String)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)


class TimelineEvent(Base):
    __tablename__ = "timeline_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    year: Mapped[str] = mapped_column(String, nullable=False)
    quarter: Mapped[str | None] = mapped_column(String)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str] = mapped_column(String, nullable=False)  # past, present, future
    sort_order: Mapped[int] = mapped_column(Integer, default=0)


class AIVoice(Base):
    __tablename__ = "ai_voices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str | None] = mapped_column(String)
    company: Mapped[str | None] = mapped_column(String)
    avatar: Mapped[str | None] = mapped_column(String)
    quote: Mapped[str] = mapped_column(Text, nullable=False)
    article_link: Mapped[str | None] = mapped_column(String)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)


class Subscriber(Base):
    """Newsletter subscription. Email is stored trimmed and lowercased."""

    __tablename__ = "newsletter_subscribers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    subscribed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
