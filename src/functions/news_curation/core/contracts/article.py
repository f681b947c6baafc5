"""Contracts for candidate articles and scraped article text."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Engagement(BaseModel):
    """Engagement counters supplied by the upstream feed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    views: int = 0
    likes: int = 0
    shares: int = 0
    comments: int = 0
    rsvp_count: int = Field(default=0, alias="rsvpCount")

    @field_validator("views", "likes", "shares", "comments", "rsvp_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        if value is None:
            return 0
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            return 0


class CandidateArticle(BaseModel):
    """Article metadata produced upstream and consumed read-only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str
    description: str = ""
    content: str = ""
    source: str = "Unknown"
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")
    url: Optional[str] = None
    article_id: Optional[str] = Field(default=None, alias="id")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    categories: List[str] = Field(default_factory=list)
    engagement: Engagement = Field(default_factory=Engagement)

    @field_validator("source", mode="before")
    @classmethod
    def _flatten_source(cls, value: Any) -> str:
        # Feeds deliver either a plain name or {"id": ..., "name": ...}
        if isinstance(value, dict):
            value = value.get("name")
        if not value:
            return "Unknown"
        return str(value)

    @field_validator("description", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("engagement", mode="before")
    @classmethod
    def _default_engagement(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def key(self) -> str:
        """Identity used for de-duplication and persistence lookups."""

        return self.article_id or self.url or self.title

    def short_description(self, limit: int = 200) -> str:
        text = self.description or self.content
        return text[:limit]


@dataclass(frozen=True)
class ScrapedText:
    """Main-content text extracted from an article page."""

    source_url: str
    text: str


@dataclass(frozen=True)
class ScrapedArticle:
    """A candidate paired with the text extracted from its URL."""

    article: CandidateArticle
    scraped: ScrapedText

    @property
    def text(self) -> str:
        return self.scraped.text
