"""Deterministic scoring used when model-based selection or ranking fails."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..contracts.article import CandidateArticle

AI_ML_KEYWORDS = (
    "artificial intelligence",
    "machine learning",
    "deep learning",
    "neural network",
    "large language model",
    "llm",
    "ai",
    "gpt",
    "gemini",
    "openai",
    "anthropic",
    "chatbot",
    "generative",
    "transformer",
    "computer vision",
    "robotics",
)

BUSINESS_TECH_KEYWORDS = (
    "startup",
    "funding",
    "raises",
    "series a",
    "series b",
    "venture",
    "acquisition",
    "ipo",
    "software",
    "developer",
    "cloud",
    "chip",
    "semiconductor",
    "cybersecurity",
    "open source",
    "platform",
)

EXCLUDED_KEYWORDS = (
    "war",
    "military",
    "weapon",
    "missile",
    "army",
    "defense",
    "election",
    "politic",
    "senate",
    "congress",
    "terror",
    "shooting",
    "killed",
    "violence",
    "lawsuit",
    "scandal",
    "controvers",
)

AI_ML_WEIGHT = 30.0
BUSINESS_TECH_WEIGHT = 15.0
EXCLUDED_PENALTY = 100.0
RECENCY_MAX_BONUS = 20.0
RECENCY_WINDOW_HOURS = 72.0

_CATEGORY_RULES = (
    ("AI & Machine Learning", AI_ML_KEYWORDS),
    ("Startups & Funding", ("startup", "funding", "raises", "series a", "series b", "venture", "ipo")),
    ("Cybersecurity", ("cybersecurity", "security", "breach", "hack", "ransomware", "vulnerability")),
    ("Hardware & Infrastructure", ("chip", "semiconductor", "gpu", "data center", "hardware", "server")),
    ("Software Development", ("software", "developer", "programming", "open source", "api", "framework")),
)
DEFAULT_CATEGORY = "Tech Industry"


def _matches(text: str, keyword: str) -> bool:
    # Short keywords must match whole words ("ai" should not hit "said")
    if len(keyword) <= 3:
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


def _searchable_text(article: CandidateArticle) -> str:
    return f"{article.title} {article.description}".lower()


def engagement_score(article: CandidateArticle) -> int:
    """Weighted engagement: views + 2*likes + 3*shares."""

    engagement = article.engagement
    return engagement.views + 2 * engagement.likes + 3 * engagement.shares


def keyword_relevance_score(article: CandidateArticle) -> float:
    text = _searchable_text(article)
    score = 0.0
    if any(_matches(text, keyword) for keyword in AI_ML_KEYWORDS):
        score += AI_ML_WEIGHT
    if any(_matches(text, keyword) for keyword in BUSINESS_TECH_KEYWORDS):
        score += BUSINESS_TECH_WEIGHT
    if any(_matches(text, keyword) for keyword in EXCLUDED_KEYWORDS):
        score -= EXCLUDED_PENALTY
    return score


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def recency_bonus(article: CandidateArticle, newest: Optional[datetime]) -> float:
    """Linear bonus that decays to zero over the recency window.

    Measured against the newest article of the pool rather than the wall
    clock so the same pool always scores the same way.
    """

    if article.published_at is None or newest is None:
        return 0.0
    age_hours = (_as_utc(newest) - _as_utc(article.published_at)).total_seconds() / 3600.0
    if age_hours <= 0:
        return RECENCY_MAX_BONUS
    if age_hours >= RECENCY_WINDOW_HOURS:
        return 0.0
    return RECENCY_MAX_BONUS * (1.0 - age_hours / RECENCY_WINDOW_HOURS)


def newest_published(articles: Sequence[CandidateArticle]) -> Optional[datetime]:
    dates = [_as_utc(article.published_at) for article in articles if article.published_at is not None]
    return max(dates) if dates else None


def fallback_selection_score(article: CandidateArticle, newest: Optional[datetime]) -> float:
    return engagement_score(article) + keyword_relevance_score(article) + recency_bonus(article, newest)


def rank_by_selection_score(articles: Sequence[CandidateArticle]) -> list[CandidateArticle]:
    """Order articles by fallback selection score, keeping upstream order on ties."""

    newest = newest_published(articles)
    return sorted(articles, key=lambda article: fallback_selection_score(article, newest), reverse=True)


def rank_by_engagement(articles: Sequence[CandidateArticle]) -> list[CandidateArticle]:
    """Order articles by weighted engagement, keeping upstream order on ties."""

    return sorted(articles, key=engagement_score, reverse=True)


def categorize_article(article: CandidateArticle) -> str:
    """Upstream category when present, otherwise a keyword-derived label."""

    if article.categories:
        return article.categories[0]
    text = _searchable_text(article)
    for label, keywords in _CATEGORY_RULES:
        if any(_matches(text, keyword) for keyword in keywords):
            return label
    return DEFAULT_CATEGORY
