"""Deterministic scoring and length enforcement helpers."""

from .article_scoring import (
    categorize_article,
    engagement_score,
    keyword_relevance_score,
    rank_by_engagement,
    rank_by_selection_score,
)
from .truncation import truncate_at_sentence, truncate_with_hard_cut

__all__ = [
    "categorize_article",
    "engagement_score",
    "keyword_relevance_score",
    "rank_by_engagement",
    "rank_by_selection_score",
    "truncate_at_sentence",
    "truncate_with_hard_cut",
]
