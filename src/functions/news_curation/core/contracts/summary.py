"""Contracts for the summary artifacts produced per article."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .article import CandidateArticle

FALLBACK_RAW_SUMMARY = (
    "This article discusses an important development in AI/ML technology, presenting new "
    "technical insights and methodologies that are relevant for understanding current "
    "industry trends.\n\n"
    "For AI students and practitioners, this development offers valuable learning "
    "opportunities and demonstrates the evolving nature of artificial intelligence and "
    "machine learning applications."
)

FALLBACK_QUICK_SUMMARY = (
    "A recent AI/ML development with practical implications for students and practitioners."
)

FALLBACK_WHY_IT_MATTERS = (
    "This technological development represents significant progress in the AI/ML field, "
    "offering valuable insights for students learning about cutting-edge research and "
    "practical applications. The advancement demonstrates key technical principles that "
    "are essential for understanding modern artificial intelligence systems and their "
    "real-world implementations. For practitioners and aspiring developers, this "
    "development highlights emerging trends in the industry and provides learning "
    "opportunities for staying current with rapidly evolving technologies."
)


class SummaryArtifact(BaseModel):
    """Three length-bounded texts displayed for one article."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    raw: str
    quick_summary: str = Field(alias="quickSummary")
    why_it_matters: str = Field(alias="whyItMatters")

    @classmethod
    def fallback(cls) -> "SummaryArtifact":
        return cls(
            raw=FALLBACK_RAW_SUMMARY,
            quick_summary=FALLBACK_QUICK_SUMMARY,
            why_it_matters=FALLBACK_WHY_IT_MATTERS,
        )

    @property
    def is_fallback(self) -> bool:
        return self == SummaryArtifact.fallback()


@dataclass(frozen=True)
class SummarizedArticle:
    """Article paired with its summary artifact."""

    article: CandidateArticle
    summary: SummaryArtifact
    reused: bool = False


@dataclass(frozen=True)
class StoredSummary:
    """Artifact as persisted by the summary store, with its timestamp."""

    key: str
    artifact: SummaryArtifact
    last_updated: datetime
