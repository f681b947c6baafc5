"""Value objects exchanged between curation stages."""

from .article import CandidateArticle, Engagement, ScrapedArticle, ScrapedText
from .ranking import RankingResult
from .summary import StoredSummary, SummarizedArticle, SummaryArtifact

__all__ = [
    "CandidateArticle",
    "Engagement",
    "RankingResult",
    "ScrapedArticle",
    "ScrapedText",
    "StoredSummary",
    "SummarizedArticle",
    "SummaryArtifact",
]
