"""End-to-end curation run: scrape, select, rank, summarize."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..contracts.article import CandidateArticle, ScrapedArticle
from ..contracts.ranking import RankingResult
from ..contracts.summary import StoredSummary, SummarizedArticle, SummaryArtifact
from ..db.summary_store import SummaryStore, is_fresh
from ..extraction.article_scraper import ArticleScraper
from ..extraction.image_validator import validate_image_url
from ..ranking.category_ranker import CategoryRanker
from ..selection.article_selector import ArticleSelector
from ..summarization.article_summarizer import ArticleSummarizer


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _article_payload(item: SummarizedArticle) -> Dict[str, Any]:
    article = item.article
    payload = article.model_dump(mode="json", by_alias=True)
    payload["key"] = article.key
    payload["imageUrl"] = article.image_url if validate_image_url(article.image_url) else None
    payload["summary"] = item.summary.model_dump(by_alias=True)
    payload["summaryReused"] = item.reused
    return payload


@dataclass
class CurationResult:
    """Outcome of one curation run."""

    run_at: datetime
    category: str
    candidate_count: int
    scraped_count: int
    supplemented_count: int
    articles: List[SummarizedArticle] = field(default_factory=list)
    ranking: Optional[RankingResult] = None

    def to_dict(self) -> Dict[str, Any]:
        featured = self.ranking.featured if self.ranking else None
        return {
            "run_at": self.run_at.isoformat(),
            "category": self.category,
            "counts": {
                "candidates": self.candidate_count,
                "scraped": self.scraped_count,
                "selected": len(self.articles),
                "supplemented": self.supplemented_count,
                "reused_summaries": sum(1 for item in self.articles if item.reused),
            },
            "articles": [_article_payload(item) for item in self.articles],
            "top3": [article.key for article in self.ranking.top3] if self.ranking else [],
            "featured": featured.key if featured else None,
        }


class CurationPipeline:
    """Runs the curation stages strictly one after another."""

    def __init__(
        self,
        *,
        scraper: ArticleScraper,
        selector: ArticleSelector,
        ranker: CategoryRanker,
        summarizer: ArticleSummarizer,
        store: SummaryStore,
        target_articles: int = 20,
        category: str = "news",
        freshness_hours: float = 24.0,
        clock: Callable[[], datetime] = _utc_now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.scraper = scraper
        self.selector = selector
        self.ranker = ranker
        self.summarizer = summarizer
        self.store = store
        self.target_articles = target_articles
        self.category = category
        self.freshness_hours = freshness_hours
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def run(
        self,
        candidates: Sequence[CandidateArticle],
        previous_pool: Optional[Sequence[CandidateArticle]] = None,
    ) -> CurationResult:
        run_at = self._clock()
        self._logger.info("Starting curation run with %d candidates", len(candidates))

        scraped = self.scraper.scrape_multiple(candidates)
        text_by_key = {item.article.key: item for item in scraped}

        selected = self.selector.select_best([item.article for item in scraped], self.target_articles)
        supplemented = self._supplement(selected, candidates, previous_pool)
        selected = selected + supplemented

        ranking = self.ranker.rank_category(selected, self.category)
        articles = self._summarize_selection(selected, text_by_key, run_at)

        result = CurationResult(
            run_at=run_at,
            category=self.category,
            candidate_count=len(candidates),
            scraped_count=len(scraped),
            supplemented_count=len(supplemented),
            articles=articles,
            ranking=ranking,
        )
        self._logger.info(
            "Curation run finished: %d selected (%d supplemented), featured=%s",
            len(articles),
            len(supplemented),
            ranking.featured.title if ranking.featured else None,
        )
        return result

    def summarize_url(self, article: CandidateArticle) -> SummarizedArticle:
        """Summary for a single article, reusing a fresh stored artifact."""

        now = self._clock()
        stored = self._load(article.key)
        if is_fresh(stored, now, self.freshness_hours):
            self._logger.info("Reusing stored summary for %s", article.key)
            return SummarizedArticle(article=article, summary=stored.artifact, reused=True)

        scraped = self.scraper.scrape(article.url) if article.url else None
        if scraped is None:
            self._logger.warning("Could not scrape %s; returning fallback summary", article.url)
            return SummarizedArticle(article=article, summary=SummaryArtifact.fallback())

        summary = self.summarizer.generate_summary(scraped.text, article.title)
        if not summary.is_fallback:
            self._save(article.key, summary, now)
        return SummarizedArticle(article=article, summary=summary)

    def _supplement(
        self,
        selected: List[CandidateArticle],
        candidates: Sequence[CandidateArticle],
        previous_pool: Optional[Sequence[CandidateArticle]],
    ) -> List[CandidateArticle]:
        needed = self.target_articles - len(selected)
        if needed <= 0 or not previous_pool:
            return []

        seen = {article.key for article in selected} | {article.key for article in candidates}
        pool = [article for article in previous_pool if article.key not in seen]
        self._logger.info("Selection short by %d; drawing from %d previous articles", needed, len(pool))

        supplemented: List[CandidateArticle] = []
        for article in self.selector.select_from_previous(needed, pool):
            if article.key in seen:
                continue
            seen.add(article.key)
            supplemented.append(article)
        return supplemented[:needed]

    def _summarize_selection(
        self,
        selected: Sequence[CandidateArticle],
        text_by_key: Dict[str, ScrapedArticle],
        run_at: datetime,
    ) -> List[SummarizedArticle]:
        finished: Dict[str, SummarizedArticle] = {}
        to_generate: List[ScrapedArticle] = []

        for article in selected:
            stored = self._load(article.key)
            if is_fresh(stored, run_at, self.freshness_hours):
                self._logger.info("Reusing stored summary for %s", article.title)
                finished[article.key] = SummarizedArticle(article=article, summary=stored.artifact, reused=True)
                continue

            scraped = text_by_key.get(article.key)
            if scraped is None and article.url:
                page = self.scraper.scrape(article.url)
                scraped = ScrapedArticle(article=article, scraped=page) if page is not None else None
            if scraped is None:
                self._logger.warning("No article text for %s; using fallback summary", article.title)
                finished[article.key] = SummarizedArticle(article=article, summary=SummaryArtifact.fallback())
                continue
            to_generate.append(scraped)

        def _persist(result: SummarizedArticle) -> None:
            finished[result.article.key] = result
            if not result.summary.is_fallback:
                self._save(result.article.key, result.summary, run_at)

        self.summarizer.process_multiple_articles(to_generate, on_result=_persist)
        return [finished[article.key] for article in selected]

    def close(self) -> None:
        """Release the HTTP resources held by the scraper."""

        self.scraper.close()

    def __enter__(self) -> "CurationPipeline":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _load(self, key: str) -> Optional[StoredSummary]:
        try:
            return self.store.get(key)
        except Exception as exc:
            self._logger.warning("Summary lookup failed for %s: %s", key, exc)
            return None

    def _save(self, key: str, artifact: SummaryArtifact, updated_at: datetime) -> None:
        try:
            self.store.save(key, artifact, updated_at)
        except Exception as exc:
            self._logger.error("Failed to persist summary for %s: %s", key, exc)
