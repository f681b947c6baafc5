"""Factories for constructing curation collaborators from configuration."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from src.shared.batch.retry import RetryPolicy
from src.shared.db.connection import SupabaseConfig, get_supabase_client

from .config import CurationConfig
from .contracts.article import CandidateArticle
from .db.summary_store import InMemorySummaryStore, SummaryStore, SupabaseSummaryStore
from .extraction.article_scraper import ArticleScraper, HtmlFetcher
from .llm.rate_limiter import PacingPolicy, RequestRateLimiter
from .llm.text_generator import TextGenerator
from .pipelines.curation_pipeline import CurationPipeline
from .ranking.category_ranker import CategoryRanker
from .selection.article_selector import ArticleSelector
from .summarization.article_summarizer import ArticleSummarizer

logger = logging.getLogger(__name__)


def articles_from_payload(items: Any, field_name: str = "articles") -> List[CandidateArticle]:
    """Validate a list of article dicts from an API-style payload."""

    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{field_name} must be a list of article objects")
    articles: List[CandidateArticle] = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"{field_name}[{position}] must be an object")
        if not item.get("title"):
            raise ValueError(f"{field_name}[{position}] is missing a title")
        articles.append(CandidateArticle.model_validate(item))
    return articles


def pacing_from_config(config: CurationConfig) -> PacingPolicy:
    pacing = config.pacing
    return PacingPolicy(
        between_fields_seconds=pacing.between_fields_seconds,
        between_articles_seconds=pacing.between_articles_seconds,
        between_scrapes_seconds=pacing.between_scrapes_seconds,
        overload_backoff_seconds=pacing.overload_backoff_seconds,
    )


def build_text_generator(config: CurationConfig) -> TextGenerator:
    """Create the Gemini client; the SDK is only imported when one is needed."""

    from .llm.gemini_client import GeminiTextGenerator

    return GeminiTextGenerator(
        model=config.llm.model,
        api_key=config.llm.api_key,
        rate_limiter=RequestRateLimiter(config.llm.requests_per_minute),
    )


def build_summary_store(config: CurationConfig) -> SummaryStore:
    storage = config.storage
    if not storage.use_supabase:
        logger.info("Supabase not configured; keeping summaries in memory")
        return InMemorySummaryStore()
    client = get_supabase_client(
        SupabaseConfig(url=storage.supabase_url, key=storage.supabase_key, schema=storage.schema)
    )
    return SupabaseSummaryStore(client, table_name=storage.table)


def build_pipeline(
    config: CurationConfig,
    *,
    generator: Optional[TextGenerator] = None,
    fetcher: Optional[HtmlFetcher] = None,
    store: Optional[SummaryStore] = None,
    pacing: Optional[PacingPolicy] = None,
    retry_policy: Optional[RetryPolicy] = None,
) -> CurationPipeline:
    """Wire a :class:`CurationPipeline`; any collaborator may be supplied explicitly."""

    generator = generator or build_text_generator(config)
    pacing = pacing or pacing_from_config(config)
    retry_policy = retry_policy or RetryPolicy(
        max_retries=config.retry.max_retries,
        base_delay=config.retry.base_delay_seconds,
    )

    scraper = ArticleScraper(
        fetcher=fetcher,
        config=config.extraction,
        pacing=pacing,
        min_content_length=config.limits.min_content_length,
    )
    return CurationPipeline(
        scraper=scraper,
        selector=ArticleSelector(
            generator,
            retry_policy=retry_policy,
            previous_pool_limit=config.previous_pool_limit,
        ),
        ranker=CategoryRanker(generator, retry_policy=retry_policy),
        summarizer=ArticleSummarizer(generator, limits=config.limits, pacing=pacing),
        store=store if store is not None else build_summary_store(config),
        target_articles=config.target_articles,
        category=config.category,
        freshness_hours=config.freshness_hours,
    )
