"""Generate the three summary fields of an article under length budgets."""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence

from ..config import SummaryLimits
from ..contracts.article import ScrapedArticle
from ..contracts.summary import (
    FALLBACK_QUICK_SUMMARY,
    FALLBACK_RAW_SUMMARY,
    FALLBACK_WHY_IT_MATTERS,
    SummarizedArticle,
    SummaryArtifact,
)
from ..llm.rate_limiter import PacingPolicy
from ..llm.text_generator import TextGenerator, is_overloaded
from ..processors.truncation import truncate_at_sentence, truncate_with_hard_cut
from ..prompts import (
    build_main_summary_prompt,
    build_quick_summary_prompt,
    build_quick_summary_repair_prompt,
    build_why_it_matters_prompt,
)

MAIN_SUMMARY_MAX_TOKENS = 600
QUICK_SUMMARY_MAX_TOKENS = 100
WHY_IT_MATTERS_MAX_TOKENS = 500
SUMMARY_TEMPERATURE = 0.3
REPAIR_TEMPERATURE = 0.1

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


class ArticleSummarizer:
    """Produces :class:`SummaryArtifact` values from scraped article text.

    Each field has its own prompt, validation and repair path. Model
    failures never escape: the affected field falls back to a fixed text.
    """

    def __init__(
        self,
        generator: TextGenerator,
        *,
        limits: Optional[SummaryLimits] = None,
        pacing: Optional[PacingPolicy] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._generator = generator
        self._limits = limits or SummaryLimits()
        self._pacing = pacing or PacingPolicy()
        self._logger = logger or logging.getLogger(__name__)

    def generate_summary(self, text: Optional[str], title: str = "") -> SummaryArtifact:
        if not text or len(text) < self._limits.min_content_length:
            self._logger.info("Content too short for summary of %r; using fallback", title)
            return SummaryArtifact.fallback()

        self._logger.info("Generating summary for %r", title)
        raw = self.generate_main_summary(text)
        self._pacing.between_fields()
        quick_summary = self.generate_quick_summary(text)
        self._pacing.between_fields()
        why_it_matters = self.generate_why_it_matters(text)

        return SummaryArtifact(raw=raw, quick_summary=quick_summary, why_it_matters=why_it_matters)

    def generate_main_summary(self, text: str) -> str:
        prompt = build_main_summary_prompt(
            text,
            paragraph_min=self._limits.paragraph_min,
            paragraph_max=self._limits.paragraph_max,
        )
        summary = self._generate_field("main summary", prompt, MAIN_SUMMARY_MAX_TOKENS, SUMMARY_TEMPERATURE)
        if summary is None:
            return FALLBACK_RAW_SUMMARY

        paragraphs = [part.strip() for part in _PARAGRAPH_BREAK.split(summary) if part.strip()]
        if len(paragraphs) != 2 or len(summary) < self._limits.min_raw_length:
            self._logger.warning(
                "Main summary malformed (%d paragraphs, %d chars); using fallback",
                len(paragraphs),
                len(summary),
            )
            return FALLBACK_RAW_SUMMARY
        return "\n\n".join(paragraphs)

    def generate_quick_summary(self, text: str) -> str:
        limit = self._limits.quick_limit
        prompt = build_quick_summary_prompt(text, max_chars=self._limits.quick_max)
        summary = self._generate_field("quick summary", prompt, QUICK_SUMMARY_MAX_TOKENS, SUMMARY_TEMPERATURE)
        if not summary:
            return FALLBACK_QUICK_SUMMARY
        if len(summary) <= limit:
            return summary

        self._logger.info("Quick summary too long (%d chars); requesting a shorter version", len(summary))
        repair_prompt = build_quick_summary_repair_prompt(summary, max_chars=self._limits.quick_max)
        repaired = self._generate_field("quick summary repair", repair_prompt, QUICK_SUMMARY_MAX_TOKENS, REPAIR_TEMPERATURE)
        if repaired:
            summary = repaired
        if len(summary) <= limit:
            return summary

        self._logger.info("Quick summary still %d chars; truncating at sentence boundary", len(summary))
        truncated = truncate_at_sentence(summary, self._limits.quick_max)
        return truncated or FALLBACK_QUICK_SUMMARY

    def generate_why_it_matters(self, text: str) -> str:
        prompt = build_why_it_matters_prompt(
            text,
            min_chars=self._limits.why_min,
            max_chars=self._limits.why_max,
        )
        paragraph = self._generate_field("why it matters", prompt, WHY_IT_MATTERS_MAX_TOKENS, SUMMARY_TEMPERATURE)
        if not paragraph:
            return FALLBACK_WHY_IT_MATTERS
        if len(paragraph) <= self._limits.why_limit:
            return paragraph

        self._logger.info("Why-it-matters too long (%d chars); truncating", len(paragraph))
        return truncate_with_hard_cut(paragraph, self._limits.why_max) or FALLBACK_WHY_IT_MATTERS

    def process_multiple_articles(
        self,
        articles: Sequence[ScrapedArticle],
        *,
        on_result: Optional[Callable[[SummarizedArticle], None]] = None,
    ) -> List[SummarizedArticle]:
        """Summarize articles one after another; a failing article gets the fallback."""

        results: List[SummarizedArticle] = []
        total = len(articles)
        for position, item in enumerate(articles, start=1):
            self._logger.info("Summarizing article %d/%d: %s", position, total, item.article.title)
            try:
                summary = self.generate_summary(item.text, item.article.title)
            except Exception:
                self._logger.exception("Summary failed for %r; using fallback", item.article.title)
                summary = SummaryArtifact.fallback()

            result = SummarizedArticle(article=item.article, summary=summary)
            results.append(result)
            if on_result is not None:
                on_result(result)
            if position < total:
                self._pacing.between_articles()

        self._logger.info("Summarized %d articles", len(results))
        return results

    def _generate_field(
        self,
        field_name: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Optional[str]:
        try:
            response = self._generator.generate(prompt, max_tokens=max_tokens, temperature=temperature)
        except Exception as exc:
            self._logger.error("Generating %s failed: %s", field_name, exc)
            if is_overloaded(exc):
                self._pacing.after_overload()
            return None
        return (response or "").strip()
