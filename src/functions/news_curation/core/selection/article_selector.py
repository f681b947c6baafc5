"""Model-assisted shortlist of candidate articles with a deterministic fallback."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from src.shared.batch.retry import RetryPolicy

from ..contracts.article import CandidateArticle
from ..llm.text_generator import TextGenerator
from ..processors.article_scoring import rank_by_engagement, rank_by_selection_score
from ..prompts import build_previous_selection_prompt, build_selection_prompt

DEFAULT_TARGET = 20
PREVIOUS_POOL_LIMIT = 50

SELECTION_MAX_TOKENS = 200
PREVIOUS_SELECTION_MAX_TOKENS = 100
SELECTION_TEMPERATURE = 0.3

_TOKEN_STRIP = " \t\r\n\"'`[]().;:"


def parse_index_list(response: str, pool_size: int, limit: Optional[int] = None) -> List[int]:
    """Parse a comma-separated list of 1-based indices.

    Non-numeric and out-of-range tokens are dropped, duplicates keep their
    first position. Returns 0-based indices.
    """

    indices: List[int] = []
    seen = set()
    for token in (response or "").split(","):
        cleaned = token.strip(_TOKEN_STRIP)
        try:
            value = int(cleaned)
        except ValueError:
            continue
        if not 1 <= value <= pool_size or value in seen:
            continue
        seen.add(value)
        indices.append(value - 1)
        if limit is not None and len(indices) >= limit:
            break
    return indices


class ArticleSelector:
    """Chooses the best K articles from a candidate pool."""

    def __init__(
        self,
        generator: TextGenerator,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        previous_pool_limit: int = PREVIOUS_POOL_LIMIT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._generator = generator
        self._retry = retry_policy or RetryPolicy()
        self._previous_pool_limit = previous_pool_limit
        self._logger = logger or logging.getLogger(__name__)

    def select_best(self, pool: Sequence[CandidateArticle], count: int = DEFAULT_TARGET) -> List[CandidateArticle]:
        """Return at most ``count`` articles, in the order the model ranked them."""

        if not pool:
            self._logger.info("No articles to select from")
            return []
        if len(pool) <= count:
            self._logger.info("Pool of %d fits target of %d; skipping model selection", len(pool), count)
            return list(pool)

        self._logger.info("Selecting %d articles from %d candidates", count, len(pool))
        selected = self._select_with_model(pool, count)
        if not selected:
            self._logger.warning("Model selection unusable; falling back to keyword/recency scoring")
            selected = self._select_manually(pool, count)

        self._logger.info("%d articles selected", len(selected))
        return selected

    def select_from_previous(
        self,
        needed: int,
        previous_pool: Optional[Sequence[CandidateArticle]],
    ) -> List[CandidateArticle]:
        """Supplement a short selection with articles from an older batch."""

        if needed <= 0 or not previous_pool:
            return []

        offered = list(previous_pool[: self._previous_pool_limit])
        if len(offered) <= needed:
            return offered

        prompt = build_previous_selection_prompt(offered, needed)
        try:
            response = self._retry.call(
                lambda: self._generator.generate(
                    prompt,
                    max_tokens=PREVIOUS_SELECTION_MAX_TOKENS,
                    temperature=SELECTION_TEMPERATURE,
                )
            )
        except Exception as exc:
            self._logger.warning("Previous-batch selection failed: %s", exc)
            return rank_by_engagement(offered)[:needed]

        indices = parse_index_list(response, len(offered), limit=needed)
        if not indices:
            self._logger.warning("Previous-batch selection returned no usable IDs: %r", response)
            return rank_by_engagement(offered)[:needed]

        self._logger.info("Selected %d articles from previous batch", len(indices))
        return [offered[index] for index in indices]

    def _select_with_model(self, pool: Sequence[CandidateArticle], count: int) -> List[CandidateArticle]:
        prompt = build_selection_prompt(pool, count)
        try:
            response = self._retry.call(
                lambda: self._generator.generate(
                    prompt,
                    max_tokens=SELECTION_MAX_TOKENS,
                    temperature=SELECTION_TEMPERATURE,
                )
            )
        except Exception as exc:
            self._logger.error("Model selection failed: %s", exc)
            return []

        self._logger.debug("Selection response: %s", response)
        indices = parse_index_list(response, len(pool), limit=count)
        return [pool[index] for index in indices]

    def _select_manually(self, pool: Sequence[CandidateArticle], count: int) -> List[CandidateArticle]:
        return rank_by_selection_score(pool)[:count]
