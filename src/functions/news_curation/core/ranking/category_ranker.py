"""Two-stage ranking of a category: pool to top three to a featured item."""

from __future__ import annotations

import json
import logging
import re
from typing import List, Optional, Sequence

from src.shared.batch.retry import RetryPolicy

from ..contracts.article import CandidateArticle
from ..contracts.ranking import RankingResult
from ..llm.text_generator import TextGenerator
from ..processors.article_scoring import rank_by_engagement
from ..prompts import build_number1_prompt, build_top3_prompt

TOP_N = 3
TOP3_MAX_TOKENS = 100
NUMBER1_MAX_TOKENS = 10
RANKING_TEMPERATURE = 0.3

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def parse_top_indices(response: str, pool_size: int, limit: int = TOP_N) -> List[int]:
    """Parse a JSON array of 0-based indices.

    Raises ValueError when the response is not a JSON array of integers.
    Out-of-range entries and duplicates are dropped.
    """

    payload = json.loads(_CODE_FENCE.sub("", (response or "").strip()))
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")

    indices: List[int] = []
    for value in payload:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Expected integer indices, got {value!r}")
        if 0 <= value < pool_size and value not in indices:
            indices.append(value)
    return indices[:limit]


def parse_single_index(response: str) -> Optional[int]:
    match = _LEADING_INT.match(response or "")
    return int(match.group(1)) if match else None


class CategoryRanker:
    """Narrows a category to its top three items and picks the featured one."""

    def __init__(
        self,
        generator: TextGenerator,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._generator = generator
        self._retry = retry_policy or RetryPolicy()
        self._logger = logger or logging.getLogger(__name__)

    def get_top3(self, items: Sequence[CandidateArticle], category: str = "news") -> List[CandidateArticle]:
        if not items:
            self._logger.info("No %s items to rank", category)
            return []
        if len(items) <= TOP_N:
            self._logger.info("%s: returning all %d items", category, len(items))
            return list(items)

        prompt = build_top3_prompt(items, category)
        try:
            response = self._retry.call(
                lambda: self._generator.generate(
                    prompt,
                    max_tokens=TOP3_MAX_TOKENS,
                    temperature=RANKING_TEMPERATURE,
                )
            )
            self._logger.debug("Top-3 response for %s: %s", category, response)
            indices = parse_top_indices(response, len(items))
        except Exception as exc:
            self._logger.warning("Top-3 ranking failed for %s: %s", category, exc)
            return self._fallback_top3(items)

        if not indices:
            self._logger.warning("Top-3 response for %s held no usable indices", category)
            return self._fallback_top3(items)

        top3 = [items[index] for index in indices]
        self._logger.info("Top %d %s items: %s", len(top3), category, [item.title for item in top3])
        return top3

    def get_number1(
        self,
        top3: Sequence[CandidateArticle],
        category: str = "news",
    ) -> Optional[CandidateArticle]:
        if not top3:
            return None
        if len(top3) == 1:
            return top3[0]

        prompt = build_number1_prompt(top3, category)
        try:
            response = self._retry.call(
                lambda: self._generator.generate(
                    prompt,
                    max_tokens=NUMBER1_MAX_TOKENS,
                    temperature=RANKING_TEMPERATURE,
                )
            )
        except Exception as exc:
            self._logger.warning("Featured selection failed for %s: %s", category, exc)
            return top3[0]

        index = parse_single_index(response)
        if index is None or not 0 <= index < len(top3):
            self._logger.warning("Invalid featured index %r for %s; defaulting to first item", response, category)
            return top3[0]

        self._logger.info("Featured %s item: %s", category, top3[index].title)
        return top3[index]

    get_featured = get_number1

    def rank_category(self, items: Sequence[CandidateArticle], category: str = "news") -> RankingResult:
        """Top three plus featured item; at most two model calls."""

        self._logger.info("Ranking %s category (%d items)", category, len(items))
        top3 = self.get_top3(items, category)
        featured = self.get_number1(top3, category)
        return RankingResult(category=category, top3=top3, featured=featured)

    def _fallback_top3(self, items: Sequence[CandidateArticle]) -> List[CandidateArticle]:
        self._logger.info("Using engagement-based fallback ranking")
        return rank_by_engagement(items)[:TOP_N]
