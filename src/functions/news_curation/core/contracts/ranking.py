"""Contracts for category ranking results."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from .article import CandidateArticle


class RankingResult(BaseModel):
    """Top three items of a category and the featured item among them."""

    model_config = ConfigDict(frozen=True)

    category: str = "news"
    top3: List[CandidateArticle]
    featured: Optional[CandidateArticle] = None

    @model_validator(mode="after")
    def _featured_within_top3(self) -> "RankingResult":
        if len(self.top3) > 3:
            raise ValueError("top3 may hold at most three items")
        if not self.top3:
            if self.featured is not None:
                raise ValueError("featured must be empty when top3 is empty")
        elif self.featured is None or not any(item is self.featured or item == self.featured for item in self.top3):
            raise ValueError("featured must be one of the top3 items")
        return self
