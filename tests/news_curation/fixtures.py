"""Shared fakes and builders for news curation tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from src.functions.news_curation.core.contracts.article import CandidateArticle

Scripted = Union[str, BaseException]

BASE_TIME = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeGenerator:
    """Returns scripted responses in order and records every prompt."""

    def __init__(self, responses: Optional[Sequence[Scripted]] = None, default: Scripted = "") -> None:
        self._responses: List[Scripted] = list(responses or [])
        self._default = default
        self.calls: List[Dict[str, Any]] = []

    def generate(self, prompt: str, *, max_tokens: Optional[int] = None, temperature: Optional[float] = None) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        outcome = self._responses.pop(0) if self._responses else self._default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def call_count(self) -> int:
        return len(self.calls)


class FakeFetcher:
    """Serves HTML per URL; URLs missing from ``pages`` raise an httpx error."""

    def __init__(self, pages: Optional[Dict[str, str]] = None) -> None:
        self.pages = dict(pages or {})
        self.requested: List[str] = []

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.pages:
            raise httpx.ConnectError(f"unreachable: {url}")
        return self.pages[url]


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_article(
    index: int,
    *,
    title: Optional[str] = None,
    description: str = "",
    views: int = 0,
    likes: int = 0,
    shares: int = 0,
    hours_old: Optional[float] = None,
    url: Optional[str] = "auto",
    image_url: Optional[str] = None,
) -> CandidateArticle:
    published = BASE_TIME - timedelta(hours=hours_old) if hours_old is not None else None
    return CandidateArticle(
        id=f"article-{index}",
        title=title or f"Article {index}",
        description=description,
        source={"id": None, "name": f"Source {index}"},
        publishedAt=published,
        url=f"https://news.example.org/story-{index}" if url == "auto" else url,
        imageUrl=image_url,
        engagement={"views": views, "likes": likes, "shares": shares},
    )


def make_pool(size: int) -> List[CandidateArticle]:
    return [make_article(index) for index in range(1, size + 1)]


def article_html(paragraphs: Sequence[str], title: str = "Story") -> str:
    body = "\n".join(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    return (
        "<html><head><title>{title}</title></head><body>"
        "<nav><a href='/'>Home</a><a href='/tech'>Tech</a></nav>"
        "<article><h1>{title}</h1>{body}</article>"
        "<footer>Copyright. All rights reserved.</footer>"
        "</body></html>"
    ).format(title=title, body=body)


LONG_PARAGRAPHS = [
    "Researchers at a university lab released an open source language model that runs on a single "
    "consumer graphics card while matching larger systems on common reasoning benchmarks.",
    "The team trained the model on a curated mix of code, textbooks and scientific papers, and "
    "published the full training recipe so other groups can reproduce the results independently.",
    "Industry analysts expect the release to lower the cost of experimenting with language models "
    "for startups and student teams that cannot afford large cloud computing budgets.",
]

TWO_PARAGRAPH_SUMMARY = (
    "A university lab released an open source language model that runs on one consumer GPU and "
    "matches larger systems on reasoning benchmarks, with the full training recipe published.\n\n"
    "The release lowers the cost of experimentation for startups and student teams, and analysts "
    "expect it to accelerate independent research on efficient training methods."
)

ARTICLE_TEXT = " ".join(LONG_PARAGRAPHS)
