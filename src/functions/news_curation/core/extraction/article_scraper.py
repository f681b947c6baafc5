"""Fetch article pages and reduce them to main-content plain text."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Protocol

import httpx
from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable

from ..config import DEFAULT_USER_AGENT, ExtractionConfig
from ..contracts.article import CandidateArticle, ScrapedArticle, ScrapedText
from ..llm.rate_limiter import PacingPolicy

MIN_CONTENT_LENGTH = 200

_BOILERPLATE_PATTERNS = (
    re.compile(r"subscribe now", re.IGNORECASE),
    re.compile(r"sign up for (our|the) newsletter", re.IGNORECASE),
    re.compile(r"^advertisement$", re.IGNORECASE),
    re.compile(r"cookie (policy|settings)", re.IGNORECASE),
    re.compile(r"all rights reserved", re.IGNORECASE),
    re.compile(r"^(share|tweet|email) (this|on)", re.IGNORECASE),
    re.compile(r"^read more", re.IGNORECASE),
)

_MIN_PARAGRAPH_LENGTH = 20


class HtmlFetcher(Protocol):
    def fetch(self, url: str) -> str:
        """Return the raw HTML served at ``url``."""


class HttpFetcher:
    """Synchronous httpx fetcher with a desktop browser identity."""

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            },
            follow_redirects=True,
            timeout=timeout,
            transport=transport,
        )

    def fetch(self, url: str) -> str:
        response = self._client.get(url)
        response.raise_for_status()
        return response.text

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _filter_paragraphs(paragraphs: Iterable[str]) -> List[str]:
    cleaned: List[str] = []
    for paragraph in paragraphs:
        trimmed = " ".join(paragraph.split())
        if len(trimmed) < _MIN_PARAGRAPH_LENGTH:
            continue
        if any(pattern.search(trimmed) for pattern in _BOILERPLATE_PATTERNS):
            continue
        cleaned.append(trimmed)
    return cleaned


def extract_main_text(raw_html: str, base_url: Optional[str] = None) -> Optional[str]:
    """Reader-mode extraction of the article body.

    Returns None when the page has no recognisable main content.
    """

    if not raw_html or not raw_html.strip():
        return None
    try:
        summary_html = Document(raw_html, url=base_url).summary(html_partial=True)
    except Unparseable:
        return None

    soup = BeautifulSoup(summary_html, "lxml")
    blocks = [element.get_text(" ", strip=True) for element in soup.find_all(["p", "li", "h2", "h3", "blockquote"])]
    if not blocks:
        blocks = soup.get_text("\n").splitlines()

    paragraphs = _filter_paragraphs(blocks)
    if not paragraphs:
        return None
    return "\n\n".join(paragraphs)


class ArticleScraper:
    """Turns article URLs into :class:`ScrapedText`, one page at a time."""

    def __init__(
        self,
        *,
        fetcher: Optional[HtmlFetcher] = None,
        config: Optional[ExtractionConfig] = None,
        pacing: Optional[PacingPolicy] = None,
        min_content_length: int = MIN_CONTENT_LENGTH,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = config or ExtractionConfig()
        # Only a fetcher created here is closed by close()
        self._owned_fetcher: Optional[HttpFetcher] = None
        if fetcher is None:
            fetcher = self._owned_fetcher = HttpFetcher(timeout=config.timeout_seconds, user_agent=config.user_agent)
        self._fetcher = fetcher
        self._pacing = pacing or PacingPolicy()
        self._min_content_length = min_content_length
        self._logger = logger or logging.getLogger(__name__)

    def extract(self, url: str) -> Optional[str]:
        """Return main-content text for ``url`` or None when unusable."""

        try:
            raw_html = self._fetcher.fetch(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._logger.warning("Failed to fetch %s: %s", url, exc)
            return None

        text = extract_main_text(raw_html, url)
        if text is None:
            self._logger.warning("No main content found at %s", url)
            return None
        if len(text) < self._min_content_length:
            self._logger.warning(
                "Content too short at %s (%d chars, minimum %d)",
                url,
                len(text),
                self._min_content_length,
            )
            return None

        self._logger.info("Extracted %d characters from %s", len(text), url)
        return text

    def scrape(self, url: str) -> Optional[ScrapedText]:
        text = self.extract(url)
        if text is None:
            return None
        return ScrapedText(source_url=url, text=text)

    def scrape_multiple(self, articles: Iterable[CandidateArticle]) -> List[ScrapedArticle]:
        """Scrape articles sequentially, keeping only the ones with usable text."""

        articles = list(articles)
        results: List[ScrapedArticle] = []
        for position, article in enumerate(articles, start=1):
            if not article.url:
                self._logger.debug("Skipping %r: no URL", article.title)
                continue
            self._logger.info("Scraping article %d/%d: %s", position, len(articles), article.title)
            scraped = self.scrape(article.url)
            if scraped is not None:
                results.append(ScrapedArticle(article=article, scraped=scraped))
            if position < len(articles):
                self._pacing.between_scrapes()

        self._logger.info("Scraped %d of %d articles", len(results), len(articles))
        return results

    def close(self) -> None:
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()
