import httpx

from src.functions.news_curation.core.extraction.article_scraper import (
    ArticleScraper,
    HttpFetcher,
    extract_main_text,
)
from src.functions.news_curation.core.llm.rate_limiter import PacingPolicy
from tests.news_curation.fixtures import LONG_PARAGRAPHS, FakeFetcher, RecordingSleep, article_html, make_article

STORY_URL = "https://news.example.org/story-1"


def _scraper(fetcher, pacing=None):
    return ArticleScraper(fetcher=fetcher, pacing=pacing or PacingPolicy.disabled())


def test_extract_main_text_drops_navigation_and_boilerplate():
    html = article_html(LONG_PARAGRAPHS + ["Subscribe now to get more stories like this one every day."])

    text = extract_main_text(html, STORY_URL)

    assert text is not None
    assert LONG_PARAGRAPHS[0] in text
    assert LONG_PARAGRAPHS[2] in text
    assert "Subscribe now" not in text
    assert "Home" not in text


def test_extract_main_text_returns_none_for_empty_pages():
    assert extract_main_text("", STORY_URL) is None
    assert extract_main_text("<html><body><p>Hi</p></body></html>", STORY_URL) is None


def test_extract_returns_text_for_substantial_pages():
    fetcher = FakeFetcher({STORY_URL: article_html(LONG_PARAGRAPHS)})

    text = _scraper(fetcher).extract(STORY_URL)

    assert text is not None
    assert len(text) >= 200


def test_extract_rejects_short_content():
    fetcher = FakeFetcher({STORY_URL: article_html(["A single paragraph that is not very long at all."])})

    assert _scraper(fetcher).extract(STORY_URL) is None


def test_network_failure_is_not_fatal():
    assert _scraper(FakeFetcher()).extract(STORY_URL) is None


def test_http_fetcher_sends_browser_identity_and_follows_redirects():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://news.example.org/new"})
        seen["user_agent"] = request.headers.get("User-Agent")
        return httpx.Response(200, text=article_html(LONG_PARAGRAPHS))

    fetcher = HttpFetcher(timeout=5.0, transport=httpx.MockTransport(handler))

    html = fetcher.fetch("https://news.example.org/old")

    assert LONG_PARAGRAPHS[1] in html
    assert "Mozilla/5.0" in seen["user_agent"]


def test_http_errors_make_extract_return_none():
    transport = httpx.MockTransport(lambda request: httpx.Response(404, text="missing"))
    scraper = _scraper(HttpFetcher(transport=transport))

    assert scraper.extract(STORY_URL) is None


def test_timeouts_make_extract_return_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    scraper = _scraper(HttpFetcher(transport=httpx.MockTransport(handler)))

    assert scraper.extract(STORY_URL) is None


def test_close_releases_only_the_fetcher_it_created():
    injected = HttpFetcher(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    _scraper(injected).close()

    owning = ArticleScraper(pacing=PacingPolicy.disabled())
    owning.close()

    assert injected.closed is False
    assert owning._owned_fetcher.closed is True
    injected.close()


def test_scrape_multiple_skips_failures_and_paces_between_items():
    sleep = RecordingSleep()
    pacing = PacingPolicy(
        between_fields_seconds=0.0,
        between_articles_seconds=0.0,
        between_scrapes_seconds=2.0,
        overload_backoff_seconds=0.0,
        sleep=sleep,
    )
    good = make_article(1)
    broken = make_article(2)
    no_url = make_article(3, url=None)
    fetcher = FakeFetcher({good.url: article_html(LONG_PARAGRAPHS)})

    results = _scraper(fetcher, pacing).scrape_multiple([good, broken, no_url])

    assert [item.article for item in results] == [good]
    assert results[0].scraped.source_url == good.url
    assert fetcher.requested == [good.url, broken.url]
    assert sleep.calls == [2.0, 2.0]
