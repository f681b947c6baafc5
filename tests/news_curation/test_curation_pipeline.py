from datetime import timedelta

import pytest

from src.functions.news_curation.core.config import CurationConfig, PacingConfig
from src.functions.news_curation.core.contracts.summary import SummaryArtifact
from src.functions.news_curation.core.db.summary_store import InMemorySummaryStore
from src.functions.news_curation.core.factory import build_pipeline
from src.functions.news_curation.core.llm.rate_limiter import PacingPolicy
from src.shared.batch.retry import RetryPolicy
from tests.news_curation.fixtures import (
    BASE_TIME,
    LONG_PARAGRAPHS,
    TWO_PARAGRAPH_SUMMARY,
    FakeFetcher,
    FakeGenerator,
    article_html,
    make_article,
)

QUICK = "Open model runs on a single GPU."
WHY = "Cheaper experimentation widens access to language model research for students and startups."

STORED = SummaryArtifact(raw="Stored one.\n\nStored two.", quick_summary="Stored quick.", why_it_matters="Stored why.")


def _summary_responses(count):
    responses = []
    for _ in range(count):
        responses.extend([TWO_PARAGRAPH_SUMMARY, QUICK, WHY])
    return responses


def _pipeline(generator, fetcher, store=None, target=20):
    config = CurationConfig(target_articles=target, pacing=PacingConfig.disabled())
    pipeline = build_pipeline(
        config,
        generator=generator,
        fetcher=fetcher,
        store=store if store is not None else InMemorySummaryStore(),
        pacing=PacingPolicy.disabled(),
        retry_policy=RetryPolicy.immediate(),
    )
    pipeline._clock = lambda: BASE_TIME
    return pipeline


def _pages(articles):
    return {article.url: article_html(LONG_PARAGRAPHS, title=article.title) for article in articles}


def test_small_run_skips_selection_call_and_summarizes_every_article():
    candidates = [make_article(index, views=index * 10) for index in range(1, 5)]
    generator = FakeGenerator(["[3, 1, 0]", "0"] + _summary_responses(4))
    store = InMemorySummaryStore()

    result = _pipeline(generator, FakeFetcher(_pages(candidates)), store, target=20).run(candidates)

    assert [item.article for item in result.articles] == candidates
    assert [item.article_id for item in result.ranking.top3] == ["article-4", "article-2", "article-1"]
    assert result.ranking.featured is result.ranking.top3[0]
    assert all(item.summary.quick_summary == QUICK for item in result.articles)
    assert generator.call_count == 2 + 12
    assert len(store) == 4


def test_unscrapable_candidates_are_not_selected():
    candidates = [make_article(index) for index in range(1, 4)]
    fetcher = FakeFetcher(_pages(candidates[:2]))
    generator = FakeGenerator(["0"] + _summary_responses(2))

    result = _pipeline(generator, fetcher).run(candidates)

    assert [item.article.article_id for item in result.articles] == ["article-1", "article-2"]
    assert result.scraped_count == 2


def test_underflow_is_supplemented_from_previous_pool_without_duplicates():
    candidates = [make_article(index) for index in range(1, 3)]
    previous = [make_article(2)] + [make_article(index) for index in range(10, 15)]
    pages = _pages(candidates + previous)
    # previous pool after removing article-2 has five items; model picks IDs 2 and 4
    generator = FakeGenerator(["2,4"] + ["[0, 1, 2]", "1"] + _summary_responses(4))

    result = _pipeline(generator, FakeFetcher(pages), target=4).run(candidates, previous_pool=previous)

    ids = [item.article.article_id for item in result.articles]
    assert ids == ["article-1", "article-2", "article-11", "article-13"]
    assert result.supplemented_count == 2
    assert len(set(ids)) == len(ids)
    assert result.ranking.featured in result.ranking.top3


def test_fresh_stored_summary_is_reused_and_stale_one_regenerated():
    candidates = [make_article(1), make_article(2)]
    store = InMemorySummaryStore()
    store.save("article-1", STORED, BASE_TIME - timedelta(hours=2))
    store.save("article-2", STORED, BASE_TIME - timedelta(hours=30))
    generator = FakeGenerator(["1"] + _summary_responses(1))

    result = _pipeline(generator, FakeFetcher(_pages(candidates)), store).run(candidates)

    first, second = result.articles
    assert first.reused is True
    assert first.summary == STORED
    assert second.reused is False
    assert second.summary.quick_summary == QUICK
    assert store.get("article-2").last_updated == BASE_TIME
    assert result.ranking.featured.article_id == "article-2"
    assert generator.call_count == 4


def test_model_outage_still_produces_a_complete_result():
    candidates = [make_article(index, views=index) for index in range(1, 7)]
    generator = FakeGenerator(default=RuntimeError("service down"))

    result = _pipeline(generator, FakeFetcher(_pages(candidates)), target=3).run(candidates)

    assert len(result.articles) == 3
    assert len(result.ranking.top3) == 3
    assert result.ranking.featured is result.ranking.top3[0]
    assert all(item.summary == SummaryArtifact.fallback() for item in result.articles)


def test_to_dict_filters_invalid_image_urls():
    good = make_article(1, image_url="https://images.vendor.io/a1b2c3.jpg")
    placeholder = make_article(2, image_url="http://cdn.example.org/photos/placeholder-banner.jpg")
    generator = FakeGenerator(["0"] + _summary_responses(2))

    payload = _pipeline(generator, FakeFetcher(_pages([good, placeholder]))).run([good, placeholder]).to_dict()

    assert [article["imageUrl"] for article in payload["articles"]] == ["https://images.vendor.io/a1b2c3.jpg", None]
    assert payload["articles"][0]["summary"]["quickSummary"] == QUICK
    assert payload["counts"]["selected"] == 2
    assert payload["featured"] in payload["top3"]


class TestSummarizeUrl:
    def test_generates_and_persists(self):
        article = make_article(1)
        store = InMemorySummaryStore()
        generator = FakeGenerator(_summary_responses(1))

        result = _pipeline(generator, FakeFetcher(_pages([article])), store).summarize_url(article)

        assert result.summary.raw == TWO_PARAGRAPH_SUMMARY
        assert store.get(article.key).artifact == result.summary

    def test_reuses_fresh_summary(self):
        article = make_article(1)
        store = InMemorySummaryStore()
        store.save(article.key, STORED, BASE_TIME - timedelta(hours=23))
        generator = FakeGenerator()

        result = _pipeline(generator, FakeFetcher(), store).summarize_url(article)

        assert result.reused is True
        assert result.summary == STORED
        assert generator.call_count == 0

    def test_unreachable_page_returns_fallback(self):
        article = make_article(1)

        result = _pipeline(FakeGenerator(), FakeFetcher()).summarize_url(article)

        assert result.summary == SummaryArtifact.fallback()

    def test_fallback_is_not_stored_so_next_call_regenerates(self):
        article = make_article(1)
        store = InMemorySummaryStore()
        pages = FakeFetcher(_pages([article]))
        outage = FakeGenerator(default=RuntimeError("permanent outage"))

        first = _pipeline(outage, pages, store).summarize_url(article)

        assert first.summary == SummaryArtifact.fallback()
        assert store.get(article.key) is None

        second = _pipeline(FakeGenerator(_summary_responses(1)), pages, store).summarize_url(article)

        assert second.reused is False
        assert second.summary.quick_summary == QUICK
        assert store.get(article.key).artifact == second.summary


def test_pipeline_closes_the_http_client_it_created():
    config = CurationConfig(pacing=PacingConfig.disabled())

    with build_pipeline(config, generator=FakeGenerator(), store=InMemorySummaryStore()) as pipeline:
        fetcher = pipeline.scraper._owned_fetcher
        assert fetcher.closed is False

    assert fetcher.closed is True


class _BrokenStore:
    def get(self, key):
        raise ConnectionError("database unavailable")

    def save(self, key, artifact, updated_at):
        raise ConnectionError("database unavailable")


def test_store_failures_do_not_abort_the_run():
    candidates = [make_article(1)]
    generator = FakeGenerator(_summary_responses(1))

    result = _pipeline(generator, FakeFetcher(_pages(candidates)), _BrokenStore()).run(candidates)

    assert result.articles[0].summary.quick_summary == QUICK


@pytest.mark.parametrize("hours,fresh", [(0, True), (23.9, True), (24, False), (48, False)])
def test_freshness_window(hours, fresh):
    from src.functions.news_curation.core.db.summary_store import is_fresh
    from src.functions.news_curation.core.contracts.summary import StoredSummary

    stored = StoredSummary(key="k", artifact=STORED, last_updated=BASE_TIME - timedelta(hours=hours))

    assert is_fresh(stored, BASE_TIME) is fresh
