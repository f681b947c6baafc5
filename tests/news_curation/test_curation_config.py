import pytest

from src.functions.news_curation.core.config import (
    CurationConfig,
    PacingConfig,
    StorageConfig,
    SummaryLimits,
    config_from_payload,
    load_config,
)
from src.shared.utils.config_validator import ConfigurationError

ENV_VARS = (
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_REQUESTS_PER_MINUTE",
    "CURATION_TARGET_ARTICLES",
    "CURATION_FRESHNESS_HOURS",
    "CURATION_DISABLE_PACING",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_SCHEMA",
    "NEWS_SUMMARY_TABLE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment():
    config = load_config()

    assert config.target_articles == 20
    assert config.previous_pool_limit == 50
    assert config.freshness_hours == 24.0
    assert config.llm.model == "gemini-2.5-flash-lite"
    assert config.pacing == PacingConfig()
    assert config.storage.use_supabase is False


def test_summary_limits_expose_buffered_budgets():
    limits = SummaryLimits()

    assert limits.quick_limit == 150
    assert limits.why_limit == 900


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-flash")
    monkeypatch.setenv("CURATION_TARGET_ARTICLES", "12")
    monkeypatch.setenv("CURATION_DISABLE_PACING", "true")
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "service-key")
    monkeypatch.setenv("NEWS_SUMMARY_TABLE", "curated_summaries")

    config = load_config()

    assert config.llm.api_key == "secret"
    assert config.llm.model == "gemini-2.0-flash"
    assert config.target_articles == 12
    assert config.pacing == PacingConfig.disabled()
    assert config.storage.use_supabase is True
    assert config.storage.table == "curated_summaries"


def test_malformed_environment_value_is_a_configuration_error(monkeypatch):
    monkeypatch.setenv("CURATION_TARGET_ARTICLES", "twenty")

    with pytest.raises(ConfigurationError):
        load_config()


@pytest.mark.parametrize(
    "config",
    [
        CurationConfig(target_articles=0),
        CurationConfig(target_articles=True),
        CurationConfig(freshness_hours=-1),
        CurationConfig(category=""),
        CurationConfig(pacing=PacingConfig(between_fields_seconds=-3)),
        CurationConfig(limits=SummaryLimits(why_min=900, why_max=800)),
        CurationConfig(storage=StorageConfig(supabase_url="https://project.supabase.co")),
    ],
)
def test_validate_rejects_invalid_values(config):
    with pytest.raises(ValueError):
        config.validate()


class TestConfigFromPayload:
    def test_applies_request_overrides(self):
        payload = {
            "target_articles": "5",
            "category": "ai",
            "llm": {"model": "gemini-2.0-flash", "requests_per_minute": 10},
            "disable_pacing": True,
        }

        config = config_from_payload(payload, base=CurationConfig())

        assert config.target_articles == 5
        assert config.category == "ai"
        assert config.llm.model == "gemini-2.0-flash"
        assert config.llm.requests_per_minute == 10
        assert config.pacing == PacingConfig.disabled()

    def test_supabase_can_be_disabled_per_request(self):
        base = CurationConfig(storage=StorageConfig(supabase_url="https://p.supabase.co", supabase_key="k"))

        config = config_from_payload({"supabase": {"enabled": False}}, base=base)

        assert config.storage.use_supabase is False

    def test_supabase_settings_from_request(self):
        payload = {"supabase": {"url": "https://p.supabase.co", "key": "k", "table": "summaries_v2"}}

        config = config_from_payload(payload, base=CurationConfig())

        assert config.storage.use_supabase is True
        assert config.storage.table == "summaries_v2"
        assert config.storage.schema == "public"

    @pytest.mark.parametrize(
        "payload",
        [
            {"target_articles": "many"},
            {"target_articles": 0},
            {"supabase": "yes"},
            {"llm": {"requests_per_minute": "fast"}},
        ],
    )
    def test_invalid_overrides_raise_value_error(self, payload):
        with pytest.raises(ValueError):
            config_from_payload(payload, base=CurationConfig())
