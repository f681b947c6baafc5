"""Configuration models for the news curation module."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from src.shared.utils.config_validator import get_bool_env, get_float_env, get_int_env
from src.shared.utils.env import get_env

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


def _ensure_positive(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    if value <= 0:
        raise ValueError(f"{field_name} must be positive")
    return value


def _coerce_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be an integer") from exc


def _ensure_non_negative(value: Any, field_name: str) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be numeric") from exc
    if numeric < 0:
        raise ValueError(f"{field_name} must not be negative")
    return numeric


@dataclass
class LLMConfig:
    """Gemini model selection and request throughput."""

    model: str = "gemini-2.5-flash-lite"
    api_key: Optional[str] = None
    requests_per_minute: int = 30

    def validate(self) -> None:
        if not isinstance(self.model, str) or not self.model.strip():
            raise ValueError("model must be provided")
        self.model = self.model.strip()
        self.requests_per_minute = _ensure_positive(self.requests_per_minute, "requests_per_minute")


@dataclass
class RetryConfig:
    """Backoff applied to transient text-generation failures."""

    max_retries: int = 3
    base_delay_seconds: float = 1.0

    def validate(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise ValueError("max_retries must be a non-negative integer")
        self.base_delay_seconds = _ensure_non_negative(self.base_delay_seconds, "base_delay_seconds")


@dataclass
class PacingConfig:
    """Delays between sequential steps of a curation run."""

    between_fields_seconds: float = 3.0
    between_articles_seconds: float = 5.0
    between_scrapes_seconds: float = 2.0
    overload_backoff_seconds: float = 10.0

    def validate(self) -> None:
        for attr in (
            "between_fields_seconds",
            "between_articles_seconds",
            "between_scrapes_seconds",
            "overload_backoff_seconds",
        ):
            setattr(self, attr, _ensure_non_negative(getattr(self, attr), attr))

    @classmethod
    def disabled(cls) -> "PacingConfig":
        return cls(0.0, 0.0, 0.0, 0.0)


@dataclass
class SummaryLimits:
    """Character budgets for the summary artifact fields."""

    min_content_length: int = 200
    quick_max: int = 130
    quick_buffer: int = 20
    why_min: int = 750
    why_max: int = 800
    why_buffer: int = 100
    paragraph_min: int = 200
    paragraph_max: int = 400
    min_raw_length: int = 50

    def validate(self) -> None:
        for attr in (
            "min_content_length",
            "quick_max",
            "why_min",
            "why_max",
            "paragraph_min",
            "paragraph_max",
            "min_raw_length",
        ):
            setattr(self, attr, _ensure_positive(getattr(self, attr), attr))
        if self.quick_buffer < 0 or self.why_buffer < 0:
            raise ValueError("length buffers must not be negative")
        if self.why_min > self.why_max:
            raise ValueError("why_min must not exceed why_max")
        if self.paragraph_min > self.paragraph_max:
            raise ValueError("paragraph_min must not exceed paragraph_max")

    @property
    def quick_limit(self) -> int:
        return self.quick_max + self.quick_buffer

    @property
    def why_limit(self) -> int:
        return self.why_max + self.why_buffer


@dataclass
class ExtractionConfig:
    """HTTP fetch settings for article scraping."""

    timeout_seconds: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT

    def validate(self) -> None:
        self.timeout_seconds = _ensure_non_negative(self.timeout_seconds, "timeout_seconds")
        if self.timeout_seconds == 0:
            raise ValueError("timeout_seconds must be positive")


@dataclass
class StorageConfig:
    """Where summary artifacts are persisted between runs.

    Without Supabase credentials artifacts are kept in process memory.
    """

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    schema: str = "public"
    table: str = "news_summaries"

    @property
    def use_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def validate(self) -> None:
        if bool(self.supabase_url) != bool(self.supabase_key):
            raise ValueError("Both supabase url and key are required when using Supabase storage")
        if not self.table:
            raise ValueError("table must be provided")


@dataclass
class CurationConfig:
    """Top-level configuration for a curation run."""

    target_articles: int = 20
    previous_pool_limit: int = 50
    freshness_hours: float = 24.0
    category: str = "news"
    llm: LLMConfig = field(default_factory=LLMConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    limits: SummaryLimits = field(default_factory=SummaryLimits)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def validate(self) -> None:
        self.target_articles = _ensure_positive(self.target_articles, "target_articles")
        self.previous_pool_limit = _ensure_positive(self.previous_pool_limit, "previous_pool_limit")
        self.freshness_hours = _ensure_non_negative(self.freshness_hours, "freshness_hours")
        if not self.category:
            raise ValueError("category must be provided")
        self.llm.validate()
        self.retry.validate()
        self.pacing.validate()
        self.limits.validate()
        self.extraction.validate()
        self.storage.validate()


def load_config() -> CurationConfig:
    """Build configuration from environment variables."""

    config = CurationConfig(
        target_articles=get_int_env("CURATION_TARGET_ARTICLES", 20),
        freshness_hours=get_float_env("CURATION_FRESHNESS_HOURS", 24.0),
        llm=LLMConfig(
            model=get_env("GEMINI_MODEL", "gemini-2.5-flash-lite") or "gemini-2.5-flash-lite",
            api_key=get_env("GEMINI_API_KEY"),
            requests_per_minute=get_int_env("GEMINI_REQUESTS_PER_MINUTE", 30),
        ),
        storage=StorageConfig(
            supabase_url=get_env("SUPABASE_URL"),
            supabase_key=get_env("SUPABASE_KEY"),
            schema=get_env("SUPABASE_SCHEMA", "public") or "public",
            table=get_env("NEWS_SUMMARY_TABLE", "news_summaries") or "news_summaries",
        ),
    )
    if get_bool_env("CURATION_DISABLE_PACING", False):
        logger.info("Pacing disabled via CURATION_DISABLE_PACING")
        config.pacing = PacingConfig.disabled()
    config.validate()
    return config


def config_from_payload(payload: Dict[str, Any], base: Optional[CurationConfig] = None) -> CurationConfig:
    """Apply request-level overrides on top of the environment configuration."""

    config = base or load_config()

    if "target_articles" in payload:
        config.target_articles = _coerce_int(payload["target_articles"], "target_articles")
    if "category" in payload:
        config.category = str(payload["category"])

    llm_payload = payload.get("llm")
    if isinstance(llm_payload, dict):
        if llm_payload.get("model"):
            config.llm.model = llm_payload["model"]
        if llm_payload.get("api_key"):
            config.llm.api_key = llm_payload["api_key"]
        if llm_payload.get("requests_per_minute"):
            config.llm.requests_per_minute = _coerce_int(llm_payload["requests_per_minute"], "llm.requests_per_minute")

    supabase_payload = payload.get("supabase")
    if supabase_payload is not None and not isinstance(supabase_payload, dict):
        raise ValueError("supabase configuration must be an object when provided")
    if isinstance(supabase_payload, dict):
        if supabase_payload.get("enabled") is False:
            config.storage = StorageConfig()
        else:
            config.storage = StorageConfig(
                supabase_url=supabase_payload.get("url") or config.storage.supabase_url,
                supabase_key=supabase_payload.get("key") or config.storage.supabase_key,
                schema=supabase_payload.get("schema", config.storage.schema),
                table=supabase_payload.get("table", config.storage.table),
            )

    if payload.get("disable_pacing"):
        config.pacing = PacingConfig.disabled()

    config.validate()
    return config
