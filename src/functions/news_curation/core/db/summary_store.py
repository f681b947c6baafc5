"""Persistence sink for generated summary artifacts."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol

from ..contracts.summary import StoredSummary, SummaryArtifact

logger = logging.getLogger(__name__)


class SummaryStore(Protocol):
    def get(self, key: str) -> Optional[StoredSummary]:
        """Return the stored artifact for ``key`` if one exists."""

    def save(self, key: str, artifact: SummaryArtifact, updated_at: datetime) -> None:
        """Insert or overwrite the artifact stored for ``key``."""


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_fresh(stored: Optional[StoredSummary], now: datetime, max_age_hours: float = 24.0) -> bool:
    """True when ``stored`` is younger than the freshness window."""

    if stored is None:
        return False
    age = _as_utc(now) - _as_utc(stored.last_updated)
    return age < timedelta(hours=max_age_hours)


class InMemorySummaryStore:
    """Process-local store used by the CLI, the local server and tests."""

    def __init__(self) -> None:
        self._records: Dict[str, StoredSummary] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[StoredSummary]:
        with self._lock:
            return self._records.get(key)

    def save(self, key: str, artifact: SummaryArtifact, updated_at: datetime) -> None:
        with self._lock:
            self._records[key] = StoredSummary(key=key, artifact=artifact, last_updated=updated_at)

    def __len__(self) -> int:
        return len(self._records)


class SupabaseSummaryStore:
    """Summary artifacts kept in a Supabase table, one row per article key."""

    def __init__(self, client: Any, *, table_name: str = "news_summaries") -> None:
        self._client = client
        self.table_name = table_name

    def get(self, key: str) -> Optional[StoredSummary]:
        response = (
            self._client.table(self.table_name)
            .select("article_key, raw, quick_summary, why_it_matters, last_updated")
            .eq("article_key", key)
            .limit(1)
            .execute()
        )
        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        row = rows[0]
        return StoredSummary(
            key=row["article_key"],
            artifact=SummaryArtifact(
                raw=row["raw"],
                quick_summary=row["quick_summary"],
                why_it_matters=row["why_it_matters"],
            ),
            last_updated=datetime.fromisoformat(str(row["last_updated"]).replace("Z", "+00:00")),
        )

    def save(self, key: str, artifact: SummaryArtifact, updated_at: datetime) -> None:
        record = {
            "article_key": key,
            "raw": artifact.raw,
            "quick_summary": artifact.quick_summary,
            "why_it_matters": artifact.why_it_matters,
            "last_updated": _as_utc(updated_at).isoformat(),
        }
        self._client.table(self.table_name).upsert(record, on_conflict="article_key").execute()
        logger.debug("Stored summary for %s in %s", key, self.table_name)
