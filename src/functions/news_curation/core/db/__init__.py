"""Summary persistence."""

from .summary_store import InMemorySummaryStore, SummaryStore, SupabaseSummaryStore, is_fresh

__all__ = ["InMemorySummaryStore", "SummaryStore", "SupabaseSummaryStore", "is_fresh"]
