"""Shared Supabase connection utilities."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from supabase import Client, create_client

logger = logging.getLogger(__name__)


@dataclass
class SupabaseConfig:
    """Configuration for a Supabase connection.

    Attributes:
        url: Supabase project URL
        key: Supabase API key (anon or service role)
        schema: Database schema to use (default: public)
    """

    url: str
    key: str
    schema: str = "public"

    @classmethod
    def from_env(
        cls,
        url_var: str = "SUPABASE_URL",
        key_var: str = "SUPABASE_KEY",
        schema_var: str = "SUPABASE_SCHEMA",
    ) -> "SupabaseConfig":
        """Create configuration from environment variables.

        Raises:
            ValueError: If the URL or key variable is not set
        """
        url = os.getenv(url_var)
        key = os.getenv(key_var)
        if not url or not key:
            raise ValueError(f"Missing required environment variables: {url_var} and/or {key_var}")
        return cls(url=url, key=key, schema=os.getenv(schema_var, "public"))


def get_supabase_client(config: Optional[SupabaseConfig] = None) -> Client:
    """Create a Supabase client, scoped to ``config.schema`` when it is not public.

    Example:
        >>> client = get_supabase_client()
        >>> client.table("news_summaries").select("*").limit(1).execute()
    """
    if config is None:
        config = SupabaseConfig.from_env()

    logger.debug("Creating Supabase client for %s", config.url)
    client = create_client(config.url, config.key)

    if config.schema and config.schema != "public":
        schema_fn = getattr(client, "schema", None)
        if callable(schema_fn):
            client = schema_fn(config.schema)
            logger.debug("Using schema: %s", config.schema)
        else:
            logger.warning("Supabase client does not support schema override; continuing with default schema")

    return client
