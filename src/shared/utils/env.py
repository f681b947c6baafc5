"""Environment variable loading utilities."""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_env(env_file: Optional[str] = None, override: bool = False) -> None:
    """Load environment variables from .env files.

    Args:
        env_file: Explicit .env path. If None, every .env found from the
                  filesystem root down to the current directory is loaded,
                  nearest last.
        override: Whether to override existing environment variables.
    """
    if env_file:
        candidates = [Path(env_file)]
    else:
        current = Path.cwd()
        candidates = [parent / ".env" for parent in reversed(current.parents)]
        candidates.append(current / ".env")

    loaded = 0
    for path in dict.fromkeys(candidates):
        if not path.exists():
            continue
        load_dotenv(path, override=override)
        loaded += 1
        logger.debug("Loaded environment from %s", path)

    if not loaded:
        logger.debug("No .env file found, using system environment")


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with optional default."""
    return os.getenv(key, default)
