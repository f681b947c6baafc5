"""Shared utility functions."""

from .env import get_env, load_env
from .logging import setup_logging

__all__ = ["get_env", "load_env", "setup_logging"]
