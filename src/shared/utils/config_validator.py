"""
Configuration validation utilities.

Typed accessors for environment variables with clear error messages.
"""

import os


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def get_int_env(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to ``default`` when unset."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def get_float_env(name: str, default: float) -> float:
    """Read a float environment variable, falling back to ``default`` when unset."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def get_bool_env(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable (true/false, 1/0, yes/no)."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in {"true", "1", "yes"}:
        return True
    if lowered in {"false", "0", "no"}:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")
