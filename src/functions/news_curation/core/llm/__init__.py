"""Text-generation clients and request pacing."""

from .rate_limiter import PacingPolicy, RequestRateLimiter
from .text_generator import TextGenerationError, TextGenerator, is_overloaded

__all__ = [
    "PacingPolicy",
    "RequestRateLimiter",
    "TextGenerationError",
    "TextGenerator",
    "is_overloaded",
]
