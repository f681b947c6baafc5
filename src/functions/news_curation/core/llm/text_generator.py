"""Text-generation capability consumed by the curation stages."""

from __future__ import annotations

from typing import Optional, Protocol


class TextGenerationError(RuntimeError):
    """Failure reported by a text-generation backend.

    ``status_code`` carries the HTTP-like status when the backend exposes one
    so the retry classifier can tell rate limits from permanent failures.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TextGenerator(Protocol):
    """Anything that turns a prompt into text."""

    def generate(
        self,
        prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Return the generated text for ``prompt``."""


def is_overloaded(error: BaseException) -> bool:
    """Return True when the backend reported it is overloaded (HTTP 529)."""

    if getattr(error, "status_code", None) == 529:
        return True
    return "overloaded" in str(error).lower()
