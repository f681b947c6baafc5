"""Gemini-backed implementation of the text-generation capability."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError

from src.shared.utils.config_validator import ConfigurationError

from .rate_limiter import RequestRateLimiter
from .text_generator import TextGenerationError

DEFAULT_MODEL = "gemini-2.5-flash-lite"


class GeminiTextGenerator:
    """Sends prompts to a Gemini model and returns the visible response text.

    The instance is created explicitly by the caller and handed to every
    component that needs text generation.
    """

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        api_key: Optional[str] = None,
        rate_limiter: Optional[RequestRateLimiter] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self._api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set")
        genai.configure(api_key=self._api_key)
        self.model_name = model
        self._model = genai.GenerativeModel(model_name=model)
        self._rate_limiter = rate_limiter or RequestRateLimiter()
        self._logger = logger or logging.getLogger(__name__)

    def generate(
        self,
        prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        generation_config: dict[str, Any] = {}
        if max_tokens is not None:
            generation_config["max_output_tokens"] = max_tokens
        if temperature is not None:
            generation_config["temperature"] = temperature

        with self._rate_limiter.slot():
            try:
                result = self._model.generate_content(
                    prompt,
                    generation_config=genai.types.GenerationConfig(**generation_config)
                    if generation_config
                    else None,
                )
            except GoogleAPIError as exc:
                status_code = getattr(exc, "code", None)
                self._logger.warning("Gemini request failed (status=%s): %s", status_code, exc)
                raise TextGenerationError(
                    f"Gemini API error: {getattr(exc, 'message', None) or exc}",
                    status_code=status_code if isinstance(status_code, int) else None,
                ) from exc

        text = self._extract_text(result)
        self._logger.debug("Gemini returned %d characters", len(text))
        return text

    @staticmethod
    def _extract_text(result: Any) -> str:
        candidates = getattr(result, "candidates", None) or []
        if candidates:
            content = getattr(candidates[0], "content", None)
            parts = getattr(content, "parts", None) or []
            # Thinking models emit internal thought parts alongside the answer
            return "".join(
                getattr(part, "text", "") or ""
                for part in parts
                if not getattr(part, "thought", False)
            )
        try:
            return str(result.text or "")
        except (AttributeError, ValueError):
            return ""
