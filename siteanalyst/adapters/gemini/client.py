"""
Gemini Client - Unified Google Gemini API client.

This is the SINGLE source of truth for all Gemini API interactions.

Authentication:
- Uses an API key when configured
- Otherwise falls back to Application Default Credentials
  (`gcloud auth application-default login`)

Features:
- Async operations (blocking SDK calls run in worker threads)
- Rate limiting (60 RPM default), shared by every concurrent caller
- Automatic retries with exponential backoff for transport failures
- Inline document parts (PDF bytes) alongside the prompt
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import google.generativeai as genai
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .models import DocumentPart, GeminiConfig, GeminiResponse

logger = logging.getLogger(__name__)

__all__ = ["GeminiClient", "RateLimitError", "GeminiAPIError", "BlockedResponseError"]

_RATE_LIMIT_MARKERS = ("429", "quota", "rate limit", "resource exhausted")


class RateLimitError(Exception):
    """Rate limit exceeded."""

    pass


class GeminiAPIError(Exception):
    """Gemini API error."""

    pass


class BlockedResponseError(Exception):
    """Gemini answered without usable text (safety block or no candidates)."""

    pass


class GeminiClient:
    """
    Unified Gemini API client.

    Created once per process and passed by reference to whatever needs it;
    the model instance and rate-limit window live on the instance, not in
    module globals.

    Example:
        >>> client = GeminiClient(GeminiConfig(api_key="..."))
        >>> response = await client.generate("Summarize this memo", document=part)
        >>> print(response.text)
    """

    def __init__(
        self,
        config: GeminiConfig | None = None,
    ) -> None:
        """
        Initialize Gemini client.

        Args:
            config: Client configuration. Uses defaults if None.
        """
        self.config = config or GeminiConfig()

        if self.config.api_key:
            genai.configure(api_key=self.config.api_key)

        # Rate limiting state
        self._request_times: list[float] = []
        self._rate_lock = asyncio.Lock()

        # Model instance (lazy loaded)
        self._model: genai.GenerativeModel | None = None

        logger.info(
            "GeminiClient initialized: model=%s, auth=%s",
            self.config.model,
            "api_key" if self.config.api_key else "adc",
        )

    @property
    def model(self) -> str:
        """Configured model id."""
        return self.config.model

    def _get_model(self) -> genai.GenerativeModel:
        """Get or create model instance."""
        if self._model is None:
            generation_config: dict[str, Any] = {
                "temperature": self.config.temperature,
                "max_output_tokens": self.config.max_output_tokens,
            }
            self._model = genai.GenerativeModel(
                model_name=self.config.model,
                generation_config=generation_config,
                safety_settings={"HARASSMENT": "BLOCK_NONE"},
            )
        return self._model

    async def _check_rate_limit(self) -> None:
        """Enforce rate limiting."""
        async with self._rate_lock:
            now = time.time()
            # Remove requests older than 1 minute
            self._request_times = [t for t in self._request_times if now - t < 60]

            if len(self._request_times) >= self.config.rate_limit_rpm:
                wait_time = 60 - (now - self._request_times[0])
                if wait_time > 0:
                    logger.warning("Rate limit reached, waiting %.1fs", wait_time)
                    await asyncio.sleep(wait_time)

            self._request_times.append(time.time())

    async def generate(
        self,
        prompt: str,
        document: DocumentPart | None = None,
    ) -> GeminiResponse:
        """
        Generate text from a prompt, optionally grounded on an inline document.

        Args:
            prompt: User prompt
            document: Optional inline document (e.g. PDF bytes)

        Returns:
            GeminiResponse with generated text

        Raises:
            GeminiAPIError: API call failed after all retries
            RateLimitError: Quota or rate limit exceeded (not retried)
            BlockedResponseError: Reply carried no text (not retried)
        """
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((GeminiAPIError, ConnectionError)),
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(
                multiplier=self.config.retry_min_wait_seconds,
                min=self.config.retry_min_wait_seconds,
                max=30,
            ),
            reraise=True,
        ):
            with attempt:
                return await self._generate_once(prompt, document)
        raise GeminiAPIError("Gemini API error: retries exhausted")

    async def _generate_once(
        self,
        prompt: str,
        document: DocumentPart | None,
    ) -> GeminiResponse:
        await self._check_rate_limit()

        parts: list[Any] = []
        if document is not None:
            parts.append({"mime_type": document.mime_type, "data": document.data})
        parts.append(prompt)
        contents = [{"role": "user", "parts": parts}]

        try:
            model = self._get_model()
            response = await asyncio.to_thread(
                model.generate_content,
                contents,
                request_options={"timeout": self.config.timeout_seconds},
            )
        except Exception as e:
            error_msg = str(e).lower()
            if any(marker in error_msg for marker in _RATE_LIMIT_MARKERS):
                raise RateLimitError(f"Rate limit exceeded: {e}") from e
            raise GeminiAPIError(f"Gemini API error: {e}") from e

        text = _response_text(response)

        # Get usage stats
        usage = getattr(response, "usage_metadata", None)
        prompt_tokens = getattr(usage, "prompt_token_count", 0) if usage else 0
        completion_tokens = getattr(usage, "candidates_token_count", 0) if usage else 0

        return GeminiResponse(
            text=text,
            model=self.config.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            finish_reason=_finish_reason(response),
        )


def _response_text(response: Any) -> str:
    """Reply text; a blocked or candidate-less reply raises BlockedResponseError."""
    if not getattr(response, "candidates", None):
        raise BlockedResponseError("Gemini returned no candidates")
    try:
        return response.text
    except ValueError as e:
        raise BlockedResponseError(
            f"Gemini returned no text: finish_reason={_finish_reason(response)}"
        ) from e


def _finish_reason(response: Any) -> str:
    """Name of the first candidate's finish reason, or UNKNOWN."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return "UNKNOWN"
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return "UNKNOWN"
    name = getattr(reason, "name", reason)
    return name if isinstance(name, str) else str(name)
