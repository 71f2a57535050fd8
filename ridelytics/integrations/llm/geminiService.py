"""
Gemini text generation client
=============================

Async wrapper around the ``google-genai`` SDK.  The chat service treats text
generation as an opaque ``prompt -> text`` operation via the
``TextGenerator`` protocol.

Calls are retried (3 attempts, exponential backoff) on transient failures:
5xx responses, timeouts and transport errors.  4xx responses, responses the
SDK cannot parse and empty completions fail immediately.  Every failure
surfaces as ``UpstreamGenerationError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx
from google import genai
from google.genai import errors, types

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_MAX_RETRIES = 3
_INITIAL_BACKOFF_SECONDS = 0.5  # doubles each retry: 0.5, 1.0, 2.0


# ---------------------------------------------------------------------------
# Custom exception
# ---------------------------------------------------------------------------


class UpstreamGenerationError(Exception):
    """Raised when the text-generation service errors or is unreachable."""

    def __init__(self, message: str, status: str | None = None, raw: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.raw = raw


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def extract_text(response: Any) -> str:
    """Completion text of a ``generate_content`` response.

    Raises:
        UpstreamGenerationError: When the response has no usable text,
            including blocked prompts and payloads of an unexpected shape.
    """
    try:
        text = response.text
    except (AttributeError, TypeError, ValueError) as exc:
        raise UpstreamGenerationError(
            "Gemini API returned an unreadable response", raw=repr(response)
        ) from exc

    if isinstance(text, str) and text:
        return text

    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    raise UpstreamGenerationError(
        "Gemini API returned no text",
        status=str(getattr(block_reason, "value", block_reason)) if block_reason else None,
        raw=repr(response),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class GeminiTextGenerator:
    """``TextGenerator`` backed by the Gemini API."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-3-flash-preview",
        temperature: float = 0.7,
        max_output_tokens: int = 500,
        timeout: float = 30.0,
        client: genai.Client | None = None,
        retry_backoff: float = _INITIAL_BACKOFF_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._timeout = timeout
        self._client = client
        self._retry_backoff = retry_backoff

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise UpstreamGenerationError("GEMINI_API_KEY is not configured")
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def _generate_with_retry(self, client: genai.Client, prompt: str) -> Any:
        config = types.GenerateContentConfig(
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )
        backoff = self._retry_backoff
        last_exception: Exception | None = None

        for attempt in range(1, _MAX_RETRIES + 1):
            try:
                return await asyncio.wait_for(
                    client.aio.models.generate_content(
                        model=self._model, contents=prompt, config=config
                    ),
                    timeout=self._timeout,
                )
            except errors.ClientError as exc:
                raise UpstreamGenerationError(
                    f"Gemini API client error: HTTP {exc.code}",
                    status=str(exc.code),
                    raw=exc.message,
                ) from exc
            except errors.ServerError as exc:
                last_exception = exc
                logger.warning(
                    "Gemini API server error on attempt %d/%d: HTTP %s",
                    attempt,
                    _MAX_RETRIES,
                    exc.code,
                )
            except (asyncio.TimeoutError, httpx.HTTPError) as exc:
                last_exception = exc
                logger.warning(
                    "Gemini API transport error on attempt %d/%d: %r",
                    attempt,
                    _MAX_RETRIES,
                    exc,
                )
            except (errors.APIError, ValueError) as exc:
                # Unclassified API errors and bodies that fail SDK validation
                raise UpstreamGenerationError(
                    "Gemini API returned an unusable response", raw=str(exc)
                ) from exc

            if attempt < _MAX_RETRIES:
                await asyncio.sleep(backoff)
                backoff *= 2

        raise UpstreamGenerationError(
            f"Gemini API request failed after {_MAX_RETRIES} attempts",
            raw=str(last_exception),
        )

    async def generate(self, prompt: str) -> str:
        """Generate a completion for a single-turn ``prompt``.

        Raises:
            UpstreamGenerationError: On missing credentials, API failure or
                an empty completion.
        """
        client = self._get_client()
        response = await self._generate_with_retry(client, prompt)
        return extract_text(response)
