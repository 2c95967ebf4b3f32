"""
ai_explainer.py -- Optional OpenAI rewording of verse match explanations.

Only the user's text and the already-chosen references are sent to the API.
The model never selects verses. Enabled when FEATURE_OPENAI is on and an
OPENAI_API_KEY is configured. Retries transient failures with exponential
backoff using the configured attempt count and initial delay.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx
import openai

from engine.config import AppConfig
from engine.errors import ErrorCode, ScripturePalError
from engine.explanation_builder import build_enrichment_messages
from engine.models import VerseMatchResponse

logger = logging.getLogger(__name__)

MAX_TOKENS: int = 200
TEMPERATURE: float = 0.4


class AIExplainer:
    """Rewrites template explanations through the OpenAI chat API."""

    def __init__(
        self,
        config: AppConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        client: Any = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.model = config.api.model
        self.max_attempts = max(config.performance.max_retry_attempts, 1)
        self.initial_backoff = config.performance.retry_delay_ms / 1000.0
        self.enabled = config.features.openai_integration and bool(config.api.api_key)
        self._sleep = sleep
        self._client = client

        if self._client is None and self.enabled:
            self._client = openai.AsyncOpenAI(
                api_key=config.api.api_key,
                base_url=config.api.base_url,
                timeout=config.api.timeout_ms / 1000.0,
                max_retries=0,
                http_client=http_client,
            )
        if not self.enabled:
            logger.info("AI explanations disabled (feature flag off or no API key)")

    async def _call_with_retry(self, messages: list[dict[str, str]]) -> str:
        """Call the chat API with exponential backoff on transient failures."""
        backoff = self.initial_backoff

        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.info("OpenAI call attempt %d/%d (model=%s)", attempt, self.max_attempts, self.model)
                response = await self._client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    max_tokens=MAX_TOKENS,
                    temperature=TEMPERATURE,
                )
                content = response.choices[0].message.content
                return (content or "").strip()

            except openai.RateLimitError as exc:
                logger.warning("Rate limited (attempt %d): %s", attempt, exc)
                if attempt == self.max_attempts:
                    raise ScripturePalError(
                        ErrorCode.AI_PROCESSING_ERROR, "OpenAI rate limit exceeded", details=str(exc),
                    ) from exc

            except openai.APITimeoutError as exc:
                logger.warning("Timeout (attempt %d): %s", attempt, exc)
                if attempt == self.max_attempts:
                    raise ScripturePalError(
                        ErrorCode.AI_PROCESSING_ERROR, "OpenAI request timed out", details=str(exc),
                    ) from exc

            except openai.APIConnectionError as exc:
                logger.warning("Connection error (attempt %d): %s", attempt, exc)
                if attempt == self.max_attempts:
                    raise ScripturePalError(
                        ErrorCode.NETWORK_ERROR, "Could not reach OpenAI", details=str(exc),
                    ) from exc

            except openai.APIError as exc:
                logger.error("OpenAI API error: %s", exc)
                raise ScripturePalError(
                    ErrorCode.AI_PROCESSING_ERROR, "OpenAI request failed", details=str(exc),
                ) from exc

            await self._sleep(backoff)
            backoff *= 2

        raise ScripturePalError(ErrorCode.AI_PROCESSING_ERROR, "Exhausted retries for OpenAI call")

    async def explain(self, user_text: str, response: VerseMatchResponse) -> Optional[str]:
        """
        Return an AI-written explanation for a match, or None when disabled.

        Raises ScripturePalError when the API keeps failing; callers keep
        the template explanation in that case.
        """
        if not self.enabled or self._client is None:
            return None
        messages = build_enrichment_messages(user_text, response)
        text = await self._call_with_retry(messages)
        if not text:
            raise ScripturePalError(ErrorCode.AI_PROCESSING_ERROR, "OpenAI returned an empty explanation")
        return text
