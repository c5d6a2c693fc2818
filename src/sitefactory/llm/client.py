"""Async LLM client wrapping OpenAI's chat completions API with retry."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import date

import openai

from sitefactory.config.defaults import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
)
from sitefactory.config.schema import is_placeholder_key
from sitefactory.errors.exceptions import TerminalError
from sitefactory.errors.retry import retry_async
from sitefactory.types import LLMResponse, RetryConfig, TokenUsage

logger = logging.getLogger(__name__)

DRY_RUN_MODEL = "dry-run"


class AsyncLLMClient:
    """Sends chat-completion requests to an OpenAI-compatible endpoint.

    Without a usable API key (missing or a placeholder) or with
    ``dry_run=True`` the client runs in dry-run mode: no OpenAI client is
    created and callers are expected to use :func:`dry_run_response`.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str = DEFAULT_MODEL,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        retry_config: RetryConfig | None = None,
        dry_run: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self.model = model
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self._client: openai.AsyncOpenAI | None = client

        if client is None and not dry_run and not is_placeholder_key(api_key):
            self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        elif client is None:
            if not dry_run:
                logger.warning("OpenAI API key not set. Using dry-run mode.")
            dry_run = True
        self.dry_run = dry_run

    async def complete(
        self,
        prompt: str,
        *,
        model: str | None = None,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Send one prompt and return the parsed completion.

        ``max_tokens`` and ``temperature`` fall back to the values the client
        was constructed with.

        Transient failures are retried; terminal ones raise immediately.
        """
        if self._client is None:
            raise TerminalError(
                "OpenAI client not initialized. Check API key.", error_type="auth_failure"
            )

        messages = self._build_messages(system_prompt or self.system_prompt, prompt)

        async def _call() -> LLMResponse:
            response = await self._client.chat.completions.create(
                model=model or self.model,
                messages=messages,
                max_tokens=self.max_tokens if max_tokens is None else max_tokens,
                temperature=self.temperature if temperature is None else temperature,
            )
            return self._parse_response(response)

        return await retry_async(_call, self._retry_config, sleep=self._sleep)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    @staticmethod
    def _build_messages(system_prompt: str, user_prompt: str) -> list[dict]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    @staticmethod
    def _parse_response(response: openai.types.chat.ChatCompletion) -> LLMResponse:
        choice = response.choices[0]
        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            token_usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=(usage.total_tokens if usage else 0)
                or prompt_tokens + completion_tokens,
            ),
            finish_reason=choice.finish_reason,
        )


def dry_run_response(topic: str, category: str | None = None) -> LLMResponse:
    """Synthetic article response used when no API call may be made."""
    article = {
        "title": f"Mock Article: {topic or 'Untitled'}",
        "excerpt": "This is a mock article generated in dry-run mode.",
        "content": (
            "<p>This is placeholder content. "
            "Set OPENAI_API_KEY to generate real articles.</p>"
        ),
        "author": "AI Analyst",
        "date": date.today().isoformat(),
        "readTime": "5 min read",
        "category": category or "AI Insights",
    }
    return LLMResponse(content=json.dumps(article), model=DRY_RUN_MODEL)
