"""Tests for the async LLM client."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from sitefactory.errors.exceptions import TerminalError
from sitefactory.llm.client import DRY_RUN_MODEL, AsyncLLMClient, dry_run_response
from sitefactory.types import RetryConfig


def _completion(content="hello", prompt_tokens=12, completion_tokens=30, model="gpt-4o-mini"):
    response = MagicMock()
    response.model = model
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    response.usage.total_tokens = prompt_tokens + completion_tokens
    return response


def _openai_mock(*results):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=list(results))
    client.close = AsyncMock()
    return client


class TestDryRunMode:
    def test_no_key_means_dry_run(self):
        assert AsyncLLMClient(api_key=None).dry_run

    def test_placeholder_key_means_dry_run(self):
        assert AsyncLLMClient(api_key="placeholder-llm-key").dry_run

    def test_explicit_dry_run(self):
        assert AsyncLLMClient(api_key="sk-real", dry_run=True).dry_run

    async def test_complete_without_client_is_terminal(self):
        client = AsyncLLMClient(dry_run=True)
        with pytest.raises(TerminalError):
            await client.complete("prompt")

    def test_dry_run_response(self):
        response = dry_run_response("Power BI", "Technology")
        article = json.loads(response.content)
        assert response.model == DRY_RUN_MODEL
        assert article["title"] == "Mock Article: Power BI"
        assert article["category"] == "Technology"
        assert response.token_usage.prompt_tokens == 0

    def test_dry_run_response_default_category(self):
        assert json.loads(dry_run_response("x").content)["category"] == "AI Insights"


class TestComplete:
    async def test_parses_response(self, no_sleep):
        mock = _openai_mock(_completion("article text"))
        client = AsyncLLMClient(client=mock, sleep=no_sleep)
        result = await client.complete("Write something", max_tokens=500)

        assert result.content == "article text"
        assert result.model == "gpt-4o-mini"
        assert result.token_usage.prompt_tokens == 12
        assert result.token_usage.completion_tokens == 30
        assert result.token_usage.total_tokens == 42
        assert result.finish_reason == "stop"

    async def test_sends_system_and_user_messages(self, no_sleep):
        mock = _openai_mock(_completion())
        client = AsyncLLMClient(client=mock, system_prompt="Be brief.", sleep=no_sleep)
        await client.complete("Topic please", model="gpt-4o", max_tokens=100, temperature=0.2)

        kwargs = mock.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 100
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Topic please"},
        ]

    async def test_retries_transient_errors(self, no_sleep):
        mock = _openai_mock(openai.APIConnectionError(request=None), _completion("ok"))
        client = AsyncLLMClient(
            client=mock, retry_config=RetryConfig(max_attempts=3), sleep=no_sleep
        )
        assert (await client.complete("p")).content == "ok"
        assert mock.chat.completions.create.await_count == 2
        no_sleep.assert_awaited_once()

    async def test_terminal_errors_not_retried(self, no_sleep):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        auth_error = openai.AuthenticationError(
            message="bad key",
            response=httpx.Response(401, request=request),
            body=None,
        )
        mock = _openai_mock(auth_error)
        client = AsyncLLMClient(client=mock, sleep=no_sleep)
        with pytest.raises(openai.AuthenticationError):
            await client.complete("p")
        assert mock.chat.completions.create.await_count == 1

    async def test_empty_content_becomes_empty_string(self, no_sleep):
        mock = _openai_mock(_completion(content=None))
        client = AsyncLLMClient(client=mock, sleep=no_sleep)
        assert (await client.complete("p")).content == ""

    async def test_close(self, no_sleep):
        mock = _openai_mock()
        await AsyncLLMClient(client=mock, sleep=no_sleep).close()
        mock.close.assert_awaited_once()


class TestConstructedDefaults:
    async def test_complete_uses_constructed_defaults(self, no_sleep):
        mock = _openai_mock(_completion(), _completion())
        client = AsyncLLMClient(client=mock, temperature=0.3, max_tokens=640, sleep=no_sleep)

        await client.complete("first")
        kwargs = mock.chat.completions.create.await_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 640

        await client.complete("second", max_tokens=50, temperature=0.0)
        kwargs = mock.chat.completions.create.await_args.kwargs
        assert kwargs["temperature"] == 0.0
        assert kwargs["max_tokens"] == 50
