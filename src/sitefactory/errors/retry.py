"""Retry engine: one backoff primitive shared by every external call."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
import openai
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from sitefactory.errors.exceptions import (
    SiteFactoryError,
    TerminalError,
    TransientError,
)
from sitefactory.types import RetryConfig, RetryStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MAX_WAIT = 60.0  # seconds


# Terminal openai errors: (exception type, error_type, http status)
_TERMINAL_OPENAI: tuple[tuple[type[openai.OpenAIError], str, int], ...] = (
    (openai.AuthenticationError, "auth_failure", 401),
    (openai.NotFoundError, "model_not_found", 404),
    (openai.BadRequestError, "bad_input", 400),
)


def _retry_after_seconds(exc: openai.APIStatusError) -> float | None:
    response = getattr(exc, "response", None)
    header = response.headers.get("retry-after") if response is not None else None
    if not header:
        return None
    try:
        return float(header)
    except ValueError:
        return None


def classify_openai_error(exc: Exception) -> SiteFactoryError:
    """Translate an openai exception into a transient or terminal error."""
    for exc_type, error_type, status in _TERMINAL_OPENAI:
        if isinstance(exc, exc_type):
            return TerminalError(str(exc), error_type=error_type, http_status=status)

    if isinstance(exc, openai.RateLimitError):
        return TransientError(
            str(exc),
            error_type="rate_limit",
            http_status=429,
            retry_after=_retry_after_seconds(exc),
            original=exc,
        )
    if isinstance(exc, openai.APIConnectionError):
        # Covers APITimeoutError, which subclasses it
        return TransientError(str(exc), error_type="timeout", original=exc)

    error_type = "server_error" if isinstance(exc, openai.InternalServerError) else "unknown"
    return TransientError(
        str(exc),
        error_type=error_type,
        http_status=getattr(exc, "status_code", None),
        original=exc,
    )


def classify_error(exc: BaseException) -> SiteFactoryError:
    """Map any exception onto the retry taxonomy.

    Unknown exceptions are treated as transient so they get the linear backoff.
    """
    if isinstance(exc, SiteFactoryError):
        return exc
    if isinstance(exc, openai.OpenAIError):
        return classify_openai_error(exc)
    if isinstance(exc, httpx.TransportError):
        return TransientError(str(exc), error_type="network", original=exc)
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        error_type = "rate_limit" if status == 429 else "server_error"
        if 400 <= status < 500 and status != 429:
            return TerminalError(str(exc), error_type="bad_input", http_status=status)
        return TransientError(str(exc), error_type=error_type, http_status=status, original=exc)
    return TransientError(str(exc), error_type="unknown", original=exc)


def is_rate_limit(exc: BaseException | None) -> bool:
    if exc is None:
        return False
    classified = classify_error(exc)
    return isinstance(classified, TransientError) and classified.is_rate_limit


def is_retryable(exc: BaseException) -> bool:
    return isinstance(classify_error(exc), TransientError)


def compute_wait(
    attempt: int,
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL,
    initial_wait: float = 1.0,
    jitter: bool = False,
    max_wait: float = _MAX_WAIT,
) -> float:
    """Compute wait time after the given (1-based) failed attempt."""
    attempt = max(1, attempt)
    if strategy == RetryStrategy.EXPONENTIAL:
        wait = initial_wait * (2 ** (attempt - 1))
    elif strategy == RetryStrategy.LINEAR:
        wait = initial_wait * attempt
    else:  # FIXED
        wait = initial_wait

    if jitter:
        wait += random.uniform(0, wait * 0.25)

    return min(wait, max_wait)


def _backoff_wait(config: RetryConfig) -> Callable[[RetryCallState], float]:
    def _wait(retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        strategy = config.rate_limit_strategy if is_rate_limit(exc) else config.strategy
        return compute_wait(
            retry_state.attempt_number,
            strategy,
            initial_wait=config.base_delay,
            max_wait=config.max_wait,
        )

    return _wait


def _log_retry(config: RetryConfig) -> Callable[[RetryCallState], None]:
    def _before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        kind = "Rate limit hit" if is_rate_limit(exc) else "API error"
        logger.warning(
            "%s (attempt %d/%d): %s. Retrying in %.1fs",
            kind,
            retry_state.attempt_number,
            config.max_attempts,
            exc,
            wait,
        )

    return _before_sleep


async def retry_async(
    fn: Callable[..., Awaitable[T]],
    retry_config: RetryConfig | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> T:
    """Execute an async function with classified backoff.

    Rate limits back off exponentially, other transient errors linearly.
    Terminal errors raise immediately. Exhausting attempts re-raises the
    last error unchanged.
    """
    config = retry_config or RetryConfig()
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, config.max_attempts)),
        wait=_backoff_wait(config),
        retry=retry_if_exception(is_retryable),
        before_sleep=_log_retry(config),
        sleep=sleep,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            result = await fn(**kwargs)
    return result
