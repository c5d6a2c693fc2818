"""sitefactory exceptions. Every class names the ErrorCategory it is logged under."""

from __future__ import annotations

from sitefactory.types import ErrorCategory


class SiteFactoryError(Exception):
    """Root of the sitefactory exception tree."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ProviderError(SiteFactoryError):
    """A failed call to the LLM or image provider."""

    category = ErrorCategory.API

    def __init__(
        self,
        message: str = "",
        error_type: str = "unknown",
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.http_status = http_status


class TransientError(ProviderError):
    """Worth retrying: rate limits, 5xx responses, timeouts, dropped connections."""

    def __init__(
        self,
        message: str = "",
        error_type: str = "server_error",
        http_status: int | None = None,
        retry_after: float | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message, error_type=error_type, http_status=http_status)
        self.retry_after = retry_after
        self.original = original

    @property
    def is_rate_limit(self) -> bool:
        return self.http_status == 429 or self.error_type == "rate_limit"


class TerminalError(ProviderError):
    """Raised straight through the retry loop: bad key (401), unknown model (404), bad request (400)."""

    def __init__(
        self,
        message: str = "",
        error_type: str = "auth_failure",
        http_status: int | None = None,
    ) -> None:
        super().__init__(message, error_type=error_type, http_status=http_status)


class PipelineError(SiteFactoryError):
    category = ErrorCategory.PIPELINE

    def __init__(self, message: str = "", stage: str = "", inner: Exception | None = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.inner = inner


class ContentValidationError(SiteFactoryError):
    category = ErrorCategory.VALIDATION


class ConfigError(SiteFactoryError):
    category = ErrorCategory.CONFIG


class SiteBuildError(SiteFactoryError):
    """Missing template or unwritable output; ``path`` names the file involved."""

    category = ErrorCategory.FILE_SYSTEM

    def __init__(self, message: str = "", path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
