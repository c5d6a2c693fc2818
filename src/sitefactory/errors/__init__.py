"""Error handling: exceptions, retry logic, and the persisted error log."""

from sitefactory.errors.exceptions import (
    ConfigError,
    ContentValidationError,
    PipelineError,
    ProviderError,
    SiteBuildError,
    SiteFactoryError,
    TerminalError,
    TransientError,
)
from sitefactory.errors.log import ErrorEntry, ErrorLogger
from sitefactory.errors.retry import classify_error, compute_wait, retry_async

__all__ = [
    "SiteFactoryError",
    "ProviderError",
    "TransientError",
    "TerminalError",
    "PipelineError",
    "ContentValidationError",
    "ConfigError",
    "SiteBuildError",
    "ErrorEntry",
    "ErrorLogger",
    "classify_error",
    "compute_wait",
    "retry_async",
]
