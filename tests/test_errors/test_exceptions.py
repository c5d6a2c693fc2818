"""Tests for the exception hierarchy."""

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
from sitefactory.types import ErrorCategory


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        for cls in (
            TransientError,
            TerminalError,
            PipelineError,
            ContentValidationError,
            ConfigError,
            SiteBuildError,
        ):
            assert issubclass(cls, SiteFactoryError)

    def test_categories(self):
        assert TransientError().category == ErrorCategory.API
        assert PipelineError().category == ErrorCategory.PIPELINE
        assert ContentValidationError().category == ErrorCategory.VALIDATION
        assert ConfigError().category == ErrorCategory.CONFIG
        assert SiteBuildError().category == ErrorCategory.FILE_SYSTEM


class TestTransientError:
    def test_rate_limit_by_type(self):
        assert TransientError("slow down", error_type="rate_limit").is_rate_limit

    def test_rate_limit_by_status(self):
        assert TransientError("slow down", http_status=429).is_rate_limit

    def test_server_error_is_not_rate_limit(self):
        assert not TransientError("boom", http_status=503).is_rate_limit


class TestPipelineError:
    def test_carries_stage_and_inner(self):
        inner = ValueError("bad output")
        err = PipelineError("failed", stage="blueprint", inner=inner)
        assert err.stage == "blueprint"
        assert err.inner is inner
        assert str(err) == "failed"


class TestSiteBuildError:
    def test_carries_path(self):
        err = SiteBuildError("missing", path="templates/index.html.j2")
        assert err.path == "templates/index.html.j2"
        assert err.message == "missing"


class TestProviderError:
    def test_transient_and_terminal_share_base(self):
        assert issubclass(TransientError, ProviderError)
        assert issubclass(TerminalError, ProviderError)
        assert not issubclass(PipelineError, ProviderError)

    def test_terminal_fields(self):
        err = TerminalError("bad key", error_type="auth_failure", http_status=401)
        assert err.http_status == 401
        assert err.category == ErrorCategory.API
