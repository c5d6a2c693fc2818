"""Persisted error log with categorization and reporting."""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from sitefactory.types import ErrorCategory, Severity

logger = logging.getLogger(__name__)

_DEFAULT_MAX_ENTRIES = 1000
_RECENT_COUNT = 10

_LOG_LEVELS: dict[Severity, int] = {
    Severity.CRITICAL: logging.CRITICAL,
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}

# First match wins
_CATEGORY_KEYWORDS: list[tuple[ErrorCategory, tuple[str, ...]]] = [
    (ErrorCategory.VALIDATION, ("validation", "invalid", "required")),
    (ErrorCategory.API, ("api", "rate limit", "429")),
    (ErrorCategory.FILE_SYSTEM, ("file", "directory", "path", "enoent")),
    (ErrorCategory.PIPELINE, ("pipeline", "stage")),
    (ErrorCategory.NETWORK, ("network", "fetch", "connection", "econnreset")),
    (ErrorCategory.CONFIG, ("config", "environment")),
]

_CRITICAL_KEYWORDS = ("cannot continue", "fatal", "critical")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ErrorEntry(BaseModel):
    id: str
    timestamp: str = Field(default_factory=_now_iso)
    message: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
    severity: Severity = Severity.ERROR
    module: str = "unknown"
    operation: str = "unknown"
    metadata: dict[str, Any] = Field(default_factory=dict)


def categorize_error(error: BaseException | str) -> ErrorCategory:
    """Pick a category from the exception type, falling back to message keywords."""
    category = getattr(error, "category", None)
    if isinstance(category, ErrorCategory) and category != ErrorCategory.UNKNOWN:
        return category

    message = str(error).lower()
    for candidate, keywords in _CATEGORY_KEYWORDS:
        if any(k in message for k in keywords):
            return candidate
    return ErrorCategory.UNKNOWN


def determine_severity(error: BaseException | str, category: ErrorCategory) -> Severity:
    if getattr(error, "is_fatal", False) or getattr(error, "critical", False):
        return Severity.CRITICAL

    message = str(error).lower()
    if any(k in message for k in _CRITICAL_KEYWORDS):
        return Severity.CRITICAL
    if category in (ErrorCategory.VALIDATION, ErrorCategory.CONFIG):
        return Severity.ERROR
    if category == ErrorCategory.API and (
        "rate limit" in message or getattr(error, "is_rate_limit", False)
    ):
        return Severity.WARNING
    return Severity.ERROR


class ErrorLogger:
    """Records errors to ``<data_dir>/logs/errors.json`` and the logging system.

    The file keeps at most ``max_entries`` entries (oldest dropped first)
    plus a summary of counts by category and severity. Failing to write the
    file never raises.
    """

    def __init__(self, data_dir: Path, max_entries: int = _DEFAULT_MAX_ENTRIES) -> None:
        self._log_path = Path(data_dir) / "logs" / "errors.json"
        self._max_entries = max_entries
        self._entries: list[ErrorEntry] = self._load()

    @property
    def path(self) -> Path:
        return self._log_path

    @property
    def entries(self) -> list[ErrorEntry]:
        return list(self._entries)

    def log(
        self,
        error: BaseException | str,
        *,
        category: ErrorCategory | None = None,
        severity: Severity | None = None,
        module: str = "unknown",
        operation: str = "unknown",
        metadata: dict[str, Any] | None = None,
    ) -> ErrorEntry:
        """Record one error and return the stored entry."""
        resolved_category = category or categorize_error(error)
        resolved_severity = severity or determine_severity(error, resolved_category)

        entry = ErrorEntry(
            id=f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}",
            message=str(error) or type(error).__name__,
            category=resolved_category,
            severity=resolved_severity,
            module=module,
            operation=operation,
            metadata=metadata or {},
        )
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries :]
        self._save()

        logger.log(
            _LOG_LEVELS[resolved_severity],
            "[%s] %s: %s (module=%s, operation=%s)",
            resolved_severity.value.upper(),
            resolved_category.value,
            entry.message,
            module,
            operation,
        )
        return entry

    def recent(self, limit: int = _RECENT_COUNT) -> list[ErrorEntry]:
        return self._entries[-limit:] if limit > 0 else []

    def by_category(self, category: ErrorCategory) -> list[ErrorEntry]:
        return [e for e in self._entries if e.category == category]

    def by_severity(self, severity: Severity) -> list[ErrorEntry]:
        return [e for e in self._entries if e.severity == severity]

    def summary(self) -> dict[str, Any]:
        by_category: dict[str, int] = {}
        by_severity: dict[str, int] = {}
        for entry in self._entries:
            by_category[entry.category.value] = by_category.get(entry.category.value, 0) + 1
            by_severity[entry.severity.value] = by_severity.get(entry.severity.value, 0) + 1
        return {
            "total": len(self._entries),
            "byCategory": by_category,
            "bySeverity": by_severity,
            "recent": [
                {
                    "id": e.id,
                    "message": e.message,
                    "category": e.category.value,
                    "severity": e.severity.value,
                    "timestamp": e.timestamp,
                }
                for e in self.recent()
            ],
        }

    def top_errors(self, limit: int = 10) -> list[dict[str, Any]]:
        """Group entries by category and message prefix, most frequent first."""
        counts: dict[str, dict[str, Any]] = {}
        for entry in self._entries:
            key = f"{entry.category.value}:{entry.message[:100]}"
            bucket = counts.setdefault(
                key,
                {
                    "message": entry.message,
                    "category": entry.category.value,
                    "count": 0,
                    "firstSeen": entry.timestamp,
                    "lastSeen": entry.timestamp,
                },
            )
            bucket["count"] += 1
            bucket["lastSeen"] = entry.timestamp
        ranked = sorted(counts.values(), key=lambda b: b["count"], reverse=True)
        return ranked[:limit]

    def report(self) -> dict[str, Any]:
        summary = self.summary()
        return {
            "generated": _now_iso(),
            "summary": {
                "total": summary["total"],
                "byCategory": summary["byCategory"],
                "bySeverity": summary["bySeverity"],
            },
            "recent": summary["recent"],
            "critical": [
                e.model_dump(mode="json") for e in self.by_severity(Severity.CRITICAL)[-5:]
            ],
            "topErrors": self.top_errors(10),
        }

    def print_report(self, console: Console) -> None:
        report = self.report()

        table = Table(title="Error Summary", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value")
        table.add_row("Total errors", str(report["summary"]["total"]))
        for severity, count in report["summary"]["bySeverity"].items():
            table.add_row(f"Severity: {severity}", str(count))
        for category, count in report["summary"]["byCategory"].items():
            table.add_row(f"Category: {category}", str(count))
        console.print(table)

        if report["critical"]:
            crit_table = Table(title="Recent Critical Errors", show_header=True)
            crit_table.add_column("Timestamp")
            crit_table.add_column("Module")
            crit_table.add_column("Message", style="red")
            for e in report["critical"]:
                crit_table.add_row(e["timestamp"], e["module"], e["message"])
            console.print(crit_table)

        if report["topErrors"]:
            top_table = Table(title="Top Errors by Frequency", show_header=True)
            top_table.add_column("Count", justify="right")
            top_table.add_column("Category", style="cyan")
            top_table.add_column("Message")
            top_table.add_column("Last seen")
            for e in report["topErrors"][:5]:
                top_table.add_row(str(e["count"]), e["category"], e["message"][:60], e["lastSeen"])
            console.print(top_table)

    def clear(self) -> None:
        self._entries = []
        self._save()

    def export(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.report(), indent=2))

    def _load(self) -> list[ErrorEntry]:
        if not self._log_path.exists():
            return []
        try:
            data = json.loads(self._log_path.read_text())
            return [ErrorEntry.model_validate(e) for e in data.get("entries", [])]
        except Exception as e:
            logger.warning("Error loading error log %s: %s", self._log_path, e)
            return []

    def _save(self) -> None:
        try:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            payload = {
                "entries": [e.model_dump(mode="json") for e in self._entries],
                "summary": self.summary(),
                "timestamp": _now_iso(),
            }
            self._log_path.write_text(json.dumps(payload, indent=2))
        except Exception as e:
            logger.error("Failed to save error log: %s", e)
