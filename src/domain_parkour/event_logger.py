"""
Event logger for the page generator.

Provides structured logging with dual-format output (JSON and human-readable
text), a minimum severity filter, and masking of sensitive values such as
the KV API token.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, TextIO

from .enums import LogLevel


@dataclass
class LogEntry:
    """Represents a single log entry with all metadata."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)


class EventLogger:
    """
    Structured logger shared by the configuration sources and the handler.

    Entries below the configured level are dropped. With keep_entries,
    emitted entries are also kept in memory for inspection.
    """

    # Key fragments whose values are masked in log output
    SENSITIVE_KEYS = frozenset({
        'token', 'secret', 'password', 'api_key', 'authorization',
        'credential', 'private_key',
    })

    MASK_VALUE = "***MASKED***"

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        level: LogLevel = LogLevel.INFO,
        keep_entries: bool = False,
    ):
        """
        Initialize the event logger.

        Args:
            output_format: Output format - 'json', 'text', or 'both'
            output_stream: Output stream for log entries (defaults to sys.stderr)
            level: Minimum severity written
            keep_entries: Keep emitted entries in memory (see entries)
        """
        if output_format not in ("json", "text", "both"):
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._output_stream = output_stream or sys.stderr
        self._level = level
        self._keep_entries = keep_entries
        self._entries: list[LogEntry] = []

    @classmethod
    def from_settings(cls, level: str, output_format: str) -> "EventLogger":
        """Create a logger from the string values found in LoggingSettings."""
        return cls(output_format=output_format, level=LogLevel(level))

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def entries(self) -> list[LogEntry]:
        """Get all emitted entries (always empty unless keep_entries is set)."""
        return self._entries.copy()

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log an entry in the configured format(s).

        Args:
            level: Log severity level
            component: Component name generating the log
            message: Human-readable log message
            data: Optional additional data to include

        Returns:
            The created LogEntry, or None if filtered by level
        """
        if level.rank < self._level.rank:
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=self.mask_sensitive_data(data or {}),
        )
        if self._keep_entries:
            self._entries.append(entry)
        self._output_entry(entry)
        return entry

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[Exception] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log an error with its context.

        Args:
            component: Component name generating the log
            message: Human-readable error message
            error: Optional exception object
            additional_data: Optional additional context data
        """
        data = additional_data.copy() if additional_data else {}

        if error is not None:
            data["error_type"] = type(error).__name__
            data["error_message"] = str(error)
            details = getattr(error, "details", None)
            if details:
                data.setdefault("details", details)

        return self.log(LogLevel.ERROR, component, message, data)

    def mask_sensitive_data(self, data: dict) -> dict:
        """
        Recursively mask sensitive data in a dictionary.

        Args:
            data: Dictionary potentially containing sensitive data

        Returns:
            New dictionary with sensitive values masked
        """
        masked = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if any(fragment in key_lower for fragment in self.SENSITIVE_KEYS):
                masked[key] = self.MASK_VALUE
            elif isinstance(value, dict):
                masked[key] = self.mask_sensitive_data(value)
            elif isinstance(value, list):
                masked[key] = [
                    self.mask_sensitive_data(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                masked[key] = value
        return masked

    def _output_entry(self, entry: LogEntry) -> None:
        if self._output_format in ("json", "both"):
            self._output_stream.write(self._format_json(entry) + "\n")
        if self._output_format in ("text", "both"):
            self._output_stream.write(self._format_text(entry) + "\n")
        self._output_stream.flush()

    def _format_json(self, entry: LogEntry) -> str:
        payload = {
            "timestamp": entry.timestamp,
            "level": entry.level.value,
            "component": entry.component,
            "message": entry.message,
            "data": entry.data,
        }
        return json.dumps(payload, ensure_ascii=False, default=str)

    def _format_text(self, entry: LogEntry) -> str:
        # e.g. [2025-06-01T12:00:00+00:00] WARN [sources] message key=value
        line = (
            f"[{entry.timestamp}] {entry.level.value.upper()} "
            f"[{entry.component}] {entry.message}"
        )
        if entry.data:
            pairs = " ".join(f"{k}={v}" for k, v in entry.data.items())
            line = f"{line} {pairs}"
        return line
