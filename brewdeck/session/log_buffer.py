"""Operator log buffer: pure data, no Textual imports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_LOG_CAPACITY = 1000


class LogLevel(Enum):
    """Display class of a log line. Only affects styling."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def classify(text: str) -> LogLevel:
    """Classify a log line by the markers it contains.

    Checked in order: error markers win over success markers, which win
    over warning markers.
    """
    if "Error" in text or "error" in text:
        return LogLevel.ERROR
    if "Success" in text or "✓" in text:
        return LogLevel.SUCCESS
    if "Warning" in text or "⚠" in text:
        return LogLevel.WARNING
    return LogLevel.INFO


@dataclass(frozen=True)
class LogEntry:
    text: str
    level: LogLevel = LogLevel.INFO

    @classmethod
    def of(cls, text: str) -> LogEntry:
        return cls(text=text, level=classify(text))


@dataclass(frozen=True)
class LogBuffer:
    """Append-only, capacity-capped sequence of log entries.

    Appending past capacity drops entries from the oldest end.
    """

    entries: tuple[LogEntry, ...] = ()
    capacity: int = DEFAULT_LOG_CAPACITY

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, *texts: str) -> LogBuffer:
        """Return a new buffer with ``texts`` appended."""
        if not texts:
            return self
        entries = self.entries + tuple(LogEntry.of(text) for text in texts)
        if len(entries) > self.capacity:
            entries = entries[len(entries) - self.capacity:]
        return LogBuffer(entries=entries, capacity=self.capacity)

    def texts(self) -> list[str]:
        return [entry.text for entry in self.entries]

    def window(self, start: int | None, visible: int) -> tuple[int, tuple[LogEntry, ...]]:
        """Entries to show in a panel ``visible`` lines tall.

        Args:
            start: First visible index, or None to follow the tail.
            visible: Panel height in lines.

        Returns:
            The clamped first index and the entries from there.
        """
        visible = max(1, visible)
        last_start = max(0, len(self.entries) - visible)
        if start is None:
            first = last_start
        else:
            first = min(max(0, start), last_start)
        return first, self.entries[first:first + visible]
