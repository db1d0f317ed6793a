"""Single log stream merging pushed engine output and local events.

Two producers feed the aggregator: the push channel (welcome banner and raw
engine lines) and the session itself (turn controller, status probe).  Both
run on the Qt event loop, so appends never interleave mid-call and no lock
is needed.  Entries are ordered by arrival, never by timestamp.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from kibitzer.core.enums import LogKind

_LOGGER = logging.getLogger(__name__)

AppendedCallback = Callable[[int], None]  # index of the first new entry
ClearedCallback = Callable[[], None]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogEntry:
    kind: LogKind
    message: str
    timestamp: datetime


@dataclass
class LogEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_appended: list[AppendedCallback] = field(default_factory=list)
    on_cleared: list[ClearedCallback] = field(default_factory=list)


class LogAggregator:
    """Append-only, typed log stream for one session."""

    __slots__ = ("__weakref__", "_entries", "_welcome_shown", "_clock", "events")

    def __init__(self, clock: Clock | None = None) -> None:
        self._entries: list[LogEntry] = []
        self._welcome_shown = False
        self._clock = clock or _utc_now
        self.events = LogEvents()

    # ── Producers ────────────────────────────────────────────────────────

    def record_welcome(self, ascii_art: str, description: str) -> None:
        """Append the welcome banner, once per session."""
        if self._welcome_shown:
            return
        self._welcome_shown = True
        now = self._clock()
        self._append(
            LogEntry(LogKind.WELCOME, ascii_art, now),
            LogEntry(LogKind.WELCOME, description, now),
        )

    def record_pushed(self, raw_message: str | None) -> None:
        """Append one engine line; blank lines are dropped."""
        if raw_message is None:
            return
        text = raw_message.strip()
        if not text:
            return
        self._append(LogEntry(LogKind.ENGINE, text, self._clock()))

    def record_local(self, kind: LogKind, message: str) -> None:
        self._append(LogEntry(kind, message, self._clock()))

    def info(self, message: str) -> None:
        self.record_local(LogKind.INFO, message)

    def error(self, message: str) -> None:
        self.record_local(LogKind.ERROR, message)

    def clear(self) -> None:
        """Drop all entries. The welcome latch stays set."""
        self._entries.clear()
        for cb in self.events.on_cleared:
            cb()

    # ── Readers ──────────────────────────────────────────────────────────

    @property
    def welcome_shown(self) -> bool:
        return self._welcome_shown

    def snapshot(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def entries_since(self, index: int) -> tuple[LogEntry, ...]:
        """Entries appended after the first *index* ones."""
        return tuple(self._entries[max(index, 0) :])

    def __len__(self) -> int:
        return len(self._entries)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _append(self, *entries: LogEntry) -> None:
        start = len(self._entries)
        for entry in entries:
            self._entries.append(entry)
            if entry.kind == LogKind.ERROR:
                _LOGGER.warning("%s", entry.message)
            else:
                _LOGGER.debug("[%s] %s", entry.kind.value, entry.message)
        for cb in self.events.on_appended:
            cb(start)
