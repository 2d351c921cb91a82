"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Execution event records, the append-only event log, and timeline rendering.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, Literal

from ..llms.types import JSONValue

NodeKind = Literal["inference", "tool"]
EventStatus = Literal["ok", "error", "cancelled"]


def now_s() -> float:
    """Return a monotonic timestamp in seconds, comparable across events."""

    return time.monotonic()


@dataclass(frozen=True, slots=True)
class ExecutionEvent:
    """Execution window of one inference or tool operation."""

    kind: NodeKind
    name: str
    context: str
    started_at_s: float
    ended_at_s: float
    status: EventStatus = "ok"
    error: str | None = None

    @property
    def duration_s(self) -> float:
        return max(0.0, self.ended_at_s - self.started_at_s)

    def overlaps(self, other: "ExecutionEvent") -> bool:
        """Whether the half-open intervals `[start, end)` intersect."""
        return (
            self.started_at_s < other.ended_at_s
            and other.started_at_s < self.ended_at_s
        )


@dataclass(frozen=True, slots=True)
class TimelineRow:
    """One event positioned relative to the earliest start of a run."""

    kind: NodeKind
    name: str
    context: str
    offset_ms: int
    duration_ms: int
    status: EventStatus

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "kind": self.kind,
            "name": self.name,
            "context": self.context,
            "offset_ms": self.offset_ms,
            "duration_ms": self.duration_ms,
            "status": self.status,
        }


class ExecutionEventLog:
    """
    Append-only event record shared by concurrently completing operations.

    Appends are guarded by a lock so tools running in worker threads can
    record alongside event-loop tasks.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[ExecutionEvent] = []

    def record(self, event: ExecutionEvent) -> None:
        with self._lock:
            self._events.append(event)

    @contextmanager
    def span(self, kind: NodeKind, name: str, context: str) -> Iterator[None]:
        """Record exactly one event bracketing the wrapped block."""
        started = now_s()
        status: EventStatus = "ok"
        error: str | None = None
        try:
            yield
        except BaseException as exc:
            # CancelledError and KeyboardInterrupt are not Exceptions.
            status = "error" if isinstance(exc, Exception) else "cancelled"
            error = str(exc) or type(exc).__name__
            raise
        finally:
            self.record(
                ExecutionEvent(
                    kind=kind,
                    name=name,
                    context=context,
                    started_at_s=started,
                    ended_at_s=now_s(),
                    status=status,
                    error=error,
                )
            )

    def events(self) -> list[ExecutionEvent]:
        """Snapshot of recorded events ordered by start time."""
        with self._lock:
            rows = list(self._events)
        return sorted(rows, key=lambda e: e.started_at_s)

    def by_name(self) -> dict[str, ExecutionEvent]:
        """Latest event per name."""
        return {event.name: event for event in self.events()}

    def timeline(self) -> list[TimelineRow]:
        return build_timeline(self.events())

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[ExecutionEvent]:
        return iter(self.events())


def build_timeline(events: Iterable[ExecutionEvent]) -> list[TimelineRow]:
    """Convert events into offset/duration rows relative to the earliest start."""
    ordered = sorted(events, key=lambda e: e.started_at_s)
    if not ordered:
        return []
    origin = ordered[0].started_at_s
    return [
        TimelineRow(
            kind=event.kind,
            name=event.name,
            context=event.context,
            offset_ms=round((event.started_at_s - origin) * 1000),
            duration_ms=round(event.duration_s * 1000),
            status=event.status,
        )
        for event in ordered
    ]


def render_timeline(events: Iterable[ExecutionEvent], *, width: int = 40) -> str:
    """Render events as an ASCII bar chart, one line per event."""
    rows = build_timeline(events)
    if not rows:
        return ""
    total = max(row.offset_ms + row.duration_ms for row in rows) or 1
    lines = ["Timeline:"]
    for row in rows:
        bar_start = round(row.offset_ms / total * width)
        bar_len = max(1, round(row.duration_ms / total * width))
        bar = (" " * bar_start + "#" * bar_len).ljust(width)
        end = row.offset_ms + row.duration_ms
        lines.append(
            f"{row.kind.upper():<9} {row.name:<12} | {bar} | "
            f"{row.offset_ms}ms -> {end}ms {row.context}"
        )
    return "\n".join(lines)
