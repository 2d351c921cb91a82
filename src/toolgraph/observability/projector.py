"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Projection helpers that convert execution events into RunMetrics.
"""

from __future__ import annotations

from typing import Iterable

from ..core.telemetry import ExecutionEvent
from .models import RunMetrics

_SCHEMA_VERSION = "run_metrics.v1"


def run_metrics_schema_version() -> str:
    """Return stable run-metrics schema version identifier."""

    return _SCHEMA_VERSION


def project_run_metrics(
    events: Iterable[ExecutionEvent],
    *,
    run_id: str = "",
    mode: str = "",
) -> RunMetrics:
    """Project one run's events into counts, latencies and overlap."""

    rows = sorted(events, key=lambda e: e.started_at_s)
    metrics = RunMetrics(run_id=run_id, mode=mode)
    if not rows:
        return metrics

    for event in rows:
        latency_ms = event.duration_s * 1000.0
        if event.kind == "inference":
            metrics.llm_calls += 1
            metrics.llm_latencies_ms.append(latency_ms)
        else:
            metrics.tool_calls += 1
            tool_name = event.context.split(" ", 1)[0] or event.name
            metrics.tool_latencies_ms.setdefault(tool_name, []).append(latency_ms)
        if event.status != "ok":
            metrics.errors.append(f"{event.name}: {event.error or event.status}")

    started = rows[0].started_at_s
    ended = max(event.ended_at_s for event in rows)
    metrics.total_duration_s = max(0.0, ended - started)
    metrics.busy_duration_s = sum(event.duration_s for event in rows)
    metrics.state = "failed" if metrics.errors else "completed"
    return metrics
