"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Console exporter for human-readable metrics and timelines.
"""

from __future__ import annotations

import sys
from typing import Iterable, TextIO

from ...core.telemetry import ExecutionEvent, render_timeline
from ..models import RunMetrics


class ConsoleTimelineExporter:
    """Pretty-print one run metrics summary and its timeline."""

    def __init__(
        self,
        *,
        output: TextIO | None = None,
        color: bool = True,
        width: int = 40,
    ) -> None:
        self._output = output or sys.stdout
        self._color = color
        self._width = width

    def _c(self, text: str, code: str) -> str:
        if not self._color:
            return text
        return f"\033[{code}m{text}\033[0m"

    def export(
        self,
        metrics: RunMetrics,
        events: Iterable[ExecutionEvent] = (),
    ) -> None:
        out = self._output
        header = self._c("═" * 50, "36")
        out.write(f"\n{header}\n")
        title = f"  toolgraph run ({metrics.mode})" if metrics.mode else "  toolgraph run"
        out.write(self._c(f"{title}\n", "1;36"))
        out.write(f"{header}\n\n")

        status = (
            self._c("SUCCESS", "32") if metrics.success else self._c("FAILED", "31")
        )
        out.write(f"  Status:      {status}\n")
        if metrics.run_id:
            out.write(f"  Run ID:      {metrics.run_id}\n")
        out.write(f"  Duration:    {metrics.total_duration_s * 1000:.0f}ms\n")
        out.write(f"  LLM calls:   {metrics.llm_calls}\n")
        out.write(f"  Tool calls:  {metrics.tool_calls}\n")
        if metrics.parallelism is not None:
            out.write(f"  Parallelism: {metrics.parallelism:.2f}x\n")

        if metrics.errors:
            out.write(self._c(f"  Errors ({len(metrics.errors)}):\n", "31"))
            for err in metrics.errors[:5]:
                out.write(f"  - {err[:100]}\n")

        timeline = render_timeline(events, width=self._width)
        if timeline:
            out.write(f"\n{timeline}\n")

        out.write(f"\n{header}\n")
        out.flush()
