"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Observability package for toolgraph runs.

Projects the execution events of one run into ``RunMetrics`` and exports
them, with the run's timeline, to the console or JSON.

Quick start::

    from toolgraph.core import ExecutionEventLog, run_prompt_with_tools
    from toolgraph.observability import ConsoleTimelineExporter, project_run_metrics

    events = ExecutionEventLog()
    text = await run_prompt_with_tools(client, registry, "Hi", events=events)

    metrics = project_run_metrics(events.events(), mode="parallel")
    ConsoleTimelineExporter().export(metrics, events.events())
"""

from .exporters import (
    ConsoleTimelineExporter,
    JSONRunMetricsExporter,
    RunMetricsExporter,
)
from .models import RunMetrics
from .projector import project_run_metrics, run_metrics_schema_version

__all__ = [
    "RunMetrics",
    "project_run_metrics",
    "run_metrics_schema_version",
    "RunMetricsExporter",
    "ConsoleTimelineExporter",
    "JSONRunMetricsExporter",
]
