"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Run metrics exporters.
"""

from .base import RunMetricsExporter
from .console import ConsoleTimelineExporter
from .json import JSONRunMetricsExporter

__all__ = [
    "RunMetricsExporter",
    "ConsoleTimelineExporter",
    "JSONRunMetricsExporter",
]
