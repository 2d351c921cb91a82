"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Runtime orchestration primitives.
"""

from .dispatcher import ParallelScheduler
from .engine import (
    WorkflowEngine,
    run_prompt_sequentially,
    run_prompt_with_tools,
)
from .executor import NodeExecutor
from .sequential import SequentialRunner

__all__ = [
    "NodeExecutor",
    "ParallelScheduler",
    "SequentialRunner",
    "WorkflowEngine",
    "run_prompt_with_tools",
    "run_prompt_sequentially",
]
