"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Core graph model, builder, runtime and execution telemetry exports.
"""

from .builder import GraphBuilder
from .cancellation import CancellationToken
from .errors import (
    CycleDetectedError,
    DuplicateNodeError,
    GraphError,
    GraphSealedError,
    InferenceFailedError,
    NodeExecutionError,
    OperationCancelledError,
    OperationTimedOutError,
    ToolExecutionFailedError,
    TooManyRoundsError,
    UnknownDependencyError,
    WorkflowError,
)
from .graph import NodeWork, WorkflowGraph, WorkflowNode, WorkflowResult
from .runtime import (
    NodeExecutor,
    ParallelScheduler,
    SequentialRunner,
    WorkflowEngine,
    run_prompt_sequentially,
    run_prompt_with_tools,
)
from .settings import WorkflowSettings
from .telemetry import (
    ExecutionEvent,
    ExecutionEventLog,
    NodeKind,
    TimelineRow,
    build_timeline,
    render_timeline,
)

__all__ = [
    "GraphBuilder",
    "CancellationToken",
    "WorkflowGraph",
    "WorkflowNode",
    "WorkflowResult",
    "NodeWork",
    "NodeKind",
    "NodeExecutor",
    "ParallelScheduler",
    "SequentialRunner",
    "WorkflowEngine",
    "run_prompt_with_tools",
    "run_prompt_sequentially",
    "WorkflowSettings",
    "ExecutionEvent",
    "ExecutionEventLog",
    "TimelineRow",
    "build_timeline",
    "render_timeline",
    "WorkflowError",
    "GraphError",
    "CycleDetectedError",
    "UnknownDependencyError",
    "DuplicateNodeError",
    "GraphSealedError",
    "NodeExecutionError",
    "InferenceFailedError",
    "ToolExecutionFailedError",
    "OperationTimedOutError",
    "OperationCancelledError",
    "TooManyRoundsError",
]
