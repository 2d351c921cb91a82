"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

toolgraph: run model inference and the tool calls it requests as a
dependency graph, so independent operations execute concurrently.
"""

from .core import (
    CancellationToken,
    CycleDetectedError,
    ExecutionEvent,
    ExecutionEventLog,
    GraphBuilder,
    InferenceFailedError,
    OperationCancelledError,
    OperationTimedOutError,
    ParallelScheduler,
    SequentialRunner,
    ToolExecutionFailedError,
    TooManyRoundsError,
    UnknownDependencyError,
    WorkflowEngine,
    WorkflowError,
    WorkflowGraph,
    WorkflowSettings,
    render_timeline,
    run_prompt_sequentially,
    run_prompt_with_tools,
)
from .llms import InferenceClient, LLMResponse, Message, ScriptedInferenceClient, ToolCall
from .tools import ToolNotFoundError, ToolRegistry, ToolResult, tool

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "ExecutionEvent",
    "ExecutionEventLog",
    "GraphBuilder",
    "ParallelScheduler",
    "SequentialRunner",
    "WorkflowEngine",
    "WorkflowGraph",
    "WorkflowSettings",
    "render_timeline",
    "run_prompt_with_tools",
    "run_prompt_sequentially",
    "InferenceClient",
    "LLMResponse",
    "Message",
    "ScriptedInferenceClient",
    "ToolCall",
    "ToolRegistry",
    "ToolResult",
    "tool",
    "WorkflowError",
    "CycleDetectedError",
    "UnknownDependencyError",
    "ToolNotFoundError",
    "InferenceFailedError",
    "ToolExecutionFailedError",
    "OperationTimedOutError",
    "OperationCancelledError",
    "TooManyRoundsError",
]
