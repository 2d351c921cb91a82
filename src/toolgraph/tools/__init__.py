"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Tool definitions and the name-indexed registry consumed by graph builders.
"""

from .core import (
    Tool,
    ToolAlreadyRegisteredError,
    ToolContext,
    ToolError,
    ToolFn,
    ToolNotFoundError,
    ToolResult,
    ToolSpec,
    ToolTimeoutError,
    ToolValidationError,
    as_async,
    tool,
)
from .registry import ToolCallRecord, ToolRegistry

__all__ = [
    "Tool",
    "ToolSpec",
    "ToolContext",
    "ToolResult",
    "ToolFn",
    "as_async",
    "tool",
    "ToolRegistry",
    "ToolCallRecord",
    "ToolError",
    "ToolAlreadyRegisteredError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "ToolValidationError",
]
