from .base import (
    Tool,
    ToolContext,
    ToolResult,
    ToolSpec,
    ToolFn,
    as_async,
)
from .decorator import tool
from .errors import (
    ToolAlreadyRegisteredError,
    ToolError,
    ToolNotFoundError,
    ToolTimeoutError,
    ToolValidationError,
)

__all__ = [
    "Tool",
    "ToolSpec",
    "ToolContext",
    "ToolResult",
    "ToolFn",
    "as_async",
    "tool",
    "ToolError",
    "ToolAlreadyRegisteredError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "ToolValidationError",
]
