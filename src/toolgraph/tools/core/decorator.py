"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

`@tool` decorator turning plain functions into registry-ready Tool objects.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable

from pydantic import BaseModel

from .base import Tool, ToolFn, ToolSpec


def tool(
    *,
    args_model: type[BaseModel],
    name: str | None = None,
    description: str | None = None,
    timeout: float | None = None,
) -> Callable[[ToolFn], Tool[Any, Any]]:
    """
    Build a `Tool` from a sync or async handler.

    The handler receives the validated `args_model` instance and, when it
    declares a second parameter (or one named `ctx`), the `ToolContext`.
    """

    def _wrap(fn: ToolFn) -> Tool[Any, Any]:
        tool_name = name or fn.__name__
        tool_description = description or inspect.getdoc(fn) or ""
        spec = ToolSpec(
            name=tool_name,
            description=tool_description,
            parameters_schema=args_model.model_json_schema(),
        )
        return Tool(
            spec=spec,
            fn=fn,
            args_model=args_model,
            default_timeout=timeout,
        )

    return _wrap
