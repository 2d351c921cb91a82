"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Function-tool declarations handed to inference clients alongside a prompt.
"""

from __future__ import annotations

from typing import Any, Iterable

from .types import ToolDefinition


def _parameters(schema: dict[str, Any]) -> dict[str, Any]:
    # pydantic emits a model title; declarations only carry the argument shape.
    params = {k: v for k, v in schema.items() if k != "title"}
    params["type"] = "object"
    params.setdefault("properties", {})
    return params


def toolspec_to_function_tool(spec: Any) -> ToolDefinition:
    """Declaration for one spec-like object (`name`, `description`, `parameters_schema`)."""
    return {
        "type": "function",
        "function": {
            "name": spec.name,
            "description": spec.description,
            "parameters": _parameters(spec.parameters_schema),
        },
    }


def to_function_tools(tools: Iterable[Any]) -> list[ToolDefinition]:
    """Convert tool-like objects with `.spec` into function tool declarations."""
    return [toolspec_to_function_tool(tool.spec) for tool in tools]
