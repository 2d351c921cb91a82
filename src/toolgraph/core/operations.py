"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Single inference and tool operations with failures mapped to workflow errors.
"""

from __future__ import annotations

from typing import Any

from ..llms.contracts import InferenceClient
from ..llms.types import JSONObject, LLMResponse, Message, ToolDefinition
from ..tools.core.base import ToolContext, ToolResult
from ..tools.core.errors import ToolTimeoutError, ToolValidationError
from ..tools.registry import ToolRegistry
from .cancellation import CancellationToken
from .errors import (
    InferenceFailedError,
    OperationTimedOutError,
    ToolExecutionFailedError,
)


async def call_inference(
    client: InferenceClient,
    messages: list[Message],
    *,
    node_id: str,
    tools: list[ToolDefinition] | None = None,
    cancel: CancellationToken | None = None,
) -> LLMResponse:
    """Await one model response; client exceptions become `InferenceFailedError`."""
    try:
        return await client.infer(messages, tools=tools, cancel=cancel)
    except Exception as e:
        raise InferenceFailedError(
            str(e) or type(e).__name__,
            classification=type(e).__name__,
            node_id=node_id,
        ) from e


async def call_tool(
    registry: ToolRegistry,
    tool_name: str,
    arguments: JSONObject,
    *,
    node_id: str,
    call_id: str | None = None,
    cancel: CancellationToken | None = None,
    metadata: dict[str, Any] | None = None,
) -> ToolResult[Any]:
    """Execute one tool through the registry; unsuccessful results raise."""
    ctx = ToolContext(
        request_id=node_id,
        metadata={"node_id": node_id, **(metadata or {})},
        cancel=cancel,
    )
    try:
        result = await registry.call(
            tool_name,
            dict(arguments),
            ctx=ctx,
            tool_call_id=call_id,
        )
    except ToolTimeoutError as e:
        raise OperationTimedOutError(
            str(e), timeout_s=None, node_id=node_id, kind="tool"
        ) from e
    except ToolValidationError as e:
        raise ToolExecutionFailedError(
            str(e), tool_name=tool_name, node_id=node_id
        ) from e
    if not result.success:
        raise ToolExecutionFailedError(
            result.error_message or f"Tool '{tool_name}' failed",
            tool_name=tool_name,
            node_id=node_id,
        )
    return result
