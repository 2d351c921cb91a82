"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Helpers that assemble follow-up conversations from responses and tool results.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Iterable

from ..llms.types import (
    LLMResponse,
    Message,
    MessagePart,
    ToolCall,
    ToolResultContentPart,
)
from ..tools.core.base import ToolResult

_CONTEXT_LIMIT = 120


def with_call_ids(response: LLMResponse, *, start: int = 0) -> LLMResponse:
    """Give each id-less tool request a `<tool name>-<n>` id, counting from `start`."""
    calls = [
        call if call.id else replace(call, id=f"{call.tool_name}-{start + i}")
        for i, call in enumerate(response.tool_calls)
    ]
    return replace(response, tool_calls=calls)


def user_message(text: str) -> Message:
    return Message(role="user", content=text)


def assistant_message(response: LLMResponse) -> Message:
    """Echo a model response back into history, including its tool requests."""
    if not response.tool_calls:
        return Message(role="assistant", content=response.text)
    parts: list[MessagePart] = []
    if response.text:
        parts.append({"type": "text", "text": response.text})
    for call in response.tool_calls:
        parts.append(
            {
                "type": "tool_use",
                "id": call.id or call.tool_name,
                "name": call.tool_name,
                "input": dict(call.arguments),
            }
        )
    return Message(role="assistant", content=parts)


def tool_result_part(result: ToolResult) -> ToolResultContentPart:
    part: ToolResultContentPart = {
        "type": "tool_result",
        "tool_use_id": result.tool_call_id or result.tool_name or "",
        "content": result.content_for_model(),
    }
    if not result.success:
        part["is_error"] = True
    return part


def tool_result_message(results: Iterable[ToolResult]) -> Message:
    """Aggregate tool outputs into one message for the next inference round."""
    return Message(role="user", content=[tool_result_part(r) for r in results])


def tool_call_context(call: ToolCall) -> str:
    """`"<tool name> <arguments>"` label used for tool events."""
    args = json.dumps(call.arguments, sort_keys=True, default=str)
    return f"{call.tool_name} {args}"


def describe_message(message: Message, *, limit: int = _CONTEXT_LIMIT) -> str:
    """Short single-line summary of a message for event context."""
    if isinstance(message.content, str):
        text = message.content
    else:
        pieces: list[str] = []
        for part in message.content:
            if part["type"] == "text":
                pieces.append(part["text"])
            elif part["type"] == "tool_use":
                pieces.append(f"tool_use:{part['name']}")
            elif part["type"] == "tool_result":
                pieces.append(f"tool_result:{part['tool_use_id']}")
        text = " ".join(pieces)
    text = " ".join(text.split())
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text
