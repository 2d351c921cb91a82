"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module defines the provider-agnostic types exchanged with inference clients.
"""

from __future__ import annotations


from dataclasses import dataclass, field
from typing import (
    Any,
    Literal,
    NotRequired,
    TypeAlias,
    TypedDict,
)


JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONSchema: TypeAlias = dict[str, JSONValue]

Role = Literal["user", "assistant", "system", "tool"]


class TextContentPart(TypedDict):
    """Message content part payload for text content."""
    type: Literal["text"]
    text: str


class ToolUseContentPart(TypedDict):
    """Message content part payload for tool use content."""
    type: Literal["tool_use"]
    id: str
    name: str
    input: JSONObject


class ToolResultContentPart(TypedDict):
    """Message content part payload for tool result content."""
    type: Literal["tool_result"]
    tool_use_id: str
    content: str
    is_error: NotRequired[bool]


MessagePart: TypeAlias = TextContentPart | ToolUseContentPart | ToolResultContentPart
MessageContent: TypeAlias = str | list[MessagePart]


class ToolFunctionSpec(TypedDict):
    """Schema/spec payload for tool function definitions."""
    name: str
    parameters: JSONSchema
    description: NotRequired[str]


class ToolDefinition(TypedDict):
    """Data type for tool definition."""
    type: Literal["function"]
    function: ToolFunctionSpec


@dataclass(frozen=True, slots=True)
class Message:
    """Normalized chat message payload."""
    role: Role
    content: MessageContent
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Usage:
    """Token usage counters returned by provider responses."""
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None


@dataclass(frozen=True, slots=True)
class ToolCall:
    """
    Data-only representation of a model-returned tool call.
    The workflow layer decides if/when/how to execute this.
    """

    id: str | None = None
    tool_name: str = ""
    arguments: JSONObject = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LLMResponse:
    """Normalized response payload for inference requests."""
    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: str | None = None
    usage: Usage = field(default_factory=Usage)
    model: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
