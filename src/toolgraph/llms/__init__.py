"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Inference-side types, the client contract, and tool declaration export.
"""

from .contracts import InferenceClient
from .scripted import RecordedInference, ScriptedInferenceClient, ScriptExhaustedError
from .tool_export import (
    to_function_tools,
    toolspec_to_function_tool,
)
from .types import (
    JSONObject,
    JSONValue,
    LLMResponse,
    Message,
    MessageContent,
    MessagePart,
    TextContentPart,
    ToolCall,
    ToolDefinition,
    ToolResultContentPart,
    ToolUseContentPart,
    Usage,
)

__all__ = [
    "InferenceClient",
    "ScriptedInferenceClient",
    "ScriptExhaustedError",
    "RecordedInference",
    "to_function_tools",
    "toolspec_to_function_tool",
    "JSONObject",
    "JSONValue",
    "LLMResponse",
    "Message",
    "MessageContent",
    "MessagePart",
    "TextContentPart",
    "ToolCall",
    "ToolDefinition",
    "ToolResultContentPart",
    "ToolUseContentPart",
    "Usage",
]
