"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Inference client contract consumed by the workflow runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .types import LLMResponse, Message, ToolDefinition

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken


@runtime_checkable
class InferenceClient(Protocol):
    """
    Minimal model transport used by graph nodes and the sequential runner.

    Implementations raise any exception to signal failure; the runtime
    converts it into `InferenceFailedError` with the originating node id.
    """

    async def infer(
        self,
        messages: list[Message],
        *,
        tools: list[ToolDefinition] | None = None,
        cancel: "CancellationToken | None" = None,
    ) -> LLMResponse: ...
