"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic in-process inference client for tests and benchmarks.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable

from .types import LLMResponse, Message, ToolDefinition

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken


Responder = Callable[
    [list[Message], list[ToolDefinition] | None], LLMResponse | Awaitable[LLMResponse]
]


class ScriptExhaustedError(RuntimeError):
    """Raised when a scripted client is asked for more responses than queued."""


@dataclass(frozen=True, slots=True)
class RecordedInference:
    """One call observed by `ScriptedInferenceClient`."""

    messages: list[Message]
    tools: list[ToolDefinition] | None = None
    started_at_s: float = 0.0
    ended_at_s: float = 0.0


@dataclass(slots=True)
class ScriptedInferenceClient:
    """
    Replay queued responses, or delegate to a responder, with fixed latency.

    Exceptions placed in the script are raised instead of returned, which lets
    tests exercise inference failure paths.
    """

    script: Iterable[LLMResponse | BaseException] = ()
    responder: Responder | None = None
    latency_s: float = 0.0
    calls: list[RecordedInference] = field(default_factory=list)
    _queue: deque[LLMResponse | BaseException] = field(init=False)

    def __post_init__(self) -> None:
        self._queue = deque(self.script)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def enqueue(self, *items: LLMResponse | BaseException) -> None:
        self._queue.extend(items)

    async def infer(
        self,
        messages: list[Message],
        *,
        tools: list[ToolDefinition] | None = None,
        cancel: "CancellationToken | None" = None,
    ) -> LLMResponse:
        loop = asyncio.get_running_loop()
        started = loop.time()
        if cancel is not None:
            cancel.raise_if_cancelled()
        if self.latency_s > 0:
            await asyncio.sleep(self.latency_s)
        self.calls.append(
            RecordedInference(
                messages=list(messages),
                tools=list(tools) if tools is not None else None,
                started_at_s=started,
                ended_at_s=loop.time(),
            )
        )

        if self._queue:
            item = self._queue.popleft()
            if isinstance(item, BaseException):
                raise item
            return item
        if self.responder is not None:
            result = self.responder(list(messages), tools)
            if asyncio.iscoroutine(result) or isinstance(result, asyncio.Future):
                result = await result
            return result  # type: ignore[return-value]
        raise ScriptExhaustedError(
            f"Scripted client has no response for call #{len(self.calls)}"
        )
