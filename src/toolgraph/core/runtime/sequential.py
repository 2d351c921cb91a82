"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Strictly sequential "infer, run tools, feed back, repeat" baseline runner.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ...llms.contracts import InferenceClient
from ...llms.types import LLMResponse, Message, ToolCall, ToolDefinition
from ...tools.core.base import ToolResult
from ...tools.registry import ToolRegistry
from ..cancellation import CancellationToken
from ..errors import OperationCancelledError, TooManyRoundsError
from ..graph import WorkflowNode
from ..messages import (
    assistant_message,
    describe_message,
    tool_call_context,
    tool_result_message,
    user_message,
    with_call_ids,
)
from ..operations import call_inference, call_tool
from ..telemetry import ExecutionEventLog
from .executor import NodeExecutor

logger = logging.getLogger("toolgraph.runtime.sequential")


class SequentialRunner:
    """
    Comparison baseline that builds no graph.

    Each round sends the conversation so far, then executes the requested
    tools one at a time and appends their outputs as the next message. The
    loop ends when a response requests no tools; its text is returned.
    """

    def __init__(
        self,
        client: InferenceClient,
        registry: ToolRegistry,
        *,
        max_rounds: int = 20,
        operation_timeout_s: float | None = 300.0,
        executor: NodeExecutor | None = None,
    ) -> None:
        if max_rounds < 1:
            raise ValueError("max_rounds must be >= 1")
        self.client = client
        self.registry = registry
        self.max_rounds = max_rounds
        self.operation_timeout_s = operation_timeout_s
        self.executor = executor or NodeExecutor()

    async def run(
        self,
        prompt: str,
        *,
        events: ExecutionEventLog | None = None,
        cancel: CancellationToken | None = None,
    ) -> str:
        events = events if events is not None else ExecutionEventLog()
        cancel = cancel or CancellationToken()
        declarations = self.registry.declarations()
        history: list[Message] = []
        message = user_message(prompt)
        tool_counter = 0

        for round_index in range(self.max_rounds):
            self._check_cancelled(cancel)
            history.append(message)
            label = f"round_{round_index}"
            response = await self._infer(
                label, list(history), message, declarations, events, cancel
            )
            if not response.tool_calls:
                logger.debug("%s: no tool requests, done", label)
                return response.text

            response = with_call_ids(response, start=tool_counter)
            tool_counter += len(response.tool_calls)
            history.append(assistant_message(response))
            results: list[ToolResult[Any]] = []
            for call in response.tool_calls:
                self._check_cancelled(cancel)
                results.append(await self._invoke(call, events, cancel))
            logger.debug("%s: executed %d tool(s)", label, len(results))
            message = tool_result_message(results)

        logger.warning("sequential run hit max_rounds=%d", self.max_rounds)
        raise TooManyRoundsError(self.max_rounds)

    async def _infer(
        self,
        label: str,
        messages: list[Message],
        current: Message,
        declarations: list[ToolDefinition],
        events: ExecutionEventLog,
        cancel: CancellationToken,
    ) -> LLMResponse:
        client = self.client

        async def _work(_: Mapping[str, Any]) -> LLMResponse:
            return await call_inference(
                client, messages, node_id=label, tools=declarations, cancel=cancel
            )

        node = WorkflowNode(
            node_id=label,
            kind="inference",
            work=_work,
            context=describe_message(current),
        )
        return await self.executor.execute(
            node, {}, events=events, timeout_s=self.operation_timeout_s
        )

    async def _invoke(
        self,
        call: ToolCall,
        events: ExecutionEventLog,
        cancel: CancellationToken,
    ) -> ToolResult[Any]:
        # Unknown tools fail before any event is recorded, as at build time.
        tool_name = self.registry.get(call.tool_name).spec.name
        call_id = call.id or call.tool_name
        node_id = f"tool_{call_id}"
        registry = self.registry

        async def _work(_: Mapping[str, Any]) -> ToolResult[Any]:
            return await call_tool(
                registry,
                tool_name,
                call.arguments,
                node_id=node_id,
                call_id=call_id,
                cancel=cancel,
            )

        node = WorkflowNode(
            node_id=node_id,
            kind="tool",
            work=_work,
            context=tool_call_context(call),
        )
        return await self.executor.execute(
            node, {}, events=events, timeout_s=self.operation_timeout_s
        )

    @staticmethod
    def _check_cancelled(cancel: CancellationToken) -> None:
        if cancel.cancelled:
            raise OperationCancelledError(f"Run cancelled: {cancel.reason}")
