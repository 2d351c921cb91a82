"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Incremental graph builder for inference and tool-invocation nodes.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..llms.contracts import InferenceClient
from ..llms.types import LLMResponse, Message, ToolCall, ToolDefinition
from ..tools.core.base import ToolResult
from ..tools.registry import ToolRegistry
from .cancellation import CancellationToken
from .graph import WorkflowGraph, WorkflowNode
from .messages import assistant_message, tool_call_context, tool_result_message, user_message
from .operations import call_inference, call_tool


class GraphBuilder:
    """
    Add nodes to a growing `WorkflowGraph` and return their ids for wiring.

    Inference nodes are named `inference_<n>`; tool nodes `tool_<call id>`.
    Tools are resolved against the registry when the node is added, so an
    unknown tool fails the build instead of the run.
    """

    def __init__(
        self,
        client: InferenceClient,
        registry: ToolRegistry,
        *,
        graph: WorkflowGraph | None = None,
        cancel: CancellationToken | None = None,
        tool_declarations: list[ToolDefinition] | None = None,
    ) -> None:
        self.client = client
        self.registry = registry
        self.graph = graph or WorkflowGraph()
        self.cancel = cancel or CancellationToken()
        self.tool_declarations = tool_declarations

    def add_inference_node(
        self,
        prompt: str,
        depends_on: Sequence[str] = (),
        *,
        history: Sequence[Message] = (),
        tools: list[ToolDefinition] | None = None,
    ) -> str:
        """Register a model call; upstream results are fed in ahead of `prompt`."""
        node_id = f"inference_{self.graph.peek_index('inference')}"
        deps = tuple(dict.fromkeys(depends_on))
        self.graph.check_dependencies(node_id, deps)
        declarations = tools if tools is not None else self.tool_declarations
        base_history = list(history)
        client = self.client
        cancel = self.cancel

        async def _infer(upstream: Mapping[str, Any]) -> LLMResponse:
            messages = [*base_history, *_upstream_messages(deps, upstream), user_message(prompt)]
            return await call_inference(
                client, messages, node_id=node_id, tools=declarations, cancel=cancel
            )

        self.graph.next_index("inference")
        return self.graph.add_node(
            WorkflowNode(
                node_id=node_id,
                kind="inference",
                work=_infer,
                depends_on=deps,
                context=prompt,
            )
        )

    def add_tool_node(self, request: ToolCall, depends_on: Sequence[str] = ()) -> str:
        """Register one tool invocation requested by the model."""
        call_id = request.id or f"{request.tool_name}-{self.graph.peek_index('tool')}"
        node_id = f"tool_{call_id}"
        deps = tuple(dict.fromkeys(depends_on))
        self.graph.check_dependencies(node_id, deps)
        # Raises ToolNotFoundError before the node is registered.
        tool_name = self.registry.get(request.tool_name).spec.name
        registry = self.registry
        cancel = self.cancel
        arguments = dict(request.arguments)

        async def _invoke(upstream: Mapping[str, Any]) -> ToolResult[Any]:
            return await call_tool(
                registry,
                tool_name,
                arguments,
                node_id=node_id,
                call_id=call_id,
                cancel=cancel,
                metadata={"depends_on": list(deps)},
            )

        self.graph.next_index("tool")
        return self.graph.add_node(
            WorkflowNode(
                node_id=node_id,
                kind="tool",
                work=_invoke,
                depends_on=deps,
                context=tool_call_context(request),
            )
        )

    def build(self) -> WorkflowGraph:
        return self.graph


def _upstream_messages(deps: Sequence[str], upstream: Mapping[str, Any]) -> list[Message]:
    messages: list[Message] = []
    tool_results: list[ToolResult[Any]] = []
    for dep in deps:
        value = upstream.get(dep)
        if isinstance(value, ToolResult):
            tool_results.append(value)
        elif isinstance(value, LLMResponse):
            messages.append(assistant_message(value))
    if tool_results:
        messages.append(tool_result_message(tool_results))
    return messages
