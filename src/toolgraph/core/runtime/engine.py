"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Workflow driver: discovery call -> parallel tool graph -> follow-up call.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ...llms.contracts import InferenceClient
from ...llms.types import LLMResponse
from ...tools.registry import ToolRegistry
from ..builder import GraphBuilder
from ..cancellation import CancellationToken
from ..errors import OperationCancelledError
from ..graph import WorkflowGraph, WorkflowNode, WorkflowResult
from ..messages import assistant_message, user_message, with_call_ids
from ..operations import call_inference
from ..settings import WorkflowSettings
from ..telemetry import ExecutionEventLog
from .dispatcher import ParallelScheduler
from .executor import NodeExecutor
from .sequential import SequentialRunner

logger = logging.getLogger("toolgraph.runtime")

DISCOVERY_NODE_ID = "discovery"


class WorkflowEngine:
    """Full pipeline: builder -> scheduler for graphs, plus the sequential baseline."""

    def __init__(
        self,
        client: InferenceClient,
        registry: ToolRegistry,
        *,
        settings: WorkflowSettings | None = None,
        executor: NodeExecutor | None = None,
        scheduler: ParallelScheduler | None = None,
        sequential: SequentialRunner | None = None,
    ) -> None:
        self.client = client
        self.registry = registry
        self.settings = settings or WorkflowSettings()
        self.executor = executor or NodeExecutor()
        self.scheduler = scheduler or ParallelScheduler(
            max_parallelism=self.settings.max_parallelism,
            operation_timeout_s=self.settings.operation_timeout_s,
            cancel_on_failure=self.settings.cancel_on_failure,
            executor=self.executor,
        )
        self.sequential = sequential or SequentialRunner(
            client,
            registry,
            max_rounds=self.settings.max_rounds,
            operation_timeout_s=self.settings.operation_timeout_s,
            executor=self.executor,
        )

    def new_builder(
        self,
        *,
        cancel: CancellationToken | None = None,
        graph: WorkflowGraph | None = None,
    ) -> GraphBuilder:
        """Builder bound to this engine's collaborators for hand-wired graphs."""
        return GraphBuilder(self.client, self.registry, graph=graph, cancel=cancel)

    async def run_graph(
        self,
        graph: WorkflowGraph,
        *,
        events: ExecutionEventLog | None = None,
        cancel: CancellationToken | None = None,
    ) -> WorkflowResult:
        return await self.scheduler.run(graph, events=events, cancel=cancel)

    async def run_prompt(
        self,
        prompt: str,
        *,
        events: ExecutionEventLog | None = None,
        cancel: CancellationToken | None = None,
    ) -> str:
        """
        Answer one prompt, running the requested tools concurrently.

        The discovery call runs outside the graph. When it requests tools, a
        two-level graph is built: one node per tool call and a follow-up
        inference node that depends on all of them.
        """
        events = events if events is not None else ExecutionEventLog()
        cancel = cancel or CancellationToken()
        if cancel.cancelled:
            raise OperationCancelledError(f"Run cancelled: {cancel.reason}")

        initial = await self._discover(prompt, events, cancel)
        if not initial.tool_calls:
            return initial.text
        # Echoed tool_use ids and tool_result ids must agree.
        initial = with_call_ids(initial)

        builder = self.new_builder(cancel=cancel)
        tool_nodes = [builder.add_tool_node(call) for call in initial.tool_calls]
        final_node = builder.add_inference_node(
            self.settings.follow_up_prompt,
            tool_nodes,
            history=[user_message(prompt), assistant_message(initial)],
        )
        logger.debug("built follow-up graph with %d tool node(s)", len(tool_nodes))

        results = await self.run_graph(builder.build(), events=events, cancel=cancel)
        final: LLMResponse = results[final_node]
        return final.text

    async def run_prompt_sequentially(
        self,
        prompt: str,
        *,
        events: ExecutionEventLog | None = None,
        cancel: CancellationToken | None = None,
    ) -> str:
        return await self.sequential.run(prompt, events=events, cancel=cancel)

    async def _discover(
        self,
        prompt: str,
        events: ExecutionEventLog,
        cancel: CancellationToken,
    ) -> LLMResponse:
        client = self.client
        declarations = self.registry.declarations()

        async def _work(_: Mapping[str, Any]) -> LLMResponse:
            return await call_inference(
                client,
                [user_message(prompt)],
                node_id=DISCOVERY_NODE_ID,
                tools=declarations,
                cancel=cancel,
            )

        node = WorkflowNode(
            node_id=DISCOVERY_NODE_ID,
            kind="inference",
            work=_work,
            context=prompt,
        )
        return await self.executor.execute(
            node, {}, events=events, timeout_s=self.settings.operation_timeout_s
        )


async def run_prompt_with_tools(
    client: InferenceClient,
    registry: ToolRegistry,
    prompt: str,
    *,
    cancel: CancellationToken | None = None,
    events: ExecutionEventLog | None = None,
    settings: WorkflowSettings | None = None,
) -> str:
    """Execute a single prompt, parallelising any tool calls it triggers."""
    engine = WorkflowEngine(client, registry, settings=settings)
    return await engine.run_prompt(prompt, events=events, cancel=cancel)


async def run_prompt_sequentially(
    client: InferenceClient,
    registry: ToolRegistry,
    prompt: str,
    *,
    cancel: CancellationToken | None = None,
    events: ExecutionEventLog | None = None,
    settings: WorkflowSettings | None = None,
) -> str:
    """Execute a single prompt with strictly serialized round trips."""
    engine = WorkflowEngine(client, registry, settings=settings)
    return await engine.run_prompt_sequentially(prompt, events=events, cancel=cancel)
