"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Parallel topological scheduler for workflow graphs.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any

from ..cancellation import CancellationToken
from ..errors import NodeExecutionError, OperationCancelledError
from ..graph import WorkflowGraph, WorkflowResult
from ..telemetry import ExecutionEventLog
from .executor import NodeExecutor

logger = logging.getLogger("toolgraph.runtime")


class ParallelScheduler:
    """
    Execute every node of a graph once, dispatching all ready nodes together.

    A node becomes ready when each of its dependencies has completed
    successfully. The first failure aborts the run; results gathered so far
    are discarded. With `cancel_on_failure` the in-flight siblings of a
    failed node are cancelled, otherwise they are left running unobserved.
    """

    def __init__(
        self,
        *,
        max_parallelism: int | None = None,
        operation_timeout_s: float | None = 300.0,
        cancel_on_failure: bool = True,
        executor: NodeExecutor | None = None,
    ) -> None:
        if max_parallelism is not None and max_parallelism < 1:
            raise ValueError("max_parallelism must be >= 1")
        self.max_parallelism = max_parallelism
        self.operation_timeout_s = operation_timeout_s
        self.cancel_on_failure = cancel_on_failure
        self.executor = executor or NodeExecutor()

    async def run(
        self,
        graph: WorkflowGraph,
        *,
        events: ExecutionEventLog | None = None,
        cancel: CancellationToken | None = None,
    ) -> WorkflowResult:
        """Run the graph and return `{node_id: result}` for every node."""
        events = events if events is not None else ExecutionEventLog()
        graph.seal()
        order = graph.topological_order()
        if not order:
            return {}

        children = graph.dependents()
        indegree = {node_id: len(graph.get(node_id).depends_on) for node_id in order}
        ready = deque(node_id for node_id in order if indegree[node_id] == 0)
        running: dict[asyncio.Task[Any], str] = {}
        results: dict[str, Any] = {}
        limit = self.max_parallelism or len(order)

        cancel_waiter: asyncio.Task[None] | None = None
        if cancel is not None:
            cancel_waiter = asyncio.create_task(cancel.wait())

        logger.debug("run %s: %d nodes, limit=%d", graph.name, len(order), limit)
        try:
            while ready or running:
                while ready and len(running) < limit:
                    node_id = ready.popleft()
                    node = graph.get(node_id)
                    upstream = {dep: results[dep] for dep in node.depends_on}
                    task = asyncio.create_task(
                        self.executor.execute(
                            node,
                            upstream,
                            events=events,
                            timeout_s=self.operation_timeout_s,
                        ),
                        name=f"{graph.name}:{node_id}",
                    )
                    running[task] = node_id
                    logger.debug("dispatched %s (%d in flight)", node_id, len(running))

                waitables: set[asyncio.Future[Any]] = set(running)
                if cancel_waiter is not None:
                    waitables.add(cancel_waiter)
                done, _ = await asyncio.wait(
                    waitables, return_when=asyncio.FIRST_COMPLETED
                )

                if cancel_waiter is not None and cancel_waiter in done:
                    await self._cancel_in_flight(running)
                    raise OperationCancelledError(
                        f"Run cancelled: {cancel.reason if cancel else 'cancelled'}"
                    )

                failure: BaseException | None = None
                # Walk completions in dispatch order so the reported failure is stable.
                for task in [t for t in running if t in done]:
                    node_id = running.pop(task)
                    error = _task_error(task, graph, node_id)
                    if error is not None:
                        if failure is None:
                            failure = error
                        continue
                    results[node_id] = task.result()
                    logger.debug("completed %s", node_id)
                    for child in children[node_id]:
                        indegree[child] -= 1
                        if indegree[child] == 0:
                            ready.append(child)

                if failure is not None:
                    logger.warning(
                        "run %s aborted: %s (%d in flight)",
                        graph.name,
                        failure,
                        len(running),
                    )
                    if self.cancel_on_failure:
                        await self._cancel_in_flight(running)
                    else:
                        for task in running:
                            task.add_done_callback(_discard_outcome)
                    raise failure
        except asyncio.CancelledError:
            await self._cancel_in_flight(running)
            raise
        finally:
            if cancel_waiter is not None and not cancel_waiter.done():
                cancel_waiter.cancel()

        return {node_id: results[node_id] for node_id in order}

    async def _cancel_in_flight(self, running: dict[asyncio.Task[Any], str]) -> None:
        if not running:
            return
        for task in running:
            task.cancel()
        await asyncio.gather(*running, return_exceptions=True)
        running.clear()


def _discard_outcome(task: asyncio.Task[Any]) -> None:
    """Retrieve the outcome of a sibling left running after a failure."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug("abandoned %s failed: %s", task.get_name(), error)


def _task_error(
    task: asyncio.Task[Any], graph: WorkflowGraph, node_id: str
) -> BaseException | None:
    if task.cancelled():
        return OperationCancelledError(
            "Operation cancelled", node_id=node_id, kind=graph.get(node_id).kind
        )
    error = task.exception()
    if isinstance(error, NodeExecutionError):
        error.attach(node_id=node_id, kind=graph.get(node_id).kind)
    return error
