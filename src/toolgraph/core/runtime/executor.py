"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Execute one workflow node with a deadline and an execution event.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from ..errors import NodeExecutionError, OperationTimedOutError
from ..graph import WorkflowNode
from ..telemetry import ExecutionEventLog

logger = logging.getLogger("toolgraph.runtime")


class NodeExecutor:
    """Run and report: the one contract shared by inference and tool nodes."""

    async def execute(
        self,
        node: WorkflowNode,
        upstream: Mapping[str, Any],
        *,
        events: ExecutionEventLog,
        timeout_s: float | None = None,
    ) -> Any:
        """Await the node's unit of work; exactly one event is recorded."""
        deadline: asyncio.Timeout | None = None
        with events.span(node.kind, node.node_id, node.context):
            try:
                if timeout_s is None:
                    return await node.work(upstream)
                async with asyncio.timeout(timeout_s) as deadline:
                    return await node.work(upstream)
            except TimeoutError as e:
                if deadline is None or not deadline.expired():
                    # Raised by the work itself, not by our deadline.
                    raise NodeExecutionError(
                        f"{type(e).__name__}: {e}",
                        node_id=node.node_id,
                        kind=node.kind,
                    ) from e
                logger.warning("%s timed out after %.2fs", node.node_id, timeout_s)
                raise OperationTimedOutError(
                    f"Operation timed out after {timeout_s:.2f}s",
                    timeout_s=timeout_s,
                    node_id=node.node_id,
                    kind=node.kind,
                ) from e
            except NodeExecutionError as e:
                e.attach(node_id=node.node_id, kind=node.kind)
                raise
            except Exception as e:
                raise NodeExecutionError(
                    f"{type(e).__name__}: {e}",
                    node_id=node.node_id,
                    kind=node.kind,
                ) from e
