"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Workflow error taxonomy for graph construction and execution.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for every workflow-level failure."""


class GraphError(WorkflowError, ValueError):
    """Raised when a graph mutation would leave the graph invalid."""


class CycleDetectedError(GraphError):
    """Raised when a dependency set would create a cycle."""


class UnknownDependencyError(GraphError):
    """Raised when a node references an identifier not present in the graph."""


class DuplicateNodeError(GraphError):
    """Raised when a node identifier is already taken."""


class GraphSealedError(GraphError):
    """Raised when a graph is mutated after execution has started."""


class NodeExecutionError(WorkflowError):
    """Run-time failure of one operation, tagged with its originating node."""

    def __init__(
        self,
        message: str,
        *,
        node_id: str | None = None,
        kind: str | None = None,
    ) -> None:
        self.node_id = node_id
        self.kind = kind
        self.detail = message
        super().__init__(self._format())

    def _format(self) -> str:
        if self.node_id is None:
            return self.detail
        return f"[{self.node_id}] {self.detail}"

    def attach(self, *, node_id: str, kind: str | None = None) -> "NodeExecutionError":
        """Fill in the originating node when the raiser did not know it."""
        if self.node_id is None:
            self.node_id = node_id
            self.args = (self._format(),)
        if self.kind is None:
            self.kind = kind
        return self


class InferenceFailedError(NodeExecutionError):
    """Raised when the inference client fails (network, quota, bad response)."""

    def __init__(
        self,
        message: str,
        *,
        classification: str = "unknown",
        node_id: str | None = None,
    ) -> None:
        self.classification = classification
        super().__init__(message, node_id=node_id, kind="inference")


class ToolExecutionFailedError(NodeExecutionError):
    """Raised when a tool raises or returns an unsuccessful result."""

    def __init__(
        self,
        message: str,
        *,
        tool_name: str,
        node_id: str | None = None,
    ) -> None:
        self.tool_name = tool_name
        super().__init__(message, node_id=node_id, kind="tool")


class OperationTimedOutError(NodeExecutionError):
    """Raised when a unit of work exceeds its per-operation deadline."""

    def __init__(
        self,
        message: str,
        *,
        timeout_s: float | None,
        node_id: str | None = None,
        kind: str | None = None,
    ) -> None:
        self.timeout_s = timeout_s
        super().__init__(message, node_id=node_id, kind=kind)


class OperationCancelledError(NodeExecutionError):
    """Raised when the caller's cancellation token fires during a run."""


class TooManyRoundsError(WorkflowError):
    """Raised when the sequential loop exceeds its round-trip cap."""

    def __init__(self, max_rounds: int) -> None:
        self.max_rounds = max_rounds
        super().__init__(
            f"Sequential run exceeded {max_rounds} inference/tool round trips"
        )
