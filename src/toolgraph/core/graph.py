"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dependency graph model: nodes with explicit dependencies and bound units of work.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, Mapping

from .errors import (
    CycleDetectedError,
    DuplicateNodeError,
    GraphSealedError,
    UnknownDependencyError,
)
from .telemetry import NodeKind

# A unit of work receives the results of its declared dependencies.
NodeWork = Callable[[Mapping[str, Any]], Awaitable[Any]]

WorkflowResult = dict[str, Any]


@dataclass(frozen=True, slots=True)
class WorkflowNode:
    """One schedulable operation and the nodes it must wait for."""

    node_id: str
    kind: NodeKind
    work: NodeWork
    depends_on: tuple[str, ...] = ()
    context: str = ""


class WorkflowGraph:
    """
    Node table plus per-kind id counters.

    Written only while building; `seal()` freezes it for execution.
    """

    def __init__(self, name: str = "workflow") -> None:
        self.name = name
        self._nodes: dict[str, WorkflowNode] = {}
        self._counters: dict[str, int] = {}
        self._sealed = False

    def peek_index(self, prefix: str) -> int:
        return self._counters.get(prefix, 0)

    def next_index(self, prefix: str) -> int:
        index = self._counters.get(prefix, 0)
        self._counters[prefix] = index + 1
        return index

    def check_dependencies(self, node_id: str, depends_on: tuple[str, ...]) -> None:
        """Validate a prospective node without registering it."""
        if self._sealed:
            raise GraphSealedError(
                f"Graph '{self.name}' is sealed; cannot add node '{node_id}'"
            )
        if node_id in depends_on:
            raise CycleDetectedError(f"Node '{node_id}' cannot depend on itself")
        missing = [dep for dep in depends_on if dep not in self._nodes]
        if missing:
            raise UnknownDependencyError(
                f"Node '{node_id}' depends on unknown node(s): {', '.join(missing)}"
            )
        if node_id in self._nodes:
            raise DuplicateNodeError(f"Duplicate node_id '{node_id}' in graph")

    def add_node(self, node: WorkflowNode) -> str:
        depends_on = tuple(dict.fromkeys(node.depends_on))
        self.check_dependencies(node.node_id, depends_on)
        if depends_on != node.depends_on:
            node = WorkflowNode(
                node_id=node.node_id,
                kind=node.kind,
                work=node.work,
                depends_on=depends_on,
                context=node.context,
            )
        self._nodes[node.node_id] = node
        return node.node_id

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, node_id: str) -> WorkflowNode:
        return self._nodes[node_id]

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def nodes(self) -> list[WorkflowNode]:
        return list(self._nodes.values())

    def dependents(self) -> dict[str, list[str]]:
        """Map each node to the nodes that wait on it, in insertion order."""
        children: dict[str, list[str]] = {node_id: [] for node_id in self._nodes}
        for node in self._nodes.values():
            for dep in node.depends_on:
                children[dep].append(node.node_id)
        return children

    def topological_order(self) -> list[str]:
        """Stable Kahn ordering; raises `CycleDetectedError` if one exists."""
        indegree = {node_id: len(node.depends_on) for node_id, node in self._nodes.items()}
        children = self.dependents()
        ready = [node_id for node_id, degree in indegree.items() if degree == 0]
        order: list[str] = []
        while ready:
            current = ready.pop(0)
            order.append(current)
            for child in children[current]:
                indegree[child] -= 1
                if indegree[child] == 0:
                    ready.append(child)

        if len(order) != len(self._nodes):
            stuck = sorted(node_id for node_id, degree in indegree.items() if degree > 0)
            raise CycleDetectedError(
                f"Graph '{self.name}' contains a cycle through: {', '.join(stuck)}"
            )
        return order

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[WorkflowNode]:
        return iter(self._nodes.values())
