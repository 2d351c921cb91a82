"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module implements the ToolRegistry for toolgraph.
It stores tools by name, resolves them for graph construction, executes them
with concurrency limiting and timeouts, and exports their declarations for
inference clients.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..llms.tool_export import to_function_tools
from ..llms.types import ToolDefinition
from .core.base import Tool, ToolContext, ToolResult
from .core.errors import (
    ToolAlreadyRegisteredError,
    ToolNotFoundError,
    ToolTimeoutError,
)


@dataclass(frozen=True, slots=True)
class ToolCallRecord:
    tool_name: str
    started_at_s: float
    ended_at_s: float
    ok: bool
    error: Optional[str] = None
    tool_call_id: Optional[str] = None


class ToolRegistry:
    """
    Stores tools by name and provides safe async execution with:
      - concurrency limiting
      - registry-level default timeout
      - call records for diagnostics
      - function-tool declaration export
    """

    def __init__(
        self,
        *,
        max_concurrency: int = 32,
        default_timeout: float | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")

        self._tools: Dict[str, Tool[Any, Any]] = {}
        self._max_concurrency = max_concurrency
        self._sem: asyncio.Semaphore | None = None
        self._default_timeout = default_timeout
        self._records: List[ToolCallRecord] = []

    # ''''''''''''
    # Registration
    # ''''''''''''

    def register(self, tool: Tool[Any, Any], *, overwrite: bool = False) -> None:
        name = tool.spec.name
        if not overwrite and name in self._tools:
            raise ToolAlreadyRegisteredError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def register_many(self, tools: Iterable[Tool[Any, Any]], *, overwrite: bool = False) -> None:
        for t in tools:
            self.register(t, overwrite=overwrite)

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    def get(self, name: str) -> Tool[Any, Any]:
        try:
            return self._tools[name]
        except KeyError as e:
            raise ToolNotFoundError(f"Tool {name} not found") from e

    def lookup(self, name: str) -> Tool[Any, Any] | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    # '''''''''
    # Execution
    # '''''''''

    def _semaphore(self) -> asyncio.Semaphore:
        # Created lazily so a registry can be built outside a running loop.
        if self._sem is None:
            self._sem = asyncio.Semaphore(self._max_concurrency)
        return self._sem

    async def call(
        self,
        name: str,
        raw_args: Dict[str, Any],
        *,
        ctx: ToolContext | None = None,
        timeout: float | None = None,
        tool_call_id: str | None = None,
    ) -> ToolResult[Any]:
        """
        Execute a registered tool by name.

        Timeout precedence:
          1) call(timeout=...)
          2) tool.default_timeout
          3) registry default_timeout
        """
        tool = self.get(name)
        ctx = ctx or ToolContext()
        started = time.time()

        async with self._semaphore():
            effective_timeout = (
                timeout
                if timeout is not None
                else (tool.default_timeout if tool.default_timeout is not None else self._default_timeout)
            )

            try:
                try:
                    res = await tool.call(
                        raw_args,
                        ctx=ctx,
                        timeout=effective_timeout,
                        tool_call_id=tool_call_id,
                    )
                except asyncio.TimeoutError as e:
                    raise ToolTimeoutError(
                        f"Tool '{name}' timed out after {effective_timeout} seconds."
                    ) from e
            except Exception as e:
                self._records.append(
                    ToolCallRecord(
                        tool_name=name,
                        started_at_s=started,
                        ended_at_s=time.time(),
                        ok=False,
                        error="timeout" if isinstance(e, ToolTimeoutError) else str(e),
                        tool_call_id=tool_call_id,
                    )
                )
                raise

            self._records.append(
                ToolCallRecord(
                    tool_name=name,
                    started_at_s=started,
                    ended_at_s=time.time(),
                    ok=res.success,
                    error=res.error_message,
                    tool_call_id=tool_call_id,
                )
            )
            return res

    # '''''''''''''
    # Observability
    # '''''''''''''

    def recent_calls(self, limit: int = 100) -> List[ToolCallRecord]:
        return self._records[-limit:]

    # ''''''
    # Export
    # ''''''

    def declarations(self) -> List[ToolDefinition]:
        """
        Export registry tools as function-tool declarations:
        [
          {"type":"function","function":{"name":...,"description":...,"parameters":...}},
          ...
        ]
        """
        return to_function_tools(self._tools.values())

