"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Tool primitives: spec, call context, result envelope and the executable Tool.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import json
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ToolValidationError

if TYPE_CHECKING:
    from ...core.cancellation import CancellationToken

ArgsT = TypeVar("ArgsT", bound=BaseModel)
OutT = TypeVar("OutT")

ToolFn = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Name, description and JSON schema advertised to the model."""

    name: str
    description: str
    parameters_schema: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ToolContext:
    """Per-call context handed to tool handlers that accept it."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    metadata: dict[str, Any] = field(default_factory=dict)
    cancel: "CancellationToken | None" = None


@dataclass(frozen=True, slots=True)
class ToolResult(Generic[OutT]):
    """
    Result envelope for one tool call.

    `output` is the structured payload fed back to the model; `display` is a
    short human-readable summary.
    """

    success: bool
    output: OutT | None = None
    display: str = ""
    error_message: str | None = None
    tool_name: str | None = None
    tool_call_id: str | None = None

    def content_for_model(self) -> str:
        """Render the payload as text suitable for a tool_result message part."""
        if not self.success:
            return self.error_message or "tool failed"
        if self.output is None:
            return self.display
        if isinstance(self.output, str):
            return self.output
        if isinstance(self.output, BaseModel):
            return self.output.model_dump_json()
        return json.dumps(self.output, default=str, sort_keys=True)


def as_async(fn: ToolFn) -> Callable[..., Awaitable[Any]]:
    """Wrap a sync callable so it runs in a worker thread."""
    if inspect.iscoroutinefunction(fn):
        return fn

    @functools.wraps(fn)
    async def _runner(*args: Any, **kwargs: Any) -> Any:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _runner


def _accepts_context(fn: ToolFn) -> bool:
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return False
    return len(params) >= 2 or any(p.name == "ctx" for p in params)


class Tool(Generic[ArgsT, OutT]):
    """
    Executable tool: validates raw arguments with a pydantic model, then
    awaits the handler.

    Handler exceptions are captured into a failed `ToolResult`; argument
    validation failures raise `ToolValidationError`.
    """

    def __init__(
        self,
        *,
        spec: ToolSpec,
        fn: ToolFn,
        args_model: type[ArgsT],
        default_timeout: float | None = None,
    ) -> None:
        self.spec = spec
        self.args_model = args_model
        self.default_timeout = default_timeout
        self._fn = fn
        self._call = as_async(fn)
        self._wants_ctx = _accepts_context(fn)

    def __repr__(self) -> str:
        return f"Tool(name={self.spec.name!r})"

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._fn(*args, **kwargs)

    def validate(self, raw_args: dict[str, Any]) -> ArgsT:
        try:
            return self.args_model.model_validate(raw_args or {})
        except ValidationError as e:
            raise ToolValidationError(
                f"Invalid arguments for tool '{self.spec.name}': {e}"
            ) from e

    async def call(
        self,
        raw_args: dict[str, Any],
        *,
        ctx: ToolContext | None = None,
        timeout: float | None = None,
        tool_call_id: str | None = None,
    ) -> ToolResult[OutT]:
        args = self.validate(raw_args)
        ctx = ctx or ToolContext()
        effective_timeout = timeout if timeout is not None else self.default_timeout

        try:
            if self._wants_ctx:
                pending = self._call(args, ctx)
            else:
                pending = self._call(args)
            if effective_timeout is None:
                value = await pending
            else:
                value = await asyncio.wait_for(pending, timeout=effective_timeout)
        except asyncio.TimeoutError:
            raise
        except Exception as e:
            return ToolResult(
                success=False,
                error_message=f"{type(e).__name__}: {e}",
                tool_name=self.spec.name,
                tool_call_id=tool_call_id,
            )

        if isinstance(value, ToolResult):
            return ToolResult(
                success=value.success,
                output=value.output,
                display=value.display,
                error_message=value.error_message,
                tool_name=value.tool_name or self.spec.name,
                tool_call_id=value.tool_call_id or tool_call_id,
            )
        return ToolResult(
            success=True,
            output=value,
            display=value if isinstance(value, str) else "",
            tool_name=self.spec.name,
            tool_call_id=tool_call_id,
        )
