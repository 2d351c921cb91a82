from __future__ import annotations

import asyncio
from itertools import combinations

import pytest
from pydantic import BaseModel

from toolgraph.core import (
    ExecutionEventLog,
    SequentialRunner,
    ToolExecutionFailedError,
    TooManyRoundsError,
    run_prompt_sequentially,
)
from toolgraph.llms import LLMResponse, ScriptedInferenceClient, ToolCall
from toolgraph.tools import ToolRegistry, ToolResult, tool


def run_async(coro):
    return asyncio.run(coro)


class DummyArgs(BaseModel):
    pass


@tool(args_model=DummyArgs, name="dummy", description="dummy tool")
async def dummy(args: DummyArgs) -> ToolResult:
    return ToolResult(success=True, output={"text": "tool"}, display="done")


class NapArgs(BaseModel):
    seconds: float = 0.03
    fail: bool = False


@tool(args_model=NapArgs, name="nap", description="Sleep for a while")
async def nap(args: NapArgs) -> str:
    await asyncio.sleep(args.seconds)
    if args.fail:
        raise ValueError("nap interrupted")
    return "rested"


def _registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register_many([dummy, nap])
    return registry


def test_two_round_interaction_is_strictly_serialized():
    client = ScriptedInferenceClient(
        script=[
            LLMResponse(tool_calls=[ToolCall(id="1", tool_name="dummy", arguments={})]),
            LLMResponse(text="final"),
        ],
        latency_s=0.01,
    )
    events = ExecutionEventLog()

    result = run_async(
        run_prompt_sequentially(client, _registry(), "prompt", events=events)
    )

    assert result == "final"
    rows = events.events()
    assert [e.kind for e in rows] == ["inference", "tool", "inference"]
    assert [e.name for e in rows] == ["round_0", "tool_1", "round_1"]
    for a, b in combinations(rows, 2):
        assert not a.overlaps(b)
    assert rows[0].context == "prompt"
    assert rows[2].context == "tool_result:1"


def test_tools_within_a_round_run_one_at_a_time():
    calls = [ToolCall(id=str(i), tool_name="nap", arguments={"seconds": 0.03}) for i in range(3)]
    client = ScriptedInferenceClient(
        script=[LLMResponse(tool_calls=calls), LLMResponse(text="done")]
    )
    events = ExecutionEventLog()

    run_async(SequentialRunner(client, _registry()).run("go", events=events))

    tools = [e for e in events.events() if e.kind == "tool"]
    assert [e.name for e in tools] == ["tool_0", "tool_1", "tool_2"]
    for a, b in combinations(tools, 2):
        assert not a.overlaps(b)


def test_each_round_sends_the_growing_conversation():
    client = ScriptedInferenceClient(
        script=[
            LLMResponse(tool_calls=[ToolCall(id="1", tool_name="dummy", arguments={})]),
            LLMResponse(text="final"),
        ]
    )

    run_async(SequentialRunner(client, _registry()).run("prompt"))

    first, second = client.calls
    assert [m.role for m in first.messages] == ["user"]
    assert [m.role for m in second.messages] == ["user", "assistant", "user"]
    assert second.messages[2].content[0]["tool_use_id"] == "1"
    assert first.tools is not None and second.tools is not None


def test_final_text_comes_from_the_response_without_tool_requests():
    client = ScriptedInferenceClient(
        script=[
            LLMResponse(
                text="let me check",
                tool_calls=[ToolCall(id="1", tool_name="dummy", arguments={})],
            ),
            LLMResponse(text="answer"),
        ]
    )

    assert run_async(SequentialRunner(client, _registry()).run("q")) == "answer"


def test_round_cap_raises_too_many_rounds():
    client = ScriptedInferenceClient(
        responder=lambda messages, tools: LLMResponse(
            tool_calls=[ToolCall(tool_name="dummy", arguments={})]
        )
    )
    events = ExecutionEventLog()

    with pytest.raises(TooManyRoundsError) as excinfo:
        run_async(SequentialRunner(client, _registry(), max_rounds=3).run("loop", events=events))

    assert excinfo.value.max_rounds == 3
    assert client.call_count == 3
    assert [e.name for e in events.events() if e.kind == "tool"] == [
        "tool_dummy-0",
        "tool_dummy-1",
        "tool_dummy-2",
    ]


def test_tool_failure_aborts_the_loop():
    client = ScriptedInferenceClient(
        script=[
            LLMResponse(
                tool_calls=[
                    ToolCall(id="a", tool_name="nap", arguments={"seconds": 0, "fail": True}),
                    ToolCall(id="b", tool_name="nap", arguments={"seconds": 0}),
                ]
            ),
        ]
    )
    events = ExecutionEventLog()

    with pytest.raises(ToolExecutionFailedError) as excinfo:
        run_async(SequentialRunner(client, _registry()).run("go", events=events))

    assert excinfo.value.node_id == "tool_a"
    assert "nap interrupted" in str(excinfo.value)
    assert [e.name for e in events.events()] == ["round_0", "tool_a"]
    assert client.call_count == 1


def test_tool_requests_without_ids_get_matching_generated_ids():
    client = ScriptedInferenceClient(
        script=[
            LLMResponse(
                tool_calls=[
                    ToolCall(tool_name="dummy", arguments={}),
                    ToolCall(tool_name="dummy", arguments={}),
                ]
            ),
            LLMResponse(tool_calls=[ToolCall(tool_name="dummy", arguments={})]),
            LLMResponse(text="final"),
        ]
    )

    run_async(SequentialRunner(client, _registry()).run("prompt"))

    messages = client.calls[2].messages
    assistants = [m for m in messages if m.role == "assistant"]
    use_ids = [p["id"] for m in assistants for p in m.content if p["type"] == "tool_use"]
    result_ids = [
        p["tool_use_id"]
        for m in messages
        if m.role == "user" and isinstance(m.content, list)
        for p in m.content
    ]
    assert use_ids == ["dummy-0", "dummy-1", "dummy-2"]
    assert result_ids == use_ids
