from __future__ import annotations

import asyncio
import gc
import time

import pytest
from pydantic import BaseModel

from toolgraph.core import (
    CancellationToken,
    ExecutionEventLog,
    GraphBuilder,
    InferenceFailedError,
    NodeExecutionError,
    OperationCancelledError,
    OperationTimedOutError,
    ParallelScheduler,
    ToolExecutionFailedError,
    WorkflowGraph,
    WorkflowNode,
)
from toolgraph.llms import LLMResponse, ScriptedInferenceClient, ToolCall
from toolgraph.tools import ToolRegistry, tool


def run_async(coro):
    return asyncio.run(coro)


class SleepArgs(BaseModel):
    label: str
    delay_s: float = 0.05
    fail: bool = False


@tool(args_model=SleepArgs, name="sleep", description="Sleep then echo label")
async def sleep_tool(args: SleepArgs) -> dict:
    await asyncio.sleep(args.delay_s)
    if args.fail:
        raise RuntimeError(f"{args.label} broke")
    return {"label": args.label}


def _registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(sleep_tool)
    return registry


def _node(node_id, *, delay=0.0, deps=(), error=None, kind="tool", seen=None):
    async def work(upstream):
        if seen is not None:
            seen[node_id] = dict(upstream)
        await asyncio.sleep(delay)
        if error is not None:
            raise error
        return f"{node_id}-out"

    return WorkflowNode(
        node_id=node_id, kind=kind, work=work, depends_on=tuple(deps), context=node_id
    )


def _diamond() -> WorkflowGraph:
    graph = WorkflowGraph("diamond")
    graph.add_node(_node("root", delay=0.01))
    graph.add_node(_node("left", delay=0.02, deps=["root"]))
    graph.add_node(_node("right", delay=0.01, deps=["root"]))
    graph.add_node(_node("join", delay=0.01, deps=["left", "right"], kind="inference"))
    return graph


def test_result_keys_match_added_nodes():
    results = run_async(ParallelScheduler().run(_diamond()))

    assert set(results) == {"root", "left", "right", "join"}
    assert results["join"] == "join-out"


def test_dependents_start_after_dependencies_end():
    events = ExecutionEventLog()
    graph = _diamond()
    run_async(ParallelScheduler().run(graph, events=events))

    by_name = events.by_name()
    assert len(events) == 4
    for node in graph:
        for dep in node.depends_on:
            assert by_name[node.node_id].started_at_s >= by_name[dep].ended_at_s


def test_upstream_results_are_passed_to_dependents():
    seen: dict[str, dict] = {}
    graph = WorkflowGraph()
    graph.add_node(_node("a", seen=seen))
    graph.add_node(_node("b", seen=seen))
    graph.add_node(_node("c", deps=["a", "b"], seen=seen))

    run_async(ParallelScheduler().run(graph))

    assert seen["a"] == {}
    assert seen["c"] == {"a": "a-out", "b": "b-out"}


def test_independent_tool_nodes_overlap():
    registry = _registry()
    events = ExecutionEventLog()

    async def scenario():
        builder = GraphBuilder(ScriptedInferenceClient(), registry)
        builder.add_tool_node(ToolCall(id="a", tool_name="sleep", arguments={"label": "a"}))
        builder.add_tool_node(ToolCall(id="b", tool_name="sleep", arguments={"label": "b"}))
        started = time.monotonic()
        results = await ParallelScheduler().run(builder.build(), events=events)
        return results, time.monotonic() - started

    results, elapsed = run_async(scenario())

    assert elapsed < 0.09
    assert results["tool_a"].output == {"label": "a"}
    first, second = events.events()
    assert first.overlaps(second)


def test_max_parallelism_serializes_ready_nodes():
    events = ExecutionEventLog()
    graph = WorkflowGraph()
    for name in ("a", "b", "c"):
        graph.add_node(_node(name, delay=0.02))

    run_async(ParallelScheduler(max_parallelism=1).run(graph, events=events))

    rows = events.events()
    assert [row.name for row in rows] == ["a", "b", "c"]
    for earlier, later in zip(rows, rows[1:]):
        assert not earlier.overlaps(later)


def test_failure_aborts_run_and_skips_dependents():
    events = ExecutionEventLog()
    graph = WorkflowGraph()
    graph.add_node(_node("slow", delay=0.3))
    graph.add_node(_node("boom", delay=0.01, error=RuntimeError("kaput")))
    graph.add_node(_node("after", deps=["boom"]))

    async def scenario():
        started = time.monotonic()
        with pytest.raises(NodeExecutionError) as excinfo:
            await ParallelScheduler().run(graph, events=events)
        return excinfo.value, time.monotonic() - started

    error, elapsed = run_async(scenario())

    assert error.node_id == "boom"
    assert "kaput" in str(error)
    assert elapsed < 0.25
    by_name = events.by_name()
    assert "after" not in by_name
    assert by_name["boom"].status == "error"
    assert by_name["slow"].status == "cancelled"


def test_failure_without_sibling_cancellation_leaves_siblings_running():
    events = ExecutionEventLog()
    graph = WorkflowGraph()
    graph.add_node(_node("slow", delay=0.1))
    graph.add_node(_node("boom", error=RuntimeError("kaput")))

    async def scenario():
        with pytest.raises(NodeExecutionError):
            await ParallelScheduler(cancel_on_failure=False).run(graph, events=events)
        await asyncio.sleep(0.2)

    run_async(scenario())

    assert events.by_name()["slow"].status == "ok"


def test_abandoned_sibling_failure_is_retrieved_without_loop_errors():
    events = ExecutionEventLog()
    graph = WorkflowGraph()
    graph.add_node(_node("late", delay=0.05, error=ValueError("late failure")))
    graph.add_node(_node("boom", error=RuntimeError("kaput")))

    async def scenario():
        loop = asyncio.get_running_loop()
        reported = []
        loop.set_exception_handler(lambda _, context: reported.append(context))
        with pytest.raises(NodeExecutionError, match="kaput"):
            await ParallelScheduler(cancel_on_failure=False).run(graph, events=events)
        await asyncio.sleep(0.15)
        gc.collect()
        return reported

    reported = run_async(scenario())

    assert reported == []
    assert events.by_name()["late"].status == "error"


def test_tool_failure_surfaces_typed_error_with_node_context():
    registry = _registry()

    async def scenario():
        builder = GraphBuilder(ScriptedInferenceClient(), registry)
        builder.add_tool_node(
            ToolCall(id="bad", tool_name="sleep", arguments={"label": "x", "fail": True})
        )
        await ParallelScheduler().run(builder.build())

    with pytest.raises(ToolExecutionFailedError) as excinfo:
        run_async(scenario())

    assert excinfo.value.node_id == "tool_bad"
    assert excinfo.value.tool_name == "sleep"
    assert "x broke" in str(excinfo.value)


def test_inference_failure_is_classified():
    client = ScriptedInferenceClient(script=[ConnectionError("quota exceeded")])

    async def scenario():
        builder = GraphBuilder(client, ToolRegistry())
        builder.add_inference_node("hi")
        await ParallelScheduler().run(builder.build())

    with pytest.raises(InferenceFailedError) as excinfo:
        run_async(scenario())

    assert excinfo.value.node_id == "inference_0"
    assert excinfo.value.classification == "ConnectionError"


def test_operation_timeout_is_reported():
    events = ExecutionEventLog()
    graph = WorkflowGraph()
    graph.add_node(_node("stuck", delay=0.5))

    with pytest.raises(OperationTimedOutError) as excinfo:
        run_async(ParallelScheduler(operation_timeout_s=0.05).run(graph, events=events))

    assert excinfo.value.node_id == "stuck"
    assert excinfo.value.timeout_s == 0.05
    assert events.by_name()["stuck"].status == "error"


def test_timeout_error_raised_by_the_work_is_not_a_deadline_expiry():
    graph = WorkflowGraph()
    graph.add_node(_node("flaky", error=TimeoutError("backend slow")))

    with pytest.raises(NodeExecutionError) as excinfo:
        run_async(ParallelScheduler(operation_timeout_s=5.0).run(graph))

    assert not isinstance(excinfo.value, OperationTimedOutError)
    assert excinfo.value.node_id == "flaky"
    assert "TimeoutError: backend slow" in str(excinfo.value)


def test_caller_cancellation_stops_the_run():
    events = ExecutionEventLog()
    graph = WorkflowGraph()
    graph.add_node(_node("a", delay=0.5))
    graph.add_node(_node("b", delay=0.5))

    async def scenario():
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.02, token.cancel, "user abort")
        await ParallelScheduler().run(graph, events=events, cancel=token)

    with pytest.raises(OperationCancelledError, match="user abort"):
        run_async(scenario())

    assert {event.status for event in events.events()} == {"cancelled"}


def test_follow_up_inference_receives_tool_results():
    registry = _registry()
    client = ScriptedInferenceClient(script=[LLMResponse(text="summary")])

    async def scenario():
        builder = GraphBuilder(client, registry)
        a = builder.add_tool_node(ToolCall(id="a", tool_name="sleep", arguments={"label": "a", "delay_s": 0}))
        b = builder.add_tool_node(ToolCall(id="b", tool_name="sleep", arguments={"label": "b", "delay_s": 0}))
        final = builder.add_inference_node("summarize", [a, b])
        results = await ParallelScheduler().run(builder.build())
        return results[final]

    response = run_async(scenario())

    assert response.text == "summary"
    messages = client.calls[0].messages
    assert [part["tool_use_id"] for part in messages[0].content] == ["a", "b"]
    assert messages[0].content[0]["content"] == '{"label": "a"}'
    assert messages[-1].content == "summarize"


def test_rerun_of_equivalent_graph_has_same_keys():
    first = run_async(ParallelScheduler().run(_diamond()))
    second = run_async(ParallelScheduler().run(_diamond()))

    assert list(first) == list(second)


def test_empty_graph_returns_empty_mapping():
    assert run_async(ParallelScheduler().run(WorkflowGraph())) == {}


def test_invalid_parallelism_is_rejected():
    with pytest.raises(ValueError):
        ParallelScheduler(max_parallelism=0)
