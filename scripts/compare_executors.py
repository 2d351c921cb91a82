#!/usr/bin/env python3
"""
Compare the sequential runner with the parallel driver on a simulated workload.

The scripted model requests N independent tool calls on its first turn and
answers once it sees their results. Both modes see identical latencies.

Usage examples:
  PYTHONPATH=src python scripts/compare_executors.py
  PYTHONPATH=src python scripts/compare_executors.py --tools 8 --tool-latency-ms 200 --json
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import time

from pydantic import BaseModel, Field

from toolgraph.core import ExecutionEventLog, WorkflowEngine, WorkflowSettings
from toolgraph.llms import LLMResponse, Message, ScriptedInferenceClient, ToolCall
from toolgraph.observability import (
    ConsoleTimelineExporter,
    JSONRunMetricsExporter,
    project_run_metrics,
)
from toolgraph.tools import ToolRegistry, tool


class SleepArgs(BaseModel):
    label: str
    latency_ms: float = Field(default=100.0, ge=0)


@tool(args_model=SleepArgs, name="sleep", description="Wait, then echo the label.")
async def sleep_tool(args: SleepArgs) -> dict[str, str]:
    await asyncio.sleep(args.latency_ms / 1000.0)
    return {"label": args.label, "status": "done"}


def _has_tool_results(messages: list[Message]) -> bool:
    for message in messages:
        if isinstance(message.content, list) and any(
            part["type"] == "tool_result" for part in message.content
        ):
            return True
    return False


def build_client(*, num_tools: int, tool_latency_ms: float, llm_latency_ms: float):
    def responder(messages, tools):
        if _has_tool_results(messages):
            return LLMResponse(text=f"Collected {num_tools} results.")
        return LLMResponse(
            tool_calls=[
                ToolCall(
                    id=str(i),
                    tool_name="sleep",
                    arguments={"label": f"job-{i}", "latency_ms": tool_latency_ms},
                )
                for i in range(num_tools)
            ]
        )

    return ScriptedInferenceClient(responder=responder, latency_s=llm_latency_ms / 1000.0)


async def run_comparison(
    *,
    num_tools: int,
    tool_latency_ms: float,
    llm_latency_ms: float,
    max_parallelism: int | None,
    as_json: bool,
) -> None:
    registry = ToolRegistry()
    registry.register(sleep_tool)
    settings = WorkflowSettings(max_parallelism=max_parallelism)
    prompt = f"Run {num_tools} jobs and report."

    for mode in ("sequential", "parallel"):
        client = build_client(
            num_tools=num_tools,
            tool_latency_ms=tool_latency_ms,
            llm_latency_ms=llm_latency_ms,
        )
        engine = WorkflowEngine(client, registry, settings=settings)
        events = ExecutionEventLog()
        started = time.monotonic()
        if mode == "parallel":
            text = await engine.run_prompt(prompt, events=events)
        else:
            text = await engine.run_prompt_sequentially(prompt, events=events)
        elapsed_ms = (time.monotonic() - started) * 1000

        metrics = project_run_metrics(events.events(), run_id=mode, mode=mode)
        if as_json:
            JSONRunMetricsExporter().export(metrics, events.events())
        else:
            ConsoleTimelineExporter().export(metrics, events.events())
            print(f"{mode}: {elapsed_ms:.0f}ms, output={text!r}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sequential vs parallel comparison")
    parser.add_argument("--tools", type=int, default=4)
    parser.add_argument("--tool-latency-ms", type=float, default=100.0)
    parser.add_argument("--llm-latency-ms", type=float, default=50.0)
    parser.add_argument("--max-parallelism", type=int, default=None)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    asyncio.run(
        run_comparison(
            num_tools=args.tools,
            tool_latency_ms=args.tool_latency_ms,
            llm_latency_ms=args.llm_latency_ms,
            max_parallelism=args.max_parallelism,
            as_json=args.json,
        )
    )


if __name__ == "__main__":
    main()
