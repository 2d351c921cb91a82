"""
parallel_tools.py — Hand-wired graph with fan-out and fan-in.

Two lookups run concurrently, a summary inference waits for both, and a
final inference depends on the summary. Uses the scripted client so it runs
offline.

Usage:
    PYTHONPATH=src python examples/parallel_tools.py
"""

import asyncio

from pydantic import BaseModel

from toolgraph import (
    ExecutionEventLog,
    LLMResponse,
    ScriptedInferenceClient,
    ToolCall,
    ToolRegistry,
    WorkflowEngine,
    render_timeline,
    tool,
)


class CityArgs(BaseModel):
    city: str


@tool(args_model=CityArgs, name="weather", description="Current weather for a city.")
async def weather(args: CityArgs) -> dict[str, str]:
    await asyncio.sleep(0.2)
    return {"city": args.city, "forecast": "sunny"}


async def main() -> None:
    registry = ToolRegistry()
    registry.register(weather)
    client = ScriptedInferenceClient(
        script=[
            LLMResponse(text="Both cities are sunny."),
            LLMResponse(text="Pack sunglasses."),
        ],
        latency_s=0.1,
    )
    engine = WorkflowEngine(client, registry)

    builder = engine.new_builder()
    paris = builder.add_tool_node(ToolCall(id="paris", tool_name="weather", arguments={"city": "Paris"}))
    rome = builder.add_tool_node(ToolCall(id="rome", tool_name="weather", arguments={"city": "Rome"}))
    summary = builder.add_inference_node("Summarize the weather.", [paris, rome])
    advice = builder.add_inference_node("What should I pack?", [summary])

    events = ExecutionEventLog()
    results = await engine.run_graph(builder.build(), events=events)
    print(f"Answer: {results[advice].text}")
    print(render_timeline(events.events()))


if __name__ == "__main__":
    asyncio.run(main())
