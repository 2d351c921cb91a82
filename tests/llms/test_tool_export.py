from __future__ import annotations

from pydantic import BaseModel

from toolgraph.llms.tool_export import to_function_tools, toolspec_to_function_tool
from toolgraph.tools import ToolSpec, tool


class EchoArgs(BaseModel):
    text: str
    times: int = 1


class NoArgs(BaseModel):
    pass


@tool(args_model=EchoArgs, name="echo", description="Echo text")
def echo(args: EchoArgs) -> str:
    return args.text * args.times


@tool(args_model=NoArgs, name="ping", description="Ping")
def ping(args: NoArgs) -> str:
    return "pong"


def test_toolspec_to_function_tool_maps_core_fields():
    mapped = toolspec_to_function_tool(echo.spec)

    assert mapped["type"] == "function"
    assert mapped["function"]["name"] == "echo"
    assert mapped["function"]["description"] == "Echo text"
    params = mapped["function"]["parameters"]
    assert params["type"] == "object"
    assert params["required"] == ["text"]
    assert set(params["properties"]) == {"text", "times"}
    assert "title" not in params


def test_argument_free_tool_still_declares_an_object():
    [declaration] = to_function_tools([ping])

    assert declaration["function"]["parameters"] == {"type": "object", "properties": {}}


def test_bare_spec_without_schema_gets_empty_object_parameters():
    spec = ToolSpec(name="noop", description="Nothing")

    assert toolspec_to_function_tool(spec)["function"]["parameters"] == {
        "type": "object",
        "properties": {},
    }


def test_to_function_tools_keeps_order():
    names = [d["function"]["name"] for d in to_function_tools([ping, echo])]

    assert names == ["ping", "echo"]
