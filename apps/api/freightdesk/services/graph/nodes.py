"""LangGraph node functions for the plan/act tool loop."""

import logging
from typing import Any

from langchain_core.messages import AIMessage, ToolMessage

from freightdesk.core.errors import PlannerError
from freightdesk.services.graph.planner import Planner
from freightdesk.services.graph.prompts import (
    FALLBACK_RESPONSE,
    ITERATION_LIMIT_RESPONSE,
    SYSTEM_PROMPT,
)
from freightdesk.services.graph.state import AgentState
from freightdesk.services.shipment_tools import ShipmentToolExecutor, to_openai_tools

logger = logging.getLogger(__name__)


def message_text(message: AIMessage) -> str:
    """Plain text of a model reply, whether content is a string or blocks."""
    content = message.content
    if isinstance(content, str):
        return content.strip()

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts).strip()


async def plan_node(
    state: AgentState,
    planner: Planner,
    system: str = SYSTEM_PROMPT,
) -> dict[str, Any]:
    """Ask the planner for the next step.

    A reply with tool calls is appended to history for the act node. A
    plain reply ends the loop and becomes the final answer.
    """
    try:
        response = await planner.plan(system, list(state["messages"]), to_openai_tools())
    except PlannerError:
        raise
    except Exception as e:
        logger.exception("Planner call failed")
        raise PlannerError(str(e) or "Chat failed") from e

    if response.tool_calls or response.invalid_tool_calls:
        logger.info(
            "Tool loop iteration %d: tool calls=%s",
            state.get("iterations", 0),
            [tc["name"] for tc in response.tool_calls],
        )
        return {"messages": [response]}

    logger.info(
        "Tool loop iteration %d: no tool calls, returning text response",
        state.get("iterations", 0),
    )
    return {
        "messages": [response],
        "final_response": message_text(response) or FALLBACK_RESPONSE,
    }


async def act_node(state: AgentState, executor: ShipmentToolExecutor) -> dict[str, Any]:
    """Run every tool call from the last planner reply, in the order emitted."""
    last = state["messages"][-1]
    if not isinstance(last, AIMessage):
        return {}

    calls_record = list(state.get("tool_calls_record") or [])
    results_record = list(state.get("tool_results_record") or [])
    observations: list[ToolMessage] = []

    for tc in last.tool_calls:
        calls_record.append({"id": tc["id"], "name": tc["name"], "args": tc["args"]})
        result = await executor.execute(tc["name"], tc["args"])
        results_record.append({"tool_call_id": tc["id"], "result": result})
        observations.append(
            ToolMessage(content=result, tool_call_id=tc["id"] or "", name=tc["name"])
        )

    # Arguments the model emitted as broken JSON still need an answer per call id.
    for bad in last.invalid_tool_calls:
        name = bad.get("name") or "unknown"
        reason = bad.get("error") or "invalid JSON"
        result = f"Error: could not parse arguments for {name}: {reason}"
        calls_record.append({"id": bad.get("id"), "name": name, "args": {}})
        results_record.append({"tool_call_id": bad.get("id"), "result": result})
        observations.append(
            ToolMessage(content=result, tool_call_id=bad.get("id") or "", name=name)
        )

    return {
        "messages": observations,
        "iterations": state.get("iterations", 0) + 1,
        "tool_calls_record": calls_record,
        "tool_results_record": results_record,
    }


async def give_up_node(state: AgentState) -> dict[str, Any]:
    """Stop a loop that hit the iteration cap."""
    logger.warning("Tool loop hit the iteration cap after %d rounds", state.get("iterations", 0))
    return {"final_response": ITERATION_LIMIT_RESPONSE}
