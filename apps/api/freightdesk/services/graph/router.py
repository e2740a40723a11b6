"""LangGraph conditional routing for the tool loop."""

from langchain_core.messages import AIMessage

from freightdesk.core.config import settings
from freightdesk.services.graph.state import AgentState


def wants_tools(message: object) -> bool:
    """True when the planner's reply asks for at least one tool call."""
    return isinstance(message, AIMessage) and bool(
        message.tool_calls or message.invalid_tool_calls
    )


def route_after_plan(
    state: AgentState,
    max_iterations: int | None = None,
) -> str:
    """Decide where to go after a planner call.

    Returns:
        "act" to run the requested tools, "give_up" when the iteration cap
        has been reached, or "finish" when the planner answered in text.
    """
    limit = settings.max_tool_iterations if max_iterations is None else max_iterations
    messages = state.get("messages") or []
    if not messages or not wants_tools(messages[-1]):
        return "finish"

    if state.get("iterations", 0) >= limit:
        return "give_up"

    return "act"
