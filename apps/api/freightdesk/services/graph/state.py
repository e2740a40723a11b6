"""LangGraph state for the shipment assistant's tool loop."""

from typing import Annotated, Any

from langchain_core.messages import BaseMessage
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict


class AgentState(TypedDict):
    """State that flows through the plan/act workflow.

    Attributes:
        messages: History for this request only (uses LangGraph's add_messages reducer)
        owner_id: User whose shipments the tools may touch
        iterations: Completed act rounds, checked against the iteration cap
        final_response: Answer text once the loop has terminated
        tool_calls_record: Every tool call the planner requested, in order
        tool_results_record: Observation text for each call, keyed by call id
    """

    messages: Annotated[list[BaseMessage], add_messages]
    owner_id: str
    iterations: int
    final_response: str
    tool_calls_record: list[dict[str, Any]]
    tool_results_record: list[dict[str, Any]]
