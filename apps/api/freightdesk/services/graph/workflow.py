"""LangGraph workflow definition for the shipment assistant.

Two working states: ``plan`` (waiting on the planner) and ``act`` (running
the tool calls it asked for). The graph ends when the planner answers in
plain text, or via ``give_up`` once the iteration cap is reached.

    plan ──tools──▶ act ──▶ plan
      │
      ├──text──▶ END
      └──cap───▶ give_up ──▶ END
"""

import logging
from typing import Any

from langgraph.graph import END, StateGraph

from freightdesk.core.config import settings
from freightdesk.services.graph.nodes import act_node, give_up_node, plan_node
from freightdesk.services.graph.planner import Planner
from freightdesk.services.graph.prompts import SYSTEM_PROMPT
from freightdesk.services.graph.router import route_after_plan
from freightdesk.services.graph.state import AgentState
from freightdesk.services.shipment_tools import ShipmentToolExecutor

logger = logging.getLogger(__name__)


def recursion_limit_for(max_iterations: int) -> int:
    """LangGraph step budget that never trips before our own cap does."""
    # Each round is plan + act, plus the final plan and give_up/END.
    return 2 * max_iterations + 5


def create_shipment_agent_graph(
    planner: Planner,
    executor: ShipmentToolExecutor,
    max_iterations: int | None = None,
    system: str = SYSTEM_PROMPT,
) -> Any:
    """Build and compile the plan/act workflow.

    Args:
        planner: Chooses tool calls or answers
        executor: Runs tool calls for the requesting owner
        max_iterations: Safety cap on act rounds (defaults to settings)
        system: System instruction sent with every planner call

    Returns:
        Compiled LangGraph workflow
    """
    limit = settings.max_tool_iterations if max_iterations is None else max_iterations

    async def _plan(state: AgentState) -> dict[str, Any]:
        return await plan_node(state, planner, system=system)

    async def _act(state: AgentState) -> dict[str, Any]:
        return await act_node(state, executor)

    def _route(state: AgentState) -> str:
        return route_after_plan(state, max_iterations=limit)

    graph = StateGraph(AgentState)

    graph.add_node("plan", _plan)
    graph.add_node("act", _act)
    graph.add_node("give_up", give_up_node)

    graph.set_entry_point("plan")

    graph.add_conditional_edges(
        "plan",
        _route,
        {
            "act": "act",
            "give_up": "give_up",
            "finish": END,
        },
    )

    graph.add_edge("act", "plan")
    graph.add_edge("give_up", END)

    return graph.compile()
