"""Chat service driving the shipment assistant's tool loop."""

import logging

from langchain_core.messages import HumanMessage
from sqlalchemy.ext.asyncio import AsyncSession

from freightdesk.core.config import settings
from freightdesk.core.errors import PlannerError
from freightdesk.schemas.chat import ChatResponse, ToolCallRecord
from freightdesk.services.graph.planner import OpenAIPlanner, Planner
from freightdesk.services.graph.prompts import FALLBACK_RESPONSE
from freightdesk.services.graph.workflow import create_shipment_agent_graph, recursion_limit_for
from freightdesk.services.shipment_service import ShipmentService
from freightdesk.services.shipment_tools import ShipmentToolExecutor

logger = logging.getLogger(__name__)


class ChatService:
    """Turns one user message into tool calls and a final answer.

    History lives only for the duration of ``process_message``: every call
    starts from the single new user message.
    """

    def __init__(
        self,
        db: AsyncSession,
        planner: Planner | None = None,
        max_iterations: int | None = None,
    ) -> None:
        self.db = db
        self.planner = planner or OpenAIPlanner()
        self.max_iterations = (
            settings.max_tool_iterations if max_iterations is None else max_iterations
        )

    async def process_message(self, owner_id: str, message: str) -> ChatResponse:
        """Run the plan/act loop for one message.

        Args:
            owner_id: The user whose shipments the assistant may read and change
            message: The user's natural-language request

        Returns:
            The final answer and the tool calls made to produce it

        Raises:
            PlannerError: If the planner call fails at any point in the loop
        """
        executor = ShipmentToolExecutor(ShipmentService(self.db), owner_id)
        graph = create_shipment_agent_graph(
            self.planner, executor, max_iterations=self.max_iterations
        )

        initial_state = {
            "messages": [HumanMessage(content=message)],
            "owner_id": owner_id,
            "iterations": 0,
            "final_response": "",
            "tool_calls_record": [],
            "tool_results_record": [],
        }

        try:
            final_state = await graph.ainvoke(
                initial_state,
                config={"recursion_limit": recursion_limit_for(self.max_iterations)},
            )
        except PlannerError:
            raise
        except Exception as e:
            logger.exception("Chat loop failed for owner %s", owner_id)
            raise PlannerError(str(e) or "Chat failed") from e

        # act_node appends calls and results in lockstep; ids may be missing or repeated.
        tools_used = [
            ToolCallRecord(
                id=tc["id"] or "",
                name=tc["name"],
                args=tc["args"] or {},
                result=r["result"],
            )
            for tc, r in zip(
                final_state.get("tool_calls_record") or [],
                final_state.get("tool_results_record") or [],
            )
        ]

        logger.info(
            "Chat turn finished: owner=%s, iterations=%d, tools=%s",
            owner_id,
            final_state.get("iterations", 0),
            [t.name for t in tools_used],
        )

        return ChatResponse(
            response=final_state.get("final_response") or FALLBACK_RESPONSE,
            tools_used=tools_used,
        )
