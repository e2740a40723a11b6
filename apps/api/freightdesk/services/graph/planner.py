"""Planner capability: given history and tools, return text or tool calls.

The tool loop only depends on the ``Planner`` protocol, so tests can drive
it with scripted replies instead of a live model.
"""

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from langchain_core.messages import AIMessage, BaseMessage, SystemMessage
from langchain_openai import ChatOpenAI

from freightdesk.core.config import settings

logger = logging.getLogger(__name__)


class Planner(Protocol):
    """Anything that can choose the next step of the conversation."""

    async def plan(
        self,
        system: str,
        messages: Sequence[BaseMessage],
        tools: Sequence[dict[str, Any]],
    ) -> AIMessage: ...


def _get_llm(model: str | None = None) -> ChatOpenAI:
    """Create a ChatOpenAI instance."""
    return ChatOpenAI(
        model=model or settings.chat_model,
        api_key=settings.openai_api_key,
        temperature=0.2,
        max_tokens=settings.max_response_tokens,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )


class OpenAIPlanner:
    """Planner backed by an OpenAI chat model with native tool calling."""

    def __init__(self, llm: Any | None = None) -> None:
        self.llm = llm or _get_llm()

    async def plan(
        self,
        system: str,
        messages: Sequence[BaseMessage],
        tools: Sequence[dict[str, Any]],
    ) -> AIMessage:
        bound_llm = self.llm.bind_tools(list(tools)) if tools else self.llm
        response = await bound_llm.ainvoke([SystemMessage(content=system), *messages])
        if not isinstance(response, AIMessage):
            raise TypeError(f"Planner returned {type(response).__name__}, expected AIMessage")
        return response


def get_planner() -> Planner:
    """FastAPI dependency; overridden in tests."""
    return OpenAIPlanner()
