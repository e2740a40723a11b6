"""Shipment tools exposed to the assistant.

Two halves:

* ``TOOL_REGISTRY`` is the fixed catalog the planner chooses from. It is
  built once at import time and never mutated. Each entry's ``args_schema``
  is both the JSON schema sent to the model and the validator for the
  arguments it sends back.
* ``ShipmentToolExecutor`` runs one tool call for one owner and always
  returns a string. Lookup misses, foreign shipments, bad arguments and
  database errors all become text the planner can relay to the user; nothing
  is raised back into the tool loop.
"""

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import BaseModel, Field, ValidationError

from freightdesk.core.config import settings
from freightdesk.models.shipment import Shipment, ShipmentStatus
from freightdesk.services.shipment_service import DEFAULT_LIST_LIMIT, ShipmentService

logger = logging.getLogger(__name__)

NOT_FOUND_OR_UNAUTHORIZED = "Shipment not found or not authorized."
NO_SHIPMENTS = "No shipments found."
MAX_DISAMBIGUATION_CANDIDATES = 5


# --- Input schemas ---


class ListShipmentsInput(BaseModel):
    """Input for listing shipments."""

    status: ShipmentStatus | None = Field(
        None, description="Filter by status: pending, in_transit, delivered, cancelled"
    )
    limit: int = Field(
        DEFAULT_LIST_LIMIT,
        ge=1,
        description=f"Maximum number of shipments to return (default {DEFAULT_LIST_LIMIT})",
    )


class ShipmentLookupInput(BaseModel):
    """Input for tools that act on a single shipment."""

    shipment_id: str | None = Field(None, description="The UUID of the shipment")
    search: str | None = Field(
        None,
        description="City name to find the shipment by (matches origin or destination)",
    )


class UpdateShipmentStatusInput(ShipmentLookupInput):
    """Input for changing a shipment's status."""

    new_status: ShipmentStatus = Field(description="The new status to set")


class ShipmentStatsInput(BaseModel):
    """The stats tool takes no arguments."""


@dataclass(frozen=True)
class ToolSpec:
    """A tool the planner may call."""

    name: str
    description: str
    args_schema: type[BaseModel]

    def to_openai_tool(self) -> dict[str, Any]:
        """Render in OpenAI function-calling format for ``bind_tools``."""
        tool = convert_to_openai_tool(self.args_schema)
        tool["function"]["name"] = self.name
        tool["function"]["description"] = self.description
        tool["function"].setdefault("parameters", {"type": "object", "properties": {}})
        return tool


TOOL_REGISTRY: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="list_shipments",
        description=(
            "List the user's shipments, newest first, optionally filtered by status. "
            "Use when the user wants to see or browse their shipments."
        ),
        args_schema=ListShipmentsInput,
    ),
    ToolSpec(
        name="get_shipment",
        description=(
            "Get full details of one shipment, either by its ID or by searching "
            "origin/destination city names."
        ),
        args_schema=ShipmentLookupInput,
    ),
    ToolSpec(
        name="update_shipment_status",
        description=(
            "Update the status of a shipment. Identify it by ID, or by a city name "
            "search when the ID is unknown."
        ),
        args_schema=UpdateShipmentStatusInput,
    ),
    ToolSpec(
        name="get_shipment_stats",
        description=(
            "Get statistics about the user's shipments: counts by status, "
            "total weight and the heaviest shipment."
        ),
        args_schema=ShipmentStatsInput,
    ),
    ToolSpec(
        name="delete_shipment",
        description=(
            "Permanently delete a shipment (use with caution). Identify it by ID, "
            "or by a city name search when the ID is unknown."
        ),
        args_schema=ShipmentLookupInput,
    ),
)

_REGISTRY_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOL_REGISTRY}


def get_tool_spec(name: str) -> ToolSpec | None:
    """Look up a registered tool by name."""
    return _REGISTRY_BY_NAME.get(name)


def to_openai_tools() -> list[dict[str, Any]]:
    """The whole catalog in function-calling format."""
    return [spec.to_openai_tool() for spec in TOOL_REGISTRY]


# --- Formatting ---


def _number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def format_weight(weight: float | None) -> str:
    if weight is None:
        return "N/A"
    return f"{_number(weight)} lbs"


def _localize(dt: datetime, tz_name: str) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(ZoneInfo(tz_name))


def format_date(dt: datetime, tz_name: str = "UTC") -> str:
    """US-style short date, e.g. ``3/7/2026``."""
    local = _localize(dt, tz_name)
    return f"{local.month}/{local.day}/{local.year}"


def format_datetime(dt: datetime, tz_name: str = "UTC") -> str:
    """US-style date and time, e.g. ``3/7/2026, 2:05:09 PM``."""
    local = _localize(dt, tz_name)
    clock = local.strftime("%I:%M:%S %p").lstrip("0")
    return f"{format_date(local, tz_name)}, {clock}"


def _dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


# --- Executor ---


class ShipmentToolExecutor:
    """Executes registry tools on behalf of a single owner."""

    def __init__(
        self,
        service: ShipmentService,
        owner_id: str,
        *,
        strict_search: bool | None = None,
        display_timezone: str | None = None,
    ) -> None:
        self.service = service
        self.owner_id = owner_id
        self.strict_search = (
            settings.strict_search_disambiguation if strict_search is None else strict_search
        )
        self.tz_name = display_timezone or settings.display_timezone

    async def execute(self, name: str, args: dict[str, Any] | None) -> str:
        """Run one tool call and return its observation text."""
        spec = get_tool_spec(name)
        if spec is None:
            return f"Unknown tool: {name}"

        try:
            params = spec.args_schema.model_validate(args or {})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            return f"Error: invalid arguments for {name}: {problems}"

        handler = getattr(self, f"_{name}")
        try:
            return str(await handler(params))
        except Exception as e:
            logger.exception("Tool execution error: %s", name)
            await self._rollback()
            return f"Error: {e}"

    async def _rollback(self) -> None:
        try:
            await self.service.db.rollback()
        except Exception:
            logger.exception("Rollback after tool failure also failed")

    async def _resolve(
        self, params: ShipmentLookupInput, action: str
    ) -> tuple[Shipment | None, str | None]:
        """Find the shipment a lookup refers to.

        Returns ``(shipment, None)`` on success, otherwise ``(None, message)``.
        """
        if params.shipment_id:
            shipment = await self.service.get_shipment(self.owner_id, params.shipment_id)
            if shipment is None:
                return None, NOT_FOUND_OR_UNAUTHORIZED
            return shipment, None

        if params.search:
            limit = MAX_DISAMBIGUATION_CANDIDATES if self.strict_search else 1
            matches = await self.service.find_by_city(self.owner_id, params.search, limit=limit)
            if not matches:
                return None, f'Could not find shipment to {action} matching "{params.search}".'
            if len(matches) > 1:
                candidates = [
                    {"id": str(s.id), "route": s.route, "status": s.status.value}
                    for s in matches
                ]
                return None, (
                    f'Multiple shipments match "{params.search}". Ask the user which one '
                    f"they mean, then retry with its shipment_id.\n{_dumps(candidates)}"
                )
            return matches[0], None

        return None, (
            f"Could not find shipment to {action}. "
            "Provide a shipment_id or a city name to search for."
        )

    async def _list_shipments(self, params: ListShipmentsInput) -> str:
        shipments = await self.service.list_shipments(
            self.owner_id, status=params.status, limit=params.limit
        )
        if not shipments:
            return NO_SHIPMENTS

        return _dumps(
            [
                {
                    "id": str(s.id),
                    "route": s.route,
                    "shipper": s.shipper_name,
                    "consignee": s.consignee_name,
                    "weight": format_weight(s.weight),
                    "status": s.status.value,
                    "created": format_date(s.created_at, self.tz_name),
                }
                for s in shipments
            ]
        )

    async def _get_shipment(self, params: ShipmentLookupInput) -> str:
        shipment, message = await self._resolve(params, "view")
        if shipment is None:
            return message or NOT_FOUND_OR_UNAUTHORIZED

        return _dumps(
            {
                "id": str(shipment.id),
                "origin": shipment.origin,
                "destination": shipment.destination,
                "shipper": shipment.shipper_name,
                "consignee": shipment.consignee_name,
                "weight": format_weight(shipment.weight),
                "status": shipment.status.value,
                "created": format_datetime(shipment.created_at, self.tz_name),
                "updated": format_datetime(shipment.updated_at, self.tz_name),
            }
        )

    async def _update_shipment_status(self, params: UpdateShipmentStatusInput) -> str:
        shipment, message = await self._resolve(params, "update")
        if shipment is None:
            return message or NOT_FOUND_OR_UNAUTHORIZED

        updated = await self.service.update_status(self.owner_id, shipment.id, params.new_status)
        if updated is None:
            return NOT_FOUND_OR_UNAUTHORIZED

        return (
            f'Successfully updated shipment to "{params.new_status.value}". '
            f"Route: {updated.route}"
        )

    async def _get_shipment_stats(self, params: ShipmentStatsInput) -> str:
        stats = await self.service.get_stats(self.owner_id)

        heaviest = "N/A"
        if stats.heaviest is not None:
            h = stats.heaviest
            heaviest = f"{h.origin_city} → {h.destination_city} ({_number(h.weight)} lbs)"

        return _dumps(
            {
                "total_shipments": stats.total,
                "status_breakdown": {
                    status.value: stats.by_status.get(status, 0) for status in ShipmentStatus
                },
                "total_weight": f"{_number(stats.total_weight):,} lbs",
                "heaviest_shipment": heaviest,
            }
        )

    async def _delete_shipment(self, params: ShipmentLookupInput) -> str:
        shipment, message = await self._resolve(params, "delete")
        if shipment is None:
            return message or NOT_FOUND_OR_UNAUTHORIZED

        # Capture the lane now; the row is gone afterwards.
        route = shipment.route
        shipment_id = shipment.id
        deleted = await self.service.delete_shipment(self.owner_id, shipment_id)
        if not deleted:
            return NOT_FOUND_OR_UNAUTHORIZED

        return f"Successfully deleted shipment: {route}"
