"""Order tools for the orchestrator.

All order tools are user-scoped: the registry answers with a not-logged-in payload before any
downstream call when the request carries no user id.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from chat_orchestrator.tools.registry import ToolContext, ToolName, ToolSpec, register_tool
from commerce_client import get_order_client

if TYPE_CHECKING:
    from chat_orchestrator.models import CollectedData

logger = logging.getLogger("chat_orchestrator.order_tools")

DEFAULT_ORDER_LIMIT = 10
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class GetMyOrdersArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: OrderStatus | None = Field(default=None, description="Filter orders by status")
    limit: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description=f"Maximum number of orders to return (default: {DEFAULT_ORDER_LIMIT})",
    )
    offset: int | None = Field(default=None, ge=0, description="Number of orders to skip for pagination")


class OrderIdArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: str = Field(alias="orderId", min_length=1, description="The unique identifier of the order")


# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


def _require_user_id(context: ToolContext) -> str:
    if not context.user_id:
        raise RuntimeError("Missing user id for order tool.")  # noqa: EM101, TRY003
    return context.user_id


def get_my_orders(args: GetMyOrdersArgs, context: ToolContext) -> dict[str, Any]:
    """Return the caller's order history."""
    return get_order_client().list(
        _require_user_id(context),
        status=args.status,
        limit=args.limit or DEFAULT_ORDER_LIMIT,
        offset=args.offset,
        auth_token=context.auth_token,
        trace_id=context.trace_id,
    )


def get_order_details(args: OrderIdArgs, context: ToolContext) -> dict[str, Any]:
    """Return one of the caller's orders."""
    order = get_order_client().get_by_id(
        args.order_id,
        _require_user_id(context),
        auth_token=context.auth_token,
        trace_id=context.trace_id,
    )
    if not order:
        return {"error": "Order not found"}
    return order


def track_order(args: OrderIdArgs, context: ToolContext) -> dict[str, Any]:
    """Return shipment tracking for one of the caller's orders."""
    tracking = get_order_client().track(
        args.order_id,
        _require_user_id(context),
        auth_token=context.auth_token,
        trace_id=context.trace_id,
    )
    if not tracking:
        return {"error": "Tracking information not available for this order"}
    return tracking


# ---------------------------------------------------------------------------
# Collected data extraction
# ---------------------------------------------------------------------------


def _collect_orders(result: dict[str, Any], collected: CollectedData) -> None:
    orders = result.get("orders")
    if isinstance(orders, list):
        collected.add_orders(orders)


def _collect_order(result: dict[str, Any], collected: CollectedData) -> None:
    if result.get("orderId") or result.get("id"):
        collected.add_orders([result])


# ---------------------------------------------------------------------------
# Tool registrations
# ---------------------------------------------------------------------------


register_tool(
    ToolSpec(
        name=ToolName.GET_MY_ORDERS,
        description=(
            "Get the order history for the current user. Use this when the user asks about their orders, "
            "wants to check order status, or view past purchases."
        ),
        args_model=GetMyOrdersArgs,
        handler=get_my_orders,
        requires_user=True,
        login_error="User not logged in. Please log in to view your orders.",
        collector=_collect_orders,
    )
)

register_tool(
    ToolSpec(
        name=ToolName.GET_ORDER_DETAILS,
        description=(
            "Get detailed information about a specific order. Use this when the user asks about a particular "
            "order, wants tracking information, or order specifics."
        ),
        args_model=OrderIdArgs,
        handler=get_order_details,
        requires_user=True,
        login_error="User not logged in. Please log in to view order details.",
        collector=_collect_order,
    )
)

register_tool(
    ToolSpec(
        name=ToolName.TRACK_ORDER,
        description=(
            "Get tracking information for an order. Use this when the user wants to know where their order "
            "is or check delivery status."
        ),
        args_model=OrderIdArgs,
        handler=track_order,
        requires_user=True,
        login_error="User not logged in. Please log in to track orders.",
    )
)
