"""Tool registry for orchestrator tool calls.

Tools form a closed set (``ToolName``). Each registered ``ToolSpec`` couples the schema exposed to
the model with a pydantic argument model, a handler and an optional collector that folds successful
payloads into ``CollectedData``. ``run_tool`` always resolves to a payload dict; failures become
``{"error": ...}`` payloads so the model can react to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

import ai_client_api

if TYPE_CHECKING:
    from collections.abc import Callable

    from ai_client_api import ToolDefinition
    from chat_orchestrator.models import CollectedData

ToolResult = dict[str, Any]

logger = logging.getLogger("chat_orchestrator.tools")


class ToolName(str, Enum):
    """Every tool the assistant can call."""

    SEARCH_PRODUCTS = "searchProducts"
    GET_PRODUCT_DETAILS = "getProductDetails"
    GET_CATEGORIES = "getCategories"
    GET_MY_ORDERS = "getMyOrders"
    GET_ORDER_DETAILS = "getOrderDetails"
    TRACK_ORDER = "trackOrder"


@dataclass(frozen=True)
class ToolContext:
    """Caller context shared by every tool call of one request."""

    user_id: str | None = None
    auth_token: str | None = None
    trace_id: str | None = None


@dataclass(frozen=True)
class ToolSpec:
    """A callable action: schema, handler and result extraction."""

    name: ToolName
    description: str
    args_model: type[BaseModel]
    handler: Callable[[Any, ToolContext], ToolResult]
    requires_user: bool = False
    login_error: str = "User not logged in. Please log in to continue."
    collector: Callable[[ToolResult, CollectedData], None] | None = None

    def input_schema(self) -> dict[str, Any]:
        """Return the JSON schema of the argument model."""
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        return schema

    def definition(self) -> ToolDefinition:
        """Return the provider tool definition for this tool."""
        return ai_client_api.tool_definition(
            name=self.name.value,
            description=self.description,
            input_schema=self.input_schema(),
        )


_TOOLS: dict[ToolName, ToolSpec] = {}


# ---------------------------------------------------------------------------
# Registry API
# ---------------------------------------------------------------------------


def register_tool(spec: ToolSpec) -> None:
    """Register a tool specification."""
    if spec.name in _TOOLS:
        msg = f"Tool already registered: {spec.name.value}"
        raise ValueError(msg)
    _TOOLS[spec.name] = spec


def get_tool(name: str) -> ToolSpec | None:
    """Return the spec registered under ``name``, or None for unrecognized names."""
    try:
        key = ToolName(name)
    except ValueError:
        return None
    return _TOOLS.get(key)


def list_definitions() -> list[ToolDefinition]:
    """Return all registered tool definitions in registration order."""
    return [spec.definition() for spec in _TOOLS.values()]


def run_tool(name: str, arguments_json: str, context: ToolContext) -> ToolResult:
    """Validate arguments and execute a registered tool; never raises."""
    spec = get_tool(name)
    if spec is None:
        logger.warning("Unknown tool called: %r trace_id=%s", name, context.trace_id)
        return {"error": f"Unknown tool: {name or 'unknown'}"}

    if spec.requires_user and not context.user_id:
        return {"error": spec.login_error}

    try:
        args = spec.args_model.model_validate_json(arguments_json or "{}")
    except ValidationError as exc:
        logger.warning("Invalid arguments for %s trace_id=%s: %s", name, context.trace_id, exc)
        return {"error": f"Failed to execute {name}: invalid arguments: {_describe(exc)}"}

    logger.debug("Executing tool %s args=%s trace_id=%s", name, args.model_dump(exclude_none=True), context.trace_id)
    try:
        return spec.handler(args, context)
    except Exception as exc:
        logger.exception("Tool failed (%s) trace_id=%s", name, context.trace_id)
        return {"error": f"Failed to execute {name}: {exc}"}


def collect(name: str, result: ToolResult, collected: CollectedData) -> None:
    """Fold a successful tool payload into ``collected``; error payloads are skipped."""
    if not isinstance(result, dict) or "error" in result:
        return
    spec = get_tool(name)
    if spec is None or spec.collector is None:
        return
    spec.collector(result, collected)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)
