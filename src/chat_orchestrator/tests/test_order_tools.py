"""Unit tests for order tool handlers."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING
from unittest.mock import Mock

import chat_orchestrator.tools.orders as order_tools
import pytest
from chat_orchestrator.tools import registry
from chat_orchestrator.tools.registry import ToolContext
from commerce_client import OrderClient, ServiceClient, ServiceInvocationError

if TYPE_CHECKING:
    from typing import Any

USER = ToolContext(user_id="u1", auth_token="tok", trace_id="t1")


def _patch_client(monkeypatch: pytest.MonkeyPatch, client: Any) -> Any:
    monkeypatch.setattr(order_tools, "get_order_client", lambda: client)
    return client


@pytest.mark.parametrize(
    ("tool", "arguments_json", "message"),
    [
        ("getMyOrders", "{}", "User not logged in. Please log in to view your orders."),
        ("getOrderDetails", '{"orderId": "o1"}', "User not logged in. Please log in to view order details."),
        ("trackOrder", '{"orderId": "o1"}', "User not logged in. Please log in to track orders."),
    ],
)
def test_order_tools_require_user(monkeypatch: pytest.MonkeyPatch, tool: str, arguments_json: str, message: str) -> None:
    """Without a user id, no downstream call is made."""
    service = Mock(spec=ServiceClient)
    _patch_client(monkeypatch, OrderClient(service))

    result = registry.run_tool(tool, arguments_json, ToolContext(trace_id="t1"))

    assert result == {"error": message}
    service.invoke.assert_not_called()


def test_get_my_orders_forwards_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _patch_client(monkeypatch, Mock(spec=OrderClient))
    client.list.return_value = {"orders": [{"id": "o1"}], "total": 1}

    result = registry.run_tool("getMyOrders", '{"status": "shipped"}', USER)

    assert result == {"orders": [{"id": "o1"}], "total": 1}
    client.list.assert_called_once_with("u1", status="shipped", limit=10, offset=None, auth_token="tok", trace_id="t1")


def test_get_my_orders_rejects_unknown_status(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _patch_client(monkeypatch, Mock(spec=OrderClient))

    result = registry.run_tool("getMyOrders", '{"status": "lost"}', USER)

    assert "invalid arguments" in result["error"]
    client.list.assert_not_called()


def test_get_order_details_404_becomes_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    """A downstream 404 is normalized to absence, then to an 'Order not found' payload."""
    service = Mock(spec=ServiceClient)
    service.invoke.side_effect = ServiceInvocationError("HTTP 404: nope", status_code=HTTPStatus.NOT_FOUND)
    _patch_client(monkeypatch, OrderClient(service))

    result = registry.run_tool("getOrderDetails", '{"orderId": "o9"}', USER)

    assert result == {"error": "Order not found"}
    headers = service.invoke.call_args.kwargs["headers"]
    assert headers == {"x-user-id": "u1", "Authorization": "Bearer tok"}


def test_get_order_details_transport_failure_is_isolated(monkeypatch: pytest.MonkeyPatch) -> None:
    service = Mock(spec=ServiceClient)
    service.invoke.side_effect = ServiceInvocationError("HTTP 500: boom", status_code=HTTPStatus.INTERNAL_SERVER_ERROR)
    _patch_client(monkeypatch, OrderClient(service))

    result = registry.run_tool("getOrderDetails", '{"orderId": "o9"}', USER)

    assert result == {"error": "Failed to execute getOrderDetails: HTTP 500: boom"}


def test_track_order_not_available(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _patch_client(monkeypatch, Mock(spec=OrderClient))
    client.track.return_value = None

    result = registry.run_tool("trackOrder", '{"orderId": "o1"}', USER)

    assert result == {"error": "Tracking information not available for this order"}


def test_track_order_success(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _patch_client(monkeypatch, Mock(spec=OrderClient))
    client.track.return_value = {"orderId": "o1", "status": "in_transit", "events": []}

    result = registry.run_tool("trackOrder", '{"orderId": "o1"}', USER)

    assert result["status"] == "in_transit"
    client.track.assert_called_once_with("o1", "u1", auth_token="tok", trace_id="t1")
