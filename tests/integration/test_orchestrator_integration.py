"""Integration tests for chat gateway wiring: HTTP app, Claude client, tools and downstream services."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import chat_orchestrator.main as app_module
import chat_orchestrator.tools.catalog as catalog_tools
import pytest
from chat_orchestrator.chat_service import ChatService
from chat_orchestrator.gateway import ModelGateway
from chat_orchestrator.tools import registry
from claude_client_impl.claude_impl import ClaudeClient
from commerce_client import CatalogClient, ServiceClient
from fastapi.testclient import TestClient

if TYPE_CHECKING:
    from collections.abc import Iterator

pytestmark = pytest.mark.integration


class _Block:
    def __init__(self, block_type: str, **fields: Any) -> None:
        self.type = block_type
        for key, value in fields.items():
            setattr(self, key, value)


class _Usage:
    def __init__(self, input_tokens: int, output_tokens: int) -> None:
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens


class _Response:
    def __init__(self, content: list[_Block], stop_reason: str, usage: _Usage) -> None:
        self.content = content
        self.stop_reason = stop_reason
        self.usage = usage


class _ScriptedMessages:
    """Stands in for ``anthropic.Anthropic().messages``."""

    def __init__(self, responses: list[_Response]) -> None:
        self.responses = responses
        self.requests: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> _Response:
        self.requests.append(kwargs)
        return self.responses.pop(0)


class _StubHTTPResponse:
    def __init__(self, payload: Any, status_code: int = HTTPStatus.OK) -> None:
        self.status_code = int(status_code)
        self.ok = self.status_code < HTTPStatus.BAD_REQUEST
        self.text = json.dumps(payload)
        self.content = self.text.encode()
        self._payload = payload

    def json(self) -> Any:
        return self._payload


class _StubSession:
    def __init__(self, payload: Any) -> None:
        self.payload = payload
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _StubHTTPResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return _StubHTTPResponse(self.payload)


@pytest.fixture
def reset_overrides() -> Iterator[None]:
    yield
    app_module.app.dependency_overrides.clear()


@pytest.mark.circleci
def test_chat_health_endpoint() -> None:
    """Health endpoint responds OK."""
    client = TestClient(app_module.app)
    resp = client.get("/health")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["status"] == "ok"


@pytest.mark.circleci
def test_registry_has_default_tool_definitions() -> None:
    """Registry contains the built-in tool definitions."""
    tool_names = {tool.name for tool in registry.list_definitions()}
    assert tool_names == {
        "searchProducts",
        "getProductDetails",
        "getCategories",
        "getMyOrders",
        "getOrderDetails",
        "trackOrder",
    }


@pytest.mark.circleci
@pytest.mark.usefixtures("reset_overrides")
def test_product_search_round_trip(monkeypatch: pytest.MonkeyPatch) -> None:
    """A chat message flows through Claude, the search tool and the product service."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    messages = _ScriptedMessages(
        [
            _Response(
                [_Block("tool_use", id="toolu_1", name="searchProducts", input={"query": "running shoes"})],
                "tool_use",
                _Usage(120, 30),
            ),
            _Response([_Block("text", text="I found 1 running shoe for you.")], "end_turn", _Usage(200, 20)),
        ]
    )

    class _StubAnthropic:
        def __init__(self, **_: Any) -> None:
            self.messages = messages

    monkeypatch.setattr("claude_client_impl.claude_impl.anthropic.Anthropic", _StubAnthropic)
    session = _StubSession({"products": [{"id": "p1", "name": "Trail Runner", "price": 89.0}], "total": 1})
    service_client = ServiceClient({"product-service": "http://sidecar/v1.0/invoke/product-service/method"}, session=session)  # type: ignore[arg-type]
    monkeypatch.setattr(catalog_tools, "get_catalog_client", lambda: CatalogClient(service_client))
    app_module.app.dependency_overrides[app_module.get_chat_service] = lambda: ChatService(ModelGateway(ClaudeClient))

    resp = TestClient(app_module.app).post(
        "/api/chat/message",
        json={"message": "find me running shoes", "conversationId": "conv_it"},
        headers={"x-trace-id": "trace-it"},
    )

    assert resp.status_code == HTTPStatus.OK
    body = resp.json()
    assert body["message"] == "I found 1 running shoe for you."
    assert body["conversationId"] == "conv_it"
    assert body["data"] == {"products": [{"id": "p1", "name": "Trail Runner", "price": 89.0}]}
    assert body["metadata"] == {"toolsUsed": ["searchProducts"], "tokensUsed": 370}

    (call,) = session.calls
    assert call["url"] == "http://sidecar/v1.0/invoke/product-service/method/api/products/search"
    assert call["params"] == {"q": "running shoes", "limit": 10}
    assert call["headers"]["x-trace-id"] == "trace-it"

    second = messages.requests[1]["messages"]
    assert second[1]["content"][0]["type"] == "tool_use"
    tool_result = second[2]["content"][0]
    assert tool_result["tool_use_id"] == "toolu_1"
    assert json.loads(tool_result["content"])["count"] == 1


@pytest.mark.circleci
@pytest.mark.usefixtures("reset_overrides")
def test_unconfigured_model_returns_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    app_module.app.dependency_overrides[app_module.get_chat_service] = lambda: ChatService(ModelGateway(ClaudeClient))

    resp = TestClient(app_module.app).post("/api/chat/message", json={"message": "hello"})

    assert resp.status_code == HTTPStatus.OK
    body = resp.json()
    assert "not fully configured" in body["message"]
    assert body["conversationId"].startswith("conv_")
    assert "data" not in body
