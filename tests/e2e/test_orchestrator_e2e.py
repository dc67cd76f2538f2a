"""End-to-end tests that hit the real Claude API via the chat gateway."""

from __future__ import annotations

import json
import os
import socket
import subprocess
import sys
import threading
import time
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlparse

import pytest
import requests

if TYPE_CHECKING:
    from collections.abc import Iterator

pytestmark = [pytest.mark.e2e, pytest.mark.local_credentials]

REQUIRED_ENV = ("ANTHROPIC_API_KEY",)
HEALTH_TIMEOUT_SECONDS = 12.0
REQUEST_TIMEOUT_SECONDS = 60.0
STUB_PRODUCTS = [
    {"id": "e2e-p1", "name": "Stub Trail Runner", "price": 89.0, "category": "Shoes"},
    {"id": "e2e-p2", "name": "Stub Road Racer", "price": 120.0, "category": "Shoes"},
]
MODULE_PATHS = (
    "ai_client_api",
    "claude_client_impl",
    "commerce_client",
    "chat_orchestrator",
)


def _require_envs(names: tuple[str, ...]) -> dict[str, str]:
    values = {name: os.environ.get(name) for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        pytest.skip(f"Missing e2e env vars: {', '.join(missing)}")
    return {name: value or "" for name, value in values.items()}


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


def _pythonpath(root: Path) -> str:
    paths = [str(root)] + [str(root / "src" / name / "src") for name in MODULE_PATHS]
    existing = os.environ.get("PYTHONPATH")
    if existing:
        paths.append(existing)
    return os.pathsep.join(paths)


def _wait_for_health(base_url: str) -> None:
    deadline = time.time() + HEALTH_TIMEOUT_SECONDS
    while time.time() < deadline:
        try:
            response = requests.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == HTTPStatus.OK:
                return
        except requests.RequestException:
            time.sleep(0.2)
    raise AssertionError("Chat service did not become healthy in time.")  # noqa: TRY003, EM101


@pytest.fixture
def catalog_stub() -> Iterator[tuple[str, list[dict[str, Any]]]]:
    """Serve a fixed product search result; yields the base URL and the recorded queries."""
    queries: list[dict[str, Any]] = []

    class _Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:
            url = urlparse(self.path)
            if url.path == "/api/products/search":
                queries.append(parse_qs(url.query))
                payload: Any = {"products": STUB_PRODUCTS, "total": len(STUB_PRODUCTS)}
            elif url.path == "/api/products/categories":
                payload = ["Shoes"]
            else:
                self.send_error(HTTPStatus.NOT_FOUND)
                return
            body = json.dumps(payload).encode()
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *_: Any) -> None:
            return

    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}", queries
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def chat_url(catalog_stub: tuple[str, list[dict[str, Any]]]) -> Iterator[str]:
    """Start the chat service with real credentials and a stub product service; return its base URL."""
    env = _require_envs(REQUIRED_ENV)
    root = Path(__file__).resolve().parents[2]
    base_url = f"http://127.0.0.1:{_free_port()}"
    full_env = os.environ.copy()
    full_env.update(env)
    full_env["PYTHONPATH"] = _pythonpath(root)
    full_env["PRODUCT_SERVICE_URL"] = catalog_stub[0]

    process = subprocess.Popen(  # noqa: S603
        [
            sys.executable,
            "-m",
            "uvicorn",
            "chat_orchestrator.main:app",
            "--host",
            "127.0.0.1",
            "--port",
            base_url.rsplit(":", 1)[1],
        ],
        cwd=str(root),
        env=full_env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    try:
        _wait_for_health(base_url)
        yield base_url
    finally:
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()


def test_chat_greeting(chat_url: str) -> None:
    """A greeting needs no tools and comes back with a generated conversation id."""
    response = requests.post(
        f"{chat_url}/api/chat/message",
        json={"message": "Hi! What can you help me with?"},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body.get("message")
    assert body["conversationId"].startswith("conv_")


def test_chat_product_search(chat_url: str, catalog_stub: tuple[str, list[dict[str, Any]]]) -> None:
    """A product question makes the model call searchProducts against the product service."""
    _, queries = catalog_stub
    response = requests.post(
        f"{chat_url}/api/chat/message",
        json={"message": "Search the catalog for running shoes please."},
        headers={"x-trace-id": "e2e-search"},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body.get("message")
    assert "searchProducts" in body["metadata"]["toolsUsed"]
    assert {p["id"] for p in body["data"]["products"]} >= {"e2e-p1", "e2e-p2"}
    assert queries
    assert all(query.get("q") for query in queries)
