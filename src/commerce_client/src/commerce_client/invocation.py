"""Service-to-service invocation over HTTP.

Resolves a logical service name to a base address through a static mapping (by default the
Dapr sidecar's invoke endpoint), attaches trace headers, and maps non-2xx responses to
``ServiceInvocationError``.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import requests

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "ORDER_SERVICE",
    "PRODUCT_SERVICE",
    "ServiceClient",
    "ServiceInvocationError",
    "default_base_urls",
]

PRODUCT_SERVICE = "product-service"
ORDER_SERVICE = "order-service"
TRACE_HEADER = "x-trace-id"
DEFAULT_TIMEOUT_SECONDS = 10.0

logger = logging.getLogger("commerce_client")


class ServiceInvocationError(RuntimeError):
    """Downstream call failed; ``status_code`` is None for network-level failures."""

    def __init__(self, message: str, *, status_code: int | None = None, service: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.service = service


def _sidecar_base_url(app_id: str) -> str:
    host = os.environ.get("DAPR_HOST", "localhost")
    port = os.environ.get("DAPR_HTTP_PORT", "3500")
    return f"http://{host}:{port}/v1.0/invoke/{app_id}/method"


def default_base_urls() -> dict[str, str]:
    """Build the service-name → base-address map from the environment.

    ``PRODUCT_SERVICE_URL`` / ``ORDER_SERVICE_URL`` take precedence; otherwise calls are routed
    through the sidecar using ``PRODUCT_SERVICE_APP_ID`` / ``ORDER_SERVICE_APP_ID``.
    """
    product_app = os.environ.get("PRODUCT_SERVICE_APP_ID", PRODUCT_SERVICE)
    order_app = os.environ.get("ORDER_SERVICE_APP_ID", ORDER_SERVICE)
    return {
        PRODUCT_SERVICE: os.environ.get("PRODUCT_SERVICE_URL") or _sidecar_base_url(product_app),
        ORDER_SERVICE: os.environ.get("ORDER_SERVICE_URL") or _sidecar_base_url(order_app),
    }


class ServiceClient:
    """Generic JSON client for named downstream services.

    Attributes:
        _base_urls: Static service-name → base-address mapping.
        _session: Shared requests session (connection pooling).
        _timeout: Per-request timeout in seconds.

    """

    def __init__(
        self,
        base_urls: Mapping[str, str] | None = None,
        *,
        session: requests.Session | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._base_urls = dict(base_urls) if base_urls is not None else default_base_urls()
        self._session = session or requests.Session()
        if timeout_seconds is None:
            timeout_seconds = float(os.environ.get("SERVICE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self._timeout = timeout_seconds

    def url_for(self, service_name: str, method_path: str) -> str:
        """Return the absolute URL for a service method."""
        base = self._base_urls.get(service_name)
        if base is None:
            msg = f"Unknown service: {service_name}"
            raise ServiceInvocationError(msg, service=service_name)
        return f"{base.rstrip('/')}/{method_path.lstrip('/')}"

    def invoke(  # noqa: PLR0913
        self,
        service_name: str,
        method_path: str,
        http_method: str = "GET",
        body: Any = None,  # noqa: ANN401
        headers: Mapping[str, str] | None = None,
        *,
        params: Mapping[str, Any] | None = None,
        trace_id: str | None = None,
    ) -> Any:  # noqa: ANN401
        """Call ``method_path`` on ``service_name`` and return the parsed JSON body.

        Args:
            service_name: Logical service name (see ``default_base_urls``).
            method_path: Path relative to the service base address.
            http_method: HTTP verb.
            body: Optional JSON-serializable request body.
            headers: Extra request headers.
            params: Query parameters; None values are dropped.
            trace_id: Correlation id sent as ``x-trace-id``.

        Returns:
            Decoded JSON body, or None for an empty response.

        Raises:
            ServiceInvocationError: On transport failure or non-2xx status.

        """
        url = self.url_for(service_name, method_path)
        request_headers = {"Content-Type": "application/json", TRACE_HEADER: trace_id or ""}
        request_headers.update(headers or {})
        query = {key: value for key, value in (params or {}).items() if value is not None}

        try:
            response = self._session.request(
                http_method.upper(),
                url,
                headers=request_headers,
                params=query or None,
                json=body,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Service invocation failed: %s %s trace_id=%s error=%s", service_name, method_path, trace_id, exc)
            msg = f"Service invocation failed: {service_name}/{method_path}: {exc}"
            raise ServiceInvocationError(msg, service=service_name) from exc

        if not response.ok:
            logger.warning(
                "HTTP %s from %s %s trace_id=%s",
                response.status_code,
                service_name,
                method_path,
                trace_id,
            )
            msg = f"HTTP {response.status_code}: {response.text}"
            raise ServiceInvocationError(msg, status_code=response.status_code, service=service_name)

        if not response.content:
            return None
        return response.json()
