"""Order (order-service) adapter."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from commerce_client.invocation import ORDER_SERVICE, ServiceClient, ServiceInvocationError

logger = logging.getLogger("commerce_client.orders")

BEARER_PREFIX = "Bearer "


def auth_headers(user_id: str | None = None, auth_token: str | None = None) -> dict[str, str]:
    """Build caller identity headers for order-service calls."""
    headers: dict[str, str] = {}
    if user_id:
        headers["x-user-id"] = user_id
    if auth_token:
        headers["Authorization"] = auth_token if auth_token.startswith(BEARER_PREFIX) else f"{BEARER_PREFIX}{auth_token}"
    return headers


class OrderClient:
    """Order history, detail and tracking lookups scoped to a customer."""

    def __init__(self, service_client: ServiceClient, service_name: str = ORDER_SERVICE) -> None:
        self._service = service_client
        self._service_name = service_name

    def list(  # noqa: PLR0913
        self,
        user_id: str,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        *,
        auth_token: str | None = None,
        trace_id: str | None = None,
    ) -> dict[str, Any]:
        """Return ``{"orders": [...], "total": n}`` for a customer."""
        logger.debug("Getting user orders user_id=%s status=%s trace_id=%s", user_id, status, trace_id)
        result = self._service.invoke(
            self._service_name,
            f"api/orders/customer/{user_id}",
            headers=auth_headers(user_id, auth_token),
            params={"status": status, "limit": limit, "offset": offset},
            trace_id=trace_id,
        )
        # The service answers with either a bare list or a paged object.
        if isinstance(result, list):
            orders = result
            total = len(result)
        else:
            result = result or {}
            orders = result.get("orders") or []
            total = result.get("total", len(orders))
        return {"orders": orders, "total": total}

    def get_by_id(
        self,
        order_id: str,
        user_id: str,
        *,
        auth_token: str | None = None,
        trace_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Return an order, or None when the service reports 404."""
        return self._get_or_none(f"api/orders/{order_id}", user_id, auth_token=auth_token, trace_id=trace_id)

    def track(
        self,
        order_id: str,
        user_id: str,
        *,
        auth_token: str | None = None,
        trace_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Return tracking information, or None when the service reports 404."""
        return self._get_or_none(f"api/orders/{order_id}/tracking", user_id, auth_token=auth_token, trace_id=trace_id)

    def _get_or_none(
        self,
        path: str,
        user_id: str,
        *,
        auth_token: str | None,
        trace_id: str | None,
    ) -> dict[str, Any] | None:
        try:
            return self._service.invoke(
                self._service_name,
                path,
                headers=auth_headers(user_id, auth_token),
                trace_id=trace_id,
            )
        except ServiceInvocationError as exc:
            if exc.status_code == HTTPStatus.NOT_FOUND:
                logger.debug("Not found path=%s trace_id=%s", path, trace_id)
                return None
            raise
