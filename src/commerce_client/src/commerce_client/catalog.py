"""Catalog (product-service) adapter."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from commerce_client.invocation import PRODUCT_SERVICE, ServiceClient, ServiceInvocationError

logger = logging.getLogger("commerce_client.catalog")

MATCH_ALL_QUERY = "*"


class CatalogClient:
    """Product search, lookup and category listing against the product service."""

    def __init__(self, service_client: ServiceClient, service_name: str = PRODUCT_SERVICE) -> None:
        self._service = service_client
        self._service_name = service_name

    def search(  # noqa: PLR0913
        self,
        query: str | None = None,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        limit: int | None = None,
        *,
        trace_id: str | None = None,
    ) -> dict[str, Any]:
        """Search products.

        The service requires ``q``: the free-text query wins, then the category name, then the
        match-all wildcard. The category filter is only sent for category-only searches, since a
        text query combined with a mismatched taxonomy field over-constrains the results.
        """
        params: dict[str, Any] = {
            "q": query or category or MATCH_ALL_QUERY,
            "minPrice": min_price,
            "maxPrice": max_price,
            "limit": limit or None,
        }
        if not query and category:
            params["category"] = category

        logger.debug("Searching products params=%s trace_id=%s", params, trace_id)
        result = self._service.invoke(self._service_name, "api/products/search", params=params, trace_id=trace_id)
        result = result or {}
        products = result.get("products") or []
        logger.debug("Product search completed count=%d trace_id=%s", len(products), trace_id)
        return {**result, "products": products}

    def get_by_id(self, product_id: str, *, trace_id: str | None = None) -> dict[str, Any] | None:
        """Return a product record, or None when the service reports 404."""
        try:
            return self._service.invoke(self._service_name, f"api/products/{product_id}", trace_id=trace_id)
        except ServiceInvocationError as exc:
            if exc.status_code == HTTPStatus.NOT_FOUND:
                logger.debug("Product not found product_id=%s trace_id=%s", product_id, trace_id)
                return None
            raise

    def list_categories(self, *, trace_id: str | None = None) -> list[Any]:
        """Return all product categories (empty when the service returns none)."""
        result = self._service.invoke(self._service_name, "api/products/categories", trace_id=trace_id)
        if isinstance(result, list):
            return result
        return (result or {}).get("categories") or []
