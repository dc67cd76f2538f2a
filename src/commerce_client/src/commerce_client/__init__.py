"""Public export surface for ``commerce_client``."""

from __future__ import annotations

from functools import lru_cache

from commerce_client.catalog import CatalogClient
from commerce_client.invocation import ServiceClient, ServiceInvocationError
from commerce_client.orders import OrderClient

__all__ = [
    "CatalogClient",
    "OrderClient",
    "ServiceClient",
    "ServiceInvocationError",
    "get_catalog_client",
    "get_order_client",
    "get_service_client",
]


@lru_cache(maxsize=1)
def get_service_client() -> ServiceClient:
    """Return the process-wide ServiceClient built from environment defaults."""
    return ServiceClient()


def get_catalog_client() -> CatalogClient:
    """Return a CatalogClient bound to the shared ServiceClient."""
    return CatalogClient(get_service_client())


def get_order_client() -> OrderClient:
    """Return an OrderClient bound to the shared ServiceClient."""
    return OrderClient(get_service_client())
