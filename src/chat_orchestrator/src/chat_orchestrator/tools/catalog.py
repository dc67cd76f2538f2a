"""Catalog tools for the orchestrator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from chat_orchestrator.tools.registry import ToolContext, ToolName, ToolSpec, register_tool
from commerce_client import get_catalog_client

if TYPE_CHECKING:
    from chat_orchestrator.models import CollectedData

logger = logging.getLogger("chat_orchestrator.catalog_tools")

DEFAULT_SEARCH_LIMIT = 10


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class SearchProductsArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: str | None = Field(
        default=None,
        description='Search query or keywords to find products (e.g., "running shoes", "laptop", "red dress")',
    )
    category: str | None = Field(
        default=None,
        description='Filter by product category (e.g., "Electronics", "Clothing", "Sports")',
    )
    min_price: float | None = Field(default=None, alias="minPrice", ge=0, description="Minimum price filter")
    max_price: float | None = Field(default=None, alias="maxPrice", ge=0, description="Maximum price filter")
    limit: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description=f"Maximum number of results to return (default: {DEFAULT_SEARCH_LIMIT})",
    )


class GetProductDetailsArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="productId", min_length=1, description="The unique identifier of the product")


class GetCategoriesArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


def search_products(args: SearchProductsArgs, context: ToolContext) -> dict[str, Any]:
    """Search the catalog and return product summaries with a count."""
    result = get_catalog_client().search(
        query=args.query,
        category=args.category,
        min_price=args.min_price,
        max_price=args.max_price,
        limit=args.limit or DEFAULT_SEARCH_LIMIT,
        trace_id=context.trace_id,
    )
    products = result["products"]
    logger.info("searchProducts returned %d products trace_id=%s", len(products), context.trace_id)
    return {"products": products, "count": len(products)}


def get_product_details(args: GetProductDetailsArgs, context: ToolContext) -> dict[str, Any]:
    """Return one product record."""
    product = get_catalog_client().get_by_id(args.product_id, trace_id=context.trace_id)
    if not product:
        return {"error": "Product not found"}
    return product


def get_categories(_args: GetCategoriesArgs, context: ToolContext) -> dict[str, Any]:
    """Return every catalog category."""
    return {"categories": get_catalog_client().list_categories(trace_id=context.trace_id)}


# ---------------------------------------------------------------------------
# Collected data extraction
# ---------------------------------------------------------------------------


def _collect_search(result: dict[str, Any], collected: CollectedData) -> None:
    products = result.get("products")
    if isinstance(products, list):
        collected.add_products(products)


def _collect_product(result: dict[str, Any], collected: CollectedData) -> None:
    if result.get("_id") or result.get("id"):
        collected.add_products([result])


# ---------------------------------------------------------------------------
# Tool registrations
# ---------------------------------------------------------------------------


register_tool(
    ToolSpec(
        name=ToolName.SEARCH_PRODUCTS,
        description=(
            "Search for products in the catalog by keyword, category, or filters. Use this when the user asks "
            "about products, wants to find items, browse categories, or check product availability."
        ),
        args_model=SearchProductsArgs,
        handler=search_products,
        collector=_collect_search,
    )
)

register_tool(
    ToolSpec(
        name=ToolName.GET_PRODUCT_DETAILS,
        description=(
            "Get detailed information about a specific product by its ID. Use this when the user asks for "
            "details about a particular product, wants to know specifications, availability, or pricing."
        ),
        args_model=GetProductDetailsArgs,
        handler=get_product_details,
        collector=_collect_product,
    )
)

register_tool(
    ToolSpec(
        name=ToolName.GET_CATEGORIES,
        description=(
            "Get a list of all available product categories. Use this when the user wants to browse "
            "categories or asks what types of products are available."
        ),
        args_model=GetCategoriesArgs,
        handler=get_categories,
    )
)
