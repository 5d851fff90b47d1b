"""ZeroSix MCP Server implementation using FastMCP."""

import json
import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

from .api_client import ZeroSixClient
from .config import get_settings
from .exceptions import ResponseDecodeError, TransportError, ZeroSixError
from .models import JsonValue, ProductFilter

logger = logging.getLogger(__name__)

# Module-level holder for lifespan management
_client: ZeroSixClient | None = None


@asynccontextmanager
async def lifespan(app: Any):
    """Lifespan context manager for the MCP server.

    Creates and manages the ZeroSixClient lifecycle.
    """
    global _client

    # Raises ConfigurationError when credentials are missing
    _client = ZeroSixClient(get_settings())

    try:
        yield
    finally:
        if _client:
            _client.close()
            _client = None


# Create FastMCP server with lifespan
mcp = FastMCP("zerosix", lifespan=lifespan)


def _get_client() -> ZeroSixClient:
    """Get the ZeroSixClient from module state."""
    if _client is None:
        raise RuntimeError("ZeroSixClient not initialized - server not running")
    return _client


def _run(action: str, call: Callable[[ZeroSixClient], JsonValue]) -> str:
    """Run a client call and format the result or error for the tool caller.

    Args:
        action: Description used in error messages, e.g. "fetching orders".
        call: Function performing the API call.

    Returns:
        Pretty-printed JSON, or an error message.
    """
    try:
        result = call(_get_client())
        return json.dumps(result, indent=2)

    except TransportError as e:
        return f"Error {action}: could not reach ZeroSix ({e.code}): {e.message}"
    except ResponseDecodeError as e:
        return (
            f"Error {action}: ZeroSix returned an invalid response "
            f"(HTTP {e.status_code})"
        )
    except ZeroSixError as e:
        return f"Error {action}: {str(e)}"
    except Exception as e:
        logger.exception("Unexpected error %s", action)
        return f"Unexpected error: {str(e)}"


# ============================================================================
# Product Tools
# ============================================================================


@mcp.tool()
def list_products() -> str:
    """List all products available on ZeroSix.

    Returns:
        JSON list of products with their IDs and attributes
    """
    return _run("listing products", lambda client: client.get_all_products())


@mcp.tool()
def filter_products(attributes: dict[str, str], relation: str = "greater") -> str:
    """Filter ZeroSix products by attributes.

    Args:
        attributes: Attribute values to match (e.g., {"gpu": "nvidia-1080ti", "geo": "europe"})
        relation: How attribute values are compared (default "greater")

    Returns:
        JSON list of matching products
    """
    product_filter = ProductFilter(relation=relation, attributes=attributes)
    return _run(
        "filtering products",
        lambda client: client.filter_products(product_filter),
    )


@mcp.tool()
def get_product(product_id: int) -> str:
    """Get a single product by ID.

    Args:
        product_id: The ZeroSix product ID (from list_products)

    Returns:
        JSON product details
    """
    return _run(
        f"fetching product {product_id}",
        lambda client: client.get_product_by_id(product_id),
    )


# ============================================================================
# Order Tools
# ============================================================================


@mcp.tool()
def create_order(
    product_id: int,
    instances: int,
    file_url: str | None = None,
    script_url: str | None = None,
) -> str:
    """Create an order for a product.

    Args:
        product_id: The ZeroSix product ID
        instances: Number of instances to create
        file_url: Optional URL of a file to load on the machines
        script_url: Optional URL of a script to execute on the machines

    Returns:
        JSON order details including the order key
    """
    return _run(
        "creating order",
        lambda client: client.create_order(product_id, instances, file_url, script_url),
    )


@mcp.tool()
def complete_order(order_id: int) -> str:
    """Complete an order and all of its instances.

    Args:
        order_id: The ZeroSix order ID

    Returns:
        JSON completion result
    """
    return _run(
        f"completing order {order_id}",
        lambda client: client.complete_order(order_id),
    )


@mcp.tool()
def list_orders() -> str:
    """List all orders made with the configured credentials.

    Returns:
        JSON list of orders
    """
    return _run("listing orders", lambda client: client.get_all_orders())


@mcp.tool()
def get_order(order_id: int) -> str:
    """Get a single order by ID.

    Args:
        order_id: The ZeroSix order ID

    Returns:
        JSON order details
    """
    return _run(
        f"fetching order {order_id}",
        lambda client: client.get_order_by_id(order_id),
    )


@mcp.tool()
def get_credentials(order_key: str) -> str:
    """Get the machine credentials of an order.

    Args:
        order_key: The order key (not the order ID)

    Returns:
        JSON credentials for the order's instances
    """
    return _run(
        "fetching credentials",
        lambda client: client.get_credentials(order_key),
    )


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Run the ZeroSix MCP server."""
    logging.basicConfig(level=logging.INFO)
    mcp.run()


if __name__ == "__main__":
    main()
