"""ZeroSix API client implementation."""

import logging
import urllib.parse
from collections.abc import Mapping
from typing import Any

from .auth import OAuth1Signer, percent_encode, render_query_fragment
from .config import Settings
from .dispatcher import RequestDispatcher
from .models import CreateOrderRequest, JsonValue, ProductFilter

logger = logging.getLogger(__name__)


def flatten_params(params: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested query parameters into bracketed keys.

    ``{"attributes": {"gpu": "1080ti"}}`` becomes ``{"attributes[gpu]": "1080ti"}``.
    None values are dropped and booleans become ``"1"``/``"0"``.
    """
    flat: dict[str, str] = {}
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            flat.update(flatten_params(value, name))
        elif isinstance(value, (list, tuple)):
            flat.update(flatten_params(dict(enumerate(value)), name))
        elif isinstance(value, bool):
            flat[name] = "1" if value else "0"
        else:
            flat[name] = str(value)
    return flat


class ZeroSixClient:
    """Client for interacting with the ZeroSix API.

    Every request goes through one pipeline: sign the endpoint URL plus any
    query parameters, append the OAuth parameters to the query string, and
    send the payload as a JSON body. Supports the context manager protocol.
    """

    def __init__(
        self,
        settings: Settings,
        signer: OAuth1Signer | None = None,
        dispatcher: RequestDispatcher | None = None,
    ) -> None:
        """Initialize the ZeroSix API client.

        Args:
            settings: Application settings containing API configuration.
            signer: Optional signer, built from settings by default.
            dispatcher: Optional dispatcher, with the default transport policy
                by default.

        Raises:
            ConfigurationError: If the consumer credentials are missing.
        """
        self._settings = settings
        self._signer = signer or OAuth1Signer(settings)
        self._dispatcher = dispatcher or RequestDispatcher()

    def close(self) -> None:
        """Close the HTTP client."""
        self._dispatcher.close()

    def __enter__(self) -> "ZeroSixClient":
        """Enter the context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit the context manager."""
        self.close()

    def endpoint_url(self, uri: str) -> str:
        """Return the absolute URL of an endpoint path such as ``orders/12``."""
        return self._settings.api_base_url + uri.lstrip("/")

    def sign_url(
        self,
        uri: str,
        method: str,
        query: Mapping[str, Any] | None = None,
    ) -> str:
        """Build a signed URL for one request.

        The signature covers exactly the query parameters placed in the URL.
        A query string already present in ``uri`` is merged with ``query``.
        Caller keys starting with ``oauth_`` are dropped; the signer sets those.

        Args:
            uri: Endpoint path relative to the API base URL.
            method: HTTP method the URL will be used with.
            query: Optional query parameters.

        Returns:
            ``endpoint?query&oauth_...`` ready to be sent once.
        """
        path, _, embedded_query = uri.partition("?")
        url = self.endpoint_url(path)

        query_params = dict(urllib.parse.parse_qsl(embedded_query, keep_blank_values=True))
        query_params.update(flatten_params(query or {}))
        query_params = {
            k: v for k, v in query_params.items() if not k.startswith("oauth_")
        }

        auth_params = self._signer.sign_request(url, method, query_params)
        oauth_fragment = render_query_fragment(auth_params)

        if query_params:
            return f"{url}?{render_query_fragment(query_params)}&{oauth_fragment}"
        return f"{url}?{oauth_fragment}"

    def sign_and_dispatch(
        self,
        uri: str,
        method: str,
        payload: Any = None,
        query: Mapping[str, Any] | None = None,
    ) -> JsonValue:
        """Sign a request and send it to the ZeroSix API.

        Args:
            uri: Endpoint path relative to the API base URL.
            method: HTTP method.
            payload: JSON body, ``{}`` when None.
            query: Optional query parameters, included in the signature.

        Returns:
            The decoded JSON response.

        Raises:
            TransportError: If the request could not be completed.
            ResponseDecodeError: If the response is not valid JSON.
        """
        signed_url = self.sign_url(uri, method, query)
        logger.debug("Dispatching %s %s", method.upper(), uri)
        return self._dispatcher.dispatch(signed_url, method, payload)

    # ========================================================================
    # Products
    # ========================================================================

    def get_all_products(self) -> JsonValue:
        """Get all products listed on ZeroSix."""
        return self.sign_and_dispatch("products", "GET", {})

    def filter_products(self, product_filter: ProductFilter) -> JsonValue:
        """Filter products by attributes.

        Args:
            product_filter: Relation and attribute values to match.

        Returns:
            The matching products.
        """
        return self.sign_and_dispatch("products", "GET", product_filter.model_dump())

    def get_product_by_id(self, product_id: int) -> JsonValue:
        """Get a single product by its ID."""
        return self.sign_and_dispatch(f"products/{_segment(product_id)}", "GET", {})

    # ========================================================================
    # Orders
    # ========================================================================

    def create_order(
        self,
        product_id: int,
        instances: int,
        file_url: str | None = None,
        script_url: str | None = None,
    ) -> JsonValue:
        """Create an order for a product.

        Args:
            product_id: The ZeroSix product ID.
            instances: Number of instances to create.
            file_url: Optional URL of a file to load on the machines.
            script_url: Optional URL of a script to execute on the machines.

        Returns:
            The created order.
        """
        order = CreateOrderRequest(
            product_id=product_id,
            instances=instances,
            file_url=file_url,
            script_url=script_url,
        )
        return self.sign_and_dispatch("orders", "PUT", order.model_dump())

    def complete_order(self, order_id: int) -> JsonValue:
        """Complete an order and all of its instances."""
        return self.sign_and_dispatch(f"orders/{_segment(order_id)}", "DELETE", {})

    def get_all_orders(self) -> JsonValue:
        """Get all orders made with these credentials."""
        return self.sign_and_dispatch("orders", "GET", {})

    def get_order_by_id(self, order_id: int) -> JsonValue:
        """Get a single order by its ID."""
        return self.sign_and_dispatch(f"orders/{_segment(order_id)}", "GET", {})

    def get_credentials(self, order_key: str) -> JsonValue:
        """Get the machine credentials of an order.

        Note: this endpoint takes the order key, not the order ID.
        """
        return self.sign_and_dispatch(f"credentials/{_segment(order_key)}", "GET", {})


def _segment(value: object) -> str:
    """Encode an identifier as a single URL path segment."""
    return percent_encode(str(value))
