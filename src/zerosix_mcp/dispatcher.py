"""HTTP dispatch for signed ZeroSix requests."""

import json
import logging
from typing import Any

import httpx

from .exceptions import ResponseDecodeError, TransportError
from .models import JsonValue

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
REQUEST_TIMEOUT_SECONDS = 60.0
MAX_REDIRECTS = 10


class RequestDispatcher:
    """Sends signed requests with a JSON body and decodes JSON responses.

    The HTTP status code is not inspected: any response whose body is valid
    JSON is returned as-is, leaving status handling to the caller.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            client: Optional preconfigured HTTP client. By default a client
                following up to 10 redirects with a 60 second timeout over
                HTTP/1.1 is created.
        """
        self._client = client or httpx.Client(
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
            timeout=REQUEST_TIMEOUT_SECONDS,
            http1=True,
            http2=False,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "RequestDispatcher":
        """Enter the context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit the context manager."""
        self.close()

    def dispatch(
        self,
        url: str,
        method: str,
        payload: Any = None,
    ) -> JsonValue:
        """Send a request and decode its JSON response.

        Args:
            url: The fully signed request URL.
            method: HTTP method (GET, POST, PUT, PATCH or DELETE).
            payload: JSON-serializable request body, ``{}`` when None.

        Returns:
            The decoded JSON value, or None for an empty body.

        Raises:
            ValueError: If the method is not supported.
            TransportError: If the request fails before a response arrives.
            ResponseDecodeError: If the response body is not valid JSON.
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        body = json.dumps({} if payload is None else payload).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

        try:
            response = self._client.request(method, url, content=body, headers=headers)
        except httpx.RequestError as e:
            code = type(e).__name__
            logger.warning("%s %s failed: %s: %s", method, _redact(url), code, e)
            raise TransportError(code, str(e)) from e

        logger.debug(
            "%s %s -> HTTP %d (%d bytes)",
            method,
            _redact(url),
            response.status_code,
            len(response.content),
        )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.warning(
                "%s %s returned a non-JSON body (HTTP %d)",
                method,
                _redact(url),
                response.status_code,
            )
            raise ResponseDecodeError(response.status_code, response.text) from e


def _redact(url: str) -> str:
    """Drop the query string so signatures and nonces stay out of logs."""
    return url.split("?", 1)[0]
