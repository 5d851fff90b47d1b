"""OAuth1 one-legged authentication for the ZeroSix API.

ZeroSix authenticates with consumer credentials only: there is no access
token, so the signing key is ``consumer_secret&`` and no ``oauth_token``
parameter is sent. The API reads the OAuth parameters from the query string
rather than from an ``Authorization`` header.
"""

import base64
import hashlib
import hmac
import logging
import secrets
import time
import urllib.parse
from collections.abc import Callable, Mapping

from .config import Settings
from .exceptions import ConfigurationError, SigningError
from .models import OAuthRequestParameters

logger = logging.getLogger(__name__)

OAUTH_VERSION = "1.0"
SIGNATURE_METHOD = "HMAC-SHA1"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def generate_nonce() -> str:
    """Generate a unique nonce for a request.

    Returns:
        A random 32-character hex string.
    """
    return secrets.token_hex(16)


def generate_timestamp() -> int:
    """Return the current Unix time in seconds."""
    return int(time.time())


def percent_encode(value: str) -> str:
    """Percent-encode a value according to RFC 3986.

    Only unreserved characters (letters, digits and ``-._~``) are left as-is.
    Spaces become ``%20``, never ``+``.

    Args:
        value: The value to encode.

    Returns:
        Percent-encoded string.
    """
    return urllib.parse.quote(str(value), safe="")


def normalize_base_uri(url: str) -> str:
    """Reduce a URL to the base string URI form.

    Scheme and host are lowercased, default ports dropped, and the query
    and fragment removed.
    """
    parts = urllib.parse.urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"
    return f"{scheme}://{host}{parts.path or '/'}"


def header_to_query_fragment(header: str) -> str:
    """Convert an OAuth Authorization header value into query-string form.

    ``OAuth a="1", b="2"`` becomes ``a=1&b=2``. Values in the header are
    already percent-encoded, so they can be placed in a URL unchanged.

    Args:
        header: An Authorization header value starting with ``OAuth``.

    Returns:
        The OAuth parameters joined with ``&``.
    """
    scheme, _, params = header.partition(" ")
    if scheme != "OAuth":
        raise ValueError(f"Not an OAuth authorization header: {header!r}")
    return params.replace(", ", "&").replace(",", "&").replace('"', "")


def render_query_fragment(auth_params: Mapping[str, str]) -> str:
    """Render authorization parameters directly as a query-string fragment."""
    return "&".join(
        f"{percent_encode(k)}={percent_encode(v)}" for k, v in auth_params.items()
    )


class OAuth1Signer:
    """Signs requests using one-legged OAuth1 HMAC-SHA1."""

    def __init__(
        self,
        settings: Settings,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], int] = generate_timestamp,
        signature_method: str = SIGNATURE_METHOD,
    ) -> None:
        """Initialize the OAuth1 signer.

        Args:
            settings: Application settings containing OAuth1 credentials.
            nonce_factory: Source of per-request nonces.
            clock: Source of per-request timestamps.
            signature_method: Must be ``HMAC-SHA1``.

        Raises:
            ConfigurationError: If the consumer key or secret is empty.
            SigningError: If the signature method is not supported.
        """
        if not settings.consumer_key or not settings.consumer_key.strip():
            raise ConfigurationError("ZeroSix consumer key is missing or empty")
        if not settings.consumer_secret or not settings.consumer_secret.strip():
            raise ConfigurationError("ZeroSix consumer secret is missing or empty")
        if signature_method != SIGNATURE_METHOD:
            raise SigningError(f"Unsupported signature method: {signature_method}")

        self._consumer_key = settings.consumer_key
        self._consumer_secret = settings.consumer_secret
        self._nonce_factory = nonce_factory
        self._clock = clock

    def sign_request(
        self,
        url: str,
        method: str = "GET",
        params: Mapping[str, object] | None = None,
    ) -> dict[str, str]:
        """Generate the OAuth1 authorization parameters for a request.

        The caller's params are covered by the signature and must be sent
        in the query string exactly as given.

        Args:
            url: The request URL.
            method: HTTP method.
            params: Query parameters that will be sent with the request.

        Returns:
            The OAuth parameters, including ``oauth_signature``, sorted by name.
        """
        request_params = self.collect_parameters(url, params)
        base_string = self.create_signature_base_string(
            method, url, self.signed_parameters(request_params)
        )
        signature = self.generate_signature(base_string)

        logger.debug(
            "Signed %s %s with %d caller parameter(s)",
            method.upper(),
            normalize_base_uri(url),
            len(request_params.params),
        )

        return self.authorization_parameters(request_params, signature)

    def collect_parameters(
        self,
        uri: str,
        params: Mapping[str, object] | None = None,
    ) -> OAuthRequestParameters:
        """Gather credentials, a fresh nonce/timestamp and the caller's params.

        Args:
            uri: The request URL.
            params: Caller query parameters; ``None`` means none.

        Returns:
            The immutable inputs for one signature.
        """
        params = params or {}

        return OAuthRequestParameters(
            consumer_key=self._consumer_key,
            consumer_secret=self._consumer_secret,
            nonce=self._nonce_factory(),
            timestamp=self._clock(),
            oauth_version=OAUTH_VERSION,
            uri=uri,
            params={str(k): str(v) for k, v in params.items()},
        )

    @staticmethod
    def protocol_parameters(request_params: OAuthRequestParameters) -> dict[str, str]:
        """Return the oauth_* parameters, without the signature."""
        return {
            "oauth_consumer_key": request_params.consumer_key,
            "oauth_nonce": request_params.nonce,
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(request_params.timestamp),
            "oauth_version": request_params.oauth_version,
        }

    def signed_parameters(self, request_params: OAuthRequestParameters) -> dict[str, str]:
        """Return every parameter the signature covers."""
        # Reserved oauth_* names win over caller parameters
        return {**request_params.params, **self.protocol_parameters(request_params)}

    def create_signature_base_string(
        self,
        method: str,
        url: str,
        params: Mapping[str, str],
    ) -> str:
        """Create the OAuth1 signature base string.

        Parameters already present in the URL's query string are included
        alongside ``params``.

        Args:
            method: HTTP method.
            url: The request URL.
            params: All parameters to include.

        Returns:
            The signature base string.
        """
        query = urllib.parse.urlsplit(url).query
        pairs = urllib.parse.parse_qsl(query, keep_blank_values=True)
        pairs.extend((str(k), str(v)) for k, v in params.items())

        # Sort by encoded key, then encoded value
        encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in pairs)
        param_string = "&".join(f"{k}={v}" for k, v in encoded)

        return "&".join(
            [
                method.upper(),
                percent_encode(normalize_base_uri(url)),
                percent_encode(param_string),
            ]
        )

    def generate_signature(self, base_string: str) -> str:
        """Generate the HMAC-SHA1 signature of a base string.

        Args:
            base_string: The signature base string.

        Returns:
            Base64-encoded HMAC-SHA1 signature.
        """
        # No token secret in one-legged OAuth, so the key ends with "&"
        signing_key = f"{percent_encode(self._consumer_secret)}&"

        hashed = hmac.new(
            signing_key.encode("utf-8"),
            base_string.encode("utf-8"),
            hashlib.sha1,
        )

        return base64.b64encode(hashed.digest()).decode("utf-8")

    def authorization_parameters(
        self,
        request_params: OAuthRequestParameters,
        signature: str,
    ) -> dict[str, str]:
        """Combine the protocol parameters and signature, sorted by name."""
        auth_params = self.protocol_parameters(request_params)
        auth_params["oauth_signature"] = signature
        return dict(sorted(auth_params.items()))

    def build_authorization_header(
        self,
        request_params: OAuthRequestParameters,
        signature: str,
    ) -> str:
        """Format the authorization parameters as an OAuth header value.

        Returns:
            ``OAuth oauth_consumer_key="...", ..., oauth_version="1.0"``
        """
        auth_params = self.authorization_parameters(request_params, signature)
        return "OAuth " + ", ".join(
            f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in auth_params.items()
        )
