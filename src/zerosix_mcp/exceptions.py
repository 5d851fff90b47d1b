"""Custom exceptions for the ZeroSix client."""


class ZeroSixError(Exception):
    """Base exception for ZeroSix errors."""

    pass


class ConfigurationError(ZeroSixError):
    """Raised when configuration is invalid or missing."""

    pass


class SigningError(ZeroSixError):
    """Raised when a request cannot be signed."""

    pass


class TransportError(ZeroSixError):
    """Raised when the HTTP request fails before a response is received."""

    def __init__(self, code: str, message: str):
        super().__init__(f"Transport error ({code}): {message}")
        self.code = code
        self.message = message


class ResponseDecodeError(ZeroSixError):
    """Raised when the API responds with a body that is not valid JSON."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"Could not decode JSON response (HTTP {status_code}): {body[:200]!r}"
        )
        self.status_code = status_code
        self.body = body
