"""
Pydantic models for ZeroSix requests and OAuth1 signing inputs.
"""

from pydantic import BaseModel, ConfigDict, Field, JsonValue

__all__ = [
    "CreateOrderRequest",
    "JsonValue",
    "OAuthRequestParameters",
    "ProductFilter",
]

# ============================================================================
# Signing Models
# ============================================================================


class OAuthRequestParameters(BaseModel):
    """Everything needed to compute one OAuth1 signature.

    Built fresh for every request; the nonce and timestamp make an instance
    single-use.
    """

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: str = Field(repr=False)
    nonce: str
    timestamp: int
    oauth_version: str = "1.0"
    uri: str
    params: dict[str, str] = Field(default_factory=dict)


# ============================================================================
# Endpoint Payload Models
# ============================================================================


class ProductFilter(BaseModel):
    """Attribute filter sent as the body of a product listing."""

    relation: str = "greater"
    attributes: dict[str, str] = Field(default_factory=dict)


class CreateOrderRequest(BaseModel):
    """Body of an order creation request."""

    product_id: int
    instances: int = Field(ge=1)
    file_url: str | None = None
    script_url: str | None = None
