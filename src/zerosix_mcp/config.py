"""Configuration management using pydantic-settings."""

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """ZeroSix client settings."""

    model_config = SettingsConfigDict(
        env_prefix="ZEROSIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    # OAuth1 consumer credentials
    consumer_key: str
    consumer_secret: str

    # API location, e.g. "zerosix.ai/wp-json/api/v1/"
    api_domain: str
    use_https: bool = True

    @property
    def api_base_url(self) -> str:
        """Base URL for API endpoints, always ending with a slash."""
        scheme = "https" if self.use_https else "http"
        return f"{scheme}://{self.api_domain.strip('/')}/"


def get_settings() -> Settings:
    """Get application settings.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(
            "Failed to load settings. Ensure ZEROSIX_CONSUMER_KEY, "
            f"ZEROSIX_CONSUMER_SECRET and ZEROSIX_API_DOMAIN are set: {e}"
        ) from e
