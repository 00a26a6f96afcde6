"""Application configuration using pydantic-settings.

Everything that talks to the aggregator goes through the signing proxy, so
the proxy URL is the only upstream endpoint configured here.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Aggregator proxy
    # ======================
    okx_proxy_url: str = Field(
        default="http://localhost:3000/api/okx",
        description="Signing proxy that forwards query parameters to the OKX DEX API",
    )
    http_timeout: float = Field(default=30.0, description="Upstream request timeout in seconds")

    # ======================
    # Quotes
    # ======================
    quote_debounce_ms: int = Field(
        default=450, description="Quiet period before a typed amount is quoted"
    )
    default_token_decimals: int = Field(
        default=18, description="Decimals assumed when a token does not report them"
    )
    display_fraction_digits: int = Field(
        default=6, description="Maximum fractional digits shown for quoted amounts"
    )
    default_slippage_percent: float = Field(
        default=0.5, description="Default slippage tolerance in percent (0.5 = 0.5%)"
    )

    @property
    def quote_debounce_seconds(self) -> float:
        return self.quote_debounce_ms / 1000

    def get_safe_dict(self) -> dict:
        """Return settings dict suitable for the health endpoint."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "okx_proxy_url": self._redact_url(self.okx_proxy_url),
            "http_timeout": self.http_timeout,
            "quotes": {
                "debounce_ms": self.quote_debounce_ms,
                "default_decimals": self.default_token_decimals,
                "display_digits": self.display_fraction_digits,
                "slippage_percent": self.default_slippage_percent,
            },
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact credentials embedded in a URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
