"""Configuration for the webhook server.

The server can start without a GitHub token configured (useful for health
checks and local smoke tests). The webhook endpoint validates credentials at
request time.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the webhook server.

    Notes:
        - Unlike :class:`assistive_pricing.pricing.config.PricingSettings`, this does NOT
          require a GitHub token at startup.
    """

    github_token: str = Field(default="", validation_alias="PRICING_GITHUB_TOKEN")
    github_base_url: str = Field(
        default="https://api.github.com", validation_alias="GITHUB_BASE_URL"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    config_path: Path = Field(default=Path("pricing.json"), validation_alias="PRICING_CONFIG_PATH")

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")
