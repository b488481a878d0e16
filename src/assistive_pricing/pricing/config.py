"""Process settings for the pricing CLI.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

To avoid collisions with other tools that may also use `GITHUB_TOKEN`, this
project uses a dedicated token variable: `PRICING_GITHUB_TOKEN`.

The label scales and pricing rules themselves live in the plugin
configuration file (see :mod:`assistive_pricing.pricing.plugin_config`).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Settings for the pricing CLI.

    Environment variables:
    - PRICING_GITHUB_TOKEN
    - GITHUB_BASE_URL      (optional)
    - LOG_LEVEL            (optional)
    - PRICING_CONFIG_PATH  (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `PricingSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="PRICING_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    config_path: Path = Field(
        default=Path("pricing.json"),
        validation_alias="PRICING_CONFIG_PATH",
        description="Path of the JSON plugin configuration (label scales, multiplier)",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> PricingSettings:
        if not self.github_token.strip():
            raise ValueError("PRICING_GITHUB_TOKEN is required")
        return self
