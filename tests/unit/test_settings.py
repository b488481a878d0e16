"""Unit tests for process settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from assistive_pricing.pricing.config import PricingSettings
from assistive_pricing.server.config import ServerSettings

_ENV_VARS = ("PRICING_GITHUB_TOKEN", "GITHUB_BASE_URL", "LOG_LEVEL", "PRICING_CONFIG_PATH")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_settings_load_from_env_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "PRICING_GITHUB_TOKEN=test-token\nLOG_LEVEL=DEBUG\nPRICING_CONFIG_PATH=conf/pricing.json\n",
        encoding="utf-8",
    )

    settings = PricingSettings()

    assert settings.github_token == "test-token"
    assert settings.log_level == "DEBUG"
    assert settings.config_path == Path("conf/pricing.json")
    assert settings.github_base_url == "https://api.github.com"


def test_environment_overrides_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("PRICING_GITHUB_TOKEN=from-file\n", encoding="utf-8")
    monkeypatch.setenv("PRICING_GITHUB_TOKEN", "from-env")

    assert PricingSettings().github_token == "from-env"


def test_token_is_required_for_the_cli() -> None:
    with pytest.raises(ValidationError):
        PricingSettings()


def test_server_settings_start_without_token() -> None:
    settings = ServerSettings()

    assert settings.github_token == ""
    assert settings.config_path == Path("pricing.json")
