"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, EnvSettingsSource

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "WARNING"
    log_format: str = "console"  # "json" or "console"

    @field_validator("log_format")
    @classmethod
    def log_format_must_be_known(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got '{v}'")
        return v


class DisplayConfig(BaseModel):
    currency_symbol: str = "R$"
    thousands_sep: str = "."
    decimal_sep: str = ","


class InsightConfig(BaseModel):
    """Thresholds for the insight rules (percentages are 0-100)."""

    min_group_trades: int = 2
    best_reason_min_win_rate: float = 50.0
    best_period_min_win_rate: float = 50.0
    stop_min_trades: int = 3
    stop_min_subset: int = 2
    tight_stop_good_win_rate: float = 55.0
    tight_stop_poor_win_rate: float = 40.0
    consistency_good_win_rate: float = 55.0
    consistency_poor_win_rate: float = 40.0
    consistency_min_trades: int = 5
    profit_factor_good: float = 1.5
    profit_factor_min_trades: int = 5


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables
    (see ``load_settings``).
    """

    journal_path: str = "data/trades.json"

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)

    model_config = {"env_prefix": "TRADE_DIARY_", "env_nested_delimiter": "__"}


def _merge(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Precedence, highest first: ``overrides``, ``TRADE_DIARY_*``
    environment variables, the TOML file, defaults.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: if the file is not valid TOML or the merged data
            fails validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    # Init kwargs outrank the environment in BaseSettings, so the env
    # layer is merged over the file data here.
    data = _merge(data, EnvSettingsSource(Settings)())
    if overrides:
        data = _merge(data, overrides)

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
