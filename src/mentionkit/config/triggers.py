"""Trigger configuration models and YAML loader."""

from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mentionkit.config.settings import get_settings


class TriggerConfig(BaseModel):
    """A marker symbol that starts a mention, e.g. ``@`` or ``#``."""

    model_config = ConfigDict(frozen=True)

    symbol: Annotated[str, Field(min_length=1, max_length=8)]
    max_extra_words: int = Field(default=0, ge=0)
    hide_symbol_in_display: bool = False

    @field_validator("symbol")
    @classmethod
    def symbol_has_no_whitespace(cls, v: str) -> str:
        """A symbol containing whitespace could never precede a name."""
        if any(ch.isspace() for ch in v):
            raise ValueError(f"trigger symbol must not contain whitespace: {v!r}")
        return v


class TriggersConfig(BaseModel):
    """Root configuration: the trigger set for a mention session."""

    triggers: list[TriggerConfig] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_unique_symbols(self) -> "TriggersConfig":
        """Validate that no two triggers share a symbol."""
        symbols = [t.symbol for t in self.triggers]
        duplicates = sorted({s for s in symbols if symbols.count(s) > 1})
        if duplicates:
            raise ValueError(f"Duplicate trigger symbols: {duplicates}")
        return self

    def get_trigger(self, symbol: str) -> TriggerConfig | None:
        """Get a trigger by its symbol."""
        for trigger in self.triggers:
            if trigger.symbol == symbol:
                return trigger
        return None


class ConfigLoadError(Exception):
    """Raised when configuration loading fails."""

    pass


TriggersLike = TriggersConfig | Iterable[TriggerConfig | Mapping[str, Any]]


def coerce_triggers(value: TriggersLike) -> tuple[TriggerConfig, ...]:
    """Normalize a trigger set into a validated tuple of TriggerConfig.

    Accepts a TriggersConfig, TriggerConfig instances, or plain mappings
    such as ``{"symbol": "@", "max_extra_words": 1}``.

    Raises:
        pydantic.ValidationError: If a trigger is invalid or symbols repeat.
    """
    if isinstance(value, TriggersConfig):
        return tuple(value.triggers)
    items = list(value)
    if not items:
        return ()
    if all(isinstance(item, TriggerConfig) for item in items):
        symbols = {item.symbol for item in items}
        if len(symbols) == len(items):
            return tuple(items)
    config = TriggersConfig.model_validate({"triggers": items})
    return tuple(config.triggers)


def load_triggers_config(config_path: str | Path | None = None) -> TriggersConfig:
    """Load and validate the trigger configuration from a YAML file.

    Args:
        config_path: Path to the YAML file. If None, uses settings.

    Returns:
        Validated TriggersConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be read or validation fails.
    """
    if config_path is None:
        config_path = get_settings().triggers_path

    path = Path(config_path)

    if not path.exists():
        raise ConfigLoadError(f"Configuration file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"Failed to read {path}: {e}") from e

    if raw_config is None:
        raise ConfigLoadError(f"Empty configuration file: {path}")

    try:
        return TriggersConfig.model_validate(raw_config)
    except ValueError as e:
        raise ConfigLoadError(f"Configuration validation failed: {e}") from e


@lru_cache
def get_triggers_config() -> TriggersConfig:
    """Get cached trigger configuration instance."""
    return load_triggers_config()


def clear_triggers_config_cache() -> None:
    """Clear the cached trigger configuration."""
    get_triggers_config.cache_clear()
