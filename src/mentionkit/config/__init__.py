"""Configuration module for mentionkit."""

from mentionkit.config.settings import LogLevel, Settings, get_settings
from mentionkit.config.triggers import (
    ConfigLoadError,
    TriggerConfig,
    TriggersConfig,
    TriggersLike,
    clear_triggers_config_cache,
    coerce_triggers,
    get_triggers_config,
    load_triggers_config,
)

__all__ = [
    "ConfigLoadError",
    "LogLevel",
    "Settings",
    "TriggerConfig",
    "TriggersConfig",
    "TriggersLike",
    "clear_triggers_config_cache",
    "coerce_triggers",
    "get_settings",
    "get_triggers_config",
    "load_triggers_config",
]
