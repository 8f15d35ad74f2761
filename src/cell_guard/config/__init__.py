"""Config – 12-factor settings and loaders."""

from cell_guard.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    PolicySettings,
    RedisSettings,
    Settings,
    SettingsLoader,
)
from cell_guard.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PolicySettings",
    "RedisSettings",
    "Settings",
    "SettingsLoader",
]
