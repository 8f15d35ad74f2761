"""Config settings – 12-factor env-based configuration."""
from cell_guard.config.settings.base import Settings
from cell_guard.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from cell_guard.config.settings.rate_limit import PolicySettings, RedisSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "PolicySettings",
    "RedisSettings",
    "Settings",
    "SettingsLoader",
]
