"""
Configuration module for the dailies bot.

Provides:
- YAML settings loading with validation
- Environment variable substitution
- Credential loading (bot token, channel id)
"""

from .loader import (
    ConfigError,
    ConfigLoader,
    Credentials,
    Settings,
    load_credentials,
    load_settings,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "Credentials",
    "Settings",
    "load_credentials",
    "load_settings",
]
