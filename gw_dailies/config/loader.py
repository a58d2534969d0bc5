"""
YAML configuration loader with validation.

Loads bot settings from YAML files with:
- Environment variable substitution
- Required-key validation
- Default values
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
import structlog

logger = structlog.get_logger(__name__)


class ConfigError(ValueError):
    """Invalid or missing configuration; fatal at startup."""


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - required, warning and empty string if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        else:
            value = os.getenv(var_expr)
            if value is None:
                logger.warning("env_var_not_set", var=var_expr)
                return ""
            return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


@dataclass
class SourceSettings:
    """Where the two activity pages live."""
    daily_url: str
    weekly_url: str
    site_origin: str = "https://wiki.guildwars.com"
    table_selectors: list[str] = field(default_factory=list)


@dataclass
class HttpSettings:
    """Fetcher behaviour."""
    user_agent: str = "Mozilla/5.0 (compatible; GuildWarsBot/1.0)"
    timeout: float = 30.0
    initial_backoff: float = 1.0
    max_backoff: float = 300.0


@dataclass
class DiscordSettings:
    """Discord REST endpoint settings."""
    api_base: str = "https://discord.com/api/v10"
    timeout: float = 30.0


@dataclass
class Settings:
    """Top-level settings."""
    sources: SourceSettings
    http: HttpSettings = field(default_factory=HttpSettings)
    discord: DiscordSettings = field(default_factory=DiscordSettings)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """
        Build settings from a parsed YAML mapping.

        Raises:
            ConfigError: If required keys are missing or malformed
        """
        sources = data.get("sources") or {}
        required = ["daily_url", "weekly_url"]
        for key in required:
            if not sources.get(key):
                raise ConfigError(f"Missing required setting: sources.{key}")

        http = data.get("http") or {}
        discord = data.get("discord") or {}

        try:
            return cls(
                sources=SourceSettings(
                    daily_url=sources["daily_url"],
                    weekly_url=sources["weekly_url"],
                    site_origin=sources.get("site_origin", "https://wiki.guildwars.com"),
                    table_selectors=list(sources.get("table_selectors") or []),
                ),
                http=HttpSettings(
                    user_agent=http.get("user_agent", HttpSettings.user_agent),
                    timeout=float(http.get("timeout", 30)),
                    initial_backoff=float(http.get("initial_backoff", 1)),
                    max_backoff=float(http.get("max_backoff", 300)),
                ),
                discord=DiscordSettings(
                    api_base=discord.get("api_base", DiscordSettings.api_base),
                    timeout=float(discord.get("timeout", 30)),
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid setting value: {e}") from e


@dataclass
class Credentials:
    """Discord bot credentials."""
    token: str
    channel_id: int


class ConfigLoader:
    """
    Configuration loader for bot settings.

    Loads YAML config files and validates against expected schema.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict

        Raises:
            ConfigError: If the file is missing or not valid YAML
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise ConfigError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        # Substitute environment variables
        content = substitute_env_vars(content)

        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e

        if config is not None and not isinstance(config, dict):
            raise ConfigError(f"Expected a mapping in {filepath}")

        return config or {}

    def load_settings(self, filename: str = "settings.yml") -> Settings:
        """Load and validate settings."""
        return Settings.from_dict(self.load_file(filename))


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Convenience function to load settings.

    Args:
        config_path: Optional path to a settings YAML file

    Returns:
        Settings object
    """
    if config_path:
        loader = ConfigLoader(str(Path(config_path).parent))
        return loader.load_settings(Path(config_path).name)
    return ConfigLoader().load_settings()


def load_credentials(channel_override: Optional[int] = None) -> Credentials:
    """
    Read the bot token and target channel from the environment.

    Args:
        channel_override: Channel id from the command line; takes
            precedence over CHANNEL_ID

    Raises:
        ConfigError: If TOKEN is unset or the channel id is missing/invalid
    """
    token = os.getenv("TOKEN")
    if not token:
        raise ConfigError("TOKEN environment variable not set")

    if channel_override is not None:
        channel_id = channel_override
    else:
        raw = os.getenv("CHANNEL_ID")
        if raw is None:
            raise ConfigError("CHANNEL_ID environment variable not set")
        try:
            channel_id = int(raw.strip())
        except ValueError:
            raise ConfigError("CHANNEL_ID must be a valid number") from None

    if channel_id <= 0:
        raise ConfigError("Channel id must be a positive number")

    return Credentials(token=token, channel_id=channel_id)
