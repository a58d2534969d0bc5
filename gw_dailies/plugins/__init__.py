"""
Delivery plugins.

Plugins hand a rendered cycle result to an external channel:
- DiscordClient: Discord channel messages via the REST API
"""

from .discord import DiscordClient, DiscordAuthError

__all__ = ["DiscordClient", "DiscordAuthError"]
