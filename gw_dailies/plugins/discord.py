"""
Discord delivery over the REST API.

Posts one embed per cycle to a channel. Connection means verifying the
bot token against /users/@me; a successful check is the "ready" signal
that starts the driver's timer loop.
"""

from typing import Awaitable, Callable, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


DEFAULT_API_BASE = "https://discord.com/api/v10"
USER_AGENT = "DiscordBot (https://github.com/gw-dailies, 0.1.0)"

# Discord rejects embed descriptions longer than this
MAX_DESCRIPTION_LENGTH = 4096


class DiscordAuthError(RuntimeError):
    """Bot token rejected by Discord."""


class DiscordClient:
    """
    Minimal Discord bot client for posting to one channel.

    Usage:
        async with DiscordClient(token, channel_id) as discord:
            await discord.run(on_ready=driver.handle_ready)
    """

    def __init__(
        self,
        token: str,
        channel_id: int,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Discord client.

        Args:
            token: Bot token
            channel_id: Target channel id
            api_base: REST API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.token = token
        self.channel_id = channel_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "DiscordClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            base_url=self.api_base,
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bot {self.token}",
                "User-Agent": USER_AGENT,
            },
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._client

    async def connect(self) -> str:
        """
        Verify the token and return the bot's user name.

        Raises:
            DiscordAuthError: If Discord rejects the token
            httpx.HTTPError: On network failure or other error statuses
        """
        response = await self._require_client().get("/users/@me")
        if response.status_code in (401, 403):
            raise DiscordAuthError(f"Discord rejected the bot token (HTTP {response.status_code})")
        response.raise_for_status()

        return response.json().get("username", "unknown")

    async def run(self, on_ready: Callable[[str], Awaitable[object]]) -> None:
        """
        Connect and fire the ready callback.

        Args:
            on_ready: Coroutine called with the bot's user name
        """
        user_name = await self.connect()
        logger.info("discord_connected", user=user_name, channel_id=self.channel_id)
        await on_ready(user_name)

    async def send_embed(self, title: str, description: str) -> bool:
        """
        Post a single embed to the channel.

        Failures are logged and reported, never retried.

        Returns:
            True if Discord accepted the message
        """
        if len(description) > MAX_DESCRIPTION_LENGTH:
            logger.warning("embed_truncated", length=len(description))
            description = description[:MAX_DESCRIPTION_LENGTH]

        payload = {"embeds": [{"title": title, "description": description}]}

        try:
            response = await self._require_client().post(
                f"/channels/{self.channel_id}/messages", json=payload
            )
        except httpx.HTTPError as e:
            logger.error("discord_send_failed", channel_id=self.channel_id, error=str(e))
            return False

        if response.status_code >= 300:
            logger.error(
                "discord_send_failed",
                channel_id=self.channel_id,
                status=response.status_code,
                body=response.text[:300],
            )
            return False

        logger.info("discord_message_sent", channel_id=self.channel_id)
        return True
