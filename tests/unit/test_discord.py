"""Tests for the Discord delivery plugin."""

import json

import httpx
import pytest

from gw_dailies.plugins.discord import DiscordAuthError, DiscordClient

API = "https://discord.test/api/v10"


def make_client(handler) -> DiscordClient:
    return DiscordClient(
        "bot-token",
        1234,
        api_base=API,
        transport=httpx.MockTransport(handler),
    )


class TestConnect:
    """Tests for DiscordClient.connect and run."""

    @pytest.mark.asyncio
    async def test_connect_returns_user_name(self):
        """Test token check returns the bot's name."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"id": "1", "username": "sheep"})

        async with make_client(handler) as discord:
            assert await discord.connect() == "sheep"

        assert seen["url"].endswith("/api/v10/users/@me")
        assert seen["auth"] == "Bot bot-token"

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        """Test 401 raises DiscordAuthError."""
        async with make_client(lambda r: httpx.Response(401, json={})) as discord:
            with pytest.raises(DiscordAuthError):
                await discord.connect()

    @pytest.mark.asyncio
    async def test_run_fires_ready(self):
        """Test run() calls the ready callback with the user name."""
        ready = []

        async def on_ready(user_name):
            ready.append(user_name)

        async with make_client(lambda r: httpx.Response(200, json={"username": "sheep"})) as discord:
            await discord.run(on_ready=on_ready)

        assert ready == ["sheep"]


class TestSendEmbed:
    """Tests for DiscordClient.send_embed."""

    @pytest.mark.asyncio
    async def test_posts_embed(self):
        """Test embed payload sent to the channel."""
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "99"})

        async with make_client(handler) as discord:
            ok = await discord.send_embed("Dailies for 22 November 2025", "body")

        assert ok is True
        assert seen["method"] == "POST"
        assert seen["url"] == f"{API}/channels/1234/messages"
        assert seen["payload"] == {
            "embeds": [{"title": "Dailies for 22 November 2025", "description": "body"}]
        }

    @pytest.mark.asyncio
    async def test_http_error_reported(self):
        """Test error status returns False without raising."""
        async with make_client(lambda r: httpx.Response(500, text="oops")) as discord:
            assert await discord.send_embed("t", "d") is False

    @pytest.mark.asyncio
    async def test_network_error_reported(self):
        """Test network failure returns False without raising."""
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        async with make_client(handler) as discord:
            assert await discord.send_embed("t", "d") is False

    @pytest.mark.asyncio
    async def test_not_retried(self):
        """Test a failed send is attempted exactly once."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        async with make_client(handler) as discord:
            await discord.send_embed("t", "d")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_long_description_truncated(self):
        """Test descriptions are cut to Discord's limit."""
        seen = {}

        def handler(request):
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={})

        async with make_client(handler) as discord:
            await discord.send_embed("t", "x" * 5000)

        assert len(seen["payload"]["embeds"][0]["description"]) == 4096
