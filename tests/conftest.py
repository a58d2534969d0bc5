"""Shared fixtures: sample wiki pages and a mock transport serving them."""

from pathlib import Path

import httpx
import pytest

from gw_dailies.config.loader import Settings, SourceSettings

FIXTURES = Path(__file__).parent / "fixtures"

DAILY_URL = "https://wiki.test/wiki/Daily_activities"
WEEKLY_URL = "https://wiki.test/wiki/Weekly_activities"


@pytest.fixture
def daily_html():
    """Sample Daily_activities page."""
    return (FIXTURES / "daily_activities.html").read_text(encoding="utf-8")


@pytest.fixture
def weekly_html():
    """Sample Weekly_activities page."""
    return (FIXTURES / "weekly_activities.html").read_text(encoding="utf-8")


@pytest.fixture
def settings():
    """Settings pointing at the mock wiki."""
    return Settings(
        sources=SourceSettings(
            daily_url=DAILY_URL,
            weekly_url=WEEKLY_URL,
            site_origin="https://wiki.guildwars.com",
        )
    )


@pytest.fixture
def wiki_transport(daily_html, weekly_html):
    """MockTransport serving the sample pages; records requested URLs."""
    pages = {DAILY_URL: daily_html, WEEKLY_URL: weekly_html}
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requested.append(url)
        if url not in pages:
            return httpx.Response(404, text="not found")
        return httpx.Response(
            200,
            content=pages[url].encode("utf-8"),
            headers={"Content-Type": "text/html; charset=UTF-8"},
        )

    transport = httpx.MockTransport(handler)
    transport.requested = requested
    return transport
