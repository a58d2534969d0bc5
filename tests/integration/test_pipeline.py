"""End-to-end tests over the sample wiki pages."""

from datetime import datetime, timezone

import pytest

from gw_dailies.core.http_client import HttpClient
from gw_dailies.core.models import OutputFormat
from gw_dailies.core.selectors import RowNotFoundError, TableNotFoundError
from gw_dailies.orchestrator import DailiesDriver
from gw_dailies.parsers import DailyParser, WeeklyParser


class NoSleep:
    async def __call__(self, seconds):
        raise AssertionError(f"unexpected wait of {seconds}s")


class TestDailyPage:
    """DailyParser against the sample daily page."""

    def test_all_fields_filled(self, daily_html):
        """Test every field is non-empty and linked items keep their links."""
        record = DailyParser().parse(daily_html, "22 November 2025", "22 November 2025")

        for name, value in record.to_dict().items():
            assert value, name
            assert "](" in value, name

    def test_parenthesised_url(self, daily_html):
        """Test a ')' in the href is escaped so the link stays intact."""
        record = DailyParser().parse(daily_html, "22 November 2025", "22 November 2025")
        assert record.zaishen_mission == (
            "[Sanctum Cay](https://wiki.guildwars.com/wiki/Sanctum_Cay_(mission%29)"
        )

    def test_quantity_suffix(self, daily_html):
        """Test text after the link is kept."""
        record = DailyParser().parse(daily_html, "22 November 2025", "22 November 2025")
        assert record.nicholas_sandford == (
            "[Skale Fins](https://wiki.guildwars.com/wiki/Skale_Fin) (3x)"
        )

    def test_split_keys(self, daily_html):
        """Test Sandford follows its own key between the two cutoffs."""
        record = DailyParser().parse(daily_html, "21 November 2025", "22 November 2025")
        assert record.zaishen_mission.startswith("[Thunderhead Keep]")
        assert record.nicholas_sandford.startswith("[Skale Fins]")

    def test_missing_secondary_row(self, daily_html):
        """Test a missing Sandford row is reported on its own."""
        with pytest.raises(RowNotFoundError, match="Nicholas Sandford"):
            DailyParser().parse(daily_html, "22 November 2025", "24 November 2025")

    def test_page_without_table(self):
        """Test an unrelated page fails with a structure error."""
        with pytest.raises(TableNotFoundError):
            DailyParser().parse("<html><body>Maintenance</body></html>", "x", "y")


class TestWeeklyPage:
    """WeeklyParser against the sample weekly page."""

    def test_current_week(self, weekly_html):
        """Test bonus names are plain text and the traveller item is linked."""
        record = WeeklyParser().parse(weekly_html, "17 November 2025")

        assert record.pve_bonus == "Elonian Support Bonus"
        assert record.pvp_bonus == "Heroes' Ascent Bonus"
        assert record.nicholas_traveller == (
            "[Gargoyle Skulls](https://wiki.guildwars.com/wiki/Gargoyle_Skull) (2x)"
        )

    def test_unknown_week(self, weekly_html):
        """Test a week missing from the table."""
        with pytest.raises(RowNotFoundError, match="No weekly data found for 1 December 2025"):
            WeeklyParser().parse(weekly_html, "1 December 2025")


class TestDriver:
    """Full fetch-extract-render pass through a mock transport."""

    @pytest.mark.asyncio
    async def test_markdown_report(self, settings, wiki_transport):
        """Test a simulated run renders both pages into one document."""
        emitted = []
        http = HttpClient(transport=wiki_transport, sleep=NoSleep())

        async with http:
            driver = DailiesDriver(
                http,
                settings,
                output_format=OutputFormat.MD,
                at_time=datetime(2025, 11, 23, 17, 0, tzinfo=timezone.utc),
                sleep=NoSleep(),
                emit=emitted.append,
            )
            await driver.run()

        assert len(emitted) == 1
        report = emitted[0]
        assert report.startswith("# Dailies for 23 November 2025")
        assert "## Zaishen Quests" in report
        assert "- **Zaishen Mission**: [Nahpui Quarter](https://wiki.guildwars.com/wiki/Nahpui_Quarter_(mission%29)" in report
        assert "- **PvE Bonus**: Elonian Support Bonus" in report
        assert "[Gargoyle Skulls](https://wiki.guildwars.com/wiki/Gargoyle_Skull) (2x)" in report
