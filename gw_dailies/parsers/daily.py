"""
Parser for the Daily_activities page.

One table serves two schedules: the Zaishen quests, Wanted and Vanguard
columns roll over at the primary cutoff, the Nicholas Sandford column at
the secondary cutoff. Around a rollover the two keys can name different
dates, so each gets its own pass over the rows.
"""

from gw_dailies.core.models import DailyRecord
from gw_dailies.core.normalizer import convert_link

from .base import TableParser


# Column positions in the daily table
ZAISHEN_MISSION = 1
ZAISHEN_BOUNTY = 2
ZAISHEN_COMBAT = 3
ZAISHEN_VANQUISH = 4
WANTED = 5
VANGUARD_QUEST = 6
NICHOLAS_SANDFORD = 7

PRIMARY_COLUMNS = [
    ZAISHEN_MISSION,
    ZAISHEN_BOUNTY,
    ZAISHEN_COMBAT,
    ZAISHEN_VANQUISH,
    WANTED,
    VANGUARD_QUEST,
]


class DailyParser(TableParser):
    """Extract a DailyRecord from the daily activities table."""

    MIN_COLUMNS = 8

    def parse(self, body: str, primary_key: str, secondary_key: str) -> DailyRecord:
        """
        Extract the current daily activities.

        Args:
            body: Page HTML
            primary_key: Row key for the 16:00 UTC schedule
            secondary_key: Row key for the 07:00 UTC schedule

        Returns:
            DailyRecord with link-preserving cells

        Raises:
            TableNotFoundError: If the page has no data table
            RowNotFoundError: If either key has no row
        """
        table = self.table_body(body)

        primary = self.row(table, primary_key, PRIMARY_COLUMNS, "daily")
        secondary = self.row(
            table, secondary_key, [NICHOLAS_SANDFORD], "Nicholas Sandford"
        )

        def link(markup: str) -> str:
            return convert_link(markup, self.origin)

        record = DailyRecord(
            nicholas_sandford=link(secondary[NICHOLAS_SANDFORD]),
            vanguard_quest=link(primary[VANGUARD_QUEST]),
            wanted=link(primary[WANTED]),
            zaishen_mission=link(primary[ZAISHEN_MISSION]),
            zaishen_bounty=link(primary[ZAISHEN_BOUNTY]),
            zaishen_combat=link(primary[ZAISHEN_COMBAT]),
            zaishen_vanquish=link(primary[ZAISHEN_VANQUISH]),
        )
        self.logger.info("daily_extracted", key=primary_key, sandford_key=secondary_key)
        return record
