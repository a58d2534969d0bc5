"""Parser for the Weekly_activities page."""

from gw_dailies.core.models import WeeklyRecord
from gw_dailies.core.normalizer import convert_link, strip_link

from .base import TableParser


PVE_BONUS = 1
PVP_BONUS = 2
NICHOLAS_TRAVELLER = 3


class WeeklyParser(TableParser):
    """Extract a WeeklyRecord from the weekly activities table."""

    MIN_COLUMNS = 5

    def parse(self, body: str, weekly_key: str) -> WeeklyRecord:
        """
        Extract the current weekly bonuses.

        Bonus names are kept as plain text; the Nicholas the Traveller item
        keeps its link.

        Raises:
            TableNotFoundError: If the page has no data table
            RowNotFoundError: If the key has no row
        """
        table = self.table_body(body)
        cells = self.row(
            table, weekly_key, [PVE_BONUS, PVP_BONUS, NICHOLAS_TRAVELLER], "weekly"
        )

        record = WeeklyRecord(
            nicholas_traveller=convert_link(cells[NICHOLAS_TRAVELLER], self.origin),
            pve_bonus=strip_link(cells[PVE_BONUS]),
            pvp_bonus=strip_link(cells[PVP_BONUS]),
        )
        self.logger.info("weekly_extracted", key=weekly_key)
        return record
