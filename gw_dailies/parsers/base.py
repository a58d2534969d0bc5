"""
Base class for table parsers.

Parsers implement the extraction phase - locating the row for a
resolved key and normalizing its cells.
"""

from abc import ABC, abstractmethod
from typing import Optional

from bs4 import BeautifulSoup

import structlog

from gw_dailies.core.normalizer import DEFAULT_ORIGIN
from gw_dailies.core.selectors import (
    RowNotFoundError,
    extract_row,
    find_table_body,
)

logger = structlog.get_logger(__name__)


class TableParser(ABC):
    """
    Abstract base class for activity table parsers.

    Each page has one data table whose first column is a date key and
    whose other columns sit at fixed positions. A layout change on the
    wiki is an interface break, so subclasses hard-code their indices.
    """

    # Rows with fewer cells are headers, footers or malformed
    MIN_COLUMNS: int = 0

    def __init__(
        self,
        origin: str = DEFAULT_ORIGIN,
        table_selectors: Optional[list[str]] = None,
    ):
        """
        Initialize parser.

        Args:
            origin: Site origin used to absolutize relative links
            table_selectors: CSS selectors for the data table body
        """
        self.origin = origin
        self.table_selectors = table_selectors
        self.logger = logger.bind(parser=self.__class__.__name__)

    def table_body(self, body: str):
        """Parse a page and return its data table body."""
        soup = BeautifulSoup(body, "lxml")
        return find_table_body(soup, self.table_selectors)

    def row(self, table, key: str, columns: list[int], label: str) -> dict[int, str]:
        """
        Look up a row by key.

        Raises:
            RowNotFoundError: If no row matches
        """
        cells = extract_row(table, key, self.MIN_COLUMNS, columns)
        if cells is None:
            self.logger.warning("row_not_found", label=label, key=key)
            raise RowNotFoundError(label, key)
        return cells

    @abstractmethod
    def parse(self, body: str, *keys: str):
        """
        Extract a record from a page body.

        Args:
            body: Page HTML
            *keys: Resolved row keys, one per schedule the page serves

        Returns:
            Immutable record
        """
        pass
