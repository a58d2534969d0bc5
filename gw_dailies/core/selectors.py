"""
Table lookup helpers for the wiki activity pages.

Both pages carry one data table inside the MediaWiki content area. Rows
are matched positionally: the first cell holds the date key, the
remaining cells are read by fixed column index.
"""

from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

import structlog

logger = structlog.get_logger(__name__)


# First match wins; the second covers parsers that do not insert <tbody>
TABLE_BODY_SELECTORS = [
    "div.mw-parser-output table tbody",
    "div.mw-parser-output table",
]


class StructureError(Exception):
    """Page does not have the shape or content the parsers expect."""


class TableNotFoundError(StructureError):
    """No data table in the page's content area."""


class RowNotFoundError(StructureError):
    """No table row matches the resolved key."""

    def __init__(self, label: str, key: str):
        self.label = label
        self.key = key
        super().__init__(f"No {label} data found for {key}")


def find_table_body(
    soup: BeautifulSoup,
    selectors: Optional[list[str]] = None,
) -> Tag:
    """
    Find the primary data table body.

    Args:
        soup: Parsed page
        selectors: CSS selectors to try in order

    Returns:
        First matching element

    Raises:
        TableNotFoundError: If no selector matches
    """
    for selector in selectors or TABLE_BODY_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            return element
    raise TableNotFoundError("Could not find table tbody")


def row_cells(row: Tag) -> list[Tag]:
    """Direct child elements of a table row."""
    return [child for child in row.children if isinstance(child, Tag)]


def cell_html(cell: Tag) -> str:
    """Inner HTML of a cell, trimmed."""
    return cell.decode_contents().strip()


def extract_row(
    container: Union[BeautifulSoup, Tag],
    key: str,
    min_columns: int,
    columns: list[int],
) -> Optional[dict[int, str]]:
    """
    Find the first row whose date cell equals `key`.

    Rows with fewer than `min_columns` cells (headers, footers, malformed
    rows) are skipped.

    Args:
        container: Table body (or table) element
        key: Resolved date key
        min_columns: Minimum cell count for a row to be considered
        columns: Column indices to return

    Returns:
        Mapping of column index to cell inner HTML, or None if no row matches
    """
    for row in container.select("tr"):
        cells = row_cells(row)
        if len(cells) < min_columns:
            continue

        if cells[0].get_text().strip() != key:
            continue

        logger.debug("row_matched", key=key)
        return {index: cell_html(cells[index]) for index in columns}

    return None
