"""
Parser strategies for the activity pages.

Parsers turn a fetched page body into an immutable record for the keys
resolved for the current cycle.

Strategies:
- DailyParser: Daily_activities table (primary and secondary keys)
- WeeklyParser: Weekly_activities table
"""

from .base import TableParser
from .daily import DailyParser
from .weekly import WeeklyParser

__all__ = [
    "TableParser",
    "DailyParser",
    "WeeklyParser",
]
