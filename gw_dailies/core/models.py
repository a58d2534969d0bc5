"""
Data models for the dailies pipeline.

Schedules describe when a table's "current" row rolls over; records hold
the normalized cells pulled from one cycle's pages.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ScheduleKind(str, Enum):
    """Which rollover rule a row key is resolved with."""
    PRIMARY = "primary"  # Zaishen quests, Wanted, Vanguard
    SECONDARY = "secondary"  # Nicholas Sandford
    WEEKLY = "weekly"  # Weekly bonuses, Nicholas the Traveller


class OutputFormat(str, Enum):
    """Rendering target for a cycle's result."""
    DISCORD = "discord"
    TXT = "txt"
    MD = "md"
    HTML = "html"


@dataclass(frozen=True)
class Schedule:
    """Cutoff time-of-day (UTC) and cadence for one ScheduleKind."""

    cutoff_hour: int
    cutoff_minute: int = 0
    cutoff_second: int = 0
    cadence_days: int = 1

    # Cycle zero for multi-day cadences
    anchor: Optional[datetime] = None


SCHEDULES = {
    # Rolls over at 16:00 UTC; 5 seconds of grace for the wiki's own update
    ScheduleKind.PRIMARY: Schedule(cutoff_hour=16, cutoff_second=5),
    ScheduleKind.SECONDARY: Schedule(cutoff_hour=7),
    ScheduleKind.WEEKLY: Schedule(
        cutoff_hour=15,
        cadence_days=7,
        anchor=datetime(2025, 2, 10, 15, 0, 0, tzinfo=timezone.utc),
    ),
}


@dataclass(frozen=True)
class DailyRecord:
    """One day's activities, each field a normalized cell."""

    nicholas_sandford: str
    vanguard_quest: str
    wanted: str
    zaishen_mission: str
    zaishen_bounty: str
    zaishen_combat: str
    zaishen_vanquish: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WeeklyRecord:
    """One week's bonuses."""

    nicholas_traveller: str
    pve_bonus: str
    pvp_bonus: str

    def to_dict(self) -> dict:
        return asdict(self)
