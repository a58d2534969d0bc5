"""
Row key resolution for the daily and weekly activity tables.

The wiki tables are keyed by an English date string in their first column
("22 November 2025"). These functions map a wall-clock instant onto the
key of the row that is current at that instant.
"""

from datetime import date, datetime, time, timedelta, timezone

from .models import SCHEDULES, Schedule, ScheduleKind


# Fixed English names; the join key must not depend on the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _as_utc(now: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def format_key(day: date) -> str:
    """
    Format a date the way the wiki's first column renders it.

    Day of month without leading zero, full month name, four-digit year.

    Args:
        day: Date (or datetime) to format

    Returns:
        Key string, e.g. "1 March 2026"
    """
    return f"{day.day} {MONTH_NAMES[day.month - 1]} {day.year:04d}"


def cutoff_for(now: datetime, schedule: Schedule) -> datetime:
    """Return the schedule's cutoff instant on the UTC day of `now`."""
    now = _as_utc(now)
    return datetime.combine(
        now.date(),
        time(schedule.cutoff_hour, schedule.cutoff_minute, schedule.cutoff_second),
        tzinfo=timezone.utc,
    )


def current_period_start(now: datetime, kind: ScheduleKind) -> datetime:
    """
    Return the start instant of the period that is current at `now`.

    Daily schedules: yesterday's date before the cutoff, today's from it on.
    Anchored schedules: step from the anchor in whole cadences while the
    next step is not after `now`.
    """
    schedule = SCHEDULES[kind]
    now = _as_utc(now)

    if schedule.anchor is None:
        if now < cutoff_for(now, schedule):
            return now - timedelta(days=1)
        return now

    step = timedelta(days=schedule.cadence_days)
    start = schedule.anchor
    while start + step <= now:
        start += step
    return start


def resolve_key(now: datetime, kind: ScheduleKind) -> str:
    """
    Resolve the table row key that is current at `now`.

    Args:
        now: Current (or simulated) instant
        kind: Which schedule's rollover rule to apply

    Returns:
        Date key matching the wiki table's first column
    """
    return format_key(current_period_start(now, kind))


def next_trigger(now: datetime) -> datetime:
    """Next primary cutoff strictly after `now`."""
    target = cutoff_for(now, SCHEDULES[ScheduleKind.PRIMARY])
    if _as_utc(now) >= target:
        target += timedelta(days=1)
    return target


def seconds_until(target: datetime, now: datetime) -> int:
    """Whole seconds from `now` to `target`, never negative."""
    return max(int((target - _as_utc(now)).total_seconds()), 0)
