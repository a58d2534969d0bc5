"""
Core layer - stable foundation for the dailies pipeline.

Components:
- models: Schedule, DailyRecord, WeeklyRecord dataclasses
- schedule: Cutoff rules mapping an instant to a table row key
- http_client: Retrying HTTP client
- selectors: Table body and row lookup
- normalizer: Cell markup to portable link text
"""

from .models import (
    ScheduleKind,
    Schedule,
    SCHEDULES,
    DailyRecord,
    WeeklyRecord,
    OutputFormat,
)
from .schedule import resolve_key, format_key, next_trigger, seconds_until
from .normalizer import (
    convert_link,
    strip_link,
    strip_tags,
    decode_entities,
    strip_portable_links,
    portable_links_to_html,
)
from .selectors import (
    StructureError,
    TableNotFoundError,
    RowNotFoundError,
    find_table_body,
    extract_row,
)

__all__ = [
    "ScheduleKind",
    "Schedule",
    "SCHEDULES",
    "DailyRecord",
    "WeeklyRecord",
    "OutputFormat",
    "resolve_key",
    "format_key",
    "next_trigger",
    "seconds_until",
    "convert_link",
    "strip_link",
    "strip_tags",
    "decode_entities",
    "strip_portable_links",
    "portable_links_to_html",
    "StructureError",
    "TableNotFoundError",
    "RowNotFoundError",
    "find_table_body",
    "extract_row",
]
