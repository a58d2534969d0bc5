"""
Output rendering for a cycle's daily and weekly records.

Pure string assembly; every format lists the same fields in the same
order: Nicholas Sandford, Vanguard Quest, Wanted, the four Zaishen
quests, then the weekly bonuses.
"""

from .core.models import DailyRecord, OutputFormat, WeeklyRecord
from .core.normalizer import decode_entities, portable_links_to_html, strip_portable_links


HTML_STYLE = """\
        body { font-family: Arial, sans-serif; max-width: 800px; margin: 20px auto; padding: 20px; }
        h1 { color: #2c3e50; }
        h2 { color: #34495e; margin-top: 30px; }
        .activity { margin: 10px 0; padding: 8px; background: #ecf0f1; border-radius: 4px; }
        .label { font-weight: bold; display: inline-block; width: 200px; }
        a { color: #3498db; text-decoration: none; }
        a:hover { text-decoration: underline; }"""


def _sections(daily: DailyRecord, weekly: WeeklyRecord) -> list[tuple[str, list[tuple[str, str]]]]:
    """(heading, [(label, value), ...]) groups in display order."""
    return [
        ("", [
            ("Nicholas Sandford", daily.nicholas_sandford),
            ("Vanguard Quest", daily.vanguard_quest),
            ("Wanted", daily.wanted),
        ]),
        ("Zaishen Quests", [
            ("Zaishen Mission", daily.zaishen_mission),
            ("Zaishen Bounty", daily.zaishen_bounty),
            ("Zaishen Combat", daily.zaishen_combat),
            ("Zaishen Vanquish", daily.zaishen_vanquish),
        ]),
        ("Weekly bonuses", [
            ("Nicholas the Traveller", weekly.nicholas_traveller),
            ("PvE Bonus", weekly.pve_bonus),
            ("PvP Bonus", weekly.pvp_bonus),
        ]),
    ]


def _dotted(label: str) -> str:
    """Pad a label with dots to the width of the longest one."""
    return label.ljust(len("Nicholas the Traveller"), ".")


def render_txt(daily: DailyRecord, weekly: WeeklyRecord, date_label: str) -> str:
    lines = [f"Dailies for {date_label}"]
    for heading, fields in _sections(daily, weekly):
        lines.append("")
        if heading == "Weekly bonuses":
            lines.append("Weekly bonuses:")
        for label, value in fields:
            lines.append(f"{_dotted(label)}: {decode_entities(strip_portable_links(value))}")
    return "\n".join(lines)


def render_md(daily: DailyRecord, weekly: WeeklyRecord, date_label: str) -> str:
    # Markdown resolves entity references, so cells go in encoded
    lines = [f"# Dailies for {date_label}"]
    for heading, fields in _sections(daily, weekly):
        lines.append("")
        if heading:
            lines.extend([f"## {heading}", ""])
        for label, value in fields:
            lines.append(f"- **{label}**: {value}")
    return "\n".join(lines)


def render_html(daily: DailyRecord, weekly: WeeklyRecord, date_label: str) -> str:
    body = [f"    <h1>Dailies for {date_label}</h1>"]
    for heading, fields in _sections(daily, weekly):
        if heading:
            body.append(f"    <h2>{heading}</h2>")
        for label, value in fields:
            body.append(
                f'    <div class="activity"><span class="label">{label}:</span> '
                f"{portable_links_to_html(value)}</div>"
            )

    return "\n".join([
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '    <meta charset="utf-8">',
        f"    <title>Dailies for {date_label}</title>",
        "    <style>",
        HTML_STYLE,
        "    </style>",
        "</head>",
        "<body>",
        *body,
        "</body>",
        "</html>",
    ])


def render_discord(daily: DailyRecord, weekly: WeeklyRecord, date_label: str) -> str:
    """Embed description; the date goes in the embed title."""
    lines = []
    for heading, fields in _sections(daily, weekly):
        if lines:
            lines.append("")
        if heading == "Weekly bonuses":
            lines.append("**Weekly bonuses:**")
        for label, value in fields:
            lines.append(f"`{_dotted(label)}`: {decode_entities(value)}")
    return "\n".join(lines)


RENDERERS = {
    OutputFormat.TXT: render_txt,
    OutputFormat.MD: render_md,
    OutputFormat.HTML: render_html,
    OutputFormat.DISCORD: render_discord,
}


def render(
    daily: DailyRecord,
    weekly: WeeklyRecord,
    date_label: str,
    fmt: OutputFormat,
) -> str:
    """
    Render records in the requested format.

    Args:
        daily: Current daily activities
        weekly: Current weekly bonuses
        date_label: Primary row key, shown as the heading date
        fmt: Output format

    Returns:
        Rendered document or message body
    """
    return RENDERERS[OutputFormat(fmt)](daily, weekly, date_label)


def message_title(date_label: str) -> str:
    return f"Dailies for {date_label}"
