"""
Normalization utilities for wiki table cells.

Handles:
- Anchor markup to portable links ([text](url))
- Anchor markup to plain anchor text
- Portable links back to plain text or HTML anchors

Normalized cells keep the page's HTML entities (`&amp;`, `&lt;`), so a
cell is always safe to drop into an HTML document. Plain-text targets
call decode_entities() last.
"""

import html as html_module
import re
from urllib.parse import urljoin

DEFAULT_ORIGIN = "https://wiki.guildwars.com"

LINK_WITH_HREF_RE = re.compile(r'<a\s+[^>]*href="([^"]+)"[^>]*>(.+?)</a>')
ANY_LINK_RE = re.compile(r"<a\s+[^>]*>(.+?)</a>")
TAG_RE = re.compile(r"<[^>]+>")
PORTABLE_LINK_RE = re.compile(r"\[(.+?)\]\((.+?)\)")


def strip_tags(markup: str) -> str:
    """Remove inline tags; entities stay encoded."""
    if not markup:
        return ""
    return TAG_RE.sub("", markup)


def decode_entities(text: str) -> str:
    """Decode HTML entities for plain-text targets."""
    if not text:
        return ""
    return html_module.unescape(text)


def absolute_url(href: str, origin: str = DEFAULT_ORIGIN) -> str:
    """
    Resolve a wiki href against the site origin.

    Closing parentheses are percent-encoded so the URL can sit inside
    portable link syntax.
    """
    url = urljoin(origin + "/", html_module.unescape(href))
    return url.replace(")", "%29")


def _with_suffix(text: str, markup: str, link_end: int) -> str:
    """Append whatever follows the anchor, tags removed."""
    suffix = strip_tags(markup[link_end:]).strip()
    if not suffix:
        return text
    return f"{text} {suffix}"


def convert_link(markup: str, origin: str = DEFAULT_ORIGIN) -> str:
    """
    Convert cell markup to link-preserving text.

    Examples:
    - '<a href="/wiki/Kaineng_Center">Kaineng Center</a>'
      -> '[Kaineng Center](https://wiki.guildwars.com/wiki/Kaineng_Center)'
    - '<a href="/wiki/Ale">Ale</a> (3x)' -> '[Ale](https://...) (3x)'
    - 'Plain text' -> 'Plain text'

    Args:
        markup: Inner HTML of a table cell
        origin: Site origin for relative hrefs

    Returns:
        Normalized cell text
    """
    if not markup:
        return ""

    match = LINK_WITH_HREF_RE.search(markup)
    if not match:
        return strip_tags(markup)

    href, inner = match.groups()
    link = f"[{strip_tags(inner)}]({absolute_url(href, origin)})"
    return _with_suffix(link, markup, match.end())


def strip_link(markup: str) -> str:
    """
    Convert cell markup to plain text, keeping only the anchor's text.

    Trailing text after the anchor is kept the same way as in
    convert_link().
    """
    if not markup:
        return ""

    match = ANY_LINK_RE.search(markup)
    if not match:
        return strip_tags(markup)

    return _with_suffix(strip_tags(match.group(1)), markup, match.end())


def strip_portable_links(text: str) -> str:
    """Replace [text](url) with text, then drop any leftover tags."""
    if not text:
        return ""
    return TAG_RE.sub("", PORTABLE_LINK_RE.sub(r"\1", text))


def portable_links_to_html(text: str) -> str:
    """Replace [text](url) with an HTML anchor."""
    if not text:
        return ""

    def anchor(match):
        label, url = match.groups()
        return f'<a href="{html_module.escape(url)}">{label}</a>'

    return PORTABLE_LINK_RE.sub(anchor, text)
