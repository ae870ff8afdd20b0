"""Now-playing text normalization and validity checks.

Hey future me - every metadata source on the planet formats "now playing" differently.
Icecast servers send HTML entities, Airtime Pro prefixes track names with "- ",
half the stations put "Live" or "Radio" in the title field when nothing is on.
This module is the ONE place where raw strings become display strings.

The rules:
- normalize() cleans a raw string (entities, one leading dash, whitespace)
- is_generic_or_invalid() is the single validity predicate used everywhere
  (fetchers, race coordinator, orchestrator). Don't add per-fetcher thresholds!
- parse_artist_title() turns (text, artist, title) into one "Artist - Title" string

Examples:
    >>> normalize("- Artist - Song")
    'Artist - Song'
    >>> normalize("Tom &amp; Jerry")
    'Tom & Jerry'
    >>> is_generic_or_invalid("Live")
    True
    >>> is_generic_or_invalid("Live at the Jazz Festival 2024 with Special Guests")
    False
    >>> parse_artist_title("Artist X - Track Y")
    'Artist X - Track Y'
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# =============================================================================
# HTML ENTITIES
# Only this fixed set is decoded. html.unescape() would also turn "&copy" or
# random "&foo;" sequences in titles into symbols, which we don't want.
# =============================================================================

HTML_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#039;", "'"),
    ("&#x27;", "'"),
    ("&#39;", "'"),
)

# One leading separator: hyphen, en-dash or em-dash, followed by whitespace.
_LEADING_SEPARATOR = re.compile(r"^\s*[-–—]\s+")

# =============================================================================
# GENERIC PLACEHOLDERS
# Hey future me - stations put these in the title field when there's no real info.
# Exact matches are always rejected. Substring matches only count for SHORT texts
# (< GENERIC_SUBSTRING_MAX_LENGTH) so "Live at the Jazz Festival 2024" survives.
# =============================================================================

GENERIC_DENYLIST: tuple[str, ...] = (
    "unknown",
    "untitled",
    "live",
    "on-air",
    "stream",
    "radio",
    "broadcasting",
    "music",
    "live stream",
    "internet radio",
    "online radio",
    "web radio",
    "digital radio",
    "airtime!",
)

MIN_TEXT_LENGTH = 3
GENERIC_SUBSTRING_MAX_LENGTH = 20

TITLE_SEPARATOR = " - "


def normalize(raw: str | None) -> str:
    """Clean a raw now-playing string.

    Decodes the fixed entity set, strips a single leading separator token
    and trims. Empty result means "no metadata".

    Args:
        raw: Raw text from any source (may be None)

    Returns:
        Cleaned text, or "" when nothing is left
    """
    if not raw:
        return ""

    text = str(raw).strip()
    for entity, replacement in HTML_ENTITIES:
        text = text.replace(entity, replacement)

    text = _LEADING_SEPARATOR.sub("", text, count=1)
    return text.strip()


def is_generic_or_invalid(text: str | None) -> bool:
    """Check whether a now-playing text is too short or a generic placeholder.

    Args:
        text: Candidate display text

    Returns:
        True if the text must not be displayed
    """
    if not text:
        return True

    lowered = text.lower().strip()
    if len(lowered) < MIN_TEXT_LENGTH:
        return True

    for pattern in GENERIC_DENYLIST:
        if lowered == pattern:
            return True
        if len(lowered) < GENERIC_SUBSTRING_MAX_LENGTH and pattern in lowered:
            return True
    return False


def is_valid_now_playing(text: str | None) -> bool:
    """Canonical validity predicate: non-empty and not generic."""
    return bool(text) and not is_generic_or_invalid(text)


def compose_now_playing(artist: str | None, title: str | None) -> str:
    """Join artist and title, avoiding "X - X" duplicates."""
    artist = (artist or "").strip()
    title = (title or "").strip()
    if artist and title and artist != title:
        return f"{artist}{TITLE_SEPARATOR}{title}"
    return title or artist


# Listen future me, this mirrors what stations actually send:
# - only text with " - " in it → split into artist/title on the FIRST separator
#   ("A - B - C" becomes artist "A", title "B - C")
# - text plus only one of artist/title → text wins as the title
# - both artist and title → text is ignored
def parse_artist_title(
    text: str | None = None,
    artist: str | None = None,
    title: str | None = None,
) -> str | None:
    """Build one display string from free text and/or separate fields.

    Args:
        text: Free-form now-playing text
        artist: Separate artist field
        title: Separate title field

    Returns:
        Normalized "Artist - Title" (or whatever part exists), None if nothing usable
    """
    text = (text or "").strip()
    final_artist = (artist or "").strip()
    final_title = (title or "").strip()

    if not text and not final_artist and not final_title:
        return None

    if text and not final_artist and not final_title and TITLE_SEPARATOR in text:
        head, _, tail = text.partition(TITLE_SEPARATOR)
        final_artist = head.strip()
        final_title = tail.strip()
    elif text and (not final_artist or not final_title):
        final_title = text

    now_playing = compose_now_playing(final_artist, final_title) or text
    cleaned = normalize(now_playing)
    return cleaned or None


# =============================================================================
# STATION API EXTRACTION RULES
# Hey future me - "conventional" now-playing endpoints come in a handful of shapes.
# Each rule looks at ONE shape and returns RawFields or None. First rule whose key
# is present wins, even if its fields turn out empty (same as the old behavior).
# =============================================================================


@dataclass(frozen=True)
class RawFields:
    """Unprocessed text/artist/title picked out of a JSON document."""

    text: str = ""
    artist: str = ""
    title: str = ""

    def to_now_playing(self) -> str | None:
        """Reduce to a display string."""
        return parse_artist_title(self.text, self.artist, self.title)


def _first_str(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _rule_nowplaying(data: dict[str, Any]) -> RawFields | None:
    node = data.get("nowplaying") or data.get("now_playing")
    if not node:
        return None
    if isinstance(node, str):
        return RawFields(text=node)
    if isinstance(node, dict):
        return RawFields(
            artist=_first_str(node, "artist", "performer"),
            title=_first_str(node, "song", "track", "title"),
        )
    return RawFields()


def _rule_current(data: dict[str, Any]) -> RawFields | None:
    node = data.get("current")
    if not node:
        return None
    if isinstance(node, str):
        return RawFields(text=node)
    if isinstance(node, dict):
        return RawFields(title=_first_str(node, "title", "track"))
    return RawFields()


def _rule_flat(data: dict[str, Any]) -> RawFields | None:
    if not (data.get("song") or data.get("track") or data.get("title")):
        return None
    return RawFields(
        artist=_first_str(data, "artist"),
        title=_first_str(data, "song", "track", "title"),
    )


STATION_EXTRACTION_RULES: tuple[Callable[[dict[str, Any]], RawFields | None], ...] = (
    _rule_nowplaying,
    _rule_current,
    _rule_flat,
)


def extract_station_fields(data: Any) -> RawFields | None:
    """Apply the station extraction rules in order, first match wins."""
    if not isinstance(data, dict):
        return None
    for rule in STATION_EXTRACTION_RULES:
        fields = rule(data)
        if fields is not None:
            return fields
    return None


def parse_station_metadata(data: Any) -> str | None:
    """Extract a display string from a conventional now-playing JSON document."""
    fields = extract_station_fields(data)
    return fields.to_now_playing() if fields else None
