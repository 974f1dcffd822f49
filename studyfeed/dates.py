"""
Date parsing for feed timestamps.

RSS uses RFC 822 dates ("Mon, 02 Jan 2024 03:04:05 +0000"), Atom and
Dublin Core use ISO-8601. Anything else maps to DISTANT_PAST so that a bad
date never drops an item and always sorts last under newest-first ordering.
"""

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_tz

DISTANT_PAST = datetime(1, 1, 1, tzinfo=timezone.utc)


def _parse_rfc822(raw: str) -> datetime | None:
    # parsedate_tz uses fixed English month/day names, independent of locale
    try:
        parts = parsedate_tz(raw)
    except (TypeError, ValueError, IndexError):
        return None
    if parts is None:
        return None

    offset = parts[9] or 0
    try:
        return datetime(*parts[:6], tzinfo=timezone.utc) - timedelta(seconds=offset)
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_iso8601(raw: str) -> datetime | None:
    value = raw
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        # Offsets at the edge of the calendar can push UTC out of range
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def parse_feed_date(raw: str) -> datetime:
    """
    Parse a feed date string into a timezone-aware UTC datetime.

    Tries RFC 822 first, then ISO-8601. Never raises; returns DISTANT_PAST
    when neither format matches.
    """
    raw = (raw or "").strip()
    if not raw:
        return DISTANT_PAST

    return _parse_rfc822(raw) or _parse_iso8601(raw) or DISTANT_PAST
