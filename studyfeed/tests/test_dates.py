"""
Tests for feed date parsing.
"""

from datetime import datetime, timezone

from studyfeed.dates import DISTANT_PAST, parse_feed_date


class TestRFC822:
    """Tests for RSS-style dates."""

    def test_utc_offset(self):
        """Should parse the canonical RSS date format."""
        result = parse_feed_date("Mon, 02 Jan 2024 03:04:05 +0000")
        assert result == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_positive_offset_is_normalized(self):
        """Offsets are applied so the result is the same instant in UTC."""
        result = parse_feed_date("Tue, 02 Jan 2024 05:04:05 +0200")
        assert result == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_named_zone(self):
        """GMT is understood as UTC."""
        result = parse_feed_date("Mon, 02 Jan 2024 03:04:05 GMT")
        assert result == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_surrounding_whitespace(self):
        result = parse_feed_date("  Mon, 02 Jan 2024 03:04:05 +0000\n")
        assert result == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestISO8601:
    """Tests for Atom / Dublin Core dates."""

    def test_zulu(self):
        result = parse_feed_date("2024-01-02T03:04:05Z")
        assert result == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_offset(self):
        result = parse_feed_date("2024-01-02T03:04:05-05:00")
        assert result == datetime(2024, 1, 2, 8, 4, 5, tzinfo=timezone.utc)

    def test_date_only_is_midnight_utc(self):
        result = parse_feed_date("2024-01-02")
        assert result == datetime(2024, 1, 2, tzinfo=timezone.utc)


class TestFallback:
    """Tests for the distant-past sentinel."""

    def test_garbage_returns_sentinel(self):
        """Unparsable input never raises."""
        assert parse_feed_date("not a date") == DISTANT_PAST

    def test_empty_returns_sentinel(self):
        assert parse_feed_date("") == DISTANT_PAST

    def test_out_of_range_offsets_return_sentinel(self):
        """Converting to UTC past year 1 or 9999 falls back instead of raising."""
        assert parse_feed_date("0001-01-01T00:00:00+01:00") == DISTANT_PAST
        assert parse_feed_date("9999-12-31T23:30:00-05:00") == DISTANT_PAST

    def test_sentinel_sorts_last_newest_first(self):
        """The sentinel must sort below every real date."""
        dates = [
            parse_feed_date("not a date"),
            parse_feed_date("Mon, 02 Jan 2024 03:04:05 +0000"),
            parse_feed_date("1900-01-01T00:00:00Z"),
        ]
        ordered = sorted(dates, reverse=True)
        assert ordered[-1] == DISTANT_PAST
        assert ordered[0].year == 2024
