"""
Tests for the streaming RSS/Atom parser.
"""

import pytest

from studyfeed.feeds import FeedParseError, FeedParser, parse_feed
from studyfeed.models import RawFeedItem


class TestRSS:
    """Tests for RSS 2.0 documents."""

    def test_emits_one_item_per_element_in_order(self, rss_feed):
        items = parse_feed(rss_feed)
        assert [i.title for i in items] == [
            "Steroids & Sepsis",
            "Asthma in Children",
            "Undated Letter",
        ]

    def test_item_fields(self, rss_feed):
        first = parse_feed(rss_feed)[0]
        assert first.link == "https://journal.example.com/doi/full/10.1056/NEJMoa2034577?af=R"
        assert first.pub_date == "Mon, 02 Jan 2024 03:04:05 +0000"
        assert first.creator == "Smith J"
        assert first.description.startswith("<p>BACKGROUND: Sepsis is common.</p>")

    def test_first_image_wins(self, rss_feed):
        """media:content before enclosure: the first URL is kept."""
        first, second, _ = parse_feed(rss_feed)
        assert first.image_url == "https://img.example.com/1.jpg"
        assert second.image_url is None

    def test_channel_fields_do_not_leak_into_items(self, rss_feed):
        """Channel title/link seen before the first item are reset."""
        first = parse_feed(rss_feed)[0]
        assert first.title == "Steroids & Sepsis"
        assert "Current issue" not in first.description
        assert first.link.endswith("?af=R")

    def test_missing_fields_default_to_empty(self, rss_feed):
        last = parse_feed(rss_feed)[2]
        assert last.description == ""
        assert last.creator == ""

    def test_multiple_creators_are_comma_separated(self):
        xml = b"""<rss xmlns:dc="http://purl.org/dc/elements/1.1/"><channel><item>
            <title>Two Authors</title>
            <dc:creator>Smith J</dc:creator>
            <dc:creator>Adams K</dc:creator>
        </item></channel></rss>"""
        (item,) = parse_feed(xml)
        assert item.creator == "Smith J, Adams K"

    def test_indentation_whitespace_is_ignored(self):
        xml = b"""<rss><channel><item>
            <title>
                Spaced Title
            </title>
            <link>
                https://example.com/x
            </link>
        </item></channel></rss>"""
        (item,) = parse_feed(xml)
        assert item == RawFeedItem(title="Spaced Title", link="https://example.com/x")

    def test_dublin_core_date(self):
        xml = b"""<rss xmlns:dc="http://purl.org/dc/elements/1.1/"><channel>
            <item><title>T</title><dc:date>2024-02-01</dc:date></item>
        </channel></rss>"""
        (item,) = parse_feed(xml)
        assert item.pub_date == "2024-02-01"

    def test_unmapped_elements_are_ignored(self):
        xml = b"""<rss><channel><item>
            <title>T</title><guid>abc-123</guid><category>Cardiology</category>
        </item></channel></rss>"""
        (item,) = parse_feed(xml)
        assert item == RawFeedItem(title="T")


class TestAtom:
    """Tests for Atom documents."""

    def test_emits_one_item_per_entry(self, atom_feed):
        items = parse_feed(atom_feed)
        assert [i.title for i in items] == ["Atom One", "Atom Two"]

    def test_alternate_link_preferred(self, atom_feed):
        """rel=alternate overrides an earlier rel=self link."""
        first = parse_feed(atom_feed)[0]
        assert first.link == "https://atom.example.com/1"

    def test_first_link_kept_when_no_alternate(self, atom_feed):
        second = parse_feed(atom_feed)[1]
        assert second.link == "https://atom.example.com/2"

    def test_summary_and_published(self, atom_feed):
        first = parse_feed(atom_feed)[0]
        assert first.description == "Summary one"
        assert first.pub_date == "2024-01-05T10:00:00Z"


class TestEdgeCases:
    """Tests for empty and malformed documents."""

    def test_feed_without_items(self):
        xml = b"<rss><channel><title>Empty</title></channel></rss>"
        assert parse_feed(xml) == []

    def test_malformed_xml_raises(self):
        with pytest.raises(FeedParseError):
            parse_feed(b"<rss><channel><item><title>Broken</channel>")

    def test_empty_body_raises(self):
        with pytest.raises(FeedParseError):
            parse_feed(b"")

    def test_html_error_page_raises(self):
        with pytest.raises(FeedParseError):
            parse_feed(b"<html><body><p>Not found<br></body></html>")

    def test_parsers_do_not_share_state(self, rss_feed, atom_feed):
        """Each document gets its own parser instance."""
        first = FeedParser()
        first.parse(rss_feed)
        second = FeedParser()
        assert second.parse(atom_feed)[0].title == "Atom One"
        assert len(second.items) == 2
