"""
Feed Parser - Streaming RSS/Atom item extraction.

Handles:
- RSS 2.0 <item> and Atom <entry> elements as equivalent item boundaries
- Atom link-as-attribute (<link rel="alternate" href="..."/>) and RSS
  link-as-text (<link>...</link>)
- media:content / enclosure image URLs
- Dublin Core creator and date elements

The parser is a SAX content handler: items are built while the document
streams through and sealed when their closing tag is seen. Namespace
processing is off, so prefixed names such as dc:creator are matched exactly
as the feed writes them.
"""

import logging
import xml.sax
from xml.sax.handler import ContentHandler

from .models import RawFeedItem

logger = logging.getLogger(__name__)

ITEM_ELEMENTS = frozenset({"item", "entry"})
IMAGE_ELEMENTS = frozenset({"media:content", "enclosure"})

# Element name -> accumulator receiving its text
TEXT_FIELDS: dict[str, str] = {
    "title": "title",
    "link": "link",
    "description": "description",
    "summary": "description",
    "pubDate": "pub_date",
    "published": "pub_date",
    "dc:date": "pub_date",
    "dc:creator": "creator",
}

# Fields that may repeat within an item (one dc:creator per author)
REPEAT_SEPARATORS: dict[str, str] = {"creator": ", "}


class FeedParseError(Exception):
    """Raised when a feed document is not well-formed XML."""

    pass


class FeedParser(ContentHandler):
    """
    Tag-driven state machine producing RawFeedItems from one feed document.

    Use a fresh instance per document; no state is shared between feeds.
    """

    def __init__(self):
        super().__init__()
        self.items: list[RawFeedItem] = []
        self._current_element = ""
        self._text_chunks: list[str] = []
        self._reset_item()

    def _reset_item(self) -> None:
        self._fields: dict[str, str] = {
            "title": "",
            "link": "",
            "description": "",
            "pub_date": "",
            "creator": "",
        }
        self._image_url: str | None = None

    def _flush_text(self) -> None:
        """Append the buffered text of the current element to its field."""
        field = TEXT_FIELDS.get(self._current_element)
        text = "".join(self._text_chunks).strip()
        self._text_chunks = []
        # Whitespace-only text is indentation from pretty-printed XML
        if field and text:
            if self._fields[field] and field in REPEAT_SEPARATORS:
                text = REPEAT_SEPARATORS[field] + text
            self._fields[field] += text

    def parse(self, data: bytes) -> list[RawFeedItem]:
        """
        Parse one feed document.

        Args:
            data: Raw response body

        Returns:
            Items in document order (empty if the feed has none)

        Raises:
            FeedParseError: If the document is not well-formed XML
        """
        try:
            xml.sax.parseString(data, self)
        except xml.sax.SAXException as e:
            raise FeedParseError(f"Failed to parse feed: {e}") from e
        logger.debug(f"Parsed {len(self.items)} feed items")
        return self.items

    # ─────────────────────────────────────────────────────────────
    # SAX callbacks
    # ─────────────────────────────────────────────────────────────

    def startElement(self, name, attrs):
        self._flush_text()
        self._current_element = name

        if name in ITEM_ELEMENTS:
            self._reset_item()

        if name == "link":
            href = attrs.get("href")
            if href is not None:
                if not self._fields["link"] or attrs.get("rel") == "alternate":
                    self._fields["link"] = href

        if name in IMAGE_ELEMENTS:
            url = attrs.get("url")
            if url is not None and self._image_url is None:
                self._image_url = url

    def characters(self, content):
        if TEXT_FIELDS.get(self._current_element):
            self._text_chunks.append(content)

    def endElement(self, name):
        self._flush_text()
        self._current_element = ""

        if name in ITEM_ELEMENTS:
            self.items.append(RawFeedItem(
                title=self._fields["title"].strip(),
                link=self._fields["link"].strip(),
                description=self._fields["description"].strip(),
                pub_date=self._fields["pub_date"].strip(),
                creator=self._fields["creator"].strip(),
                image_url=self._image_url,
            ))


def parse_feed(data: bytes) -> list[RawFeedItem]:
    """Parse a feed document with a fresh FeedParser."""
    return FeedParser().parse(data)
