"""
Data models for feed sources and the items parsed from them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import cached_property

from .abstracts import AbstractSection, extract_doi, segment_abstract
from .dates import DISTANT_PAST, parse_feed_date
from .text import strip_html

DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class FeedSource:
    """A configured RSS/Atom feed. Identified by its URL."""
    name: str
    url: str
    category: str = DEFAULT_CATEGORY


DEFAULT_SOURCES: list[FeedSource] = [
    FeedSource(
        name="NEJM",
        url="https://www.nejm.org/action/showFeed?jc=nejm&type=etoc&feed=rss",
        category="Medical",
    ),
    FeedSource(
        name="AAP Pediatrics",
        url="https://publications.aap.org/rss/site_1000005/1000005.xml",
        category="Medical",
    ),
    FeedSource(
        name="Annals of Internal Medicine",
        url="https://www.acpjournals.org/action/showFeed?type=etoc&feed=rss&jc=aim",
        category="Medical",
    ),
    FeedSource(
        name="The Lancet",
        url="https://www.thelancet.com/rssfeed/lancet_current.xml",
        category="Medical",
    ),
]


class SortOrder(str, Enum):
    """Orderings offered for the published item list."""
    RECENT = "Most Recent"
    TITLE = "Title A-Z"
    AUTHOR = "Author A-Z"
    RANDOM = "Random Shuffle"


@dataclass(frozen=True)
class RawFeedItem:
    """One <item>/<entry> as captured by the parser, before normalization."""
    title: str = ""
    link: str = ""
    description: str = ""
    pub_date: str = ""
    creator: str = ""
    image_url: str | None = None


@dataclass(eq=False)
class NormalizedItem:
    """
    A feed item ready for display.

    Equality and hashing use the link only, so items from two separate
    fetches of the same feed compare equal and read markers keyed on the
    link keep working.
    """
    title: str
    link: str
    description: str
    pub_date: str
    creator: str
    date: datetime = DISTANT_PAST
    image_url: str | None = None
    journal_name: str = ""
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_raw(cls, raw: RawFeedItem, source: FeedSource | None = None) -> "NormalizedItem":
        """Build a normalized item, stamping the source's name and category."""
        return cls(
            title=raw.title,
            link=raw.link,
            description=raw.description,
            pub_date=raw.pub_date,
            creator=raw.creator,
            date=parse_feed_date(raw.pub_date),
            image_url=raw.image_url,
            journal_name=source.name if source else "",
            category=source.category if source else DEFAULT_CATEGORY,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NormalizedItem):
            return NotImplemented
        return self.link == other.link

    def __hash__(self) -> int:
        return hash(self.link)

    @cached_property
    def clean_title(self) -> str:
        return strip_html(self.title)

    @cached_property
    def clean_description(self) -> str:
        return strip_html(self.description)

    @cached_property
    def doi(self) -> str | None:
        return extract_doi(self.link, self.description)

    @cached_property
    def abstract_sections(self) -> list[AbstractSection] | None:
        return segment_abstract(self.description)

    def is_read(self, read_urls: set[str] | frozenset[str]) -> bool:
        """Check the item's link against a caller-supplied set of read URLs."""
        return self.link in read_urls


@dataclass
class ReadArticle:
    """
    Read marker record owned by the caller's store.

    The pipeline only builds these from published items; it never stores
    or mutates them.
    """
    url: str
    title: str
    category: str
    publication_name: str
    date_read: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_flagged: bool = False

    @classmethod
    def from_item(cls, item: NormalizedItem, is_flagged: bool = False) -> "ReadArticle":
        return cls(
            url=item.link,
            title=item.clean_title,
            category=item.category,
            publication_name=item.journal_name,
            is_flagged=is_flagged,
        )
