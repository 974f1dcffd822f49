"""
Pydantic models for API request/response validation.
"""

from pydantic import BaseModel, Field

from .abstracts import AbstractSection
from .dates import DISTANT_PAST
from .models import DEFAULT_CATEGORY, FeedSource, NormalizedItem, ReadArticle, SortOrder


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedSourceSchema(BaseModel):
    """A configured feed."""
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_source(cls, source: FeedSource) -> "FeedSourceSchema":
        return cls(name=source.name, url=source.url, category=source.category)

    def to_source(self) -> FeedSource:
        return FeedSource(name=self.name, url=self.url, category=self.category)


class ReplaceFeedsRequest(BaseModel):
    """Request to replace the configured feed list."""
    feeds: list[FeedSourceSchema]


class RefreshRequest(BaseModel):
    """Optional explicit feed list for a refresh; configured feeds otherwise."""
    feeds: list[FeedSourceSchema] | None = None


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class AbstractSectionResponse(BaseModel):
    title: str
    content: str

    @classmethod
    def from_section(cls, section: AbstractSection) -> "AbstractSectionResponse":
        return cls(title=section.title, content=section.content)


class ArticleResponse(BaseModel):
    """A published feed item."""
    title: str
    link: str
    description: str
    published_at: str | None
    pub_date: str
    creator: str
    journal_name: str
    category: str
    image_url: str | None = None
    doi: str | None = None
    abstract_sections: list[AbstractSectionResponse] | None = None
    is_read: bool = False

    @classmethod
    def from_item(
        cls,
        item: NormalizedItem,
        read_urls: set[str] | None = None,
    ) -> "ArticleResponse":
        sections = item.abstract_sections
        return cls(
            title=item.clean_title,
            link=item.link,
            description=item.clean_description,
            # Sentinel dates are reported as unknown
            published_at=item.date.isoformat() if item.date != DISTANT_PAST else None,
            pub_date=item.pub_date,
            creator=item.creator,
            journal_name=item.journal_name,
            category=item.category,
            image_url=item.image_url,
            doi=item.doi,
            abstract_sections=(
                [AbstractSectionResponse.from_section(s) for s in sections]
                if sections else None
            ),
            is_read=item.is_read(read_urls) if read_urls else False,
        )


class SortRequest(BaseModel):
    order: SortOrder = SortOrder.RECENT


class ShuffleRequest(BaseModel):
    animate: bool = True


class ReadRecordRequest(BaseModel):
    link: str
    is_flagged: bool = False


class ReadArticleResponse(BaseModel):
    """Fields for the caller's read-marker store."""
    url: str
    title: str
    category: str
    publication_name: str
    date_read: str
    is_flagged: bool

    @classmethod
    def from_record(cls, record: ReadArticle) -> "ReadArticleResponse":
        return cls(
            url=record.url,
            title=record.title,
            category=record.category,
            publication_name=record.publication_name,
            date_read=record.date_read.isoformat(),
            is_flagged=record.is_flagged,
        )


class UnreadCountResponse(BaseModel):
    total: int
    by_journal: dict[str, int]


class AbstractResponse(BaseModel):
    doi: str
    sections: list[AbstractSectionResponse]


class OpenLinkResponse(BaseModel):
    url: str
