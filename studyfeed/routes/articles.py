"""
Article routes: published list, ordering, read markers, abstracts.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..abstracts import abstract_sections_or_whole
from ..config import config, get_feed_service, get_pubmed
from ..exceptions import require_item
from ..models import ReadArticle
from ..proxy import proxied_url
from ..schemas import (
    AbstractResponse,
    AbstractSectionResponse,
    ArticleResponse,
    OpenLinkResponse,
    ReadArticleResponse,
    ReadRecordRequest,
    ShuffleRequest,
    SortRequest,
    UnreadCountResponse,
)
from ..services import (
    FeedService,
    NoPMIDFoundError,
    PubMedClient,
    PubMedError,
    filter_items,
    unread_count,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["articles"])


# ─────────────────────────────────────────────────────────────
# Listing
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_articles(
    service: Annotated[FeedService, Depends(get_feed_service)],
    journal: str | None = None,
    q: str | None = None,
    unread_only: bool = False,
    read_url: Annotated[list[str], Query()] = [],
) -> list[ArticleResponse]:
    """
    List the published articles in their current order.

    Pass every already-read link as a repeated read_url parameter to get
    is_read flags or, with unread_only, to hide read articles.
    """
    read_urls = set(read_url)
    items = filter_items(
        service.items,
        journal=journal,
        read_urls=read_urls,
        unread_only=unread_only,
        search=q,
    )
    return [ArticleResponse.from_item(item, read_urls) for item in items]


@router.get("/unread-count")
async def get_unread_count(
    service: Annotated[FeedService, Depends(get_feed_service)],
    read_url: Annotated[list[str], Query()] = [],
) -> UnreadCountResponse:
    """Unread totals overall and per journal."""
    read_urls = set(read_url)
    items = service.items

    by_journal: dict[str, int] = {}
    for item in items:
        if not item.is_read(read_urls):
            by_journal[item.journal_name] = by_journal.get(item.journal_name, 0) + 1

    return UnreadCountResponse(total=unread_count(items, read_urls), by_journal=by_journal)


# ─────────────────────────────────────────────────────────────
# Ordering
# ─────────────────────────────────────────────────────────────

@router.post("/sort")
async def sort_articles(
    request: SortRequest,
    service: Annotated[FeedService, Depends(get_feed_service)],
) -> dict:
    """Re-sort the published list without fetching."""
    service.sort_items(request.order)
    return {"success": True, "order": request.order.value}


@router.post("/shuffle")
async def shuffle_articles(
    service: Annotated[FeedService, Depends(get_feed_service)],
    request: ShuffleRequest | None = None,
) -> dict:
    """Shuffle the published list."""
    if request is None or request.animate:
        service.shuffle()
    else:
        service.shuffle_immediate()
    return {"success": True}


# ─────────────────────────────────────────────────────────────
# Reading
# ─────────────────────────────────────────────────────────────

@router.get("/open")
async def open_article(url: str) -> OpenLinkResponse:
    """Return the link to open, rewritten through the institutional proxy."""
    return OpenLinkResponse(url=proxied_url(url, config.proxy_settings()))


@router.post("/read-record")
async def read_record(
    request: ReadRecordRequest,
    service: Annotated[FeedService, Depends(get_feed_service)],
) -> ReadArticleResponse:
    """Build the read-marker record for a published article."""
    item = require_item(next((i for i in service.items if i.link == request.link), None))
    record = ReadArticle.from_item(item, is_flagged=request.is_flagged)
    return ReadArticleResponse.from_record(record)


@router.get("/abstract")
async def get_abstract(
    doi: str,
    pubmed: Annotated[PubMedClient, Depends(get_pubmed)],
) -> AbstractResponse:
    """Look up an article's abstract on PubMed and split it into sections."""
    try:
        text = await pubmed.fetch_abstract(doi)
    except NoPMIDFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PubMedError as e:
        logger.warning(f"Abstract lookup failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    sections = abstract_sections_or_whole(text)
    if not sections:
        raise HTTPException(status_code=404, detail="Abstract not available")

    return AbstractResponse(
        doi=doi,
        sections=[AbstractSectionResponse.from_section(s) for s in sections],
    )
