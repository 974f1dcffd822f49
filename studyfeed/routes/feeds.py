"""
Feed routes: configured source list and refresh.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends

from ..config import state, get_feed_service
from ..exceptions import require_source
from ..schemas import FeedSourceSchema, RefreshRequest, ReplaceFeedsRequest
from ..services import FeedService

router = APIRouter(prefix="/feeds", tags=["feeds"])


# ─────────────────────────────────────────────────────────────
# Feed List
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_feeds() -> list[FeedSourceSchema]:
    """List configured feeds."""
    return [FeedSourceSchema.from_source(s) for s in state.sources]


@router.put("")
async def replace_feeds(request: ReplaceFeedsRequest) -> list[FeedSourceSchema]:
    """Replace the configured feed list (kept in memory only)."""
    state.sources = [f.to_source() for f in request.feeds]
    return [FeedSourceSchema.from_source(s) for s in state.sources]


# ─────────────────────────────────────────────────────────────
# Refresh
# ─────────────────────────────────────────────────────────────

@router.post("/refresh")
async def refresh_feeds(
    service: Annotated[FeedService, Depends(get_feed_service)],
    background_tasks: BackgroundTasks,
    request: RefreshRequest | None = None,
) -> dict:
    """
    Fetch all feeds (runs in background).

    A refresh started while another is running supersedes it.
    """
    if request and request.feeds:
        sources = [f.to_source() for f in request.feeds]
    else:
        sources = list(state.sources)

    background_tasks.add_task(service.fetch_all, sources)
    return {"success": True, "message": "Refresh started", "feed_count": len(sources)}


@router.post("/refresh/{name}")
async def refresh_feed(
    name: str,
    service: Annotated[FeedService, Depends(get_feed_service)],
    background_tasks: BackgroundTasks,
) -> dict:
    """Fetch a single configured feed by name (runs in background)."""
    source = require_source(next((s for s in state.sources if s.name == name), None))
    background_tasks.add_task(service.fetch_one, source)
    return {"success": True, "message": f"Refresh of {source.name} started"}
