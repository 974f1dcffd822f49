"""
Miscellaneous routes: health check.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import get_feed_service
from ..services import FeedService

router = APIRouter(tags=["misc"])


@router.get("/status")
async def health_check(
    service: Annotated[FeedService, Depends(get_feed_service)],
) -> dict:
    """API health check with the state of the published list."""
    snapshot = service.snapshot
    return {
        "status": "ok",
        "version": __version__,
        "is_fetching": snapshot.is_fetching,
        "item_count": len(snapshot.items),
        "generation": snapshot.generation,
    }
