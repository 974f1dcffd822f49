"""
Service layer for feed fetching and abstract lookup.

Services hold the business logic; routes stay thin HTTP adapters that get
them through the dependency factories in ..config.
"""

from .feed_service import (
    BROWSER_USER_AGENT,
    FeedService,
    FeedSnapshot,
    filter_items,
    sort_items,
    unread_count,
)
from .pubmed import NoPMIDFoundError, PubMedClient, PubMedError

__all__ = [
    "BROWSER_USER_AGENT",
    "FeedService",
    "FeedSnapshot",
    "filter_items",
    "sort_items",
    "unread_count",
    "NoPMIDFoundError",
    "PubMedClient",
    "PubMedError",
]
