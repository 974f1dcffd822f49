"""
Study Feed API Server

FastAPI application providing endpoints for:
- Feed list and refresh
- The merged article list (filter, sort, shuffle)
- Read-marker records and proxied article links
- PubMed abstract lookup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import config, state, load_sources
from .routes import articles_router, feeds_router, misc_router
from .services import FeedService, PubMedClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Startup - skip if already initialized (e.g., by tests)
    if state.feed_service is None:
        state.feed_service = FeedService(timeout=config.FETCH_TIMEOUT)
        state.pubmed = PubMedClient(api_key=config.PUBMED_API_KEY or None)
        state.sources = load_sources(config.FEEDS_PATH)
        logger.info(f"Loaded {len(state.sources)} feeds")

        if not config.PUBMED_API_KEY:
            logger.info("No PUBMED_API_KEY configured, using anonymous E-utilities access")

    yield


app = FastAPI(
    title="Study Feed API",
    version=__version__,
    lifespan=lifespan
)

# Include routers
app.include_router(misc_router)
app.include_router(feeds_router)
app.include_router(articles_router)
