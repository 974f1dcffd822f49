"""
Configuration and application state management.
"""

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

from .models import DEFAULT_CATEGORY, DEFAULT_SOURCES, FeedSource
from .proxy import ProxySettings, ProxyType

if TYPE_CHECKING:
    from .services.feed_service import FeedService
    from .services.pubmed import PubMedClient

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_optional_float(value: str | None) -> float | None:
    """Parse an optional number of seconds; unset or blank means None."""
    if value is None or not value.strip():
        return None
    return float(value)


class Config:
    """Application configuration from environment."""
    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Total per-request timeout in seconds; unset uses aiohttp's default
    FETCH_TIMEOUT: float | None = _parse_optional_float(os.getenv("FETCH_TIMEOUT"))

    # Optional JSON file with [{"name", "url", "category"}, ...]
    FEEDS_PATH: str = os.getenv("FEEDS_PATH", "")

    # PubMed E-utilities key (optional, raises the rate limit)
    PUBMED_API_KEY: str = os.getenv("PUBMED_API_KEY", "")

    # Institutional proxy applied when opening article links
    USE_INSTITUTIONAL_PROXY: bool = _parse_bool(os.getenv("USE_INSTITUTIONAL_PROXY"))
    PROXY_TYPE: str = os.getenv("PROXY_TYPE", ProxyType.PREFIX.value)
    PROXY_ROOT: str = os.getenv("PROXY_ROOT", "")

    def proxy_settings(self) -> ProxySettings:
        """Build proxy settings, falling back to prefix mode for unknown types."""
        try:
            proxy_type = ProxyType(self.PROXY_TYPE)
        except ValueError:
            logger.warning(f"Unknown PROXY_TYPE '{self.PROXY_TYPE}', using prefix")
            proxy_type = ProxyType.PREFIX
        return ProxySettings(
            enabled=self.USE_INSTITUTIONAL_PROXY,
            proxy_type=proxy_type,
            root=self.PROXY_ROOT,
        )


config = Config()


def load_sources(path: str | Path | None = None) -> list[FeedSource]:
    """
    Load the feed list from a JSON file.

    Falls back to the default journals when no path is given, the file does
    not exist, or it lists no feeds.

    Raises:
        ValueError: If the file is not valid JSON or an entry lacks name/url
    """
    if not path:
        return list(DEFAULT_SOURCES)

    feeds_path = Path(path)
    if not feeds_path.exists():
        logger.warning(f"Feed list {feeds_path} not found, using defaults")
        return list(DEFAULT_SOURCES)

    try:
        data = json.loads(feeds_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in feed list: {feeds_path}") from e

    if isinstance(data, dict):
        data = data.get("feeds", [])

    sources = []
    for entry in data:
        try:
            sources.append(FeedSource(
                name=entry["name"],
                url=entry["url"],
                category=entry.get("category") or DEFAULT_CATEGORY,
            ))
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid feed entry in {feeds_path}: {entry!r}") from e

    return sources or list(DEFAULT_SOURCES)


class AppState:
    """Shared application state."""
    feed_service: "FeedService | None" = None
    pubmed: "PubMedClient | None" = None
    sources: list[FeedSource] = []


state = AppState()


def get_feed_service() -> "FeedService":
    """Dependency to get the feed service instance."""
    if not state.feed_service:
        raise HTTPException(status_code=500, detail="Feed service not initialized")
    return state.feed_service


def get_pubmed() -> "PubMedClient":
    """Dependency to get the PubMed client instance."""
    if not state.pubmed:
        raise HTTPException(status_code=500, detail="PubMed client not initialized")
    return state.pubmed
