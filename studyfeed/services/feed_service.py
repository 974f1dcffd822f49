"""
Feed service: fetch orchestration and the published reading list.

Fetches one or many feeds over HTTP, parses each response independently,
merges the results and publishes them as a single snapshot. A feed that
cannot be fetched or parsed contributes no items; it never fails the batch.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterable

import aiohttp

from ..feeds import FeedParseError, parse_feed
from ..models import FeedSource, NormalizedItem, SortOrder

logger = logging.getLogger(__name__)

# Several journal servers reject requests that identify as a script
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class FeedSnapshot:
    """
    The published state of the reading list.

    Replaced as a whole on every change; consumers never see a partially
    merged batch.
    """
    items: tuple[NormalizedItem, ...] = ()
    is_fetching: bool = False
    animate: bool = False
    generation: int = 0


Listener = Callable[[FeedSnapshot], None]


# ─────────────────────────────────────────────────────────────
# Ordering and filtering
# ─────────────────────────────────────────────────────────────

def sort_items(
    items: Iterable[NormalizedItem],
    order: SortOrder | str,
    rng: random.Random | None = None,
) -> list[NormalizedItem]:
    """
    Return items in the requested order.

    Sorting is stable, so ties keep their input (source) order and
    re-applying an order leaves the list unchanged. An unknown order keeps
    the current order.
    """
    result = list(items)
    try:
        order = SortOrder(order)
    except ValueError:
        logger.warning(f"Unknown sort order '{order}', keeping current order")
        return result

    if order == SortOrder.RECENT:
        result.sort(key=lambda item: item.date, reverse=True)
    elif order == SortOrder.TITLE:
        result.sort(key=lambda item: item.clean_title.casefold())
    elif order == SortOrder.AUTHOR:
        result.sort(key=lambda item: item.creator.casefold())
    else:
        (rng or random).shuffle(result)

    return result


def filter_items(
    items: Iterable[NormalizedItem],
    journal: str | None = None,
    read_urls: set[str] | frozenset[str] | None = None,
    unread_only: bool = False,
    search: str | None = None,
) -> list[NormalizedItem]:
    """
    Narrow the reading list for display.

    Args:
        items: Items to filter
        journal: Keep only items from this source name
        read_urls: Links the caller has already marked read
        unread_only: Drop items whose link is in read_urls
        search: Case-insensitive text matched against title and description
    """
    result = list(items)

    if journal:
        result = [item for item in result if item.journal_name == journal]

    if unread_only and read_urls:
        result = [item for item in result if not item.is_read(read_urls)]

    if search:
        needle = search.casefold()
        result = [
            item for item in result
            if needle in item.clean_title.casefold()
            or needle in item.clean_description.casefold()
        ]

    return result


def unread_count(items: Iterable[NormalizedItem], read_urls: set[str] | frozenset[str]) -> int:
    """Count items whose link is not in read_urls."""
    return sum(1 for item in items if not item.is_read(read_urls))


# ─────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────

class FeedService:
    """
    Fetches feeds and publishes the merged, sorted reading list.

    All state changes go through _publish on the event loop, which swaps in a
    new FeedSnapshot in one assignment and then notifies subscribers.

    A newer fetch supersedes an older one: each fetch takes a generation
    number, and a batch that finishes after a newer batch has started is
    discarded rather than published.
    """

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        rng: random.Random | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent or BROWSER_USER_AGENT
        self.headers = {"User-Agent": self.user_agent}
        self._rng = rng or random.Random()
        self._snapshot = FeedSnapshot()
        self._generation = 0
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> FeedSnapshot:
        return self._snapshot

    @property
    def items(self) -> list[NormalizedItem]:
        return list(self._snapshot.items)

    @property
    def is_fetching(self) -> bool:
        return self._snapshot.is_fetching

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback for every published snapshot.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(
        self,
        items: Iterable[NormalizedItem],
        is_fetching: bool,
        animate: bool = False,
    ) -> None:
        self._snapshot = FeedSnapshot(
            items=tuple(items),
            is_fetching=is_fetching,
            animate=animate,
            generation=self._generation,
        )
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                logger.exception("Feed snapshot listener failed")

    # ─────────────────────────────────────────────────────────────
    # Fetching
    # ─────────────────────────────────────────────────────────────

    def _begin_batch(self) -> int:
        """Start a new fetch generation and publish the cleared list."""
        self._generation += 1
        self._publish([], is_fetching=True)
        return self._generation

    def _finish_batch(self, generation: int, items: list[NormalizedItem]) -> bool:
        """Publish a finished batch unless a newer fetch has started since."""
        if generation != self._generation:
            logger.debug(
                f"Discarding stale fetch batch {generation} "
                f"(current batch is {self._generation})"
            )
            return False

        self._publish(sort_items(items, SortOrder.RECENT), is_fetching=False)
        return True

    def _session(self) -> aiohttp.ClientSession:
        kwargs = {"headers": self.headers}
        if self.timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
        return aiohttp.ClientSession(**kwargs)

    async def _download(self, session: aiohttp.ClientSession, source: FeedSource) -> bytes:
        """GET a feed body. Raises on network errors and non-2xx statuses."""
        async with session.get(source.url) as resp:
            resp.raise_for_status()
            return await resp.read()

    async def _download_safe(self, session: aiohttp.ClientSession, source: FeedSource) -> bytes:
        """Download a feed, returning empty bytes on failure instead of raising."""
        try:
            return await self._download(session, source)
        except Exception as e:
            logger.warning(f"Failed to fetch feed {source.name} ({source.url}): {e}")
            return b""

    def _parse_source(self, source: FeedSource, data: bytes) -> list[NormalizedItem]:
        """Parse and normalize one feed body; malformed feeds yield no items."""
        if not data:
            return []

        try:
            raw_items = parse_feed(data)
            return [NormalizedItem.from_raw(raw, source) for raw in raw_items]
        except FeedParseError as e:
            logger.warning(f"Skipping feed {source.name}: {e}")
        except Exception as e:
            logger.warning(f"Failed to read items from {source.name}: {e}")
        return []

    async def fetch_one(self, source: FeedSource) -> None:
        """Fetch a single feed and publish its items, newest first."""
        generation = self._begin_batch()
        items: list[NormalizedItem] = []

        # The batch always finishes, so is_fetching never stays set
        try:
            async with self._session() as session:
                data = await self._download_safe(session, source)
            items = self._parse_source(source, data)
        finally:
            if self._finish_batch(generation, items):
                logger.info(f"Fetched {len(items)} items from {source.name}")

    async def fetch_all(self, sources: Iterable[FeedSource]) -> None:
        """
        Fetch all feeds concurrently and publish the merged list.

        Every request settles (successfully or as empty bytes) before any
        parsing or sorting, so the published order does not depend on which
        response arrived first.
        """
        sources = list(sources)
        generation = self._begin_batch()
        items: list[NormalizedItem] = []

        try:
            async with self._session() as session:
                bodies = await asyncio.gather(
                    *(self._download_safe(session, source) for source in sources)
                )

            for source, data in zip(sources, bodies):
                items.extend(self._parse_source(source, data))
        finally:
            if self._finish_batch(generation, items):
                logger.info(f"Fetched {len(items)} items from {len(sources)} feeds")

    # ─────────────────────────────────────────────────────────────
    # Reordering
    # ─────────────────────────────────────────────────────────────

    def sort_items(self, order: SortOrder | str) -> None:
        """Re-sort the published list without fetching."""
        items = sort_items(self._snapshot.items, order, rng=self._rng)
        self._publish(items, is_fetching=self._snapshot.is_fetching)

    def shuffle(self) -> None:
        """Shuffle the published list, flagging the change as animated."""
        items = list(self._snapshot.items)
        self._rng.shuffle(items)
        self._publish(items, is_fetching=self._snapshot.is_fetching, animate=True)

    def shuffle_immediate(self) -> None:
        """Shuffle the published list without animation."""
        items = list(self._snapshot.items)
        self._rng.shuffle(items)
        self._publish(items, is_fetching=self._snapshot.is_fetching)
