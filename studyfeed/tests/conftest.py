"""
Pytest fixtures for studyfeed tests.
"""

import random

import pytest
from fastapi.testclient import TestClient

from studyfeed.config import state
from studyfeed.models import DEFAULT_SOURCES, FeedSource, NormalizedItem, RawFeedItem
from studyfeed.server import app
from studyfeed.services import FeedService, PubMedClient


RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Example Journal</title>
    <link>https://journal.example.com</link>
    <description>Current issue</description>
    <item>
      <title>Steroids &amp; Sepsis</title>
      <link>https://journal.example.com/doi/full/10.1056/NEJMoa2034577?af=R</link>
      <description><![CDATA[<p>BACKGROUND: Sepsis is common.</p><p>METHODS: We enrolled 100 patients.</p><p>RESULTS: Mortality fell.</p>]]></description>
      <pubDate>Mon, 02 Jan 2024 03:04:05 +0000</pubDate>
      <dc:creator>Smith J</dc:creator>
      <media:content url="https://img.example.com/1.jpg" medium="image"/>
      <enclosure url="https://img.example.com/other.jpg" type="image/jpeg"/>
    </item>
    <item>
      <title>Asthma in Children</title>
      <link>https://journal.example.com/a2</link>
      <description>A short note.</description>
      <pubDate>Wed, 10 Jan 2024 08:00:00 +0000</pubDate>
      <dc:creator>Adams K</dc:creator>
    </item>
    <item>
      <title>Undated Letter</title>
      <link>https://journal.example.com/a3</link>
      <pubDate>sometime last week</pubDate>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Journal</title>
  <link href="https://atom.example.com/"/>
  <entry>
    <title>Atom One</title>
    <link rel="self" href="https://atom.example.com/self/1"/>
    <link rel="alternate" href="https://atom.example.com/1"/>
    <summary>Summary one</summary>
    <published>2024-01-05T10:00:00Z</published>
  </entry>
  <entry>
    <title>Atom Two</title>
    <link href="https://atom.example.com/2"/>
    <link rel="enclosure" href="https://atom.example.com/2.pdf"/>
    <published>2024-01-01T09:30:00-05:00</published>
  </entry>
</feed>
"""

RSS_SOURCE = FeedSource(name="Example Journal", url="https://journal.example.com/rss", category="Medical")
ATOM_SOURCE = FeedSource(name="Atom Journal", url="https://atom.example.com/feed", category="Science")
DEAD_SOURCE = FeedSource(name="Dead Journal", url="https://dead.example.com/rss")


@pytest.fixture
def rss_feed() -> bytes:
    return RSS_FEED


@pytest.fixture
def atom_feed() -> bytes:
    return ATOM_FEED


@pytest.fixture
def make_item():
    """Factory for normalized items with sensible defaults."""
    def _make(
        title: str = "Title",
        link: str = "https://example.com/a",
        pub_date: str = "Mon, 01 Jan 2024 00:00:00 +0000",
        creator: str = "",
        description: str = "",
        source: FeedSource = RSS_SOURCE,
    ) -> NormalizedItem:
        raw = RawFeedItem(
            title=title,
            link=link,
            description=description,
            pub_date=pub_date,
            creator=creator,
        )
        return NormalizedItem.from_raw(raw, source)

    return _make


@pytest.fixture
def service() -> FeedService:
    return FeedService(rng=random.Random(1234))


@pytest.fixture
def client(service):
    """Create a test client with isolated application state."""
    # Store original state
    original_service = state.feed_service
    original_pubmed = state.pubmed
    original_sources = state.sources

    state.feed_service = service
    state.pubmed = PubMedClient(min_interval=0)
    state.sources = list(DEFAULT_SOURCES)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.feed_service = original_service
    state.pubmed = original_pubmed
    state.sources = original_sources


@pytest.fixture
def client_with_data(client, service, make_item):
    """Test client with a published list of three articles."""
    nejm, lancet = DEFAULT_SOURCES[0], DEFAULT_SOURCES[3]
    items = [
        make_item(
            title="Newest NEJM",
            link="https://nejm.example.com/1",
            pub_date="Fri, 05 Jan 2024 00:00:00 +0000",
            creator="Baker",
            description="See https://doi.org/10.1056/NEJMoa2400001 for details",
            source=nejm,
        ),
        make_item(
            title="Lancet Review",
            link="https://lancet.example.com/1",
            pub_date="Wed, 03 Jan 2024 00:00:00 +0000",
            creator="Abel",
            description="BACKGROUND: Why. METHODS: How.",
            source=lancet,
        ),
        make_item(
            title="Older NEJM",
            link="https://nejm.example.com/2",
            pub_date="Mon, 01 Jan 2024 00:00:00 +0000",
            creator="Carter",
            source=nejm,
        ),
    ]
    service._publish(items, is_fetching=False)
    return client, items
