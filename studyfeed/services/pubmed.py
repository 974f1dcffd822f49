"""
PubMed abstract lookup by DOI.

Uses the NCBI E-utilities: esearch maps a DOI to a PMID, efetch returns the
article XML whose AbstractText elements hold the (often labelled) abstract.
"""

import asyncio
import logging
import time

import aiohttp
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

EUTILS_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/"

# NCBI allows 10 requests/second with a key; stay well below it
MIN_REQUEST_INTERVAL = 0.15


class PubMedError(Exception):
    """Raised when an abstract cannot be retrieved from PubMed."""

    pass


class NoPMIDFoundError(PubMedError):
    """Raised when PubMed has no record for a DOI."""

    pass


class PubMedClient:
    """Fetches abstracts from PubMed with request spacing."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = EUTILS_BASE_URL,
        timeout: int = 30,
        min_interval: float = MIN_REQUEST_INTERVAL,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._min_interval = min_interval
        self._last_request = 0.0
        self._lock = asyncio.Lock()

    async def _rate_limit(self) -> None:
        """Ensure minimum interval between requests."""
        async with self._lock:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request = time.monotonic()

    def _params(self, **params: str) -> dict[str, str]:
        if self.api_key:
            params["api_key"] = self.api_key
        return params

    async def _get_json(self, session: aiohttp.ClientSession, endpoint: str, params: dict) -> dict:
        await self._rate_limit()
        async with session.get(f"{self.base_url}{endpoint}", params=params) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)

    async def _get_text(self, session: aiohttp.ClientSession, endpoint: str, params: dict) -> str:
        await self._rate_limit()
        async with session.get(f"{self.base_url}{endpoint}", params=params) as resp:
            resp.raise_for_status()
            return await resp.text()

    async def fetch_abstract(self, doi: str) -> str:
        """
        Fetch the abstract text for a DOI.

        Labelled sections come back as "LABEL: text" separated by blank
        lines, ready for segment_abstract.

        Raises:
            NoPMIDFoundError: If no PubMed record matches the DOI
            PubMedError: On network or response errors
        """
        logger.info(f"Looking up PubMed abstract for DOI {doi}")

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                payload = await self._get_json(session, "esearch.fcgi", self._params(
                    db="pubmed",
                    term=f"{doi}[Location ID]",
                    retmode="json",
                ))

                id_list = payload.get("esearchresult", {}).get("idlist", [])
                if not id_list:
                    raise NoPMIDFoundError(f"No PubMed record found for DOI {doi}")
                pmid = id_list[0]

                xml = await self._get_text(session, "efetch.fcgi", self._params(
                    db="pubmed",
                    id=pmid,
                    retmode="xml",
                ))
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, AttributeError) as e:
            raise PubMedError(f"PubMed request failed for DOI {doi}: {e}") from e

        abstract = parse_abstract_xml(xml)
        logger.info(f"Fetched abstract for DOI {doi} (PMID {pmid})")
        return abstract


def parse_abstract_xml(xml: str) -> str:
    """Join the AbstractText elements of an efetch response."""
    soup = BeautifulSoup(xml, "html.parser")

    parts = []
    for element in soup.find_all("abstracttext"):
        text = element.get_text().strip()
        label = element.get("label")
        if label:
            text = f"{label}: {text}"
        if text:
            parts.append(text)

    return "\n\n".join(parts)
