"""
Scrapers for official disaster relief update pages.

Each scraper is tied to one site's current markup. A scrape never raises:
failures come back as a ScrapeResult with ``error`` set, so callers can tell
an empty page from an unreachable one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from shared.logging import get_logger
from ..domain.models import OfficialUpdate

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


MAX_UPDATES_PER_SOURCE = 3


@dataclass
class ScrapeResult:
    """Outcome of one scrape: the updates found, or the reason it failed."""

    source: str
    updates: List[OfficialUpdate] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_list(self) -> List[Dict[str, str]]:
        return [update.model_dump() for update in self.updates]


class PageScraper:
    """Fetches one page and pulls (title, link) pairs out of it."""

    key = "abstract"
    source = "abstract"
    url = ""
    base_url = ""
    selector = ""

    def __init__(self, client: httpx.AsyncClient, *, limit: int = MAX_UPDATES_PER_SOURCE):
        self.client = client
        self.limit = limit
        self.logger = get_logger(f"disasters.scraper.{self.key}")

    async def scrape(self) -> ScrapeResult:
        try:
            response = await self.client.get(self.url)
            response.raise_for_status()
            updates = self.parse(response.text)
        except Exception as exc:
            self.logger.warning("Official updates scrape failed", url=self.url, error=str(exc))
            return ScrapeResult(source=self.source, error=str(exc) or exc.__class__.__name__)

        self.logger.info("Official updates scraped", url=self.url, count=len(updates))
        return ScrapeResult(source=self.source, updates=updates)

    def parse(self, html: str) -> List[OfficialUpdate]:
        soup = BeautifulSoup(html, "html.parser")
        updates: List[OfficialUpdate] = []
        for element in soup.select(self.selector)[: self.limit]:
            title, href = self.extract(element)
            title = (title or "").strip()
            if title and href:
                updates.append(OfficialUpdate(
                    title=title,
                    link=urljoin(self.base_url, href.strip()),
                    source=self.source,
                ))
        return updates

    def extract(self, element: Tag):
        """Return (title, href) for a matched element."""
        raise NotImplementedError


class FemaScraper(PageScraper):
    key = "fema"
    source = "FEMA"
    url = "https://www.fema.gov/disasters"
    base_url = "https://www.fema.gov"
    selector = ".views-row"

    def extract(self, element: Tag):
        heading = element.find("h2")
        anchor = element.select_one("h2 a")
        title = heading.get_text() if heading else None
        href = anchor.get("href") if anchor else None
        return title, href


class RedCrossScraper(PageScraper):
    key = "redCross"
    source = "Red Cross"
    url = "https://www.redcross.org/get-help/disaster-relief-and-recovery-services.html"
    base_url = "https://www.redcross.org"
    selector = "a.related-links-title"

    def extract(self, element: Tag):
        return element.get_text(), element.get("href")


class OfficialUpdatesAggregator:
    """Runs every scraper independently and collects their results."""

    def __init__(self, scrapers: Sequence[PageScraper], *, metrics: Optional["MetricsCollector"] = None):
        self.scrapers = list(scrapers)
        self.metrics = metrics

    async def collect(self) -> Dict[str, ScrapeResult]:
        results = await asyncio.gather(*(scraper.scrape() for scraper in self.scrapers))
        collected: Dict[str, ScrapeResult] = {}
        for scraper, result in zip(self.scrapers, results):
            collected[scraper.key] = result
            if self.metrics:
                self.metrics.increment_counter(
                    "scrape_results_total",
                    source=scraper.key,
                    result="ok" if result.ok else "error",
                )
        return collected


def create_default_scrapers(client: httpx.AsyncClient) -> List[PageScraper]:
    return [FemaScraper(client), RedCrossScraper(client)]
