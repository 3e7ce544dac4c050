"""
Adapters package for the Disasters Service.

Contains wrappers around external collaborators:

- LocationExtractor: Gemini prompt-and-parse location extraction
- GeocodingClient: place name to coordinates
- Page scrapers: FEMA and Red Cross official updates
- SocialMediaClient: disaster social feed

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .location_extractor import LocationExtractor
from .geocoding_client import GeocodingClient
from .scrapers import (
    FemaScraper,
    OfficialUpdatesAggregator,
    PageScraper,
    RedCrossScraper,
    ScrapeResult,
    create_default_scrapers,
)
from .social_media_client import SocialMediaClient

__all__ = [
    "LocationExtractor",
    "GeocodingClient",
    "FemaScraper",
    "OfficialUpdatesAggregator",
    "PageScraper",
    "RedCrossScraper",
    "ScrapeResult",
    "create_default_scrapers",
    "SocialMediaClient",
]
