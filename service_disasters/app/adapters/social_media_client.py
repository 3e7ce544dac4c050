"""
Social media feed client for Disasters.
"""

from typing import Any, Dict, List, Optional

import httpx

from shared.logging import get_logger
from shared.errors import ExternalServiceError


class SocialMediaClient:
    """Fetches disaster-related posts from a feed endpoint."""

    def __init__(self, client: httpx.AsyncClient, feed_url: Optional[str] = None):
        self.client = client
        self.feed_url = feed_url
        self.logger = get_logger("disasters.social_media")

    async def fetch_posts(self, feed_url: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return the feed's posts; raises ExternalServiceError on any failure."""
        url = feed_url or self.feed_url
        if not url:
            raise ExternalServiceError("social_media", "No feed URL configured")

        try:
            response = await self.client.get(url)
            response.raise_for_status()
            posts = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            self.logger.error("Social media feed request failed", url=url, error=str(exc))
            raise ExternalServiceError("social_media", str(exc), {"url": url}) from exc

        if not isinstance(posts, list):
            raise ExternalServiceError("social_media", "Feed did not return a list", {"url": url})

        self.logger.debug("Social media posts retrieved", url=url, count=len(posts))
        return posts
