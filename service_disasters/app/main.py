"""
Disasters service for the Relief Coordination backend.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Query, Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig

from .adapters.geocoding_client import GeocodingClient
from .adapters.location_extractor import LocationExtractor
from .adapters.scrapers import OfficialUpdatesAggregator, ScrapeResult, create_default_scrapers
from .adapters.social_media_client import SocialMediaClient
from .caching.cache_manager import CacheManager
from .caching.store import create_cache_store
from .domain.models import (
    DisasterCreateRequest,
    GeocodeRequest,
    GeocodeResponse,
    SocialMediaPost,
)
from .persistence.mongo import DEFAULT_RESOURCE_RADIUS_METERS, MongoPersistence


API_PREFIX = "/api"


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _cache_key(request: Request) -> str:
    """Request identity: full path plus query string."""
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


class DisastersService(BaseService):
    """Disasters service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("disasters", config)

        self.persistence = MongoPersistence(self.config.mongo_uri, self.config.mongo_database)
        self.cache_store = create_cache_store(self.config)
        self.cache_manager = CacheManager(self.cache_store, metrics=self.metrics)

        self.location_extractor = LocationExtractor(
            self.config.gemini_api_key,
            self.config.gemini_model,
        )
        self.geocoding_client = GeocodingClient(
            self.config.geocoder_provider,
            api_key=self.config.geocoder_api_key,
            user_agent=self.config.geocoder_user_agent,
            timeout=self.config.http_timeout_seconds,
        )

        self.http_client = httpx.AsyncClient(
            timeout=self.config.http_timeout_seconds,
            follow_redirects=True,
        )
        self.official_updates = OfficialUpdatesAggregator(
            create_default_scrapers(self.http_client),
            metrics=self.metrics,
        )
        self.social_media_client = SocialMediaClient(
            self.http_client,
            self.config.social_media_feed_url,
        )

        @self.app.on_event("startup")
        async def _startup():
            await self.persistence.start()
            try:
                await self.cache_store.start()
            except Exception as exc:
                # Requests still work uncached; reads and writes fail soft
                self.logger.error("Cache store unavailable at startup", error=str(exc))

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.cache_store.stop()
            await self.persistence.stop()
            await self.geocoding_client.close()
            await self.http_client.aclose()

        self._setup_disaster_routes()
        self._setup_enrichment_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.disasters_service = self

    async def _check_dependencies(self) -> Dict[str, str]:
        mongo_ok = await self.persistence.ping()
        cache_ok = await self.cache_manager.check_health()
        return {
            "mongodb": "ok" if mongo_ok else "error",
            "cache": "ok" if cache_ok else "error",
        }

    def _setup_disaster_routes(self):
        """Set up disaster and resource record routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "disasters",
                "message": "Relief Coordination - Disasters Service",
                "version": "1.0.0",
            }

        @self.app.post(f"{API_PREFIX}/disasters", status_code=201)
        async def create_disaster(payload: DisasterCreateRequest):
            """Create a disaster owned by the configured user."""
            try:
                record = await self.persistence.create_disaster(payload, owner_id=self.config.mock_user_id)
            except Exception as exc:
                self.logger.error("Error creating disaster", error=str(exc))
                return _message(500, "Error creating disaster.")
            return JSONResponse(status_code=201, content=record.to_dict())

        @self.app.get(f"{API_PREFIX}/disasters")
        async def list_disasters():
            """List disasters, newest first."""
            try:
                records = await self.persistence.list_disasters()
            except Exception as exc:
                self.logger.error("Error fetching disasters", error=str(exc))
                return _message(500, "Error fetching disasters.")
            return [record.to_dict() for record in records]

        @self.app.get(f"{API_PREFIX}/disasters/{{disaster_id}}/resources")
        async def get_nearby_resources(
            disaster_id: str,
            lat: float = Query(..., ge=-90, le=90),
            lon: float = Query(..., ge=-180, le=180),
            radius: int = Query(DEFAULT_RESOURCE_RADIUS_METERS, ge=0, description="Metres"),
        ):
            """Resources within radius of (lat, lon), nearest first."""
            try:
                resources = await self.persistence.find_resources_near(lat, lon, radius)
            except Exception as exc:
                self.logger.error("Error fetching resources", disaster_id=disaster_id, error=str(exc))
                return _message(500, "Error fetching resources.")
            return [resource.to_dict() for resource in resources]

    def _setup_enrichment_routes(self):
        """Set up geocoding and third-party update routes."""

        @self.app.post(f"{API_PREFIX}/geocode")
        async def geocode(payload: GeocodeRequest):
            """Extract a place from free text and geocode it."""
            if not payload.text or not payload.text.strip():
                return _message(400, "Text for geocoding is required.")

            try:
                with self.metrics.time_operation("external_call_duration_seconds", dependency="gemini"):
                    location_name = await self.location_extractor.extract_location(payload.text)
            except Exception:
                return _message(500, "An error occurred with the AI or geocoding service.")

            if not location_name:
                return _message(404, "Could not extract a specific location from the text.")

            with self.metrics.time_operation("external_call_duration_seconds", dependency="geocoder"):
                location_data = await self.geocoding_client.geocode(location_name)
            if not location_data:
                return _message(404, f'Could not find coordinates for "{location_name}".')

            return GeocodeResponse(location_name=location_name, location_data=location_data).to_dict()

        @self.app.get(f"{API_PREFIX}/disasters/{{disaster_id}}/social-media")
        async def get_social_media(disaster_id: str, request: Request):
            """Social media posts, cached for ten minutes."""
            feed_url = self.config.social_media_feed_url or (
                f"{str(request.base_url).rstrip('/')}{API_PREFIX}/mock-social-media"
            )

            async def produce() -> List[Dict[str, Any]]:
                with self.metrics.time_operation("external_call_duration_seconds", dependency="social_media"):
                    return await self.social_media_client.fetch_posts(feed_url)

            try:
                return await self.cache_manager.cache_aside(
                    _cache_key(request),
                    self.config.social_media_cache_ttl,
                    produce,
                    cache_type="social_media",
                )
            except Exception as exc:
                self.logger.error("Error fetching social media updates", disaster_id=disaster_id, error=str(exc))
                return _message(500, "Error fetching social media updates.")

        @self.app.get(f"{API_PREFIX}/disasters/{{disaster_id}}/official-updates")
        async def get_official_updates(disaster_id: str, request: Request):
            """FEMA and Red Cross headlines, cached for an hour."""
            outcome: Dict[str, ScrapeResult] = {}

            async def produce() -> Dict[str, Any]:
                with self.metrics.time_operation("external_call_duration_seconds", dependency="official_updates"):
                    outcome.update(await self.official_updates.collect())
                return {
                    key: outcome[key].to_list() if key in outcome else []
                    for key in ("fema", "redCross")
                }

            try:
                return await self.cache_manager.cache_aside(
                    _cache_key(request),
                    self.config.official_updates_cache_ttl,
                    produce,
                    cache_type="official_updates",
                    should_store=lambda _: all(result.ok for result in outcome.values()),
                )
            except Exception as exc:
                self.logger.error("Error fetching official updates", disaster_id=disaster_id, error=str(exc))
                return _message(500, "Error fetching official updates.")

        @self.app.get(f"{API_PREFIX}/mock-social-media")
        async def mock_social_media():
            """Static two-post feed stamped with the current time."""
            now = datetime.now(timezone.utc)
            posts = [
                SocialMediaPost(post="#floodrelief Need food and water in downtown Varanasi.", user="citizen1", timestamp=now),
                SocialMediaPost(post="Anyone have a boat near Assi Ghat? #varanasiflood", user="helper2", timestamp=now),
            ]
            return [post.model_dump(mode="json") for post in posts]


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = DisastersService(config)
    return service.app


if __name__ == "__main__":
    service = DisastersService()
    service.run()
