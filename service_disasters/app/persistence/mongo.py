"""
MongoDB persistence layer for the Disasters service.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, GEOSPHERE, AsyncMongoClient

from shared.logging import get_logger
from shared.errors import PersistenceError
from ..domain.models import DisasterCreateRequest, DisasterRecord, ResourceRecord


DEFAULT_RESOURCE_RADIUS_METERS = 10000


class MongoPersistence:
    """Disaster and resource collections with 2dsphere indexes."""

    def __init__(self, mongo_uri: str, database: Optional[str] = None):
        self.mongo_uri = mongo_uri
        self.database_name = database
        self.logger = get_logger("disasters.persistence.mongo")
        self.client: Optional[AsyncMongoClient] = None
        self.db = None

    async def start(self):
        """Connect and ensure indexes."""
        try:
            self.client = AsyncMongoClient(self.mongo_uri, tz_aware=True)
            self.db = (
                self.client[self.database_name]
                if self.database_name
                else self.client.get_default_database()
            )
            await self._create_indexes()
            self.logger.info("MongoDB persistence started", database=self.db.name)
        except Exception as e:
            self.logger.error("Failed to start MongoDB persistence", error=str(e))
            raise PersistenceError("Failed to start MongoDB persistence", {"error": str(e)})

    async def stop(self):
        """Close the client."""
        if self.client is not None:
            await self.client.close()
            self.logger.info("MongoDB persistence stopped")

    async def _create_indexes(self):
        await self.disasters.create_index([("location", GEOSPHERE)])
        await self.disasters.create_index([("tags", ASCENDING)])
        await self.disasters.create_index([("owner_id", ASCENDING)])
        await self.resources.create_index([("location", GEOSPHERE)])

    @property
    def disasters(self):
        return self._database().disasters

    @property
    def resources(self):
        return self._database().resources

    def _database(self):
        if self.db is None:
            raise PersistenceError("MongoDB persistence is not started")
        return self.db

    async def create_disaster(self, request: DisasterCreateRequest, owner_id: str) -> DisasterRecord:
        """Insert a disaster owned by owner_id and return the stored record."""
        now = datetime.now(timezone.utc)
        doc: Dict[str, Any] = {
            "title": request.title,
            "location_name": request.location_name,
            "location": {"type": "Point", "coordinates": list(request.location.coordinates)},
            "description": request.description,
            "tags": list(request.tags),
            "owner_id": owner_id,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self.disasters.insert_one(doc)
        doc["_id"] = result.inserted_id
        self.logger.info("Disaster created", disaster_id=str(result.inserted_id), owner_id=owner_id)
        return DisasterRecord.from_document(doc)

    async def list_disasters(self) -> List[DisasterRecord]:
        """Return every disaster, newest first."""
        cursor = self.disasters.find({}).sort("createdAt", DESCENDING)
        docs = await cursor.to_list(None)
        return [DisasterRecord.from_document(doc) for doc in docs]

    async def find_resources_near(
        self,
        latitude: float,
        longitude: float,
        radius: int = DEFAULT_RESOURCE_RADIUS_METERS,
    ) -> List[ResourceRecord]:
        """Resources within radius metres of the point, nearest first."""
        query = {
            "location": {
                "$near": {
                    "$geometry": {"type": "Point", "coordinates": [longitude, latitude]},
                    "$maxDistance": radius,
                }
            }
        }
        docs = await self.resources.find(query).to_list(None)
        return [ResourceRecord.from_document(doc) for doc in docs]

    async def ping(self) -> bool:
        """Return True when MongoDB responds to a ping."""
        try:
            await self._database().command("ping")
            return True
        except Exception as exc:
            self.logger.error("MongoDB health check failed", error=str(exc))
            return False
