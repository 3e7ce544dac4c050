"""
Record and payload models for the Disasters service.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    """Relief resource categories."""
    SHELTER = "shelter"
    FOOD = "food"
    MEDICAL = "medical"
    WATER = "water"


def _validate_coordinates(value: List[float]) -> List[float]:
    if len(value) != 2:
        raise ValueError("coordinates must be a [longitude, latitude] pair")
    lon, lat = value
    if not -180.0 <= lon <= 180.0:
        raise ValueError("longitude must be within [-180, 180]")
    if not -90.0 <= lat <= 90.0:
        raise ValueError("latitude must be within [-90, 90]")
    return [float(lon), float(lat)]


Coordinates = Annotated[List[float], AfterValidator(_validate_coordinates)]


class GeoPoint(BaseModel):
    """GeoJSON point as stored in MongoDB: coordinates are [lon, lat]."""
    type: Literal["Point"] = "Point"
    coordinates: Coordinates

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class LocationInput(BaseModel):
    """Location as sent by clients; the point type is always forced to Point."""
    coordinates: Coordinates = Field(..., description="[longitude, latitude]")


class DisasterCreateRequest(BaseModel):
    """Request model for disaster creation."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, description="Short disaster title")
    location_name: str = Field(..., min_length=1, description="Human readable location")
    location: LocationInput
    description: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)


class DisasterRecord(BaseModel):
    """A stored disaster report."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    location_name: str
    location: GeoPoint
    description: str
    tags: List[str] = Field(default_factory=list)
    owner_id: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "DisasterRecord":
        """Build a record from a raw MongoDB document."""
        data = dict(doc)
        data["_id"] = str(data["_id"])
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire field names."""
        return self.model_dump(by_alias=True, mode="json")


class ResourceRecord(BaseModel):
    """A relief resource (shelter, food, medical, water point)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    location_name: str
    location: GeoPoint
    category: ResourceType = Field(..., alias="type")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ResourceRecord":
        """Build a record from a raw MongoDB document."""
        data = dict(doc)
        data["_id"] = str(data["_id"])
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire field names, omitting unset timestamps."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class GeocodeRequest(BaseModel):
    """Request model for free-text geocoding."""
    text: Optional[str] = None


class LocationData(BaseModel):
    """Coordinates returned by a geocoding provider."""
    latitude: float
    longitude: float


class GeocodeResponse(BaseModel):
    """Response model for free-text geocoding."""
    model_config = ConfigDict(populate_by_name=True)

    location_name: str = Field(..., alias="locationName")
    location_data: LocationData = Field(..., alias="locationData")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SocialMediaPost(BaseModel):
    """A post from the (mock) social media feed."""
    post: str
    user: str
    timestamp: datetime


class OfficialUpdate(BaseModel):
    """A headline scraped from an official relief organisation page."""
    title: str
    link: str
    source: str
