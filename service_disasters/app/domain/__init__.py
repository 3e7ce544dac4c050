"""
Domain models for the Disasters service.
"""

from .models import (
    DisasterCreateRequest,
    DisasterRecord,
    GeoPoint,
    GeocodeRequest,
    GeocodeResponse,
    LocationData,
    LocationInput,
    OfficialUpdate,
    ResourceRecord,
    ResourceType,
    SocialMediaPost,
)

__all__ = [
    "DisasterCreateRequest",
    "DisasterRecord",
    "GeoPoint",
    "GeocodeRequest",
    "GeocodeResponse",
    "LocationData",
    "LocationInput",
    "OfficialUpdate",
    "ResourceRecord",
    "ResourceType",
    "SocialMediaPost",
]
