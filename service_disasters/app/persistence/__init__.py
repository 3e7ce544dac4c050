"""
Record persistence for the Disasters service (MongoDB).
"""

from .mongo import MongoPersistence, DEFAULT_RESOURCE_RADIUS_METERS

__all__ = ["MongoPersistence", "DEFAULT_RESOURCE_RADIUS_METERS"]
