from .base import ZoneRecord, ZoneStore
from .codec import coordinates_from_geojson, coordinates_from_wkt, polygon_to_ewkt, polygon_to_geojson
from .memory import InMemoryZoneStore
from .geofile import GeoFileZoneStore

__all__ = [
    "GeoFileZoneStore",
    "InMemoryZoneStore",
    "ZoneRecord",
    "ZoneStore",
    "coordinates_from_geojson",
    "coordinates_from_wkt",
    "polygon_to_ewkt",
    "polygon_to_geojson",
]
