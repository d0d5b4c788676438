from ._config import config
from .geometry import (
    Coordinate,
    Polygon,
    PointLocation,
    is_simple,
    point_in_polygon,
    polygons_overlap,
    segments_intersect,
)
from .zones import DeliveryArea, SavedArea, Snapshot, UnsavedArea, ZoneCollection, normalize
from .editor import ZoneEditor, transition
from .matching import find_containing_zones, find_zone, match_points
from .storage import GeoFileZoneStore, InMemoryZoneStore, ZoneRecord, ZoneStore
from .main import DeliveryZoneSession
from .errors import *
