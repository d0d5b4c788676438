from .coordinate import Coordinate
from .polygon import MIN_VERTICES, Polygon, collapse_duplicates
from .kernel import (
    PointLocation,
    find_overlapping,
    is_simple,
    orientation,
    point_in_polygon,
    polygons_overlap,
    segments_intersect,
)

__all__ = [
    "Coordinate",
    "MIN_VERTICES",
    "Polygon",
    "PointLocation",
    "collapse_duplicates",
    "find_overlapping",
    "is_simple",
    "orientation",
    "point_in_polygon",
    "polygons_overlap",
    "segments_intersect",
]
