from collections.abc import Iterable

import pandas as pd

from deliveryzones._config import config
from deliveryzones.geometry import Coordinate, PointLocation, point_in_polygon
from deliveryzones.zones import DeliveryArea

logger = config.logger

MATCH_COLUMNS = ["point_index", "latitude", "longitude", "area_id", "label", "location"]


def locate(areas: Iterable[DeliveryArea], point) -> list[tuple[DeliveryArea, PointLocation]]:
    """Classify `point` against every area, in collection order."""
    point = Coordinate.parse(point)
    return [(area, point_in_polygon(point, area.polygon)) for area in areas]


def find_containing_zones(
    areas: Iterable[DeliveryArea], point, include_boundary: bool | None = None
) -> tuple[DeliveryArea, ...]:
    """
    Areas containing a point, e.g. a customer's delivery address.

    Zones of a saved collection do not overlap, so this normally yields at
    most one area; data that was never validated (unsaved or externally
    authored) may yield several, and all of them are returned.

    Args:
        areas: Areas to search.
        point: Coordinate, `(lat, lon)` pair or coordinate mapping.
        include_boundary: Whether a point on an edge counts as inside.
            Defaults to `config.boundary_is_inside`.

    Returns:
        tuple[DeliveryArea, ...]: Matching areas in collection order.
    """
    if include_boundary is None:
        include_boundary = config.boundary_is_inside
    accepted = {PointLocation.INSIDE}
    if include_boundary:
        accepted.add(PointLocation.ON_BOUNDARY)
    return tuple(area for area, location in locate(areas, point) if location in accepted)


def find_zone(areas: Iterable[DeliveryArea], point, include_boundary: bool | None = None) -> DeliveryArea | None:
    matches = find_containing_zones(areas, point, include_boundary)
    if len(matches) > 1:
        logger.warning(f"Point {point} lies in {len(matches)} delivery areas, using \"{matches[0].label}\"")
    return matches[0] if matches else None


def match_points(areas: Iterable[DeliveryArea], points: Iterable, include_boundary: bool | None = None) -> pd.DataFrame:
    """
    Match many points at once, e.g. a batch of pending orders.

    Args:
        areas: Areas to search.
        points: Coordinates, `(lat, lon)` pairs or coordinate mappings.
        include_boundary: See :func:`find_containing_zones`.

    Returns:
        pd.DataFrame: One row per (point, matching area) with columns
        `point_index`, `latitude`, `longitude`, `area_id`, `label`, `location`.
        Points outside every area get a single row with missing area fields.
    """
    areas = tuple(areas)
    rows = []
    for idx, raw in enumerate(points):
        point = Coordinate.parse(raw)
        matches = find_containing_zones(areas, point, include_boundary)
        if not matches:
            rows.append((idx, point.latitude, point.longitude, None, None, PointLocation.OUTSIDE.value))
            continue
        for area in matches:
            location = point_in_polygon(point, area.polygon)
            area_id = area.area_id if area.is_saved else None
            rows.append((idx, point.latitude, point.longitude, area_id, area.label, location.value))
    return pd.DataFrame(rows, columns=MATCH_COLUMNS)
