"""
Conversions between coordinate rings and the geometry formats used by the
hosted backend: GeoJSON for reads and EWKT for writes.

GeoJSON and WKT both order positions as `[longitude, latitude]` and close the
ring explicitly; coordinate tuples in this package are open rings of
`(latitude, longitude)`.
"""

import json
from collections.abc import Iterable

import shapely
from shapely.errors import ShapelyError
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import mapping

from deliveryzones._config import config
from deliveryzones.errors import GeometryDecodeError, GeometryEncodeError, InvalidCoordinateError
from deliveryzones.geometry import Coordinate

logger = config.logger

SRID = 4326


def _finite_pairs(coordinates: Iterable) -> list[Coordinate]:
    out = []
    for raw in coordinates:
        try:
            out.append(Coordinate.parse(raw))
        except InvalidCoordinateError:
            logger.warning(f"Skipping invalid coordinate {raw!r}")
    return out


def _open_ring(points: list[Coordinate]) -> tuple[Coordinate, ...]:
    if len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    return tuple(points)


def _closed_lonlat(coordinates: Iterable) -> list[tuple[float, float]]:
    points = _finite_pairs(coordinates)
    if len(points) < 3:
        raise GeometryEncodeError("Delivery areas need at least three valid points.")
    ring = [(p.longitude, p.latitude) for p in points]
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def polygon_to_geojson(coordinates: Iterable) -> dict:
    """
    Encode a ring as a GeoJSON Polygon mapping.

    Args:
        coordinates: Coordinates, `(lat, lon)` pairs or a :class:`Polygon`.

    Returns:
        dict: `{"type": "Polygon", "coordinates": [[[lon, lat], ...]]}` with a closed ring.

    Raises:
        GeometryEncodeError: If fewer than three valid points remain.
    """
    geom = mapping(ShapelyPolygon(_closed_lonlat(coordinates)))
    return {"type": "Polygon", "coordinates": [[list(p) for p in geom["coordinates"][0]]]}


def coordinates_from_geojson(raw) -> tuple[Coordinate, ...]:
    """
    Decode the outer ring of a GeoJSON Polygon.

    Accepts a mapping or its JSON text. The closing duplicate is dropped and
    non-finite or out-of-range positions are skipped.

    Raises:
        GeometryDecodeError: If `raw` is not valid JSON or not a Polygon with an outer ring.
    """
    if raw is None:
        raise GeometryDecodeError("No geometry")
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise GeometryDecodeError(f"Failed to parse polygon geometry: {e}") from e
    if not isinstance(raw, dict) or raw.get("type") != "Polygon":
        raise GeometryDecodeError(f"Expected a GeoJSON Polygon, got {raw!r}")
    rings = raw.get("coordinates")
    if not isinstance(rings, (list, tuple)) or not rings or not isinstance(rings[0], (list, tuple)) or not rings[0]:
        raise GeometryDecodeError("GeoJSON Polygon has no outer ring")

    points = []
    for pair in rings[0]:
        if not isinstance(pair, (list, tuple)) or len(pair) < 2:
            logger.warning(f"Skipping malformed GeoJSON position {pair!r}")
            continue
        lon, lat = pair[0], pair[1]
        try:
            points.append(Coordinate(lat, lon))
        except InvalidCoordinateError:
            logger.warning(f"Skipping invalid GeoJSON position {pair!r}")
    return _open_ring(points)


def polygon_to_ewkt(coordinates: Iterable, rounding_precision: int | None = None) -> str:
    """
    Encode a ring as EWKT, e.g. `SRID=4326;POLYGON ((73.0479 33.6844, ...))`.

    Raises:
        GeometryEncodeError: If fewer than three valid points remain.
    """
    if rounding_precision is None:
        rounding_precision = config.coordinate_precision
    geom = ShapelyPolygon(_closed_lonlat(coordinates))
    wkt = shapely.to_wkt(geom, rounding_precision=rounding_precision, trim=True)
    return f"SRID={SRID};{wkt}"


def coordinates_from_wkt(text: str) -> tuple[Coordinate, ...]:
    """
    Decode a WKT or EWKT Polygon into an open ring.

    Raises:
        GeometryDecodeError: If the text is not a Polygon or uses a different SRID.
    """
    if not isinstance(text, str):
        raise GeometryDecodeError(f"Expected WKT text, got {type(text).__name__}")
    body = text.strip()
    if body.upper().startswith("SRID="):
        prefix, _, body = body.partition(";")
        srid = prefix.split("=", 1)[1].strip()
        if srid != str(SRID):
            raise GeometryDecodeError(f"Unsupported SRID {srid}, expected {SRID}")
    try:
        geom = shapely.from_wkt(body)
    except ShapelyError as e:
        raise GeometryDecodeError(f"Failed to parse WKT: {e}") from e
    if not isinstance(geom, ShapelyPolygon):
        raise GeometryDecodeError(f"Expected a Polygon, got {geom.geom_type}")
    return coordinates_from_geojson(mapping(geom))
