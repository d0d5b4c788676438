from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
from shapely.geometry import Polygon as ShapelyPolygon

from deliveryzones.errors import InvalidPolygonError
from deliveryzones.geometry.coordinate import Coordinate

MIN_VERTICES = 3


def collapse_duplicates(vertices: Iterable[Coordinate]) -> tuple[Coordinate, ...]:
    """
    Drop consecutive coordinate-equal vertices, including a trailing vertex
    equal to the first one (an explicitly closed ring).

    Args:
        vertices: Vertex sequence, possibly with repeated taps.

    Returns:
        tuple[Coordinate, ...]: Sequence where no two neighbours (cyclically) are equal.
    """
    out: list[Coordinate] = []
    for v in vertices:
        if out and out[-1].same_as(v):
            continue
        out.append(v)
    while len(out) > 1 and out[-1].same_as(out[0]):
        out.pop()
    return tuple(out)


@dataclass(frozen=True, slots=True)
class Polygon:
    """
    Closed ring of coordinates; the last vertex connects back to the first.

    Attributes:
        vertices: At least three coordinates with no two cyclic neighbours equal
            at the rounding precision.

    Raises:
        InvalidPolygonError: If the vertex sequence violates the invariants.
    """

    vertices: tuple[Coordinate, ...]

    def __post_init__(self):
        vertices = tuple(Coordinate.parse(v) for v in self.vertices)
        if len(vertices) < MIN_VERTICES:
            raise InvalidPolygonError(f"Polygon must have at least {MIN_VERTICES} vertices, got {len(vertices)}")
        n = len(vertices)
        for i in range(n):
            if vertices[i].same_as(vertices[(i + 1) % n]):
                raise InvalidPolygonError(f"Consecutive vertices #{i} and #{(i + 1) % n} are equal: {vertices[i]}")
        object.__setattr__(self, "vertices", vertices)

    @classmethod
    def from_pairs(cls, pairs: Iterable) -> "Polygon":
        """Build from `(lat, lon)` pairs or coordinate mappings."""
        return cls(tuple(Coordinate.parse(p) for p in pairs))

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self.vertices)

    def edges(self) -> Iterator[tuple[Coordinate, Coordinate]]:
        """Yield `(start, end)` for every edge, closing edge last."""
        n = len(self.vertices)
        for i in range(n):
            yield self.vertices[i], self.vertices[(i + 1) % n]

    def as_array(self) -> np.ndarray:
        """Nx2 array of `(x, y)` = `(longitude, latitude)`."""
        return np.array([(v.longitude, v.latitude) for v in self.vertices], dtype=np.float64)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """`(min_lon, min_lat, max_lon, max_lat)`, shapely ordering."""
        arr = self.as_array()
        min_x, min_y = arr.min(axis=0)
        max_x, max_y = arr.max(axis=0)
        return float(min_x), float(min_y), float(max_x), float(max_y)

    def rounded(self, precision: int | None = None) -> "Polygon":
        return Polygon(tuple(v.rounded(precision) for v in self.vertices))

    def to_shapely(self) -> ShapelyPolygon:
        return ShapelyPolygon([(v.longitude, v.latitude) for v in self.vertices])

    @classmethod
    def from_shapely(cls, geom: ShapelyPolygon) -> "Polygon":
        if not isinstance(geom, ShapelyPolygon):
            raise InvalidPolygonError(f"expected shapely Polygon, got {type(geom).__name__}")
        return cls(collapse_duplicates(Coordinate(c[1], c[0]) for c in geom.exterior.coords))
