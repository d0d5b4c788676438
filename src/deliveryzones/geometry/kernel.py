"""
Planar predicates over coordinates and polygons.

All functions are pure and reentrant. Longitude is treated as x and latitude
as y; no projection is applied, which is adequate for the small, city-scale
polygons merchants draw.
"""

from collections.abc import Sequence
from enum import Enum

from deliveryzones.geometry.coordinate import Coordinate
from deliveryzones.geometry.polygon import Polygon

COLLINEAR_EPSILON = 1e-13

COLLINEAR = 0
COUNTER_CLOCKWISE = 1
CLOCKWISE = 2


class PointLocation(str, Enum):
    """Where a point lies relative to a polygon."""

    INSIDE = "inside"
    ON_BOUNDARY = "on_boundary"
    OUTSIDE = "outside"


def _vertices(polygon: Polygon | Sequence[Coordinate]) -> Sequence[Coordinate]:
    if isinstance(polygon, Polygon):
        return polygon.vertices
    return polygon


def orientation(p: Coordinate, q: Coordinate, r: Coordinate) -> int:
    """
    Orientation of the ordered triple (p, q, r).

    Returns:
        int: `COLLINEAR` (0), `COUNTER_CLOCKWISE` (1) or `CLOCKWISE` (2).
    """
    cross = (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)
    if abs(cross) <= COLLINEAR_EPSILON:
        return COLLINEAR
    return COUNTER_CLOCKWISE if cross > 0 else CLOCKWISE


def on_segment(p: Coordinate, q: Coordinate, r: Coordinate) -> bool:
    """True if `q` lies in the bounding box of segment p-r. Only meaningful for collinear triples."""
    return min(p.x, r.x) <= q.x <= max(p.x, r.x) and min(p.y, r.y) <= q.y <= max(p.y, r.y)


def segments_intersect(a1: Coordinate, a2: Coordinate, b1: Coordinate, b2: Coordinate) -> bool:
    """
    Test whether closed segments a1-a2 and b1-b2 share at least one point.

    Touching at an endpoint and collinear overlap both count as intersecting.

    Args:
        a1: First segment start.
        a2: First segment end.
        b1: Second segment start.
        b2: Second segment end.

    Returns:
        bool: True if the segments intersect.
    """
    o1 = orientation(a1, a2, b1)
    o2 = orientation(a1, a2, b2)
    o3 = orientation(b1, b2, a1)
    o4 = orientation(b1, b2, a2)

    if o1 != o2 and o3 != o4:
        return True

    # collinear fallbacks: an endpoint lies on the other segment
    if o1 == COLLINEAR and on_segment(a1, b1, a2):
        return True
    if o2 == COLLINEAR and on_segment(a1, b2, a2):
        return True
    if o3 == COLLINEAR and on_segment(b1, a1, b2):
        return True
    if o4 == COLLINEAR and on_segment(b1, a2, b2):
        return True

    return False


def point_on_segment(point: Coordinate, start: Coordinate, end: Coordinate) -> bool:
    return orientation(start, end, point) == COLLINEAR and on_segment(start, point, end)


def point_in_polygon(point: Coordinate, polygon: Polygon | Sequence[Coordinate]) -> PointLocation:
    """
    Classify a point against a polygon by ray casting.

    Points lying on any edge (closing edge included) are reported as
    `ON_BOUNDARY`; callers choose their own boundary policy.

    Args:
        point: Point to classify.
        polygon: Polygon, or a raw vertex sequence of at least three coordinates.

    Returns:
        PointLocation: `INSIDE`, `ON_BOUNDARY` or `OUTSIDE`.
    """
    vertices = _vertices(polygon)
    n = len(vertices)
    if n < 3:
        return PointLocation.OUTSIDE

    for i in range(n):
        if point_on_segment(point, vertices[i], vertices[(i + 1) % n]):
            return PointLocation.ON_BOUNDARY

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i].x, vertices[i].y
        xj, yj = vertices[j].x, vertices[j].y
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i

    return PointLocation.INSIDE if inside else PointLocation.OUTSIDE


def _bounds(vertices: Sequence[Coordinate]) -> tuple[float, float, float, float]:
    xs = [v.x for v in vertices]
    ys = [v.y for v in vertices]
    return min(xs), min(ys), max(xs), max(ys)


def _edges(vertices: Sequence[Coordinate]):
    n = len(vertices)
    for i in range(n):
        yield vertices[i], vertices[(i + 1) % n]


def polygons_overlap(p: Polygon | Sequence[Coordinate], q: Polygon | Sequence[Coordinate]) -> bool:
    """
    Test whether two polygons share any area.

    Checks, cheapest first:
      1) disjoint bounding boxes -> no overlap,
      2) any pair of edges intersects -> overlap,
      3) any vertex of one polygon strictly inside the other -> overlap
         (covers full containment where no edges cross).

    Polygons that only touch at a point or share part of an edge are reported
    as overlapping, since touching edges intersect in step 2.

    Args:
        p: First polygon.
        q: Second polygon.

    Returns:
        bool: True if the polygons overlap. The result is symmetric in `p` and `q`.
    """
    pv = _vertices(p)
    qv = _vertices(q)
    if len(pv) < 3 or len(qv) < 3:
        return False

    p_min_x, p_min_y, p_max_x, p_max_y = _bounds(pv)
    q_min_x, q_min_y, q_max_x, q_max_y = _bounds(qv)
    if p_max_x < q_min_x or q_max_x < p_min_x or p_max_y < q_min_y or q_max_y < p_min_y:
        return False

    q_edges = list(_edges(qv))
    for a1, a2 in _edges(pv):
        for b1, b2 in q_edges:
            if segments_intersect(a1, a2, b1, b2):
                return True

    if any(point_in_polygon(v, qv) is PointLocation.INSIDE for v in pv):
        return True
    if any(point_in_polygon(v, pv) is PointLocation.INSIDE for v in qv):
        return True

    return False


def is_simple(polygon: Polygon | Sequence[Coordinate]) -> bool:
    """
    Test whether a polygon's edges never cross or fold back on themselves.

    Non-adjacent edges must not intersect at all; adjacent edges may share
    only their common vertex.

    Args:
        polygon: Polygon or raw vertex sequence.

    Returns:
        bool: True if the ring is simple.
    """
    vertices = _vertices(polygon)
    n = len(vertices)
    if n < 3:
        return False
    edges = list(_edges(vertices))

    for i in range(n):
        a, shared = edges[i]
        c = edges[(i + 1) % n][1]
        # adjacent edges a-shared and shared-c overlap only when they fold back
        if orientation(a, shared, c) == COLLINEAR and (on_segment(a, c, shared) or on_segment(shared, a, c)):
            return False

    for i in range(n):
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue
            if segments_intersect(*edges[i], *edges[j]):
                return False

    return True


def find_overlapping(
    candidate: Polygon | Sequence[Coordinate], polygons: Sequence[Polygon | Sequence[Coordinate]]
) -> int | None:
    """Index of the first polygon in `polygons` that overlaps `candidate`, or None."""
    for idx, other in enumerate(polygons):
        if polygons_overlap(candidate, other):
            return idx
    return None
