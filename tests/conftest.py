import pytest

from deliveryzones import InMemoryZoneStore, Polygon, ZoneRecord
from deliveryzones.geometry import Coordinate

SHOP_ID = "shop-1"

ORIGIN_SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0)]
SMALL_SQUARE = [(4, 4), (4, 6), (6, 6), (6, 4)]
FAR_SQUARE = [(20, 20), (20, 30), (30, 30), (30, 20)]

# city-scale ring around Islamabad
CITY_ZONE = [(33.6844, 73.0479), (33.6944, 73.0479), (33.6944, 73.0579), (33.6844, 73.0579)]


def coords(pairs):
    return tuple(Coordinate(lat, lon) for lat, lon in pairs)


@pytest.fixture
def origin_square():
    return Polygon.from_pairs(ORIGIN_SQUARE)


@pytest.fixture
def small_square():
    return Polygon.from_pairs(SMALL_SQUARE)


@pytest.fixture
def far_square():
    return Polygon.from_pairs(FAR_SQUARE)


@pytest.fixture
def empty_store():
    return InMemoryZoneStore()


@pytest.fixture
def seeded_store():
    """Store holding the origin square as a saved zone of SHOP_ID."""
    return InMemoryZoneStore({SHOP_ID: [ZoneRecord(id="zone-a", label="Zone 1", coordinates=coords(ORIGIN_SQUARE))]})
