import json
import math

import pytest

from deliveryzones import InMemoryZoneStore, ZoneRecord, ZoneStore
from deliveryzones.errors import GeometryDecodeError, GeometryEncodeError, StorageError
from deliveryzones.geometry import Coordinate
from deliveryzones.storage import (
    coordinates_from_geojson,
    coordinates_from_wkt,
    polygon_to_ewkt,
    polygon_to_geojson,
)

from .conftest import CITY_ZONE, FAR_SQUARE, ORIGIN_SQUARE, SHOP_ID, coords


def test_record_dict_round_trip():
    record = ZoneRecord(id="a", label="Zone 1", coordinates=coords(ORIGIN_SQUARE))
    data = record.to_dict()
    assert data["id"] == "a"
    assert data["coordinates"][1] == {"latitude": 0.0, "longitude": 10.0}
    assert ZoneRecord.from_dict(data) == record
    assert "id" not in ZoneRecord(id=None, label="x", coordinates=()).to_dict()


def test_memory_store_is_a_zone_store():
    assert isinstance(InMemoryZoneStore(), ZoneStore)


def test_memory_store_upsert_and_prune(seeded_store):
    records = [
        ZoneRecord(id="zone-a", label="Renamed", coordinates=coords(ORIGIN_SQUARE)),
        ZoneRecord(id=None, label="Zone 2", coordinates=coords(FAR_SQUARE)),
    ]
    canonical = seeded_store.save_zones(SHOP_ID, records)
    assert canonical[0].id == "zone-a"
    assert canonical[0].label == "Renamed"
    assert canonical[1].id
    assert seeded_store.load_zones(SHOP_ID) == canonical

    assert seeded_store.save_zones(SHOP_ID, canonical[1:]) == canonical[1:]
    assert [r.id for r in seeded_store.load_zones(SHOP_ID)] == [canonical[1].id]


def test_memory_store_rounds_coordinates(empty_store):
    record = ZoneRecord(id=None, label="Zone 1", coordinates=coords([(lat + 4e-8, lon) for lat, lon in CITY_ZONE]))
    (canonical,) = empty_store.save_zones(SHOP_ID, [record])
    assert canonical.coordinates == coords(CITY_ZONE)


def test_memory_store_shops_are_isolated(seeded_store):
    seeded_store.save_zones("shop-2", [ZoneRecord(id=None, label="Z", coordinates=coords(FAR_SQUARE))])
    assert [r.id for r in seeded_store.load_zones(SHOP_ID)] == ["zone-a"]
    assert seeded_store.load_zones("unknown") == []


@pytest.mark.parametrize(
    "records",
    [
        [ZoneRecord(id="missing", label="Z", coordinates=coords(FAR_SQUARE))],
        [
            ZoneRecord(id="zone-a", label="A", coordinates=coords(ORIGIN_SQUARE)),
            ZoneRecord(id="zone-a", label="B", coordinates=coords(FAR_SQUARE)),
        ],
        [ZoneRecord(id=None, label="Z", coordinates=coords([(0, 0), (0, 1)]))],
    ],
)
def test_memory_store_rejects_bad_submission_atomically(seeded_store, records):
    before = seeded_store.load_zones(SHOP_ID)
    with pytest.raises(StorageError):
        seeded_store.save_zones(SHOP_ID, records)
    assert seeded_store.load_zones(SHOP_ID) == before


def test_geojson_encoding_closes_ring():
    geojson = polygon_to_geojson(coords(ORIGIN_SQUARE))
    assert geojson["type"] == "Polygon"
    ring = geojson["coordinates"][0]
    assert ring[0] == ring[-1] == [0.0, 0.0]
    assert ring[1] == [10.0, 0.0]
    assert len(ring) == 5


def test_geojson_decoding():
    raw = {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]]}
    assert coordinates_from_geojson(raw) == coords([(0, 0), (0, 10), (10, 10), (10, 0)])
    assert coordinates_from_geojson(json.dumps(raw)) == coordinates_from_geojson(raw)


def test_geojson_decoding_skips_invalid_positions():
    raw = {"type": "Polygon", "coordinates": [[[0, 0], [math.nan, 1], [10, 0], [500, 5], [10, 10], [0, 0]]]}
    assert coordinates_from_geojson(raw) == coords([(0, 0), (0, 10), (10, 10)])


@pytest.mark.parametrize(
    "raw",
    [None, "not json", {"type": "Point", "coordinates": [0, 0]}, {"type": "Polygon", "coordinates": []}],
)
def test_geojson_decoding_errors(raw):
    with pytest.raises(GeometryDecodeError):
        coordinates_from_geojson(raw)


def test_ewkt_encoding():
    ewkt = polygon_to_ewkt(coords(CITY_ZONE))
    assert ewkt.startswith("SRID=4326;POLYGON")
    assert "73.0479 33.6844" in ewkt
    assert coordinates_from_wkt(ewkt) == coords(CITY_ZONE)


def test_ewkt_encoding_needs_three_points():
    with pytest.raises(GeometryEncodeError):
        polygon_to_ewkt(coords([(0, 0), (0, 1)]))


def test_wkt_decoding_errors():
    with pytest.raises(GeometryDecodeError):
        coordinates_from_wkt("SRID=3857;POLYGON ((0 0, 1 0, 1 1, 0 0))")
    with pytest.raises(GeometryDecodeError):
        coordinates_from_wkt("POINT (1 2)")
    with pytest.raises(GeometryDecodeError):
        coordinates_from_wkt("POLYGON ((0 0, 1")


def test_plain_wkt_decoding():
    assert coordinates_from_wkt("POLYGON ((0 0, 10 0, 10 10, 0 0))") == coords([(0, 0), (0, 10), (10, 10)])
    assert coordinates_from_wkt("POLYGON ((0 0, 10 0, 10 10, 0 0))")[0] == Coordinate(0, 0)
