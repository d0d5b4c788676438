import pytest

from deliveryzones import InMemoryZoneStore, Polygon, SavedArea, UnsavedArea, ZoneCollection, ZoneRecord
from deliveryzones.errors import AreaNotFoundError, SaveInProgressError, StorageError, ZoneOverlapError
from deliveryzones.zones import Snapshot, normalize

from .conftest import CITY_ZONE, FAR_SQUARE, ORIGIN_SQUARE, SHOP_ID, SMALL_SQUARE, coords


def unsaved(pairs, label="Zone 1"):
    return UnsavedArea(shop_id=SHOP_ID, label=label, polygon=Polygon.from_pairs(pairs))


class FailingStore(InMemoryZoneStore):
    def __init__(self, error):
        super().__init__()
        self.error = error

    def save_zones(self, shop_id, records):
        raise self.error


class ReentrantStore(InMemoryZoneStore):
    """Issues a second save of the same collection from inside the first one."""

    def __init__(self):
        super().__init__()
        self.collection = None
        self.inner_error = None

    def save_zones(self, shop_id, records):
        try:
            self.collection.save(self)
        except SaveInProgressError as e:
            self.inner_error = e
        return super().save_zones(shop_id, records)


def test_empty_snapshot():
    collection = ZoneCollection(SHOP_ID)
    assert collection.normalize() == Snapshot.empty()
    assert str(collection.normalize()) == "[]"
    assert not collection.has_pending_changes()


def test_shop_id_required():
    with pytest.raises(ValueError):
        ZoneCollection("")


def test_normalize_is_deterministic_and_id_free():
    polygon = Polygon.from_pairs(CITY_ZONE)
    saved = [SavedArea(area_id="x-1", shop_id=SHOP_ID, label="Zone 1", polygon=polygon)]
    fresh = [UnsavedArea(shop_id=SHOP_ID, label="Zone 1", polygon=polygon)]
    assert normalize(saved) == normalize(saved)
    assert normalize(saved) == normalize(fresh)
    assert "x-1" not in normalize(saved).text
    assert normalize(saved).text.startswith('[{"label":"Zone 1","coordinates":[{"latitude":33.6844,')


def test_snapshot_ignores_sub_precision_noise():
    jitter = [(lat + 0.0000001, lon - 0.0000002) for lat, lon in CITY_ZONE]
    assert normalize([unsaved(CITY_ZONE)]) == normalize([unsaved(jitter)])
    moved = [(lat + 0.00001, lon) for lat, lon in CITY_ZONE]
    assert normalize([unsaved(CITY_ZONE)]) != normalize([unsaved(moved)])


def test_snapshot_depends_on_order_and_labels():
    a, b = unsaved(ORIGIN_SQUARE, "A"), unsaved(FAR_SQUARE, "B")
    assert normalize([a, b]) != normalize([b, a])
    assert normalize([a]) != normalize([a.with_label("A2")])


def test_load_seeds_snapshot(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    assert len(collection) == 1
    area = collection.areas[0]
    assert area.is_saved
    assert area.area_id == "zone-a"
    assert not collection.has_pending_changes()


def test_load_fills_blank_labels():
    store = InMemoryZoneStore(
        {
            SHOP_ID: [
                ZoneRecord(id="a", label="", coordinates=coords(ORIGIN_SQUARE)),
                ZoneRecord(id="b", label="  ", coordinates=coords(FAR_SQUARE)),
            ]
        }
    )
    collection = ZoneCollection.load(store, SHOP_ID)
    assert [a.label for a in collection] == ["Zone 1", "Zone 2"]


def test_load_keeps_overlapping_stored_areas():
    store = InMemoryZoneStore(
        {
            SHOP_ID: [
                ZoneRecord(id="a", label="A", coordinates=coords(ORIGIN_SQUARE)),
                ZoneRecord(id="b", label="B", coordinates=coords(SMALL_SQUARE)),
            ]
        }
    )
    collection = ZoneCollection.load(store, SHOP_ID)
    assert len(collection) == 2
    assert len(collection.overlapping_pairs()) == 1


def test_load_rejects_broken_records():
    store = InMemoryZoneStore({SHOP_ID: [ZoneRecord(id="a", label="A", coordinates=coords([(0, 0), (0, 1)]))]})
    with pytest.raises(StorageError):
        ZoneCollection.load(store, SHOP_ID)


def test_add_marks_pending_and_remove_restores(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    area = collection.add(unsaved(FAR_SQUARE, "Zone 2"))
    assert area in collection
    assert collection.has_pending_changes()
    collection.remove(area)
    assert not collection.has_pending_changes()


def test_add_rejects_overlap(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    with pytest.raises(ZoneOverlapError) as info:
        collection.add(unsaved(SMALL_SQUARE, "Zone 2"))
    assert info.value.conflicting_area is collection.areas[0]
    assert len(collection) == 1


def test_remove_unknown_area():
    collection = ZoneCollection(SHOP_ID)
    with pytest.raises(AreaNotFoundError):
        collection.remove(unsaved(ORIGIN_SQUARE))


def test_rename_and_redraw(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    original = collection.areas[0]
    renamed = collection.rename(original, "Downtown")
    assert collection.areas[0].label == "Downtown"
    assert renamed.area_id == original.area_id
    assert collection.has_pending_changes()

    # redraw may overlap the area's own old shape
    shrunk = collection.replace(renamed, renamed.with_polygon(Polygon.from_pairs(SMALL_SQUARE)))
    assert collection.areas[0].polygon == shrunk.polygon


def test_replace_rejects_overlap_with_other_area(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    far = collection.add(unsaved(FAR_SQUARE, "Zone 2"))
    with pytest.raises(ZoneOverlapError):
        collection.replace(far, far.with_polygon(Polygon.from_pairs(SMALL_SQUARE)))
    assert collection.areas[1] is far


def test_next_label():
    collection = ZoneCollection(SHOP_ID)
    assert collection.next_label() == "Zone 1"
    collection.add(unsaved(ORIGIN_SQUARE, "Zone 2"))
    assert collection.next_label() == "Zone 3"


def test_save_assigns_ids_and_clears_pending(empty_store):
    collection = ZoneCollection.load(empty_store, SHOP_ID)
    collection.add(unsaved(ORIGIN_SQUARE, "Zone 1"))
    collection.add(unsaved(FAR_SQUARE, "Zone 2"))

    saved = collection.save(empty_store)
    assert saved is not collection
    assert not saved.has_pending_changes()
    assert all(a.is_saved for a in saved)
    assert [a.label for a in saved] == ["Zone 1", "Zone 2"]
    # the old handle is left untouched
    assert collection.has_pending_changes()


def test_save_then_reload_matches(empty_store):
    collection = ZoneCollection(SHOP_ID)
    collection.add(unsaved([(lat + 0.0000001, lon) for lat, lon in CITY_ZONE]))
    saved = collection.save(empty_store)
    reloaded = ZoneCollection.load(empty_store, SHOP_ID)
    assert reloaded.normalize() == saved.normalize() == collection.normalize()
    assert [a.area_id for a in reloaded] == [a.area_id for a in saved]


def test_save_prunes_removed_areas(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    collection.remove(collection.areas[0])
    saved = collection.save(seeded_store)
    assert len(saved) == 0
    assert seeded_store.load_zones(SHOP_ID) == []


def test_save_keeps_existing_ids(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    collection.rename(collection.areas[0], "Downtown")
    saved = collection.save(seeded_store)
    assert saved.areas[0].area_id == "zone-a"
    assert saved.areas[0].label == "Downtown"


@pytest.mark.parametrize(
    "error",
    [StorageError("backend unavailable"), OSError("connection reset"), ValueError("unexpected payload")],
)
def test_failed_save_keeps_local_state(error):
    store = FailingStore(error)
    collection = ZoneCollection(SHOP_ID)
    collection.add(unsaved(ORIGIN_SQUARE))
    before = collection.normalize()
    with pytest.raises(StorageError):
        collection.save(store)
    assert collection.normalize() == before
    assert collection.persisted_snapshot == Snapshot.empty()
    assert collection.has_pending_changes()


def test_concurrent_save_is_refused():
    store = ReentrantStore()
    collection = ZoneCollection(SHOP_ID)
    collection.add(unsaved(ORIGIN_SQUARE))
    store.collection = collection

    saved = collection.save(store)
    assert isinstance(store.inner_error, SaveInProgressError)
    assert len(saved) == 1
    # the lock is released afterwards
    assert len(collection.save(InMemoryZoneStore())) == 1


def test_add_rejects_area_touching_after_rounding(seeded_store):
    collection = ZoneCollection.load(seeded_store, SHOP_ID)
    neighbour = unsaved([(0, 10.0000004), (0, 20), (10, 20), (10, 10.0000004)], "Zone 2")
    with pytest.raises(ZoneOverlapError):
        collection.add(neighbour)
    assert len(collection) == 1


def test_load_wraps_unexpected_store_errors():
    class BrokenLoadStore(InMemoryZoneStore):
        def load_zones(self, shop_id):
            raise KeyError(shop_id)

    with pytest.raises(StorageError) as info:
        ZoneCollection.load(BrokenLoadStore(), SHOP_ID)
    assert isinstance(info.value.__cause__, KeyError)
