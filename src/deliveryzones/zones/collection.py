import threading
from collections.abc import Iterable, Iterator, Sequence

from deliveryzones._config import config
from deliveryzones.errors import (
    AreaNotFoundError,
    InvalidCoordinateError,
    InvalidPolygonError,
    SaveInProgressError,
    StorageError,
    ZoneOverlapError,
)
from deliveryzones.geometry import Polygon, polygons_overlap
from deliveryzones.storage.base import ZoneRecord, ZoneStore
from deliveryzones.zones.abc_area import DeliveryArea
from deliveryzones.zones.areas import SavedArea
from deliveryzones.zones.snapshot import Snapshot, normalize

logger = config.logger


def areas_from_records(shop_id: str, records: Sequence[ZoneRecord]) -> list[SavedArea]:
    """
    Turn storage records into saved areas, filling empty labels with the
    positional default ("Zone N", N = position + 1, from
    `config.default_label_template`), the scheme also used for newly drawn areas.

    Raises:
        StorageError: If a record has no id or its geometry is not a valid polygon.
    """
    areas = []
    for index, record in enumerate(records):
        try:
            areas.append(SavedArea.from_record(shop_id, record, config.default_label(index)))
        except (InvalidPolygonError, InvalidCoordinateError, ValueError, TypeError) as e:
            raise StorageError(f"Invalid zone record #{index} from storage: {e}", shop_id) from e
    return areas


class ZoneCollection:
    """
    The ordered delivery areas of one shop plus the snapshot of what storage
    last confirmed.

    A collection is owned by a single editing session. Local edits (`add`,
    `remove`, `replace`, `rename`) mutate it in place and only become durable
    through :meth:`save`, which returns a new collection built from the
    storage response.

    Invariant: areas added through this class never overlap each other.
    Collections loaded from storage are not rejected when stored data
    overlaps; the conflict is logged instead.

    Attributes:
        shop_id: Owning shop.
        persisted_snapshot: Snapshot of the last state confirmed by storage.
    """

    def __init__(
        self,
        shop_id: str,
        areas: Iterable[DeliveryArea] = (),
        persisted_snapshot: Snapshot | None = None,
    ):
        if not isinstance(shop_id, str) or not shop_id:
            raise ValueError("shop_id must be non-empty string")
        self.shop_id = shop_id
        self._areas: list[DeliveryArea] = list(areas)
        self.persisted_snapshot = persisted_snapshot if persisted_snapshot is not None else Snapshot.empty()
        self._save_lock = threading.Lock()

    @classmethod
    def load(cls, store: ZoneStore, shop_id: str) -> "ZoneCollection":
        """
        Seed a collection and its persisted snapshot from storage.

        Args:
            store: Storage collaborator.
            shop_id: Shop to load.

        Returns:
            ZoneCollection: Collection with no pending changes.

        Raises:
            StorageError: If loading fails or storage returns invalid records.
        """
        logger.debug(f"Loading delivery areas | shop={shop_id}")
        try:
            records = store.load_zones(shop_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to load delivery areas: {e}", shop_id) from e
        areas = areas_from_records(shop_id, records)
        collection = cls(shop_id, areas, normalize(areas))
        for a, b in collection.overlapping_pairs():
            logger.warning(f'Stored delivery areas overlap | shop={shop_id} | "{a.label}" and "{b.label}"')
        logger.info(f"Loaded {len(areas)} delivery areas | shop={shop_id}")
        return collection

    @property
    def areas(self) -> tuple[DeliveryArea, ...]:
        return tuple(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __iter__(self) -> Iterator[DeliveryArea]:
        return iter(tuple(self._areas))

    def __contains__(self, area: object) -> bool:
        return self._index_of(area) is not None

    def _index_of(self, area) -> int | None:
        for idx, item in enumerate(self._areas):
            if item is area:
                return idx
        for idx, item in enumerate(self._areas):
            if item == area:
                return idx
        return None

    def normalize(self) -> Snapshot:
        return normalize(self._areas)

    def has_pending_changes(self) -> bool:
        """True when the current areas differ from the last persisted snapshot."""
        return self.normalize() != self.persisted_snapshot

    def next_label(self) -> str:
        """
        Label for the next drawn area: "Zone N" with N = count + 1, bumped
        until it does not clash with an existing label.
        """
        taken = {a.label for a in self._areas}
        index = len(self._areas)
        label = config.default_label(index)
        while label in taken:
            index += 1
            label = config.default_label(index)
        return label

    def find_conflict(self, polygon: Polygon, exclude: DeliveryArea | None = None) -> DeliveryArea | None:
        """
        First area whose polygon overlaps `polygon`.

        Both sides are compared at `config.coordinate_precision`, the precision
        storage keeps, so areas that only meet after rounding are conflicts too.

        Args:
            polygon: Candidate geometry.
            exclude: Area to skip, used when redrawing an existing area.

        Returns:
            DeliveryArea | None: Conflicting area, or None.
        """
        polygon = polygon.rounded()
        for area in self._areas:
            if exclude is not None and (area is exclude or area == exclude):
                continue
            if polygons_overlap(polygon, area.polygon.rounded()):
                return area
        return None

    def overlapping_pairs(self) -> list[tuple[DeliveryArea, DeliveryArea]]:
        out = []
        for i, a in enumerate(self._areas):
            for b in self._areas[i + 1 :]:
                if polygons_overlap(a.polygon.rounded(), b.polygon.rounded()):
                    out.append((a, b))
        return out

    def add(self, area: DeliveryArea) -> DeliveryArea:
        """
        Append an area after checking it against every existing one.

        Raises:
            ZoneOverlapError: If the area overlaps an existing area.
        """
        conflict = self.find_conflict(area.polygon)
        if conflict is not None:
            raise ZoneOverlapError(conflict, self.shop_id)
        self._areas.append(area)
        logger.debug(f'Area added | shop={self.shop_id} | "{area.label}"')
        return area

    def remove(self, area: DeliveryArea) -> None:
        """
        Remove an area locally. Storage is untouched until the next save.

        Raises:
            AreaNotFoundError: If the area is not in the collection.
        """
        idx = self._index_of(area)
        if idx is None:
            raise AreaNotFoundError(f'Delivery area "{area.label}" is not in the collection', self.shop_id)
        removed = self._areas.pop(idx)
        logger.debug(f'Area removed | shop={self.shop_id} | "{removed.label}" (pending until save)')

    def replace(self, old: DeliveryArea, new: DeliveryArea) -> DeliveryArea:
        """
        Replace an area in place, e.g. after redrawing its shape.

        Raises:
            AreaNotFoundError: If `old` is not in the collection.
            ZoneOverlapError: If `new` overlaps any other area.
        """
        idx = self._index_of(old)
        if idx is None:
            raise AreaNotFoundError(f'Delivery area "{old.label}" is not in the collection', self.shop_id)
        conflict = self.find_conflict(new.polygon, exclude=self._areas[idx])
        if conflict is not None:
            raise ZoneOverlapError(conflict, self.shop_id)
        self._areas[idx] = new
        return new

    def rename(self, area: DeliveryArea, label: str) -> DeliveryArea:
        return self.replace(area, area.with_label(label))

    def records(self) -> list[ZoneRecord]:
        return [area.to_record() for area in self._areas]

    def save(self, store: ZoneStore) -> "ZoneCollection":
        """
        Persist the full area list and return the canonical collection.

        Sends every area to `store.save_zones` (identifiers only for saved
        areas). Storage creates, updates and prunes so that the submission
        becomes the complete set for the shop.

        Args:
            store: Storage collaborator.

        Returns:
            ZoneCollection: New collection built from the storage response, with
            no pending changes. This collection is left as it was.

        Raises:
            SaveInProgressError: If a save of this collection is already running.
            StorageError: If storage fails or returns invalid data. Local areas
                and the persisted snapshot are unchanged, so the save can be retried.
        """
        if not self._save_lock.acquire(blocking=False):
            raise SaveInProgressError("A save is already in progress", self.shop_id)
        try:
            records = self.records()
            logger.debug(f"Saving delivery areas | shop={self.shop_id} | count={len(records)}")
            try:
                canonical = store.save_zones(self.shop_id, records)
            except StorageError as e:
                logger.error(f"Failed to save delivery areas | shop={self.shop_id} | {e}")
                raise
            except Exception as e:
                logger.error(f"Failed to save delivery areas | shop={self.shop_id} | {type(e).__name__}: {e}")
                raise StorageError(f"Failed to save delivery areas: {e}", self.shop_id) from e

            areas = areas_from_records(self.shop_id, canonical)
            logger.info(f"Saved {len(areas)} delivery areas | shop={self.shop_id}")
            return ZoneCollection(self.shop_id, areas, normalize(areas))
        finally:
            self._save_lock.release()

    def __repr__(self) -> str:
        return f"ZoneCollection(shop_id={self.shop_id!r}, areas={len(self._areas)}, pending={self.has_pending_changes()})"
