import threading
import uuid
from collections.abc import Sequence

from deliveryzones._config import config
from deliveryzones.errors import StorageError
from deliveryzones.storage.base import ZoneRecord

logger = config.logger


class InMemoryZoneStore:
    """
    Process-local zone storage.

    Behaves like the hosted backend: assigns identifiers to new records,
    rounds coordinates to `config.coordinate_precision` decimals, prunes
    areas missing from a submission, and swaps in the new set only after the
    whole submission is validated.
    """

    def __init__(self, initial: dict[str, Sequence[ZoneRecord]] | None = None):
        self._lock = threading.Lock()
        self._zones: dict[str, list[ZoneRecord]] = {}
        for shop_id, records in (initial or {}).items():
            self._zones[shop_id] = [self._canonical(r, r.id or self._new_id()) for r in records]

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _canonical(record: ZoneRecord, area_id: str) -> ZoneRecord:
        return ZoneRecord(
            id=area_id,
            label=record.label,
            coordinates=tuple(c.rounded() for c in record.coordinates),
        )

    def load_zones(self, shop_id: str) -> list[ZoneRecord]:
        logger.debug(f"load_zones | shop={shop_id}")
        with self._lock:
            return list(self._zones.get(shop_id, ()))

    def save_zones(self, shop_id: str, records: Sequence[ZoneRecord]) -> list[ZoneRecord]:
        logger.debug(f"save_zones | shop={shop_id} | count={len(records)}")
        with self._lock:
            known = {r.id for r in self._zones.get(shop_id, ())}
            seen: set[str] = set()
            canonical: list[ZoneRecord] = []
            for idx, record in enumerate(records):
                if len(record.coordinates) < 3:
                    raise StorageError(f"Delivery areas need at least three points (record #{idx})", shop_id)
                if record.id is None:
                    area_id = self._new_id()
                else:
                    if record.id not in known:
                        raise StorageError(f"Unknown delivery area id {record.id!r}", shop_id)
                    if record.id in seen:
                        raise StorageError(f"Delivery area id {record.id!r} submitted twice", shop_id)
                    area_id = record.id
                seen.add(area_id)
                canonical.append(self._canonical(record, area_id))

            pruned = known - seen
            if pruned:
                logger.debug(f"save_zones | shop={shop_id} | pruned={len(pruned)}")
            self._zones[shop_id] = canonical
            return list(canonical)
