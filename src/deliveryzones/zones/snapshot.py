import json
from collections.abc import Iterable
from dataclasses import dataclass

from deliveryzones._config import config
from deliveryzones.zones.abc_area import DeliveryArea


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Canonical serialized form of a zone list, used only for change detection.

    The text is compact JSON of `[{"label", "coordinates": [{"latitude", "longitude"}]}]`
    in collection order, coordinates rounded to `config.coordinate_precision`
    decimals, identifiers left out. Two snapshots are equal iff their texts are equal.
    """

    text: str

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls("[]")

    def __str__(self) -> str:
        return self.text


def _normalize_area(area: DeliveryArea, precision: int) -> dict:
    return {
        "label": area.label,
        "coordinates": [v.rounded(precision).to_dict() for v in area.polygon.vertices],
    }


def normalize(areas: Iterable[DeliveryArea], precision: int | None = None) -> Snapshot:
    """
    Build the snapshot of a sequence of delivery areas.

    Args:
        areas: Areas in collection order.
        precision: Rounding precision, defaults to `config.coordinate_precision`.

    Returns:
        Snapshot: Deterministic, identifier-free serialization.
    """
    if precision is None:
        precision = config.coordinate_precision
    payload = [_normalize_area(area, precision) for area in areas]
    return Snapshot(json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False))
