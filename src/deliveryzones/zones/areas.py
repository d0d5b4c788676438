from dataclasses import dataclass, replace

from deliveryzones.geometry import Polygon, collapse_duplicates
from deliveryzones.storage.base import ZoneRecord
from deliveryzones.zones.abc_area import DeliveryArea


def _validate_label(label) -> None:
    if not isinstance(label, str) or not label.strip():
        raise ValueError("Delivery area label must be non-empty string")


def _validate_polygon(polygon) -> None:
    if not isinstance(polygon, Polygon):
        raise TypeError(f"polygon must be Polygon, got {type(polygon).__name__}")


@dataclass(frozen=True, slots=True)
class UnsavedArea(DeliveryArea):
    """
    A delivery area drawn in the current session and not yet persisted.

    Attributes:
        shop_id: Owning shop.
        label: Non-empty label.
        polygon: Area geometry.

    Raises:
        ValueError: If `label` is empty.
        TypeError: If `polygon` is not a :class:`Polygon`.
    """

    shop_id: str
    label: str
    polygon: Polygon

    def __post_init__(self):
        _validate_label(self.label)
        _validate_polygon(self.polygon)

    @property
    def is_saved(self) -> bool:
        return False

    def with_label(self, label: str) -> "UnsavedArea":
        return replace(self, label=label)

    def with_polygon(self, polygon: Polygon) -> "UnsavedArea":
        return replace(self, polygon=polygon)

    def to_record(self) -> ZoneRecord:
        return ZoneRecord(id=None, label=self.label, coordinates=self.polygon.vertices)


@dataclass(frozen=True, slots=True)
class SavedArea(DeliveryArea):
    """
    A delivery area known to storage.

    Attributes:
        area_id: Storage-assigned identifier.
        shop_id: Owning shop.
        label: Non-empty label.
        polygon: Area geometry as last confirmed by storage (or redrawn locally).

    Raises:
        ValueError: If `area_id` or `label` is empty.
        TypeError: If `polygon` is not a :class:`Polygon`.
    """

    area_id: str
    shop_id: str
    label: str
    polygon: Polygon

    def __post_init__(self):
        if not isinstance(self.area_id, str) or not self.area_id:
            raise ValueError("SavedArea requires a non-empty area_id")
        _validate_label(self.label)
        _validate_polygon(self.polygon)

    @property
    def is_saved(self) -> bool:
        return True

    def with_label(self, label: str) -> "SavedArea":
        return replace(self, label=label)

    def with_polygon(self, polygon: Polygon) -> "SavedArea":
        return replace(self, polygon=polygon)

    def to_record(self) -> ZoneRecord:
        return ZoneRecord(id=self.area_id, label=self.label, coordinates=self.polygon.vertices)

    @classmethod
    def from_record(cls, shop_id: str, record: ZoneRecord, fallback_label: str) -> "SavedArea":
        if record.id is None:
            raise ValueError("Stored zone record has no id")
        return cls(
            area_id=record.id,
            shop_id=shop_id,
            label=record.label if record.label and record.label.strip() else fallback_label,
            polygon=Polygon(collapse_duplicates(record.coordinates)),
        )
