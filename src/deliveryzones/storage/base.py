from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from deliveryzones.geometry import Coordinate


@dataclass(frozen=True, slots=True)
class ZoneRecord:
    """
    Storage representation of one delivery area.

    Attributes:
        id: Storage identifier, None for areas that were never saved.
        label: Area label.
        coordinates: Open ring (no closing duplicate) of vertices.
    """

    id: str | None
    label: str
    coordinates: tuple[Coordinate, ...]

    def __post_init__(self):
        object.__setattr__(self, "coordinates", tuple(Coordinate.parse(c) for c in self.coordinates))

    def to_dict(self) -> dict:
        data = {
            "label": self.label,
            "coordinates": [c.to_dict() for c in self.coordinates],
        }
        if self.id is not None:
            data = {"id": self.id, **data}
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ZoneRecord":
        return cls(
            id=data.get("id"),
            label=data.get("label") or "",
            coordinates=tuple(Coordinate.parse(c) for c in data.get("coordinates") or ()),
        )


@runtime_checkable
class ZoneStore(Protocol):
    """
    Storage collaborator for delivery areas.

    `save_zones` is an upsert-and-prune: the submitted records become the
    complete set for the shop. Records with an `id` update the stored area,
    records without one are created, stored areas missing from the submission
    are deleted. It is atomic from the caller's point of view and returns the
    canonical set with identifiers assigned.

    Implementations raise :class:`~deliveryzones.errors.StorageError` on failure;
    anything else escaping a store is wrapped into one by
    :class:`~deliveryzones.zones.ZoneCollection`.
    """

    def load_zones(self, shop_id: str) -> list[ZoneRecord]: ...

    def save_zones(self, shop_id: str, records: Sequence[ZoneRecord]) -> list[ZoneRecord]: ...
