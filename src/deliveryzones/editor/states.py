from dataclasses import dataclass, field

from deliveryzones.errors import ZoneValidationError
from deliveryzones.geometry import Coordinate
from deliveryzones.zones import DeliveryArea


# States


@dataclass(frozen=True, slots=True)
class Idle:
    """No polygon is being drawn."""


@dataclass(frozen=True, slots=True)
class Drawing:
    """A polygon is being drawn; `vertices` holds the taps in order, duplicates included."""

    vertices: tuple[Coordinate, ...] = ()


@dataclass(frozen=True, slots=True)
class Committing:
    """A completed drawing under validation. Always resolved to `Idle` or back to `Drawing`."""

    vertices: tuple[Coordinate, ...]


EditorState = Idle | Drawing | Committing


# Events


@dataclass(frozen=True, slots=True)
class StartPolygon:
    pass


@dataclass(frozen=True, slots=True)
class AddVertex:
    coordinate: Coordinate

    def __post_init__(self):
        object.__setattr__(self, "coordinate", Coordinate.parse(self.coordinate))


@dataclass(frozen=True, slots=True)
class UndoVertex:
    pass


@dataclass(frozen=True, slots=True)
class CancelPolygon:
    pass


@dataclass(frozen=True, slots=True)
class CompletePolygon:
    pass


EditorEvent = StartPolygon | AddVertex | UndoVertex | CancelPolygon | CompletePolygon


# Effects


@dataclass(frozen=True, slots=True)
class NoEffect:
    pass


@dataclass(frozen=True, slots=True)
class AreaCommitted:
    """The drawing was accepted; `area` must be appended to the collection."""

    area: DeliveryArea


@dataclass(frozen=True, slots=True)
class CommitRejected:
    """The drawing was refused; the editor stays in `Drawing`."""

    error: ZoneValidationError


EditorEffect = NoEffect | AreaCommitted | CommitRejected


@dataclass(frozen=True, slots=True)
class EditorContext:
    """
    Read-only inputs of a transition.

    Attributes:
        shop_id: Shop whose zones are edited.
        existing: Areas the new polygon must not overlap.
        next_label: Label given to the next committed area.
    """

    shop_id: str
    existing: tuple[DeliveryArea, ...] = field(default=())
    next_label: str = "Zone 1"
