import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from deliveryzones._config import config
from deliveryzones.errors import InvalidCoordinateError


def _as_float(value, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinateError(f"{field} must be a number, got bool")
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError as e:
            raise InvalidCoordinateError(f"{field} is not a number: {value!r}") from e
    if not isinstance(value, (int, float)):
        raise InvalidCoordinateError(f"{field} must be a number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidCoordinateError(f"{field} must be finite, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class Coordinate:
    """
    A latitude/longitude pair in decimal degrees.

    Coordinates are compared for persistence and change detection after
    rounding to `config.coordinate_precision` decimals (6 by default, roughly
    0.11 m). Plain dataclass equality stays exact; use :meth:`same_as` or
    :meth:`rounded` when the precision floor matters.

    In the planar geometry kernel longitude is the x axis and latitude the y axis.

    Attributes:
        latitude: Latitude in [-90, 90].
        longitude: Longitude in [-180, 180].

    Raises:
        InvalidCoordinateError: If a component is not a finite number or is out of range.
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        latitude = _as_float(self.latitude, "latitude")
        longitude = _as_float(self.longitude, "longitude")
        if not -90.0 <= latitude <= 90.0:
            raise InvalidCoordinateError(f"latitude must be in [-90, 90], got {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise InvalidCoordinateError(f"longitude must be in [-180, 180], got {longitude}")
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)

    @property
    def x(self) -> float:
        return self.longitude

    @property
    def y(self) -> float:
        return self.latitude

    def rounded(self, precision: int | None = None) -> "Coordinate":
        """
        Return the coordinate rounded to `precision` decimals.

        Args:
            precision: Number of decimals. Defaults to `config.coordinate_precision`.

        Returns:
            Coordinate: Rounded copy.
        """
        if precision is None:
            precision = config.coordinate_precision
        # +0.0 folds -0.0 into 0.0 so both serialise the same way
        return Coordinate(
            round(self.latitude, precision) + 0.0,
            round(self.longitude, precision) + 0.0,
        )

    def key(self, precision: int | None = None) -> tuple[float, float]:
        rounded = self.rounded(precision)
        return rounded.latitude, rounded.longitude

    def same_as(self, other: "Coordinate", precision: int | None = None) -> bool:
        """Equality at the rounding precision."""
        return self.key(precision) == other.key(precision)

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def parse(cls, raw) -> "Coordinate":
        """
        Build a coordinate from a `Coordinate`, a `(lat, lon)` pair or a
        mapping with `latitude`/`longitude` keys.

        Raises:
            InvalidCoordinateError: If `raw` has none of the accepted shapes.
        """
        if isinstance(raw, Coordinate):
            return raw
        if isinstance(raw, Mapping):
            try:
                return cls(raw["latitude"], raw["longitude"])
            except KeyError as e:
                raise InvalidCoordinateError(f"missing coordinate field: {e}") from e
        if isinstance(raw, Sequence) and not isinstance(raw, str) and len(raw) == 2:
            return cls(raw[0], raw[1])
        raise InvalidCoordinateError(f"cannot read a coordinate from {raw!r}")

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"
