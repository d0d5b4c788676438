class DeliveryZonesBaseError(Exception):
    def __init__(self, message: str, shop_id: str | None = None):
        self.shop_id = shop_id
        self.message = message
        super().__init__(message, shop_id)

    def __str__(self):
        if self.shop_id:
            return f"[{self.shop_id}] {self.message}"
        return self.message


class InvalidCoordinateError(DeliveryZonesBaseError, ValueError):
    """Raised when a latitude/longitude pair is not finite or out of range."""


class InvalidPolygonError(DeliveryZonesBaseError, ValueError):
    """Raised when a vertex sequence cannot form a polygon."""


class ZoneValidationError(DeliveryZonesBaseError):
    """Raised when a drawn zone is refused at commit time."""


class InsufficientVerticesError(ZoneValidationError):
    def __init__(self, vertex_count: int, shop_id: str | None = None):
        self.vertex_count = vertex_count
        super().__init__(
            f"A delivery area needs at least three points, got {vertex_count}.",
            shop_id,
        )


class ZoneOverlapError(ZoneValidationError):
    def __init__(self, conflicting_area, shop_id: str | None = None):
        self.conflicting_area = conflicting_area
        super().__init__(
            f'Delivery zones cannot overlap: new area overlaps "{conflicting_area.label}".',
            shop_id,
        )


class SelfIntersectionError(ZoneValidationError):
    """Raised when a drawn polygon crosses itself."""


class EditorStateError(DeliveryZonesBaseError):
    """Raised on an event the zone editor cannot accept in its current state."""


class AreaNotFoundError(DeliveryZonesBaseError, KeyError):
    """Raised when a delivery area is not part of the collection."""

    def __str__(self):
        return DeliveryZonesBaseError.__str__(self)


class StorageError(DeliveryZonesBaseError):
    """Raised when the storage backend fails to load or save zones."""


class SaveInProgressError(StorageError):
    """Raised when a save is issued while another one is still running."""


class GeometryDecodeError(StorageError):
    """Raised when stored geometry cannot be turned back into coordinates."""


class GeometryEncodeError(StorageError):
    """Raised when coordinates cannot be encoded for storage."""
