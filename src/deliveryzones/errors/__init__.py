from .errors import (
    AreaNotFoundError,
    DeliveryZonesBaseError,
    EditorStateError,
    GeometryDecodeError,
    GeometryEncodeError,
    InsufficientVerticesError,
    InvalidCoordinateError,
    InvalidPolygonError,
    SaveInProgressError,
    SelfIntersectionError,
    StorageError,
    ZoneOverlapError,
    ZoneValidationError,
)

__all__ = [
    "AreaNotFoundError",
    "DeliveryZonesBaseError",
    "EditorStateError",
    "GeometryDecodeError",
    "GeometryEncodeError",
    "InsufficientVerticesError",
    "InvalidCoordinateError",
    "InvalidPolygonError",
    "SaveInProgressError",
    "SelfIntersectionError",
    "StorageError",
    "ZoneOverlapError",
    "ZoneValidationError",
]
