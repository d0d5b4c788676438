from .abc_area import DeliveryArea
from .areas import SavedArea, UnsavedArea
from .snapshot import Snapshot, normalize
from .collection import ZoneCollection, areas_from_records

__all__ = [
    "DeliveryArea",
    "SavedArea",
    "Snapshot",
    "UnsavedArea",
    "ZoneCollection",
    "areas_from_records",
    "normalize",
]
