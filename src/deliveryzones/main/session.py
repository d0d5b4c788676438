from deliveryzones._config import config
from deliveryzones.editor import (
    AddVertex,
    AreaCommitted,
    CancelPolygon,
    CommitRejected,
    CompletePolygon,
    StartPolygon,
    UndoVertex,
    ZoneEditor,
)
from deliveryzones.errors import EditorStateError
from deliveryzones.geometry import Coordinate, Polygon
from deliveryzones.matching import find_containing_zones
from deliveryzones.storage import ZoneStore
from deliveryzones.zones import DeliveryArea, ZoneCollection

logger = config.logger


class DeliveryZoneSession:
    """
    Attributes:
        shop_id: Shop whose delivery areas are edited.
        store: Storage collaborator used for loading and saving.
        collection: Current zone collection; replaced after each successful save.
        editor: Drawing state machine.
    """

    def __init__(self, shop_id: str, store: ZoneStore, collection: ZoneCollection | None = None):
        """
        Open an editing session for one shop.

        The session is the single owner of the shop's :class:`ZoneCollection`
        while it is alive. Drawing goes through the editor state machine;
        committed areas are appended to the collection; saving sends the
        full collection to `store` and swaps in the canonical result.

        Args:
            shop_id:
                Shop identifier.
            store:
                Storage collaborator implementing ``load_zones`` / ``save_zones``.
            collection:
                Optional pre-loaded collection. If None, zones are loaded from
                `store`, which also seeds the persisted snapshot.

        Raises:
            StorageError:
                If the initial load fails.
            ValueError:
                If `collection` belongs to another shop.
        """
        if collection is None:
            collection = ZoneCollection.load(store, shop_id)
        elif collection.shop_id != shop_id:
            raise ValueError(f"collection belongs to shop {collection.shop_id!r}, not {shop_id!r}")
        self.shop_id = shop_id
        self.store = store
        self.collection = collection
        self.editor = ZoneEditor(shop_id)

    @property
    def areas(self) -> tuple[DeliveryArea, ...]:
        return self.collection.areas

    @property
    def is_drawing(self) -> bool:
        return self.editor.is_drawing

    @property
    def drawing_vertices(self) -> tuple[Coordinate, ...]:
        return self.editor.vertices

    def has_pending_changes(self) -> bool:
        return self.collection.has_pending_changes()

    def can_leave(self) -> bool:
        """False when leaving would drop a drawing in progress or unsaved edits."""
        return not (self.is_drawing or self.has_pending_changes())

    def start_polygon(self) -> None:
        self.editor.dispatch(StartPolygon())

    def add_vertex(self, coordinate) -> None:
        self.editor.dispatch(AddVertex(Coordinate.parse(coordinate)))

    def undo_vertex(self) -> None:
        self.editor.dispatch(UndoVertex())

    def cancel_polygon(self) -> None:
        self.editor.dispatch(CancelPolygon())

    def complete_polygon(self) -> DeliveryArea:
        """
        Commit the polygon being drawn.

        Returns:
            DeliveryArea: The new unsaved area, already appended to the collection.

        Raises:
            InsufficientVerticesError:
                Fewer than three distinct points were tapped.
            SelfIntersectionError:
                The drawn ring crosses itself.
            ZoneOverlapError:
                The polygon overlaps an existing area (available as
                ``error.conflicting_area``).
            EditorStateError:
                No polygon is being drawn.

        The editor stays in the drawing state on any validation error so the
        merchant can adjust the shape.
        """
        effect = self.editor.dispatch(
            CompletePolygon(),
            existing=self.collection.areas,
            next_label=self.collection.next_label(),
        )
        if isinstance(effect, CommitRejected):
            logger.warning(f"Delivery area rejected | shop={self.shop_id} | {effect.error.message}")
            raise effect.error
        if not isinstance(effect, AreaCommitted):
            raise EditorStateError("Completing the polygon produced no area", self.shop_id)
        area = self.collection.add(effect.area)
        logger.info(f'Delivery area drawn | shop={self.shop_id} | "{area.label}" | vertices={len(area.polygon)}')
        return area

    def remove_area(self, area: DeliveryArea) -> None:
        self.collection.remove(area)

    def rename_area(self, area: DeliveryArea, label: str) -> DeliveryArea:
        return self.collection.rename(area, label)

    def redraw_area(self, area: DeliveryArea, polygon: Polygon) -> DeliveryArea:
        return self.collection.replace(area, area.with_polygon(polygon))

    def save(self) -> ZoneCollection:
        """
        Persist the collection.

        Returns:
            ZoneCollection: The canonical collection now owned by the session.

        Raises:
            EditorStateError:
                A polygon is still being drawn; complete or cancel it first.
            SaveInProgressError:
                Another save of this session is still running.
            StorageError:
                Storage failed. Local edits stay pending and the save can be retried.
        """
        if self.is_drawing:
            raise EditorStateError("Complete or cancel the delivery area before saving.", self.shop_id)
        self.collection = self.collection.save(self.store)
        return self.collection

    def find_containing_zones(self, point, include_boundary: bool | None = None) -> tuple[DeliveryArea, ...]:
        return find_containing_zones(self.collection.areas, point, include_boundary)
