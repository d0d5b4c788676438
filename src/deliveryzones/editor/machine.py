from deliveryzones._config import config
from deliveryzones.editor.states import (
    AddVertex,
    AreaCommitted,
    CancelPolygon,
    CommitRejected,
    Committing,
    CompletePolygon,
    Drawing,
    EditorContext,
    EditorEffect,
    EditorEvent,
    EditorState,
    Idle,
    NoEffect,
    StartPolygon,
    UndoVertex,
)
from deliveryzones.errors import (
    EditorStateError,
    InsufficientVerticesError,
    SelfIntersectionError,
    ZoneOverlapError,
)
from deliveryzones.geometry import MIN_VERTICES, Polygon, collapse_duplicates, is_simple, polygons_overlap
from deliveryzones.zones import DeliveryArea, UnsavedArea

logger = config.logger

Transition = tuple[EditorState, EditorEffect]


def resolve_commit(state: Committing, context: EditorContext) -> Transition:
    """
    Validate a completed drawing against the existing areas.

    Consecutive duplicate taps are collapsed first and the ring is rounded to
    `config.coordinate_precision`, the precision it is stored with. The drawing
    is then refused if fewer than three vertices remain, if the ring crosses itself
    (when `config.reject_self_intersecting` is set), or if it overlaps any
    existing area.

    Args:
        state: Drawing being committed.
        context: Shop, existing areas and label for the new area.

    Returns:
        tuple[EditorState, EditorEffect]: `(Idle, AreaCommitted)` on success,
        `(Drawing, CommitRejected)` with the original taps otherwise.
    """
    back_to_drawing = Drawing(state.vertices)
    ring = collapse_duplicates(state.vertices)

    if len(ring) < MIN_VERTICES:
        return back_to_drawing, CommitRejected(InsufficientVerticesError(len(ring), context.shop_id))

    polygon = Polygon(ring).rounded()

    if config.reject_self_intersecting and not is_simple(polygon):
        return back_to_drawing, CommitRejected(
            SelfIntersectionError("Delivery area edges cross each other; redraw the shape.", context.shop_id)
        )

    for existing in context.existing:
        if polygons_overlap(polygon, existing.polygon.rounded()):
            return back_to_drawing, CommitRejected(ZoneOverlapError(existing, context.shop_id))

    area = UnsavedArea(shop_id=context.shop_id, label=context.next_label, polygon=polygon)
    return Idle(), AreaCommitted(area)


def transition(state: EditorState, event: EditorEvent, context: EditorContext) -> Transition:
    """
    Apply one editor event. Pure: neither `state` nor `context` is modified.

    Raises:
        EditorStateError: If `event` is not accepted in `state`.
    """
    if isinstance(state, Idle):
        if isinstance(event, StartPolygon):
            return Drawing(), NoEffect()
        if isinstance(event, CancelPolygon):
            return state, NoEffect()

    elif isinstance(state, Drawing):
        if isinstance(event, AddVertex):
            return Drawing(state.vertices + (event.coordinate,)), NoEffect()
        if isinstance(event, UndoVertex):
            return Drawing(state.vertices[:-1]), NoEffect()
        if isinstance(event, CancelPolygon):
            return Idle(), NoEffect()
        if isinstance(event, CompletePolygon):
            return resolve_commit(Committing(state.vertices), context)

    raise EditorStateError(
        f"Cannot handle {type(event).__name__} while {type(state).__name__}",
        context.shop_id,
    )


class ZoneEditor:
    """
    Holds the current editor state for one shop and feeds events through
    :func:`transition`.

    Only `Idle` and `Drawing` are ever stored; a `Committing` drawing is
    resolved within the same dispatch.

    The editor never touches a collection itself; the caller applies the
    returned effect (see :class:`~deliveryzones.main.DeliveryZoneSession`).
    """

    def __init__(self, shop_id: str):
        self.shop_id = shop_id
        self.state: EditorState = Idle()

    @property
    def is_drawing(self) -> bool:
        return isinstance(self.state, Drawing)

    @property
    def vertices(self) -> tuple:
        if isinstance(self.state, Drawing):
            return self.state.vertices
        return ()

    def dispatch(
        self,
        event: EditorEvent,
        existing: tuple[DeliveryArea, ...] = (),
        next_label: str | None = None,
    ) -> EditorEffect:
        context = EditorContext(
            shop_id=self.shop_id,
            existing=tuple(existing),
            next_label=next_label or config.default_label(len(existing)),
        )
        new_state, effect = transition(self.state, event, context)
        logger.debug(f"Editor | shop={self.shop_id} | {type(event).__name__}: {type(new_state).__name__}")
        self.state = new_state
        return effect
