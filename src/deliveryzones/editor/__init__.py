from .states import (
    AddVertex,
    AreaCommitted,
    CancelPolygon,
    CommitRejected,
    Committing,
    CompletePolygon,
    Drawing,
    EditorContext,
    Idle,
    NoEffect,
    StartPolygon,
    UndoVertex,
)
from .machine import ZoneEditor, resolve_commit, transition

__all__ = [
    "AddVertex",
    "AreaCommitted",
    "CancelPolygon",
    "CommitRejected",
    "Committing",
    "CompletePolygon",
    "Drawing",
    "EditorContext",
    "Idle",
    "NoEffect",
    "StartPolygon",
    "UndoVertex",
    "ZoneEditor",
    "resolve_commit",
    "transition",
]
