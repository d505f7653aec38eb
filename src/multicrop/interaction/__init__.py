"""
Pointer interaction for region editing.

The controller owns the gesture state machine; the editor applies every
geometry commit through the constraint solver and grid synchronisation.
"""

from .controller import RegionInteractionController
from .editor import RegionEditor
from .events import InteractionFlags, InteractionMode, PointerEvent, PointerKind, PositionSelector

__all__ = [
    "InteractionFlags",
    "InteractionMode",
    "PointerEvent",
    "PointerKind",
    "PositionSelector",
    "RegionEditor",
    "RegionInteractionController",
]
