"""Normalised pointer input and interaction state types."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt


class PointerKind(enum.Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


class InteractionMode(enum.Enum):
    """The single gesture the controller is currently running."""

    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    ROTATING = "rotating"
    PANNING = "panning"
    CREATING = "creating"


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """A pointer sample in canvas-local display coordinates.

    ``timestamp_ms`` is optional; the controller falls back to its own clock
    when the input collaborator does not stamp events.
    """

    kind: PointerKind
    pos: QPointF
    modifiers: Qt.KeyboardModifier = Qt.KeyboardModifier.NoModifier
    timestamp_ms: Optional[float] = None
    touch: bool = False

    @property
    def shift(self) -> bool:
        return bool(self.modifiers & Qt.KeyboardModifier.ShiftModifier)


@dataclass(slots=True)
class PositionSelector:
    """Explicit "pick a start position" mode for grid placement.

    While ``active`` a pointer-down is consumed: its image-space position is
    handed to ``on_position_select`` and no gesture starts.
    """

    active: bool = False
    on_position_select: Optional[Callable[[QPointF], None]] = None

    def select(self, position: QPointF) -> None:
        if self.on_position_select is not None:
            self.on_position_select(QPointF(position))


@dataclass(frozen=True, slots=True)
class InteractionFlags:
    """Paint hints for the rendering collaborator."""

    mode: InteractionMode = InteractionMode.IDLE
    region_id: Optional[str] = None
    creation_rect: Optional[QRectF] = None

    @property
    def is_dragging(self) -> bool:
        return self.mode is InteractionMode.DRAGGING

    @property
    def is_resizing(self) -> bool:
        return self.mode is InteractionMode.RESIZING

    @property
    def is_rotating(self) -> bool:
        return self.mode is InteractionMode.ROTATING

    @property
    def is_panning(self) -> bool:
        return self.mode is InteractionMode.PANNING

    @property
    def is_creating(self) -> bool:
        return self.mode is InteractionMode.CREATING
