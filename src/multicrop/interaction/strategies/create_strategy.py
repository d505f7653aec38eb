"""
Create strategy for drag-to-create regions.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF

from ...models.region import Region
from ..editor import RegionEditor
from ..events import InteractionMode, PointerEvent
from .abstract import InteractionStrategy


class CreateStrategy(InteractionStrategy):
    """Strategy tracking a rubber-band rectangle until pointer-up."""

    mode = InteractionMode.CREATING

    def __init__(self, *, editor: RegionEditor, start: QPointF) -> None:
        super().__init__()
        self._editor = editor
        self._start = QPointF(start)
        self._end = QPointF(start)
        self.created: Optional[Region] = None

    def pending_rect(self) -> QRectF:
        """Return the rubber band in display coordinates."""
        return QRectF(self._start, self._end).normalized()

    def on_move(self, event: PointerEvent) -> None:
        self._end = QPointF(event.pos)

    def on_end(self, event: Optional[PointerEvent]) -> None:
        """Materialise the region if the rectangle is large enough."""
        self.created = self._editor.create_from_drag(self._start, self._end)
        self.changed = self.created is not None
