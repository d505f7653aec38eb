"""
Move strategy for dragging a region body.
"""

from __future__ import annotations

from dataclasses import replace

from PySide6.QtCore import QPointF

from ...geometry.transform import display_to_image
from ..editor import RegionEditor
from ..events import InteractionMode, PointerEvent
from .abstract import InteractionStrategy


class MoveStrategy(InteractionStrategy):
    """Strategy for translating a region (and its grid group)."""

    mode = InteractionMode.DRAGGING

    def __init__(self, *, editor: RegionEditor, region_id: str, start: QPointF) -> None:
        """Initialize move strategy.

        Parameters
        ----------
        editor:
            Editor that solves and stores the moved geometry.
        region_id:
            The region being dragged.
        start:
            Pointer position at pointer-down, in display coordinates.
        """
        super().__init__()
        self._editor = editor
        self._region_id = region_id
        self._last_pos = QPointF(start)

    @property
    def region_id(self) -> str:
        return self._region_id

    def on_move(self, event: PointerEvent) -> None:
        """Handle drag movement."""
        transform = self._editor.transform()
        previous = display_to_image(self._last_pos, transform)
        current = display_to_image(event.pos, transform)
        # Follow the pointer sample by sample so a clamp never accumulates
        # into a gap between pointer and region.
        self._last_pos = QPointF(event.pos)

        dx = current.x() - previous.x()
        dy = current.y() - previous.y()
        if abs(dx) < 1e-9 and abs(dy) < 1e-9:
            return
        region = self._editor.collection.find(self._region_id)
        if region is None:
            return
        self._editor.commit_translate(self._region_id, replace(region, x=region.x + dx, y=region.y + dy))
        self.changed = True
