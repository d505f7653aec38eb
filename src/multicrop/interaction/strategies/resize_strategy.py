"""
Resize strategy for region edge/corner dragging.
"""

from __future__ import annotations

from dataclasses import replace

from ...geometry.transform import display_to_image, to_local
from ...geometry.utils import RegionHandle
from ...models.region import Region
from ..editor import RegionEditor
from ..events import InteractionMode, PointerEvent
from .abstract import InteractionStrategy


class ResizeStrategy(InteractionStrategy):
    """Strategy for resizing a region via one of its eight handles."""

    mode = InteractionMode.RESIZING

    def __init__(self, *, editor: RegionEditor, region: Region, handle: RegionHandle) -> None:
        """Initialize resize strategy.

        Parameters
        ----------
        editor:
            Editor that solves and stores the resized geometry.
        region:
            The region as it was at pointer-down; every sample is measured
            against this frame.
        handle:
            The resize handle being dragged.
        """
        super().__init__()
        self._editor = editor
        self._origin = replace(region)
        self._handle = handle

    @property
    def region_id(self) -> str:
        return self._origin.id

    @property
    def handle(self) -> RegionHandle:
        return self._handle

    def proposed_geometry(self, event: PointerEvent) -> Region:
        """Return the unconstrained region the pointer sample asks for."""
        origin = self._origin
        local = to_local(display_to_image(event.pos, self._editor.transform()), origin)
        left, top, right, bottom = origin.x, origin.y, origin.right, origin.bottom
        if self._handle.moves_left:
            left = local.x()
        if self._handle.moves_right:
            right = local.x()
        if self._handle.moves_top:
            top = local.y()
        if self._handle.moves_bottom:
            bottom = local.y()

        current = self._editor.collection.find(origin.id) or origin
        return replace(current, x=left, y=top, width=right - left, height=bottom - top)

    def on_move(self, event: PointerEvent) -> None:
        """Handle resize drag movement."""
        if self._editor.collection.find(self._origin.id) is None:
            return
        self._editor.commit_resize(self._origin.id, self.proposed_geometry(event), self._handle)
        self.changed = True
