"""
Rotate strategy for the rotation handle.
"""

from __future__ import annotations

from ...config import ROTATION_SNAP_DEGREES
from ...geometry.transform import image_to_display, normalise_angle, pointer_angle
from ...models.region import Region
from ..editor import RegionEditor
from ..events import InteractionMode, PointerEvent
from .abstract import InteractionStrategy


def wrap_delta(degrees: float) -> float:
    """Map an angle difference into ``[-180, 180)``."""
    return (degrees + 180.0) % 360.0 - 180.0


def snap_angle(degrees: float, increment: float = ROTATION_SNAP_DEGREES) -> float:
    return round(degrees / increment) * increment


class RotateStrategy(InteractionStrategy):
    """Strategy for rotating a region about its centre."""

    mode = InteractionMode.ROTATING

    def __init__(self, *, editor: RegionEditor, region: Region, start: PointerEvent) -> None:
        super().__init__()
        self._editor = editor
        self._region_id = region.id
        self._center = image_to_display(region.center(), editor.transform())
        self._last_angle = pointer_angle(self._center, start.pos)
        # Unsnapped running total; snapping is applied on output only so that
        # small deltas are not rounded away while Shift is held.
        self._raw_rotation = region.rotation

    @property
    def region_id(self) -> str:
        return self._region_id

    def on_move(self, event: PointerEvent) -> None:
        """Handle rotation drag movement."""
        angle = pointer_angle(self._center, event.pos)
        delta = wrap_delta(angle - self._last_angle)
        self._last_angle = angle
        self._raw_rotation += delta

        rotation = self._raw_rotation
        if event.shift:
            rotation = snap_angle(rotation)
        if self._editor.collection.find(self._region_id) is None:
            return
        self._editor.commit_rotation(self._region_id, normalise_angle(rotation))
        self.changed = True
