"""
Handle enumeration and small pure helpers shared by the geometry modules.

Nothing in this module depends on Qt event handling; cursor hints are plain
``Qt.CursorShape`` values for the rendering collaborator.
"""

from __future__ import annotations

import enum

from PySide6.QtCore import QPointF, Qt

from ..models.region import Region
from .transform import normalise_angle


class RegionHandle(enum.IntEnum):
    """Enumeration of everything a pointer can land on."""

    NONE = 0
    N = 1
    S = 2
    W = 3
    E = 4
    NW = 5
    NE = 6
    SW = 7
    SE = 8
    ROTATE = 9
    BODY = -1
    OUTSIDE = -2

    @property
    def is_resize(self) -> bool:
        return self in RESIZE_HANDLES

    @property
    def moves_left(self) -> bool:
        return self in (RegionHandle.W, RegionHandle.NW, RegionHandle.SW)

    @property
    def moves_right(self) -> bool:
        return self in (RegionHandle.E, RegionHandle.NE, RegionHandle.SE)

    @property
    def moves_top(self) -> bool:
        return self in (RegionHandle.N, RegionHandle.NW, RegionHandle.NE)

    @property
    def moves_bottom(self) -> bool:
        return self in (RegionHandle.S, RegionHandle.SW, RegionHandle.SE)


# Corners first so that overlapping tolerance boxes on tiny regions resolve
# to the corner, matching the handle draw order.
RESIZE_HANDLES: tuple[RegionHandle, ...] = (
    RegionHandle.NW,
    RegionHandle.NE,
    RegionHandle.SW,
    RegionHandle.SE,
    RegionHandle.N,
    RegionHandle.S,
    RegionHandle.W,
    RegionHandle.E,
)

# Direction of each handle from the centre, in degrees, y axis pointing down.
_HANDLE_DIRECTIONS: dict[RegionHandle, float] = {
    RegionHandle.E: 0.0,
    RegionHandle.SE: 45.0,
    RegionHandle.S: 90.0,
    RegionHandle.SW: 135.0,
    RegionHandle.W: 180.0,
    RegionHandle.NW: 225.0,
    RegionHandle.N: 270.0,
    RegionHandle.NE: 315.0,
}


def local_handle_position(region: Region, handle: RegionHandle) -> QPointF:
    """Return the unrotated image-space position of a resize handle."""

    mid_x = region.x + region.width * 0.5
    mid_y = region.y + region.height * 0.5
    return {
        RegionHandle.NW: QPointF(region.x, region.y),
        RegionHandle.NE: QPointF(region.right, region.y),
        RegionHandle.SW: QPointF(region.x, region.bottom),
        RegionHandle.SE: QPointF(region.right, region.bottom),
        RegionHandle.N: QPointF(mid_x, region.y),
        RegionHandle.S: QPointF(mid_x, region.bottom),
        RegionHandle.W: QPointF(region.x, mid_y),
        RegionHandle.E: QPointF(region.right, mid_y),
    }[handle]


def cursor_for_handle(handle: RegionHandle, rotation: float = 0.0) -> Qt.CursorShape:
    """Return the cursor for *handle* on a region rotated by *rotation* degrees."""

    if handle == RegionHandle.ROTATE:
        return Qt.CursorShape.OpenHandCursor
    if handle == RegionHandle.BODY:
        return Qt.CursorShape.SizeAllCursor
    direction = _HANDLE_DIRECTIONS.get(handle)
    if direction is None:
        return Qt.CursorShape.ArrowCursor
    axis = normalise_angle(direction + rotation) % 180.0
    if axis < 22.5 or axis >= 157.5:
        return Qt.CursorShape.SizeHorCursor
    if axis < 67.5:
        return Qt.CursorShape.SizeFDiagCursor
    if axis < 112.5:
        return Qt.CursorShape.SizeVerCursor
    return Qt.CursorShape.SizeBDiagCursor
