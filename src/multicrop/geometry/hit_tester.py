"""
Hit testing logic for region handles and bodies.

This module contains pure geometric functions for detecting which handle or
region (if any) is under a display-space point, with no dependencies on Qt
events or interaction state.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QPointF, QRectF

from ..config import (
    HANDLE_SIZE_PRECISE,
    HANDLE_SIZE_TOUCH,
    ROTATION_HANDLE_DISTANCE,
    ROTATION_HANDLE_RADIUS,
)
from ..models.region import Region, ViewTransform
from .transform import display_to_image, image_to_display, rotate_about, to_local, to_world
from .utils import RESIZE_HANDLES, RegionHandle, local_handle_position


@dataclass(frozen=True, slots=True)
class HitResult:
    """Outcome of a scene-wide hit test."""

    handle: RegionHandle
    region_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.handle in (RegionHandle.NONE, RegionHandle.OUTSIDE)


EMPTY_HIT = HitResult(RegionHandle.NONE)
OUTSIDE_HIT = HitResult(RegionHandle.OUTSIDE)


def handle_world_positions(
    region: Region, transform: ViewTransform
) -> dict[RegionHandle, QPointF]:
    """Return the display-space centre of every resize handle."""

    return {
        handle: image_to_display(to_world(local_handle_position(region, handle), region), transform)
        for handle in RESIZE_HANDLES
    }


def rotation_handle_position(
    region: Region,
    transform: ViewTransform,
    distance: float = ROTATION_HANDLE_DISTANCE,
) -> QPointF:
    """Return the display-space centre of the rotation handle.

    The handle sits *distance* display units above the midpoint of the top
    edge, measured along the region's local "up" direction.
    """

    top_mid = image_to_display(
        to_world(local_handle_position(region, RegionHandle.N), region), transform
    )
    above = QPointF(top_mid.x(), top_mid.y() - distance)
    return rotate_about(above, top_mid, region.rotation)


class HitTester:
    """Pure-function hit tester for region handles and bodies."""

    def __init__(
        self,
        handle_size: float = HANDLE_SIZE_PRECISE,
        *,
        touch_handle_size: float = HANDLE_SIZE_TOUCH,
        scale_with_zoom: bool = False,
        rotation_distance: float = ROTATION_HANDLE_DISTANCE,
        rotation_radius: float = ROTATION_HANDLE_RADIUS,
    ) -> None:
        """Initialize hit tester.

        Parameters
        ----------
        handle_size:
            Edge length of the square tolerance box around each resize
            handle on precise-pointer surfaces, in display units.
        touch_handle_size:
            Edge length used for touch pointers.
        scale_with_zoom:
            Grow the handle with the zoom level, as the pixel-precision
            canvas does (``size * max(1, zoom * 0.5)``).
        rotation_distance:
            Offset of the rotation handle above the top edge.
        rotation_radius:
            Radius of the circular rotation handle tolerance.
        """
        self._handle_size = float(handle_size)
        self._touch_handle_size = float(touch_handle_size)
        self._scale_with_zoom = bool(scale_with_zoom)
        self._rotation_distance = float(rotation_distance)
        self._rotation_radius = float(rotation_radius)

    def handle_size(self, zoom_level: float = 1.0, touch: bool = False) -> float:
        """Return the effective handle size for the active surface."""

        size = self._touch_handle_size if touch else self._handle_size
        if self._scale_with_zoom:
            size *= max(1.0, float(zoom_level) * 0.5)
        return size

    # ------------------------------------------------------------------
    # Single-region queries
    # ------------------------------------------------------------------
    def hit_rotation_handle(self, point: QPointF, region: Region, transform: ViewTransform) -> bool:
        """Return True when *point* is within the rotation handle radius."""

        centre = rotation_handle_position(region, transform, self._rotation_distance)
        return math.hypot(point.x() - centre.x(), point.y() - centre.y()) <= self._rotation_radius

    def hit_resize_handle(
        self,
        point: QPointF,
        region: Region,
        transform: ViewTransform,
        *,
        zoom_level: float = 1.0,
        touch: bool = False,
    ) -> RegionHandle:
        """Return the resize handle under *point* or ``RegionHandle.NONE``."""

        half = self.handle_size(zoom_level, touch) * 0.5
        for handle, centre in handle_world_positions(region, transform).items():
            if abs(point.x() - centre.x()) <= half and abs(point.y() - centre.y()) <= half:
                return handle
        return RegionHandle.NONE

    @staticmethod
    def hit_body(point: QPointF, region: Region, transform: ViewTransform) -> bool:
        """Return True when *point* lies inside the (rotated) region body."""

        local = to_local(display_to_image(point, transform), region)
        return (
            region.x <= local.x() <= region.right
            and region.y <= local.y() <= region.bottom
        )

    def classify(
        self,
        point: QPointF,
        region: Region,
        transform: ViewTransform,
        zoom_level: float = 1.0,
        *,
        touch: bool = False,
        include_rotation: bool = True,
    ) -> RegionHandle:
        """Classify *point* against one region.

        Returns the rotation handle, a resize handle, ``BODY`` or ``NONE``.
        """
        if include_rotation and self.hit_rotation_handle(point, region, transform):
            return RegionHandle.ROTATE
        handle = self.hit_resize_handle(
            point, region, transform, zoom_level=zoom_level, touch=touch
        )
        if handle != RegionHandle.NONE:
            return handle
        if self.hit_body(point, region, transform):
            return RegionHandle.BODY
        return RegionHandle.NONE

    # ------------------------------------------------------------------
    # Scene queries
    # ------------------------------------------------------------------
    def region_at(
        self,
        point: QPointF,
        regions: Sequence[Region],
        transform: ViewTransform,
    ) -> Optional[Region]:
        """Return the top-most visible region whose body contains *point*.

        Regions are tested in descending ``z_index``; ties go to the region
        created last (later in *regions*).
        """
        ordered = sorted(
            ((region.z_index, index, region) for index, region in enumerate(regions) if region.visible),
            key=lambda item: (item[0], item[1]),
            reverse=True,
        )
        for _z, _index, region in ordered:
            if self.hit_body(point, region, transform):
                return region
        return None

    def hit_test(
        self,
        point: QPointF,
        regions: Sequence[Region],
        selected: Optional[Region],
        transform: ViewTransform,
        *,
        zoom_level: float = 1.0,
        touch: bool = False,
        viewport: Optional[QRectF] = None,
        include_rotation: bool = True,
    ) -> HitResult:
        """Resolve *point* against the whole scene in priority order.

        Priority: rotation handle of *selected*, its resize handles, region
        bodies by descending z-order, then empty space.  Points outside
        *viewport* (when given) are reported as ``OUTSIDE``.
        """
        if viewport is not None and not viewport.contains(point):
            return OUTSIDE_HIT
        if selected is not None and selected.visible:
            if include_rotation and self.hit_rotation_handle(point, selected, transform):
                return HitResult(RegionHandle.ROTATE, selected.id)
            handle = self.hit_resize_handle(
                point, selected, transform, zoom_level=zoom_level, touch=touch
            )
            if handle != RegionHandle.NONE:
                return HitResult(handle, selected.id)
        region = self.region_at(point, regions, transform)
        if region is not None:
            return HitResult(RegionHandle.BODY, region.id)
        return EMPTY_HIT
