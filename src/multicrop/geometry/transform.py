"""
Coordinate transforms between image, display and region-local space.

All functions are pure: they take the current transform or region as input
and never mutate it.  Angles are degrees at the API surface and radians
internally.
"""

from __future__ import annotations

import math

from PySide6.QtCore import QPointF

from ..config import FIT_TO_VIEW_FILL, MAX_ZOOM, MIN_ZOOM, WHEEL_ZOOM_IN, WHEEL_ZOOM_OUT
from ..models.region import ImageSize, Region, ViewTransform


def normalise_angle(degrees: float) -> float:
    """Map *degrees* into ``[0, 360)``."""

    if not math.isfinite(degrees):
        return 0.0
    value = ((degrees % 360.0) + 360.0) % 360.0
    # ``-1e-17 % 360`` rounds to exactly 360.0
    return 0.0 if value >= 360.0 else value


def image_to_display(point: QPointF, transform: ViewTransform) -> QPointF:
    """Project an image-space point into display space."""

    return QPointF(
        point.x() * transform.scale + transform.offset_x,
        point.y() * transform.scale + transform.offset_y,
    )


def display_to_image(point: QPointF, transform: ViewTransform) -> QPointF:
    """Inverse of :func:`image_to_display`.

    Raises ``ZeroDivisionError`` when ``transform.scale`` is zero; hosts keep
    the scale inside ``[MIN_ZOOM, MAX_ZOOM]`` so this never happens in practice.
    """

    scale = transform.scale
    if scale == 0.0:
        raise ZeroDivisionError("display transform scale must be non-zero")
    return QPointF(
        (point.x() - transform.offset_x) / scale,
        (point.y() - transform.offset_y) / scale,
    )


def rotate_about(point: QPointF, center: QPointF, degrees: float) -> QPointF:
    """Rotate *point* about *center* by *degrees* (clockwise in y-down space)."""

    radians = math.radians(degrees)
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)
    dx = point.x() - center.x()
    dy = point.y() - center.y()
    return QPointF(
        center.x() + dx * cos_a - dy * sin_a,
        center.y() + dx * sin_a + dy * cos_a,
    )


def to_local(point: QPointF, region: Region) -> QPointF:
    """Return *point* expressed in the region's unrotated frame."""

    if not region.rotation:
        return QPointF(point)
    return rotate_about(point, region.center(), -region.rotation)


def to_world(point: QPointF, region: Region) -> QPointF:
    """Inverse of :func:`to_local`."""

    if not region.rotation:
        return QPointF(point)
    return rotate_about(point, region.center(), region.rotation)


def pointer_angle(center: QPointF, point: QPointF) -> float:
    """Return the angle of *point* around *center* where 0 degrees points up."""

    angle = math.atan2(point.y() - center.y(), point.x() - center.x())
    return math.degrees(angle) + 90.0


# ---------------------------------------------------------------------------
# Display transform operations
# ---------------------------------------------------------------------------


def clamp_scale(scale: float) -> float:
    """Clamp *scale* to the supported zoom range."""

    if not math.isfinite(scale) or scale <= 0.0:
        return MIN_ZOOM
    return max(MIN_ZOOM, min(MAX_ZOOM, scale))


def fit_to_view(
    image_size: ImageSize,
    view_width: float,
    view_height: float,
    *,
    fill: float = FIT_TO_VIEW_FILL,
) -> ViewTransform:
    """Return the transform that centres the image using *fill* of the view."""

    if not image_size.is_valid() or view_width <= 0.0 or view_height <= 0.0:
        return ViewTransform()
    image_aspect = image_size.width / image_size.height
    view_aspect = view_width / view_height
    if image_aspect > view_aspect:
        scale = (view_width * fill) / image_size.width
    else:
        scale = (view_height * fill) / image_size.height
    scaled_w = image_size.width * scale
    scaled_h = image_size.height * scale
    return ViewTransform(
        scale,
        (view_width - scaled_w) / 2.0,
        (view_height - scaled_h) / 2.0,
    )


def zoom_at(transform: ViewTransform, anchor: QPointF, zoom_in: bool) -> ViewTransform:
    """Zoom one wheel step toward *anchor* keeping the anchored pixel fixed."""

    factor = WHEEL_ZOOM_IN if zoom_in else WHEEL_ZOOM_OUT
    old_scale = clamp_scale(transform.scale)
    new_scale = clamp_scale(old_scale * factor)
    ratio = new_scale / old_scale
    return ViewTransform(
        new_scale,
        anchor.x() - (anchor.x() - transform.offset_x) * ratio,
        anchor.y() - (anchor.y() - transform.offset_y) * ratio,
    )


def pan_from(transform: ViewTransform, start_offset: QPointF, delta: QPointF) -> ViewTransform:
    """Return *transform* translated to ``start_offset + delta``."""

    return ViewTransform(
        transform.scale,
        start_offset.x() + delta.x(),
        start_offset.y() + delta.y(),
    )


def is_point_in_image(point: QPointF, transform: ViewTransform, image_size: ImageSize) -> bool:
    """Return True when the display-space *point* lies over the image."""

    if not image_size.is_valid():
        return False
    left = transform.offset_x
    top = transform.offset_y
    right = left + image_size.width * transform.scale
    bottom = top + image_size.height * transform.scale
    return left <= point.x() <= right and top <= point.y() <= bottom
