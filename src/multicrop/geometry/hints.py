"""Read-only geometry handed to the rendering and export collaborators."""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QPointF, QRectF, QSize

from ..models.region import Region, ViewTransform
from .hit_tester import handle_world_positions, rotation_handle_position
from .transform import image_to_display, to_world
from .utils import RegionHandle


@dataclass(frozen=True, slots=True)
class DisplayGeometry:
    """Display-space placement of one region."""

    center: QPointF
    width: float
    height: float
    rotation: float
    corners: tuple[QPointF, QPointF, QPointF, QPointF]


@dataclass(frozen=True, slots=True)
class HandleLayout:
    """Display-space centres of every handle of a region."""

    resize: dict[RegionHandle, QPointF]
    rotate: QPointF


@dataclass(frozen=True, slots=True)
class ExportGeometry:
    """Source rectangle and rotation an exporter needs to rasterise a region."""

    source: QRectF
    rotation: float
    center: QPointF
    output_size: QSize


def region_corners(region: Region) -> tuple[QPointF, QPointF, QPointF, QPointF]:
    """Return the rotated corners in image space (tl, tr, br, bl)."""

    return (
        to_world(QPointF(region.x, region.y), region),
        to_world(QPointF(region.right, region.y), region),
        to_world(QPointF(region.right, region.bottom), region),
        to_world(QPointF(region.x, region.bottom), region),
    )


def region_display_geometry(region: Region, transform: ViewTransform) -> DisplayGeometry:
    """Project *region* into display space for painting."""

    corners = tuple(image_to_display(corner, transform) for corner in region_corners(region))
    return DisplayGeometry(
        center=image_to_display(region.center(), transform),
        width=region.width * transform.scale,
        height=region.height * transform.scale,
        rotation=region.rotation,
        corners=corners,  # type: ignore[arg-type]
    )


def handle_layout(region: Region, transform: ViewTransform) -> HandleLayout:
    return HandleLayout(
        resize=handle_world_positions(region, transform),
        rotate=rotation_handle_position(region, transform),
    )


def export_geometry(region: Region) -> ExportGeometry:
    """Describe the image-space sub-rectangle to rasterise for *region*."""

    return ExportGeometry(
        source=region.rect(),
        rotation=region.rotation,
        center=region.center(),
        output_size=QSize(max(1, round(region.width)), max(1, round(region.height))),
    )
