"""Data models shared by the geometry engine and its host."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional

from PySide6.QtCore import QPointF, QRectF

from ..config import MAX_ZOOM, MIN_ZOOM


def new_region_id(prefix: str = "crop") -> str:
    """Return a fresh opaque identifier for a region."""

    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Cell coordinates of a region within its grid group."""

    row: int
    col: int


@dataclass(slots=True)
class Region:
    """A rectangular crop area expressed in image space.

    ``x``/``y`` is the unrotated top-left corner.  ``rotation`` is measured in
    degrees about the region centre and kept inside ``[0, 360)``.
    """

    id: str
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    aspect_ratio: Optional[float] = None
    name: str = "Crop"
    grid_id: Optional[str] = None
    grid_position: Optional[GridPosition] = None
    visible: bool = True
    z_index: int = 0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def center(self) -> QPointF:
        """Return the rotation centre in image space."""

        return QPointF(self.x + self.width * 0.5, self.y + self.height * 0.5)

    def rect(self) -> QRectF:
        """Return the unrotated bounds as a ``QRectF``."""

        return QRectF(self.x, self.y, self.width, self.height)

    def is_grid_member(self) -> bool:
        return self.grid_id is not None and self.grid_position is not None

    def copy(self, **changes) -> "Region":
        """Return a copy of the region with *changes* applied."""

        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class ViewTransform:
    """Uniform scale plus translation mapping image space to display space."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def offset(self) -> QPointF:
        return QPointF(self.offset_x, self.offset_y)

    def with_offset(self, offset: QPointF) -> "ViewTransform":
        return ViewTransform(self.scale, float(offset.x()), float(offset.y()))

    def sanitised(self) -> "ViewTransform":
        """Return a transform whose scale is finite and inside the zoom range."""

        scale = self.scale
        if not math.isfinite(scale) or scale <= 0.0:
            scale = MIN_ZOOM
        scale = max(MIN_ZOOM, min(MAX_ZOOM, scale))
        offset_x = self.offset_x if math.isfinite(self.offset_x) else 0.0
        offset_y = self.offset_y if math.isfinite(self.offset_y) else 0.0
        if (scale, offset_x, offset_y) == (self.scale, self.offset_x, self.offset_y):
            return self
        return ViewTransform(scale, offset_x, offset_y)


@dataclass(frozen=True, slots=True)
class SafeArea:
    """Display-space rectangle regions are kept within by viewport-aware views."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def rect(self) -> QRectF:
        return QRectF(self.min_x, self.min_y, self.width, self.height)


@dataclass(frozen=True, slots=True)
class ImageSize:
    """Pixel dimensions of the source raster."""

    width: float
    height: float

    def rect(self) -> QRectF:
        return QRectF(0.0, 0.0, self.width, self.height)

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(slots=True)
class RegionSnapshot:
    """Immutable-by-convention copy of a region collection for history."""

    regions: list[Region] = field(default_factory=list)
    selected_id: Optional[str] = None
