"""
Constraint solving for proposed region geometry.

A :class:`ConstraintSolver` runs an ordered list of policy objects over a
proposed region and returns the corrected copy.  Each hosting view picks its
own policy set through :func:`solver_for_context`; image-bound and safe-area
containment are never combined in one solver.
"""

from __future__ import annotations

import enum
import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Optional

from PySide6.QtCore import QRectF

from ..config import MIN_SIZE_COARSE, MIN_SIZE_PRECISE
from ..models.region import ImageSize, Region, SafeArea, ViewTransform
from .transform import normalise_angle
from .utils import RegionHandle

_LOGGER = logging.getLogger(__name__)


class Containment(enum.Enum):
    """Outer frame a solver keeps regions inside."""

    NONE = "none"
    IMAGE_BOUNDS = "image_bounds"
    SAFE_AREA = "safe_area"


class EditorContext(enum.Enum):
    """Hosting views of the geometry engine and their policy defaults."""

    MAIN_CANVAS = "main_canvas"
    VIEWPORT_CANVAS = "viewport_canvas"
    ZOOMED_CANVAS = "zoomed_canvas"
    ADVANCED_EDITOR = "advanced_editor"

    @property
    def min_size(self) -> float:
        if self is EditorContext.MAIN_CANVAS:
            return MIN_SIZE_COARSE
        return MIN_SIZE_PRECISE

    @property
    def default_containment(self) -> Containment:
        if self is EditorContext.MAIN_CANVAS:
            return Containment.SAFE_AREA
        return Containment.IMAGE_BOUNDS


@dataclass(frozen=True, slots=True)
class ConstraintContext:
    """Per-call inputs for :meth:`ConstraintSolver.apply`.

    ``aspect_ratio`` overrides the region's own locked ratio when set.
    ``handle`` names the edge or corner being dragged; ``NONE`` means the
    region is being moved or created.
    """

    image_size: Optional[ImageSize] = None
    safe_area: Optional[SafeArea] = None
    transform: ViewTransform = ViewTransform()
    handle: RegionHandle = RegionHandle.NONE
    aspect_ratio: Optional[float] = None

    def effective_ratio(self, region: Region) -> Optional[float]:
        ratio = self.aspect_ratio if self.aspect_ratio is not None else region.aspect_ratio
        if ratio is None or not math.isfinite(ratio) or ratio <= 0.0:
            return None
        return float(ratio)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def _finite(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def resize_anchored(region: Region, handle: RegionHandle, width: float, height: float) -> Region:
    """Return *region* resized to ``width x height`` keeping the fixed edges.

    Edges not driven by *handle* stay where they are; for a move or create
    (``RegionHandle.NONE``) the top-left corner is the anchor.
    """
    x = region.right - width if handle.moves_left else region.x
    y = region.bottom - height if handle.moves_top else region.y
    return replace(region, x=x, y=y, width=width, height=height)


def floor_with_ratio(width: float, height: float, min_size: float, ratio: Optional[float]) -> tuple[float, float]:
    """Raise ``width``/``height`` to *min_size*, keeping *ratio* when set."""

    if ratio is None:
        return max(width, min_size), max(height, min_size)
    width = max(width, min_size, min_size * ratio)
    return width, width / ratio


def _contain(
    region: Region,
    bounds: QRectF,
    handle: RegionHandle,
    min_size: float,
    ratio: Optional[float],
) -> Region:
    """Fit *region* into *bounds*, shrinking from the driven edges first."""

    left, top = bounds.left(), bounds.top()
    right, bottom = bounds.right(), bounds.bottom()

    if handle.moves_left:
        max_w = min(region.right, right) - left
    elif handle.moves_right:
        max_w = right - max(region.x, left)
    else:
        max_w = right - left
    if handle.moves_top:
        max_h = min(region.bottom, bottom) - top
    elif handle.moves_bottom:
        max_h = bottom - max(region.y, top)
    else:
        max_h = bottom - top
    max_w = max(0.0, max_w)
    max_h = max(0.0, max_h)

    width, height = region.width, region.height
    if ratio is not None:
        factor = min(1.0, max_w / width, max_h / height)
        width *= factor
        height *= factor
    else:
        width = min(width, max_w)
        height = min(height, max_h)
    width, height = floor_with_ratio(width, height, min_size, ratio)

    resized = resize_anchored(region, handle, width, height)
    # Position clamps to the near edge when the bounds are smaller than the
    # floored size.
    x = max(left, min(resized.x, right - width))
    y = max(top, min(resized.y, bottom - height))
    return replace(resized, x=x, y=y)


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


class ConstraintPolicy(ABC):
    """Base class for one step of the constraint pipeline."""

    @abstractmethod
    def apply(self, region: Region, context: ConstraintContext, min_size: float) -> Region:
        """Return a corrected copy of *region*."""


class MinimumSizePolicy(ConstraintPolicy):
    """Floor width and height, scrubbing non-finite values first."""

    def apply(self, region: Region, context: ConstraintContext, min_size: float) -> Region:
        width = _finite(region.width, min_size)
        height = _finite(region.height, min_size)
        sane = replace(
            region,
            x=_finite(region.x, 0.0),
            y=_finite(region.y, 0.0),
            width=width,
            height=height,
            rotation=normalise_angle(region.rotation),
        )
        # Negative extents come from dragging an edge past its opposite edge.
        if width >= min_size and height >= min_size:
            return sane
        return resize_anchored(
            sane, context.handle, max(width, min_size), max(height, min_size)
        )


class AspectRatioPolicy(ConstraintPolicy):
    """Derive the secondary dimension from the primary one.

    ``W``/``E`` and the ``NW``/``SE`` diagonal make width primary; ``N``/``S``
    and the ``NE``/``SW`` diagonal make height primary.  Moves and creations
    keep width primary.
    """

    HEIGHT_PRIMARY = frozenset({RegionHandle.N, RegionHandle.S, RegionHandle.NE, RegionHandle.SW})

    def apply(self, region: Region, context: ConstraintContext, min_size: float) -> Region:
        ratio = context.effective_ratio(region)
        if ratio is None:
            return region
        if context.handle in self.HEIGHT_PRIMARY:
            height = max(region.height, min_size, min_size / ratio)
            width = height * ratio
        else:
            width = max(region.width, min_size, min_size * ratio)
            height = width / ratio
        return resize_anchored(region, context.handle, width, height)


class ImageBoundsPolicy(ConstraintPolicy):
    """Keep the unrotated region inside the source image."""

    def apply(self, region: Region, context: ConstraintContext, min_size: float) -> Region:
        image = context.image_size
        if image is None or not image.is_valid():
            return region
        if image.width < min_size or image.height < min_size:
            _LOGGER.debug(
                "Image %sx%s is smaller than the %s minimum; clamping to origin",
                image.width,
                image.height,
                min_size,
            )
        return _contain(region, image.rect(), context.handle, min_size, context.effective_ratio(region))


class SafeAreaPolicy(ConstraintPolicy):
    """Keep the region's display-space projection inside the safe area."""

    def apply(self, region: Region, context: ConstraintContext, min_size: float) -> Region:
        safe_area = context.safe_area
        if safe_area is None:
            return region
        transform = context.transform.sanitised()
        scale = transform.scale
        display_min = min_size * scale
        if safe_area.width < display_min or safe_area.height < display_min:
            _LOGGER.debug("Safe area %s is smaller than the minimum region size", safe_area)

        projected = replace(
            region,
            x=region.x * scale + transform.offset_x,
            y=region.y * scale + transform.offset_y,
            width=region.width * scale,
            height=region.height * scale,
        )
        contained = _contain(
            projected,
            safe_area.rect(),
            context.handle,
            display_min,
            context.effective_ratio(region),
        )
        return replace(
            contained,
            x=(contained.x - transform.offset_x) / scale,
            y=(contained.y - transform.offset_y) / scale,
            width=contained.width / scale,
            height=contained.height / scale,
        )


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


class ConstraintSolver:
    """Apply an ordered policy pipeline to proposed region geometry."""

    def __init__(self, policies: Sequence[ConstraintPolicy], *, min_size: float) -> None:
        self._policies = tuple(policies)
        self._min_size = float(min_size)

    @property
    def min_size(self) -> float:
        return self._min_size

    @property
    def policies(self) -> tuple[ConstraintPolicy, ...]:
        return self._policies

    def apply(self, region: Region, context: ConstraintContext) -> Region:
        """Return a corrected copy of *region*; the input is never mutated."""

        corrected = replace(region)
        for policy in self._policies:
            corrected = policy.apply(corrected, context, self._min_size)
        return corrected


def solver_for_context(
    context: EditorContext,
    containment: Optional[Containment] = None,
) -> ConstraintSolver:
    """Return the solver used by the view identified by *context*."""

    mode = context.default_containment if containment is None else containment
    policies: list[ConstraintPolicy] = [MinimumSizePolicy(), AspectRatioPolicy()]
    if mode is Containment.IMAGE_BOUNDS:
        policies.append(ImageBoundsPolicy())
    elif mode is Containment.SAFE_AREA:
        policies.append(SafeAreaPolicy())
    return ConstraintSolver(policies, min_size=context.min_size)
