"""
Region geometry core.

This package provides the pure coordinate-transform, hit-testing,
constraint-solving and grid-synchronisation logic shared by every canvas.
"""

from .constraints import (
    ConstraintContext,
    ConstraintSolver,
    Containment,
    EditorContext,
    solver_for_context,
)
from .grid import GridSynchronizer, create_grid, unlink
from .hit_tester import HitResult, HitTester
from .transform import display_to_image, image_to_display, normalise_angle, to_local, to_world
from .utils import RegionHandle, cursor_for_handle

__all__ = [
    "ConstraintContext",
    "ConstraintSolver",
    "Containment",
    "EditorContext",
    "GridSynchronizer",
    "HitResult",
    "HitTester",
    "RegionHandle",
    "create_grid",
    "cursor_for_handle",
    "display_to_image",
    "image_to_display",
    "normalise_angle",
    "solver_for_context",
    "to_local",
    "to_world",
    "unlink",
]
