"""Default policy constants for the multicrop geometry engine."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Minimum region size
# ---------------------------------------------------------------------------

# Precision editors (viewport canvas, zoomed canvas, advanced editor) floor a
# region at 10 image pixels while the coarse main canvas floors it at 20.
# Both floors are enforced by the editor context that owns them.
MIN_SIZE_PRECISE: Final[float] = 10.0
MIN_SIZE_COARSE: Final[float] = 20.0

# ---------------------------------------------------------------------------
# Pointer interaction constants
# ---------------------------------------------------------------------------

# A drag-to-create rectangle must exceed this many display units on both
# axes before a region is materialised.
CREATION_THRESHOLD: Final[float] = 20.0

# Two body hits on the same region within this window open the advanced
# editor instead of starting a second drag.
DOUBLE_ACTIVATE_WINDOW_MS: Final[int] = 300

ROTATION_HANDLE_DISTANCE: Final[float] = 30.0
ROTATION_HANDLE_RADIUS: Final[float] = 14.0
ROTATION_SNAP_DEGREES: Final[float] = 15.0

HANDLE_SIZE_PRECISE: Final[float] = 10.0
HANDLE_SIZE_TOUCH: Final[float] = 16.0
HANDLE_SIZE_ZOOMED: Final[float] = 8.0

# ---------------------------------------------------------------------------
# Display transform
# ---------------------------------------------------------------------------

MIN_ZOOM: Final[float] = 0.1
MAX_ZOOM: Final[float] = 5.0
WHEEL_ZOOM_IN: Final[float] = 1.1
WHEEL_ZOOM_OUT: Final[float] = 0.9
FIT_TO_VIEW_FILL: Final[float] = 0.8

# ---------------------------------------------------------------------------
# Region collection defaults
# ---------------------------------------------------------------------------

DEFAULT_REGION_SIZE: Final[float] = 200.0
DEFAULT_GRID_CELL_SIZE: Final[float] = 150.0
DEFAULT_GRID_SPACING: Final[float] = 0.0
VIEW_EDGE_MARGIN: Final[float] = 50.0
DUPLICATE_OFFSET: Final[float] = 30.0

# Keyboard nudges use the small step by default and the large one with Shift.
MOVE_STEP: Final[float] = 1.0
MOVE_STEP_LARGE: Final[float] = 10.0
RESIZE_STEP: Final[float] = 1.0
RESIZE_STEP_LARGE: Final[float] = 10.0
ROTATION_STEP: Final[float] = 1.0
ROTATION_STEP_LARGE: Final[float] = 15.0
