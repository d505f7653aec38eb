"""
Grid group creation and synchronisation.

A grid group is not stored anywhere: it is the set of regions sharing a
``grid_id``.  Members share size, rotation and aspect ratio, and their
positions tile contiguously from the ``(0, 0)`` anchor member.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any, Optional

from PySide6.QtCore import QPointF

from ..config import DEFAULT_GRID_CELL_SIZE, DEFAULT_GRID_SPACING, VIEW_EDGE_MARGIN
from ..errors import GridError
from ..models.region import GridPosition, Region, new_region_id
from .constraints import ConstraintContext, ConstraintSolver
from .transform import normalise_angle

_LOGGER = logging.getLogger(__name__)

GEOMETRY_KEYS: frozenset[str] = frozenset({"width", "height", "rotation", "aspect_ratio"})
POSITION_KEYS: frozenset[str] = frozenset({"x", "y"})


def new_grid_id() -> str:
    return f"grid-{uuid.uuid4().hex[:12]}"


def group_members(regions: Iterable[Region], grid_id: str) -> list[Region]:
    """Return the members of *grid_id* in collection order."""

    return [region for region in regions if region.grid_id == grid_id and region.grid_position is not None]


def find_anchor(members: Sequence[Region]) -> Optional[Region]:
    """Return the member sitting at row 0, column 0, if it is still linked."""

    for member in members:
        if member.grid_position == GridPosition(0, 0):
            return member
    return None


def grid_origin(members: Sequence[Region], spacing: float = DEFAULT_GRID_SPACING) -> Optional[QPointF]:
    """Return the top-left of the ``(0, 0)`` cell.

    When the anchor has been unlinked the origin is back-computed from the
    lowest remaining cell.
    """
    anchor = find_anchor(members)
    if anchor is not None:
        return QPointF(anchor.x, anchor.y)
    if not members:
        return None
    first = min(members, key=lambda m: (m.grid_position.row, m.grid_position.col))
    pos = first.grid_position
    return QPointF(
        first.x - pos.col * (first.width + spacing),
        first.y - pos.row * (first.height + spacing),
    )


def adjusted_grid_start(
    start: QPointF,
    rows: int,
    cols: int,
    cell_size: float,
    spacing: float,
    view_size: Optional[tuple[float, float]],
) -> QPointF:
    """Pull *start* back so a ``rows x cols`` grid stays inside the view."""

    if view_size is None:
        return QPointF(start)
    view_w, view_h = view_size
    total_w = cols * cell_size + (cols - 1) * spacing
    total_h = rows * cell_size + (rows - 1) * spacing
    return QPointF(
        min(start.x(), max(VIEW_EDGE_MARGIN, view_w - total_w - VIEW_EDGE_MARGIN)),
        min(start.y(), max(VIEW_EDGE_MARGIN, view_h - total_h - VIEW_EDGE_MARGIN)),
    )


def create_grid(
    rows: int,
    cols: int,
    start: QPointF,
    *,
    cell_size: float = DEFAULT_GRID_CELL_SIZE,
    spacing: float = DEFAULT_GRID_SPACING,
    view_size: Optional[tuple[float, float]] = None,
    z_index: int = 0,
    id_factory: Callable[[str], str] = new_region_id,
) -> list[Region]:
    """Synthesize ``rows x cols`` square regions sharing a fresh grid id."""

    if rows <= 0 or cols <= 0:
        raise GridError(f"grid needs at least one row and column, got {rows}x{cols}")
    if cell_size <= 0 or spacing < 0:
        raise GridError(f"invalid grid cell size {cell_size} / spacing {spacing}")

    grid_id = new_grid_id()
    origin = adjusted_grid_start(start, rows, cols, cell_size, spacing, view_size)
    members: list[Region] = []
    for row in range(rows):
        for col in range(cols):
            members.append(
                Region(
                    id=id_factory("grid-crop"),
                    x=origin.x() + col * (cell_size + spacing),
                    y=origin.y() + row * (cell_size + spacing),
                    width=cell_size,
                    height=cell_size,
                    aspect_ratio=1.0,
                    rotation=0.0,
                    name=f"Grid_R{rows}C{cols}_{row + 1}_{col + 1}",
                    grid_id=grid_id,
                    grid_position=GridPosition(row, col),
                    z_index=z_index,
                )
            )
    _LOGGER.debug("Created %sx%s grid %s at (%s, %s)", rows, cols, grid_id, origin.x(), origin.y())
    return members


def unlink(region: Region) -> Region:
    """Detach *region* from its group without touching its geometry."""

    return replace(region, grid_id=None, grid_position=None)


class GridSynchronizer:
    """Propagate a change on one grid member to the rest of its group."""

    def __init__(
        self,
        solver: Optional[ConstraintSolver] = None,
        *,
        spacing: float = DEFAULT_GRID_SPACING,
    ) -> None:
        self._solver = solver
        self._spacing = float(spacing)

    def _solve(self, region: Region, context: Optional[ConstraintContext]) -> Region:
        if self._solver is None:
            return region
        return self._solver.apply(region, context or ConstraintContext())

    def propagate(
        self,
        regions: Sequence[Region],
        grid_id: str,
        changed_id: str,
        updates: Mapping[str, Any],
        context: Optional[ConstraintContext] = None,
    ) -> list[Region]:
        """Apply *updates* made to *changed_id* across the whole group.

        Size, rotation and aspect ratio become identical on every member.
        When the solved size or the position changes, member positions are
        re-derived from the grid origin.  Returns the updated members in group order.
        """
        members = group_members(regions, grid_id)
        changed = next((m for m in members if m.id == changed_id), None)
        if changed is None:
            _LOGGER.debug("Region %s is not a member of grid %s", changed_id, grid_id)
            return []

        proposed = replace(changed, **dict(updates))
        solved = self._solve(proposed, context)
        shared = {
            "width": solved.width,
            "height": solved.height,
            "rotation": normalise_angle(solved.rotation),
            "aspect_ratio": solved.aspect_ratio,
        }

        resized = (solved.width, solved.height) != (changed.width, changed.height)
        rederive = resized or bool(set(updates) & POSITION_KEYS)
        origin = grid_origin(members, self._spacing)
        if set(updates) & POSITION_KEYS:
            pos = changed.grid_position
            origin = QPointF(
                solved.x - pos.col * (solved.width + self._spacing),
                solved.y - pos.row * (solved.height + self._spacing),
            )

        step_x = shared["width"] + self._spacing
        step_y = shared["height"] + self._spacing
        extra = {k: v for k, v in updates.items() if k not in GEOMETRY_KEYS | POSITION_KEYS}
        result: list[Region] = []
        for member in members:
            fields = dict(shared)
            if rederive and origin is not None:
                fields["x"] = origin.x() + member.grid_position.col * step_x
                fields["y"] = origin.y() + member.grid_position.row * step_y
            if member.id == changed_id:
                fields.update(extra)
            result.append(replace(member, **fields))
        return result

    def propagate_translate(
        self,
        regions: Sequence[Region],
        grid_id: str,
        changed_id: str,
        proposed: Region,
        context: Optional[ConstraintContext] = None,
    ) -> list[Region]:
        """Move the whole group by the delta *changed_id* actually achieved.

        The dragged member is solved first; every other member then receives
        the same raw delta so the tiling stays rigid mid-gesture.
        """
        members = group_members(regions, grid_id)
        changed = next((m for m in members if m.id == changed_id), None)
        if changed is None:
            return []
        solved = self._solve(proposed, context)
        dx = solved.x - changed.x
        dy = solved.y - changed.y
        result: list[Region] = []
        for member in members:
            if member.id == changed_id:
                result.append(solved)
            else:
                result.append(replace(member, x=member.x + dx, y=member.y + dy))
        return result
