"""
Geometry-aware mutations of the region collection.

``RegionEditor`` is the single place where proposed geometry is run through
the constraint solver and, for grid members, through grid propagation before
it is written back into the host's :class:`RegionCollection`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any, Optional

from PySide6.QtCore import QPointF

from ..config import (
    CREATION_THRESHOLD,
    DEFAULT_GRID_CELL_SIZE,
    DEFAULT_GRID_SPACING,
    DEFAULT_REGION_SIZE,
    DUPLICATE_OFFSET,
    MOVE_STEP,
    MOVE_STEP_LARGE,
    RESIZE_STEP,
    RESIZE_STEP_LARGE,
    ROTATION_STEP,
    ROTATION_STEP_LARGE,
    VIEW_EDGE_MARGIN,
)
from ..geometry.constraints import ConstraintContext, ConstraintSolver
from ..geometry.grid import GridSynchronizer, create_grid, unlink
from ..geometry.transform import display_to_image, normalise_angle
from ..geometry.utils import RegionHandle
from ..models.collection import RegionCollection
from ..models.region import ImageSize, Region, SafeArea, ViewTransform, new_region_id

_LOGGER = logging.getLogger(__name__)


class RegionEditor:
    """Apply constrained, grid-aware geometry changes to a collection."""

    def __init__(
        self,
        *,
        collection: RegionCollection,
        solver: ConstraintSolver,
        transform_provider: Callable[[], ViewTransform],
        image_size_provider: Callable[[], Optional[ImageSize]],
        safe_area_provider: Optional[Callable[[], Optional[SafeArea]]] = None,
        on_regions_changed: Optional[Callable[[list[Region]], None]] = None,
        on_region_removed: Optional[Callable[[Region], None]] = None,
        creation_threshold: float = CREATION_THRESHOLD,
        grid_cell_size: float = DEFAULT_GRID_CELL_SIZE,
        grid_spacing: float = DEFAULT_GRID_SPACING,
    ) -> None:
        """Initialize the editor.

        Parameters
        ----------
        collection:
            Host-owned region collection the editor writes into.
        solver:
            Constraint solver chosen for the hosting view.
        transform_provider:
            Callable returning the current display transform.
        image_size_provider:
            Callable returning the source image size, or None before load.
        safe_area_provider:
            Callable returning the viewport safe area for viewport-aware views.
        on_regions_changed:
            Callback receiving every region written by a mutation.
        on_region_removed:
            Callback receiving a region after it was deleted.
        creation_threshold:
            Minimum display extent of a drag-to-create rectangle.
        grid_cell_size:
            Cell size used by :meth:`add_grid` when none is given.
        grid_spacing:
            Gap between neighbouring grid cells.
        """
        self._collection = collection
        self._solver = solver
        self._transform_provider = transform_provider
        self._image_size_provider = image_size_provider
        self._safe_area_provider = safe_area_provider
        self._on_regions_changed = on_regions_changed
        self._on_region_removed = on_region_removed
        self._creation_threshold = float(creation_threshold)
        self._grid_cell_size = float(grid_cell_size)
        self._grid_spacing = float(grid_spacing)
        self._synchronizer = GridSynchronizer(solver, spacing=grid_spacing)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def collection(self) -> RegionCollection:
        return self._collection

    @property
    def solver(self) -> ConstraintSolver:
        return self._solver

    def transform(self) -> ViewTransform:
        """Return the host transform with a guarded, positive scale."""
        return self._transform_provider().sanitised()

    def image_size(self) -> Optional[ImageSize]:
        return self._image_size_provider()

    def safe_area(self) -> Optional[SafeArea]:
        return self._safe_area_provider() if self._safe_area_provider else None

    def constraint_context(self, handle: RegionHandle = RegionHandle.NONE) -> ConstraintContext:
        return ConstraintContext(
            image_size=self.image_size(),
            safe_area=self.safe_area(),
            transform=self.transform(),
            handle=handle,
        )

    def _emit(self, regions: list[Region]) -> list[Region]:
        if regions and self._on_regions_changed is not None:
            self._on_regions_changed(list(regions))
        return regions

    # ------------------------------------------------------------------
    # Geometry commits
    # ------------------------------------------------------------------
    def commit_translate(self, region_id: str, proposed: Region) -> list[Region]:
        """Store a moved region, dragging its grid group along."""

        current = self._collection.get(region_id)
        context = self.constraint_context()
        if current.is_grid_member():
            updated = self._synchronizer.propagate_translate(
                self._collection.regions, current.grid_id, region_id, proposed, context
            )
        else:
            updated = [self._solver.apply(proposed, context)]
        return self._emit(self._collection.replace_many(updated))

    def commit_resize(self, region_id: str, proposed: Region, handle: RegionHandle) -> list[Region]:
        """Store a resized region; grid members share the new size."""

        current = self._collection.get(region_id)
        context = self.constraint_context(handle)
        if current.is_grid_member():
            updated = self._synchronizer.propagate(
                self._collection.regions,
                current.grid_id,
                region_id,
                {"width": proposed.width, "height": proposed.height},
                context,
            )
        else:
            updated = [self._solver.apply(proposed, context)]
        return self._emit(self._collection.replace_many(updated))

    def update_geometry(
        self,
        region_id: str,
        updates: Mapping[str, Any],
        handle: RegionHandle = RegionHandle.NONE,
    ) -> list[Region]:
        """Apply field *updates*, routing grid members through propagation."""

        current = self._collection.get(region_id)
        context = self.constraint_context(handle)
        if current.is_grid_member():
            updated = self._synchronizer.propagate(
                self._collection.regions, current.grid_id, region_id, updates, context
            )
        else:
            updated = [self._solver.apply(replace(current, **dict(updates)), context)]
        return self._emit(self._collection.replace_many(updated))

    def commit_rotation(self, region_id: str, degrees: float) -> list[Region]:
        return self.update_geometry(region_id, {"rotation": normalise_angle(degrees)})

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_from_drag(self, start: QPointF, end: QPointF) -> Optional[Region]:
        """Materialise the region described by a display-space drag.

        Returns None when either extent does not exceed the creation
        threshold.
        """
        left = min(start.x(), end.x())
        top = min(start.y(), end.y())
        width = abs(end.x() - start.x())
        height = abs(end.y() - start.y())
        if width <= self._creation_threshold or height <= self._creation_threshold:
            _LOGGER.debug("Discarded %.1fx%.1f creation drag", width, height)
            return None

        transform = self.transform()
        top_left = display_to_image(QPointF(left, top), transform)
        bottom_right = display_to_image(QPointF(left + width, top + height), transform)
        proposed = Region(
            id=new_region_id(),
            x=top_left.x(),
            y=top_left.y(),
            width=bottom_right.x() - top_left.x(),
            height=bottom_right.y() - top_left.y(),
            rotation=0.0,
            name=self._collection.next_name(),
            visible=True,
            z_index=self._collection.max_z_index() + 1,
        )
        region = self._solver.apply(proposed, self.constraint_context())
        self._collection.add(region)
        self._emit([region])
        _LOGGER.debug("Created region %s", region.id)
        return region

    def add_default(self, view_width: float, view_height: float) -> Region:
        """Add the 200x200 square placed near the middle of the view."""

        center_x = max(100.0, min(view_width / 2.0 - 100.0, view_width - 300.0))
        center_y = max(100.0, min(view_height / 2.0 - 100.0, view_height - 300.0))
        origin = display_to_image(QPointF(center_x, center_y), self.transform())
        proposed = Region(
            id=new_region_id(),
            x=origin.x(),
            y=origin.y(),
            width=DEFAULT_REGION_SIZE,
            height=DEFAULT_REGION_SIZE,
            aspect_ratio=1.0,
            name=self._collection.next_name(),
            z_index=self._collection.max_z_index() + 1,
        )
        region = self._solver.apply(proposed, self.constraint_context())
        self._collection.add(region)
        self._emit([region])
        return region

    def add_grid(
        self,
        rows: int,
        cols: int,
        start: QPointF,
        *,
        cell_size: Optional[float] = None,
        view_size: Optional[tuple[float, float]] = None,
    ) -> list[Region]:
        """Create a linked ``rows x cols`` grid and select its first member."""

        members = create_grid(
            rows,
            cols,
            start,
            cell_size=self._grid_cell_size if cell_size is None else cell_size,
            spacing=self._grid_spacing,
            view_size=view_size,
            z_index=self._collection.max_z_index() + 1,
        )
        self._collection.extend(members)
        self._collection.select(members[0].id)
        return self._emit(members)

    def duplicate(self, region_id: str, view_width: float, view_height: float) -> Region:
        """Copy size, ratio and rotation into a new standalone region."""

        source = self._collection.get(region_id)
        new_x = min(source.x + DUPLICATE_OFFSET, view_width - source.width - VIEW_EDGE_MARGIN)
        new_y = min(source.y + DUPLICATE_OFFSET, view_height - source.height - VIEW_EDGE_MARGIN)
        proposed = Region(
            id=new_region_id(),
            x=max(VIEW_EDGE_MARGIN, new_x),
            y=max(VIEW_EDGE_MARGIN, new_y),
            width=source.width,
            height=source.height,
            aspect_ratio=source.aspect_ratio,
            rotation=source.rotation,
            name=f"{source.name} Copy",
            z_index=self._collection.max_z_index() + 1,
        )
        region = self._solver.apply(proposed, self.constraint_context())
        self._collection.add(region)
        self._emit([region])
        return region

    # ------------------------------------------------------------------
    # Group and housekeeping operations
    # ------------------------------------------------------------------
    def unlink_from_grid(self, region_id: str) -> Region:
        region = self._collection.replace(unlink(self._collection.get(region_id)))
        self._emit([region])
        return region

    def delete(self, region_id: str) -> Region:
        """Remove a region; grid siblings keep their geometry."""

        region = self._collection.remove(region_id)
        if self._on_region_removed is not None:
            self._on_region_removed(region)
        return region

    def fit_to_image(self, region_id: str) -> list[Region]:
        """Make the region cover the full image with no rotation."""

        image = self.image_size()
        if image is None or not image.is_valid():
            return []
        return self.update_geometry(
            region_id,
            {"x": 0.0, "y": 0.0, "width": image.width, "height": image.height, "rotation": 0.0},
        )

    # ------------------------------------------------------------------
    # Keyboard nudges
    # ------------------------------------------------------------------
    def nudge_move(self, dx: int, dy: int, *, large: bool = False) -> list[Region]:
        """Move the selected region by ``dx``/``dy`` steps."""

        selected = self._collection.selected
        if selected is None:
            return []
        step = MOVE_STEP_LARGE if large else MOVE_STEP
        proposed = replace(selected, x=selected.x + dx * step, y=selected.y + dy * step)
        return self.commit_translate(selected.id, proposed)

    def nudge_resize(self, dw: int, dh: int, *, large: bool = False) -> list[Region]:
        """Grow or shrink the selected region from its bottom-right corner."""

        selected = self._collection.selected
        if selected is None:
            return []
        step = RESIZE_STEP_LARGE if large else RESIZE_STEP
        proposed = replace(
            selected,
            width=selected.width + dw * step,
            height=selected.height + dh * step,
        )
        handle = RegionHandle.E if dw and not dh else RegionHandle.S if dh and not dw else RegionHandle.SE
        return self.commit_resize(selected.id, proposed, handle)

    def nudge_rotate(self, direction: int, *, large: bool = False) -> list[Region]:
        selected = self._collection.selected
        if selected is None:
            return []
        step = ROTATION_STEP_LARGE if large else ROTATION_STEP
        return self.commit_rotation(selected.id, selected.rotation + direction * step)
