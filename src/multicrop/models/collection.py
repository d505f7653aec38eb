"""Ordered, host-owned collection of regions plus the current selection."""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Iterable, Iterator
from typing import Optional

from ..errors import RegionNotFoundError
from .region import Region, RegionSnapshot

_LOGGER = logging.getLogger(__name__)


class RegionCollection:
    """Store regions in creation order and track which one is selected.

    Creation order doubles as the hit-testing tie-break between regions that
    share a ``z_index``: later entries are on top.
    """

    def __init__(self, regions: Iterable[Region] = ()) -> None:
        self._regions: list[Region] = list(regions)
        self._selected_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(list(self._regions))

    def __contains__(self, region_id: object) -> bool:
        return any(region.id == region_id for region in self._regions)

    @property
    def regions(self) -> list[Region]:
        """Return a shallow copy of the regions in creation order."""
        return list(self._regions)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def find(self, region_id: Optional[str]) -> Optional[Region]:
        if region_id is None:
            return None
        for region in self._regions:
            if region.id == region_id:
                return region
        return None

    def get(self, region_id: str) -> Region:
        region = self.find(region_id)
        if region is None:
            raise RegionNotFoundError(f"Region not found: {region_id}")
        return region

    def _index(self, region_id: str) -> int:
        for index, region in enumerate(self._regions):
            if region.id == region_id:
                return index
        raise RegionNotFoundError(f"Region not found: {region_id}")

    def max_z_index(self) -> int:
        return max((region.z_index for region in self._regions), default=0)

    def next_name(self) -> str:
        return f"Crop {len(self._regions) + 1}"

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected(self) -> Optional[Region]:
        return self.find(self._selected_id)

    def select(self, region_id: Optional[str]) -> None:
        if region_id is not None and region_id not in self:
            raise RegionNotFoundError(f"Region not found: {region_id}")
        self._selected_id = region_id

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add(self, region: Region, *, select: bool = True) -> Region:
        self._regions.append(region)
        if select:
            self._selected_id = region.id
        return region

    def extend(self, regions: Iterable[Region]) -> list[Region]:
        added = list(regions)
        self._regions.extend(added)
        return added

    def remove(self, region_id: str) -> Region:
        index = self._index(region_id)
        removed = self._regions.pop(index)
        if self._selected_id == region_id:
            self._selected_id = None
        _LOGGER.debug("Removed region %s", region_id)
        return removed

    def replace(self, region: Region) -> Region:
        """Store *region* in place of the entry sharing its id."""
        self._regions[self._index(region.id)] = region
        return region

    def replace_many(self, regions: Iterable[Region]) -> list[Region]:
        return [self.replace(region) for region in regions]

    def update(self, region_id: str, **changes) -> Region:
        """Apply raw field *changes* without any constraint solving."""
        return self.replace(dataclasses.replace(self.get(region_id), **changes))

    def bring_to_front(self, region_id: str) -> Region:
        current = self.get(region_id)
        top = self.max_z_index()
        if current.z_index == top and sum(r.z_index == top for r in self._regions) == 1:
            return current
        return self.update(region_id, z_index=top + 1)

    def set_visible(self, region_id: str, visible: bool) -> Region:
        return self.update(region_id, visible=bool(visible))

    # ------------------------------------------------------------------
    # History support
    # ------------------------------------------------------------------
    def snapshot(self) -> RegionSnapshot:
        """Return a detached copy suitable for an undo stack."""
        return RegionSnapshot(copy.deepcopy(self._regions), self._selected_id)

    def restore(self, snapshot: RegionSnapshot) -> None:
        self._regions = copy.deepcopy(snapshot.regions)
        selected = snapshot.selected_id
        self._selected_id = selected if selected in self else None
