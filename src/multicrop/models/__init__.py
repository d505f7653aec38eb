"""Region data models.

``RegionCollection`` lives in :mod:`multicrop.models.collection` and is
imported from there directly.
"""

from .region import GridPosition, ImageSize, Region, RegionSnapshot, SafeArea, ViewTransform, new_region_id

__all__ = [
    "GridPosition",
    "ImageSize",
    "Region",
    "RegionSnapshot",
    "SafeArea",
    "ViewTransform",
    "new_region_id",
]
