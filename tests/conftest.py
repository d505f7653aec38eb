import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from multicrop.geometry.constraints import EditorContext, solver_for_context
from multicrop.interaction.editor import RegionEditor
from multicrop.models.collection import RegionCollection
from multicrop.models.region import ImageSize, Region, ViewTransform


class Scene:
    """Host-side state an editor reads through its provider callables."""

    def __init__(
        self,
        context: EditorContext = EditorContext.VIEWPORT_CANVAS,
        image_size: ImageSize | None = ImageSize(1000, 800),
    ) -> None:
        self.transform = ViewTransform()
        self.image_size = image_size
        self.safe_area = None
        self.collection = RegionCollection()
        self.changes: list[list[Region]] = []
        self.removed: list[Region] = []
        self.editor = RegionEditor(
            collection=self.collection,
            solver=solver_for_context(context),
            transform_provider=lambda: self.transform,
            image_size_provider=lambda: self.image_size,
            safe_area_provider=lambda: self.safe_area,
            on_regions_changed=self.changes.append,
            on_region_removed=self.removed.append,
        )

    def add(self, region: Region, *, select: bool = True) -> Region:
        return self.collection.add(region, select=select)


@pytest.fixture
def scene() -> Scene:
    """A 1000x800 image shown at scale 1 in an image-bounded editor."""
    return Scene()


@pytest.fixture
def make_scene():
    return Scene


@pytest.fixture
def make_region():
    """Factory for regions with readable defaults."""

    counter = {"value": 0}

    def _make(x=100.0, y=100.0, width=200.0, height=150.0, **kwargs) -> Region:
        counter["value"] += 1
        kwargs.setdefault("id", f"r{counter['value']}")
        return Region(x=x, y=y, width=width, height=height, **kwargs)

    return _make
