"""Tests for rendering and export hints."""

import pytest
from PySide6.QtCore import QPointF, QRectF, QSize, Qt

from multicrop.geometry.hints import export_geometry, handle_layout, region_corners, region_display_geometry
from multicrop.geometry.utils import RegionHandle, cursor_for_handle
from multicrop.models.region import Region, ViewTransform


def _approx_point(point: QPointF, x: float, y: float) -> bool:
    return point.x() == pytest.approx(x, abs=1e-9) and point.y() == pytest.approx(y, abs=1e-9)


def test_display_geometry_projects_region():
    region = Region(id="r", x=0, y=0, width=100, height=50)
    geometry = region_display_geometry(region, ViewTransform(2.0, 10.0, 20.0))
    assert geometry.center == QPointF(110, 70)
    assert (geometry.width, geometry.height) == (200, 100)
    assert geometry.corners[0] == QPointF(10, 20)
    assert geometry.corners[2] == QPointF(210, 120)


def test_corners_follow_rotation():
    region = Region(id="r", x=0, y=0, width=100, height=100, rotation=90)
    top_left, top_right, bottom_right, bottom_left = region_corners(region)
    assert _approx_point(top_left, 100, 0)
    assert _approx_point(top_right, 100, 100)
    assert _approx_point(bottom_right, 0, 100)
    assert _approx_point(bottom_left, 0, 0)


def test_handle_layout():
    region = Region(id="r", x=0, y=0, width=100, height=100)
    layout = handle_layout(region, ViewTransform())
    assert set(layout.resize) == {
        RegionHandle.N,
        RegionHandle.S,
        RegionHandle.W,
        RegionHandle.E,
        RegionHandle.NW,
        RegionHandle.NE,
        RegionHandle.SW,
        RegionHandle.SE,
    }
    assert _approx_point(layout.rotate, 50, -30)


def test_export_geometry():
    region = Region(id="r", x=10.5, y=20, width=100.4, height=49.6, rotation=12)
    export = export_geometry(region)
    assert export.source == QRectF(10.5, 20, 100.4, 49.6)
    assert export.rotation == 12
    assert _approx_point(export.center, 60.7, 44.8)
    assert export.output_size == QSize(100, 50)


def test_export_size_is_at_least_one_pixel():
    region = Region(id="r", x=0, y=0, width=0.2, height=0.3)
    assert export_geometry(region).output_size == QSize(1, 1)


@pytest.mark.parametrize(
    "handle, rotation, expected",
    [
        (RegionHandle.E, 0, Qt.CursorShape.SizeHorCursor),
        (RegionHandle.W, 0, Qt.CursorShape.SizeHorCursor),
        (RegionHandle.N, 0, Qt.CursorShape.SizeVerCursor),
        (RegionHandle.NW, 0, Qt.CursorShape.SizeFDiagCursor),
        (RegionHandle.SE, 0, Qt.CursorShape.SizeFDiagCursor),
        (RegionHandle.NE, 0, Qt.CursorShape.SizeBDiagCursor),
        (RegionHandle.E, 90, Qt.CursorShape.SizeVerCursor),
        (RegionHandle.NW, 90, Qt.CursorShape.SizeBDiagCursor),
        (RegionHandle.E, 45, Qt.CursorShape.SizeFDiagCursor),
        (RegionHandle.ROTATE, 0, Qt.CursorShape.OpenHandCursor),
        (RegionHandle.BODY, 30, Qt.CursorShape.SizeAllCursor),
        (RegionHandle.NONE, 0, Qt.CursorShape.ArrowCursor),
    ],
)
def test_cursor_for_handle(handle, rotation, expected):
    assert cursor_for_handle(handle, rotation) == expected
