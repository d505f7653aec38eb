"""Tests for RegionEditor, the constrained commit path."""

import pytest
from PySide6.QtCore import QPointF

from multicrop.errors import RegionNotFoundError
from multicrop.geometry.utils import RegionHandle
from multicrop.models.region import GridPosition, ViewTransform


def test_create_from_drag(scene):
    """Dragging (100,100) to (300,250) at scale 1 yields a 200x150 region."""
    region = scene.editor.create_from_drag(QPointF(100, 100), QPointF(300, 250))
    assert (region.x, region.y, region.width, region.height) == (100, 100, 200, 150)
    assert region.name == "Crop 1"
    assert region.rotation == 0
    assert region.visible
    assert region.z_index == 1
    assert scene.collection.selected_id == region.id
    assert scene.changes == [[region]]


def test_create_from_reversed_drag(scene):
    region = scene.editor.create_from_drag(QPointF(300, 250), QPointF(100, 100))
    assert (region.x, region.y, region.width, region.height) == (100, 100, 200, 150)


def test_small_drag_creates_nothing(scene):
    assert scene.editor.create_from_drag(QPointF(100, 100), QPointF(115, 300)) is None
    assert scene.editor.create_from_drag(QPointF(100, 100), QPointF(120, 300)) is None
    assert len(scene.collection) == 0
    assert scene.changes == []


def test_create_maps_display_to_image_space(scene):
    scene.transform = ViewTransform(2.0, 50.0, 50.0)
    region = scene.editor.create_from_drag(QPointF(150, 150), QPointF(350, 250))
    assert (region.x, region.y, region.width, region.height) == (50, 50, 100, 50)


def test_created_regions_stack_above_existing(scene, make_region):
    scene.add(make_region(z_index=7))
    region = scene.editor.create_from_drag(QPointF(0, 0), QPointF(50, 50))
    assert region.z_index == 8
    assert region.name == "Crop 2"


def test_add_default_centres_square(scene):
    region = scene.editor.add_default(1000, 800)
    assert (region.x, region.y, region.width, region.height) == (400, 300, 200, 200)
    assert region.aspect_ratio == 1.0
    assert scene.collection.selected_id == region.id


def test_add_default_small_view_uses_minimum_offset(scene):
    region = scene.editor.add_default(300, 300)
    assert (region.x, region.y) == (100, 100)


def test_duplicate_copies_style_not_grid(scene, make_region):
    source = scene.add(
        make_region(rotation=30.0, aspect_ratio=None, name="Crop 1", grid_id="g", grid_position=GridPosition(0, 0))
    )
    copy = scene.editor.duplicate(source.id, 1000, 800)
    assert copy.id != source.id
    assert (copy.x, copy.y) == (130, 130)
    assert (copy.width, copy.height, copy.rotation) == (200, 150, 30)
    assert copy.name == "Crop 1 Copy"
    assert copy.grid_id is None and copy.grid_position is None
    assert scene.collection.selected_id == copy.id


def test_duplicate_stays_inside_view_margin(scene, make_region):
    source = scene.add(make_region(x=700, y=600, width=200, height=150))
    copy = scene.editor.duplicate(source.id, 1000, 800)
    assert (copy.x, copy.y) == (730, 600)


def test_commit_translate_is_constrained(scene, make_region):
    region = scene.add(make_region())
    stored = scene.editor.commit_translate(region.id, region.copy(x=-40))
    assert stored[0].x == 0
    assert scene.collection.get(region.id).x == 0


def test_commit_resize_applies_aspect_ratio(scene, make_region):
    region = scene.add(make_region(x=0, y=0, width=100, height=100, aspect_ratio=1.0))
    scene.editor.commit_resize(region.id, region.copy(width=140), RegionHandle.E)
    stored = scene.collection.get(region.id)
    assert (stored.width, stored.height) == (pytest.approx(140), pytest.approx(140))


def test_unknown_region_raises(scene, make_region):
    with pytest.raises(RegionNotFoundError):
        scene.editor.commit_translate("missing", make_region())


def test_add_grid_selects_first_member(scene):
    members = scene.editor.add_grid(2, 3, QPointF(100, 100))
    assert len(members) == 6
    assert scene.collection.selected_id == members[0].id
    assert {m.z_index for m in members} == {1}


def test_grid_resize_propagates_through_editor(scene):
    members = scene.editor.add_grid(2, 2, QPointF(100, 100))
    changed = members[3]
    scene.editor.commit_resize(changed.id, changed.copy(width=180), RegionHandle.E)
    stored = scene.collection.regions
    assert {r.width for r in stored} == {180}
    anchor = next(r for r in stored if r.grid_position == GridPosition(0, 0))
    right = next(r for r in stored if r.grid_position == GridPosition(0, 1))
    assert right.x == anchor.x + 180


def test_grid_translate_drags_group(scene):
    members = scene.editor.add_grid(2, 2, QPointF(100, 100))
    moved = members[0].copy(x=members[0].x + 25, y=members[0].y + 10)
    scene.editor.commit_translate(members[0].id, moved)
    for before, after in zip(members, scene.collection.regions):
        assert (after.x, after.y) == (before.x + 25, before.y + 10)


def test_unlinked_member_moves_alone(scene):
    members = scene.editor.add_grid(1, 2, QPointF(100, 100))
    detached = scene.editor.unlink_from_grid(members[1].id)
    assert not detached.is_grid_member()
    scene.editor.commit_translate(detached.id, detached.copy(x=detached.x + 50))
    assert scene.collection.get(members[0].id).x == 100
    assert scene.collection.get(detached.id).x == 300


def test_fit_to_image(scene, make_region):
    region = scene.add(make_region(rotation=45.0))
    scene.editor.fit_to_image(region.id)
    stored = scene.collection.get(region.id)
    assert (stored.x, stored.y, stored.width, stored.height, stored.rotation) == (0, 0, 1000, 800, 0)


def test_fit_to_image_without_image_is_noop(make_scene, make_region):
    scene = make_scene(image_size=None)
    region = scene.add(make_region())
    assert scene.editor.fit_to_image(region.id) == []


def test_delete(scene, make_region):
    region = scene.add(make_region())
    scene.editor.delete(region.id)
    assert len(scene.collection) == 0
    assert scene.collection.selected is None
    assert scene.removed == [region]


def test_delete_grid_member_keeps_siblings(scene):
    members = scene.editor.add_grid(1, 2, QPointF(100, 100))
    scene.changes.clear()
    scene.editor.delete(members[0].id)
    assert [r.id for r in scene.removed] == [members[0].id]
    assert scene.collection.get(members[1].id) == members[1]
    assert scene.changes == []


def test_commit_rotation_normalises(scene, make_region):
    region = scene.add(make_region(rotation=350.0))
    scene.editor.commit_rotation(region.id, 370.0)
    assert scene.collection.get(region.id).rotation == pytest.approx(10)


def test_nudges_require_selection(scene):
    assert scene.editor.nudge_move(1, 0) == []
    assert scene.editor.nudge_resize(1, 0) == []
    assert scene.editor.nudge_rotate(1) == []


def test_nudge_move_steps(scene, make_region):
    region = scene.add(make_region())
    scene.editor.nudge_move(1, -1)
    scene.editor.nudge_move(1, 0, large=True)
    stored = scene.collection.get(region.id)
    assert (stored.x, stored.y) == (111, 99)


def test_nudge_resize_grows_from_bottom_right(scene, make_region):
    region = scene.add(make_region())
    scene.editor.nudge_resize(1, 0)
    scene.editor.nudge_resize(0, -1, large=True)
    stored = scene.collection.get(region.id)
    assert (stored.x, stored.y, stored.width, stored.height) == (100, 100, 201, 140)


def test_nudge_rotate_steps(scene, make_region):
    region = scene.add(make_region())
    scene.editor.nudge_rotate(-1)
    assert scene.collection.get(region.id).rotation == pytest.approx(359)
    scene.editor.nudge_rotate(-1, large=True)
    assert scene.collection.get(region.id).rotation == pytest.approx(344)


def test_constraint_context_reads_providers(scene):
    scene.transform = ViewTransform(0.0, 1.0, 2.0)
    context = scene.editor.constraint_context(RegionHandle.S)
    assert context.transform.scale == pytest.approx(0.1)
    assert context.handle == RegionHandle.S
    assert context.image_size == scene.image_size
