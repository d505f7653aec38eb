from __future__ import annotations

import json
from pathlib import Path

import pytest
from jsonschema import ValidationError
from PySide6.QtCore import QCoreApplication, QPointF

from multicrop.errors import SettingsLoadError, SettingsValidationError
from multicrop.geometry.constraints import EditorContext
from multicrop.geometry.utils import RegionHandle
from multicrop.models.collection import RegionCollection
from multicrop.models.region import ImageSize, Region, ViewTransform
from multicrop.settings.manager import SettingsManager
from multicrop.settings.schema import DEFAULT_SETTINGS, merge_with_defaults, validate_settings


@pytest.fixture(scope="module")
def qapp() -> QCoreApplication:
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def test_settings_manager_roundtrip(tmp_path: Path, qapp: QCoreApplication) -> None:
    settings_path = tmp_path / "settings.json"
    manager = SettingsManager(path=settings_path)
    manager.load()
    assert settings_path.exists()
    assert manager.get("editor_context") == "main_canvas"
    emitted: list[tuple[str, object]] = []
    manager.settingsChanged.connect(lambda key, value: emitted.append((key, value)))
    manager.set("editor_context", "zoomed_canvas")
    qapp.processEvents()
    assert emitted == [("editor_context", "zoomed_canvas")]
    stored = json.loads(settings_path.read_text(encoding="utf-8"))
    assert stored["editor_context"] == "zoomed_canvas"


def test_settings_manager_nested_updates_preserve_defaults(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    manager.set("interaction.touch_mode", True)
    assert manager.get("interaction.touch_mode") is True
    assert manager.touch_mode()
    assert manager.get("interaction.creation_threshold") == 20
    assert manager.get("grid.cell_size") == 150
    assert manager.get("interaction.missing", "fallback") == "fallback"


def test_settings_manager_merges_existing_file(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"grid": {"spacing": 4}}), encoding="utf-8")
    manager = SettingsManager(path=settings_path)
    manager.load()
    assert manager.get("grid.spacing") == 4
    assert manager.get("grid.cell_size") == 150
    assert manager.get("schema") == "multicrop/settings@1"


def test_invalid_update_is_rejected(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    with pytest.raises(SettingsValidationError):
        manager.set("grid.cell_size", -5)
    assert manager.get("grid.cell_size") == 150
    with pytest.raises(SettingsValidationError):
        manager.set("editor_context", "sideways")


def test_corrupt_file_raises_load_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path=settings_path).load()


def test_invalid_file_raises_validation_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"interaction": {"handle_size": 0}}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path=settings_path).load()


def test_build_solver_follows_editor_context(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    assert manager.editor_context() is EditorContext.MAIN_CANVAS
    assert manager.build_solver().min_size == 20
    manager.set("editor_context", "advanced_editor")
    assert manager.build_solver().min_size == 10


def test_build_hit_tester_for_zoomed_canvas(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    assert manager.build_hit_tester().handle_size(4.0) == pytest.approx(10)
    assert manager.build_hit_tester().handle_size(touch=True) == pytest.approx(16)
    manager.set("editor_context", "zoomed_canvas")
    tester = manager.build_hit_tester()
    assert tester.handle_size(1.0) == pytest.approx(8)
    assert tester.handle_size(4.0) == pytest.approx(16)


def test_merge_with_defaults_does_not_mutate_defaults() -> None:
    merged = merge_with_defaults({"interaction": {"touch_mode": True}})
    assert merged["interaction"]["touch_mode"] is True
    assert DEFAULT_SETTINGS["interaction"]["touch_mode"] is False


def test_validate_settings_rejects_wrong_schema_tag() -> None:
    document = merge_with_defaults(None)
    document["schema"] = "other@1"
    with pytest.raises(ValidationError):
        validate_settings(document)


def _build_editor(manager: SettingsManager, collection: RegionCollection | None = None):
    return manager.build_editor(
        collection or RegionCollection(),
        transform_provider=lambda: ViewTransform(),
        image_size_provider=lambda: ImageSize(1000, 800),
    )


def test_build_editor_applies_creation_and_grid_settings(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    manager.set("interaction.creation_threshold", 50)
    manager.set("grid.cell_size", 100)
    manager.set("grid.spacing", 10)
    editor = _build_editor(manager)

    assert editor.create_from_drag(QPointF(100, 100), QPointF(140, 140)) is None
    assert editor.create_from_drag(QPointF(100, 100), QPointF(160, 160)) is not None

    members = editor.add_grid(1, 2, QPointF(100, 100))
    assert [m.x for m in members] == [100, 210]
    assert {m.width for m in members} == {100}


def test_build_controller_applies_touch_and_rotation_settings(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    collection = RegionCollection()
    collection.add(Region(id="crop", x=100, y=100, width=200, height=150), select=True)
    editor = _build_editor(manager, collection)

    controller = manager.build_controller(editor)
    assert controller.hit_test(QPointF(107, 107)).handle is RegionHandle.BODY
    assert controller.hit_test(QPointF(200, 70)).handle is RegionHandle.ROTATE

    manager.set("interaction.touch_mode", True)
    manager.set("interaction.allow_rotation", False)
    controller = manager.build_controller(editor)
    assert controller.hit_test(QPointF(107, 107)).handle is RegionHandle.NW
    assert controller.hit_test(QPointF(200, 70)).handle is RegionHandle.NONE
