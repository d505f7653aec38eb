"""Settings file management with validation and change notifications."""

from __future__ import annotations

import logging
import os
import sys
from copy import deepcopy
from pathlib import Path
from collections.abc import Callable
from typing import Any, Optional

from jsonschema import ValidationError
from PySide6.QtCore import QObject, Signal

from ..config import HANDLE_SIZE_ZOOMED
from ..errors import SettingsLoadError, SettingsValidationError
from ..geometry.constraints import ConstraintSolver, EditorContext, solver_for_context
from ..geometry.hit_tester import HitTester
from ..interaction.controller import RegionInteractionController
from ..interaction.editor import RegionEditor
from ..models.collection import RegionCollection
from ..models.region import ImageSize, Region, SafeArea, ViewTransform
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults

_LOGGER = logging.getLogger(__name__)


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "multicrop" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "multicrop" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "multicrop" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "multicrop" / "settings.json"
    return Path.home() / ".config" / "multicrop" / "settings.json"


class SettingsManager(QObject):
    """Load, validate and persist the engine settings."""

    settingsChanged = Signal(str, object)

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing."""

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(str(exc)) from exc
            if not isinstance(payload, dict):
                raise SettingsLoadError(f"Settings root must be an object: {path}")
        else:
            payload = None
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        _LOGGER.debug("Loaded settings from %s", path)
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value* and persist the change.

        The previous document is kept when the update fails validation.
        """

        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = str(value) if isinstance(value, Path) else value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()
        self.settingsChanged.emit(key, value)

    # ------------------------------------------------------------------
    # Engine wiring
    # ------------------------------------------------------------------
    def editor_context(self) -> EditorContext:
        return EditorContext(self.get("editor_context", EditorContext.MAIN_CANVAS.value))

    def touch_mode(self) -> bool:
        return bool(self.get("interaction.touch_mode", False))

    def build_solver(self) -> ConstraintSolver:
        """Return the constraint solver for the configured editor context."""

        return solver_for_context(self.editor_context())

    def build_hit_tester(self) -> HitTester:
        """Return a hit tester sized for the configured editor context.

        The zoomed canvas uses a smaller base handle that grows with zoom.
        """

        context = self.editor_context()
        touch_size = float(self.get("interaction.touch_handle_size"))
        if context is EditorContext.ZOOMED_CANVAS:
            return HitTester(HANDLE_SIZE_ZOOMED, touch_handle_size=touch_size, scale_with_zoom=True)
        return HitTester(float(self.get("interaction.handle_size")), touch_handle_size=touch_size)

    def build_editor(
        self,
        collection: RegionCollection,
        *,
        transform_provider: Callable[[], ViewTransform],
        image_size_provider: Callable[[], Optional[ImageSize]],
        safe_area_provider: Optional[Callable[[], Optional[SafeArea]]] = None,
        on_regions_changed: Optional[Callable[[list[Region]], None]] = None,
        on_region_removed: Optional[Callable[[Region], None]] = None,
    ) -> RegionEditor:
        """Return an editor wired to the configured solver and thresholds."""

        return RegionEditor(
            collection=collection,
            solver=self.build_solver(),
            transform_provider=transform_provider,
            image_size_provider=image_size_provider,
            safe_area_provider=safe_area_provider,
            on_regions_changed=on_regions_changed,
            on_region_removed=on_region_removed,
            creation_threshold=float(self.get("interaction.creation_threshold")),
            grid_cell_size=float(self.get("grid.cell_size")),
            grid_spacing=float(self.get("grid.spacing")),
        )

    def build_controller(self, editor: RegionEditor, **callbacks: Any) -> RegionInteractionController:
        """Return a controller honouring the touch and rotation settings.

        *callbacks* are forwarded to :class:`RegionInteractionController`.
        """

        return RegionInteractionController(
            editor=editor,
            hit_tester=self.build_hit_tester(),
            allow_rotation=bool(self.get("interaction.allow_rotation", True)),
            touch_mode=self.touch_mode(),
            **callbacks,
        )

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        path = self.path
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json(path, self._data)


__all__ = ["SettingsManager", "default_settings_path"]
