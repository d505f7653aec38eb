"""Schema helpers for the engine settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    CREATION_THRESHOLD,
    DEFAULT_GRID_CELL_SIZE,
    DEFAULT_GRID_SPACING,
    HANDLE_SIZE_PRECISE,
    HANDLE_SIZE_TOUCH,
)

EDITOR_CONTEXTS = ["main_canvas", "viewport_canvas", "zoomed_canvas", "advanced_editor"]

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "multicrop/settings.schema.json",
    "type": "object",
    "required": ["schema", "interaction", "grid"],
    "properties": {
        "schema": {"const": "multicrop/settings@1"},
        "editor_context": {"type": "string", "enum": EDITOR_CONTEXTS},
        "interaction": {
            "type": "object",
            "properties": {
                "touch_mode": {"type": "boolean"},
                "allow_rotation": {"type": "boolean"},
                "creation_threshold": {"type": "number", "minimum": 0},
                "handle_size": {"type": "number", "exclusiveMinimum": 0},
                "touch_handle_size": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": True,
        },
        "grid": {
            "type": "object",
            "properties": {
                "cell_size": {"type": "number", "exclusiveMinimum": 0},
                "spacing": {"type": "number", "minimum": 0},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "multicrop/settings@1",
    "editor_context": "main_canvas",
    "interaction": {
        "touch_mode": False,
        "allow_rotation": True,
        "creation_threshold": CREATION_THRESHOLD,
        "handle_size": HANDLE_SIZE_PRECISE,
        "touch_handle_size": HANDLE_SIZE_TOUCH,
    },
    "grid": {
        "cell_size": DEFAULT_GRID_CELL_SIZE,
        "spacing": DEFAULT_GRID_SPACING,
    },
}

_NESTED_SECTIONS = ("interaction", "grid")

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = [
    "DEFAULT_SETTINGS",
    "EDITOR_CONTEXTS",
    "SETTINGS_SCHEMA",
    "merge_with_defaults",
    "validate_settings",
]
