"""Custom exception hierarchy for multicrop."""

from __future__ import annotations


class MulticropError(Exception):
    """Base class for all custom errors raised by multicrop."""


# --- 2-layer hierarchy ---

class DomainError(MulticropError):
    """Base class for region-model errors."""


class ApplicationError(MulticropError):
    """Base class for host-facing application errors."""


# --- Domain errors ---

class RegionNotFoundError(DomainError):
    """Raised when the requested region id is not part of the collection."""


class GridError(DomainError):
    """Raised when a grid group request is malformed."""


# --- Settings errors ---

class SettingsError(ApplicationError):
    """Base class for settings-related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be read."""


class SettingsValidationError(SettingsError):
    """Raised when the settings document fails schema validation."""


__all__ = [
    "ApplicationError",
    "DomainError",
    "GridError",
    "MulticropError",
    "RegionNotFoundError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
