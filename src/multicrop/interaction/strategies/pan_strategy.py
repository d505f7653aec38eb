"""
Pan strategy for dragging the display transform.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from PySide6.QtCore import QPointF

from ...geometry.transform import pan_from
from ...models.region import ViewTransform
from ..events import InteractionMode, PointerEvent
from .abstract import InteractionStrategy


class PanStrategy(InteractionStrategy):
    """Strategy for panning the working view."""

    mode = InteractionMode.PANNING

    def __init__(
        self,
        *,
        start: QPointF,
        transform: ViewTransform,
        on_transform_changed: Callable[[ViewTransform], None],
    ) -> None:
        """Initialize pan strategy.

        Parameters
        ----------
        start:
            Pointer position at pointer-down.
        transform:
            Display transform at pointer-down.
        on_transform_changed:
            Callback receiving the panned transform.
        """
        super().__init__()
        self._start = QPointF(start)
        self._start_transform = transform
        self._start_offset = transform.offset
        self._current = transform
        self._on_transform_changed = on_transform_changed

    @property
    def current(self) -> ViewTransform:
        return self._current

    def on_move(self, event: PointerEvent) -> None:
        """Handle pan drag movement."""
        delta = event.pos - self._start
        self._current = pan_from(self._start_transform, self._start_offset, delta)
        self._on_transform_changed(self._current)

    def on_end(self, event: Optional[PointerEvent]) -> None:
        """Commit the final offset."""
        self._on_transform_changed(self._current)
