"""
Region interaction controller (pointer state machine).

This module acts as the orchestrator, delegating to the hit tester for
pointer classification, to gesture strategies for the per-mode geometry, and
to :class:`RegionEditor` for constrained, grid-aware commits.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt

from ..config import DOUBLE_ACTIVATE_WINDOW_MS
from ..geometry.hit_tester import HitResult, HitTester
from ..geometry.transform import display_to_image, is_point_in_image
from ..geometry.utils import RegionHandle, cursor_for_handle
from ..models.region import RegionSnapshot, ViewTransform
from .editor import RegionEditor
from .events import InteractionFlags, InteractionMode, PointerEvent, PointerKind, PositionSelector
from .strategies import (
    CreateStrategy,
    InteractionStrategy,
    MoveStrategy,
    PanStrategy,
    ResizeStrategy,
    RotateStrategy,
)

_LOGGER = logging.getLogger(__name__)


class RegionInteractionController:
    """Turn pointer events into region mutations, one gesture at a time."""

    def __init__(
        self,
        *,
        editor: RegionEditor,
        hit_tester: Optional[HitTester] = None,
        on_transform_changed: Optional[Callable[[ViewTransform], None]] = None,
        on_selection_changed: Optional[Callable[[Optional[str]], None]] = None,
        on_cursor_change: Optional[Callable[[Optional[Qt.CursorShape]], None]] = None,
        on_advanced_edit: Optional[Callable[[str], None]] = None,
        on_gesture_committed: Optional[Callable[[RegionSnapshot], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        double_activate_window_ms: float = DOUBLE_ACTIVATE_WINDOW_MS,
        allow_rotation: bool = True,
        touch_mode: bool = False,
        viewport_provider: Optional[Callable[[], Optional[QRectF]]] = None,
    ) -> None:
        """Initialize the interaction controller.

        Parameters
        ----------
        editor:
            Editor owning the region collection and the constraint solver.
        hit_tester:
            Hit tester configured for the hosting view.
        on_transform_changed:
            Callback receiving the panned display transform.
        on_selection_changed:
            Callback receiving the newly selected region id (or None).
        on_cursor_change:
            Callback to change cursor, signature: (cursor_shape or None to unset).
        on_advanced_edit:
            Callback fired when the same region body is hit twice within the
            double-activation window.
        on_gesture_committed:
            Callback receiving a collection snapshot after every gesture that
            changed regions, for the history collaborator.
        clock:
            Monotonic clock in seconds, used when events carry no timestamp.
        double_activate_window_ms:
            Maximum delay between the two body hits of a double activation.
        allow_rotation:
            Whether the rotation handle is offered by this view.
        touch_mode:
            Use the touch handle size for every event, not only touch ones.
        viewport_provider:
            Callable returning the display-space rectangle that accepts
            presses.  Defaults to the editor's safe area, when it has one.
        """
        self._editor = editor
        self._hit_tester = hit_tester or HitTester()
        self._on_transform_changed = on_transform_changed
        self._on_selection_changed = on_selection_changed
        self._on_cursor_change = on_cursor_change
        self._on_advanced_edit = on_advanced_edit
        self._on_gesture_committed = on_gesture_committed
        self._clock = clock
        self._double_window = float(double_activate_window_ms)
        self._allow_rotation = bool(allow_rotation)
        self._touch_mode = bool(touch_mode)
        self._viewport_provider = viewport_provider

        # Interaction state
        self._current_strategy: Optional[InteractionStrategy] = None
        self._last_body_id: Optional[str] = None
        self._last_body_time: float = 0.0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def mode(self) -> InteractionMode:
        if self._current_strategy is None:
            return InteractionMode.IDLE
        return self._current_strategy.mode

    @property
    def editor(self) -> RegionEditor:
        return self._editor

    def interaction_flags(self) -> InteractionFlags:
        """Return the paint hints for the current gesture."""
        strategy = self._current_strategy
        if strategy is None:
            return InteractionFlags()
        creation_rect = strategy.pending_rect() if isinstance(strategy, CreateStrategy) else None
        return InteractionFlags(strategy.mode, strategy.region_id, creation_rect)

    def viewport(self) -> Optional[QRectF]:
        """Return the display-space rectangle that accepts presses, if bounded."""
        if self._viewport_provider is not None:
            return self._viewport_provider()
        safe_area = self._editor.safe_area()
        return safe_area.rect() if safe_area is not None else None

    def hit_test(self, pos: QPointF, *, touch: bool = False) -> HitResult:
        """Classify *pos* against the current scene without side effects."""
        collection = self._editor.collection
        transform = self._editor.transform()
        return self._hit_tester.hit_test(
            pos,
            collection.regions,
            collection.selected,
            transform,
            zoom_level=transform.scale,
            touch=touch or self._touch_mode,
            viewport=self.viewport(),
            include_rotation=self._allow_rotation,
        )

    def cursor_for_hit(self, hit: HitResult, pos: Optional[QPointF] = None) -> Qt.CursorShape:
        """Return the cursor shape advertising what a press on *hit* would do.

        Empty space over the image at *pos* starts a creation drag, anywhere
        else it pans.
        """
        if hit.handle == RegionHandle.OUTSIDE:
            return Qt.CursorShape.ArrowCursor
        if hit.is_empty:
            image_size = self._editor.image_size()
            if (
                pos is not None
                and image_size is not None
                and is_point_in_image(pos, self._editor.transform(), image_size)
            ):
                return Qt.CursorShape.CrossCursor
            return Qt.CursorShape.OpenHandCursor
        region = self._editor.collection.find(hit.region_id)
        rotation = region.rotation if region is not None else 0.0
        return cursor_for_handle(hit.handle, rotation)

    def cursor_hint(self, pos: QPointF, *, touch: bool = False) -> Qt.CursorShape:
        """Return the cursor shape for an idle pointer at *pos*."""
        return self.cursor_for_hit(self.hit_test(pos, touch=touch), pos)

    def dispatch(self, event: PointerEvent, position_selector: Optional[PositionSelector] = None) -> None:
        """Route *event* to the matching handler."""
        if event.kind is PointerKind.DOWN:
            self.handle_pointer_down(event, position_selector)
        elif event.kind is PointerKind.MOVE:
            self.handle_pointer_move(event)
        elif event.kind is PointerKind.UP:
            self.handle_pointer_up(event)
        else:
            self.handle_pointer_leave(event)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def handle_pointer_down(
        self,
        event: PointerEvent,
        position_selector: Optional[PositionSelector] = None,
    ) -> None:
        """Start a gesture according to what lies under the pointer."""
        if self._current_strategy is not None:
            _LOGGER.debug("Ignoring pointer-down during %s", self.mode.value)
            return

        transform = self._editor.transform()
        if position_selector is not None and position_selector.active:
            position_selector.select(display_to_image(event.pos, transform))
            return

        collection = self._editor.collection
        hit = self.hit_test(event.pos, touch=event.touch)
        if hit.handle == RegionHandle.OUTSIDE:
            _LOGGER.debug("Ignoring pointer-down outside the viewport")
            return

        if hit.handle == RegionHandle.ROTATE:
            self._last_body_id = None
            region = collection.get(hit.region_id)
            self._current_strategy = RotateStrategy(editor=self._editor, region=region, start=event)
            self._set_cursor(Qt.CursorShape.ClosedHandCursor)
        elif hit.handle.is_resize:
            self._last_body_id = None
            region = collection.get(hit.region_id)
            self._current_strategy = ResizeStrategy(editor=self._editor, region=region, handle=hit.handle)
            self._set_cursor(cursor_for_handle(hit.handle, region.rotation))
        elif hit.handle == RegionHandle.BODY:
            if self._is_double_activation(hit.region_id, event):
                self._last_body_id = None
                _LOGGER.debug("Advanced edit requested for %s", hit.region_id)
                if self._on_advanced_edit is not None:
                    self._on_advanced_edit(hit.region_id)
                return
            self._select(hit.region_id)
            self._current_strategy = MoveStrategy(editor=self._editor, region_id=hit.region_id, start=event.pos)
            self._set_cursor(Qt.CursorShape.SizeAllCursor)
        else:
            self._select(None)
            self._last_body_id = None
            image_size = self._editor.image_size()
            if image_size is not None and is_point_in_image(event.pos, transform, image_size):
                self._current_strategy = CreateStrategy(editor=self._editor, start=event.pos)
                self._set_cursor(Qt.CursorShape.CrossCursor)
            else:
                self._current_strategy = PanStrategy(
                    start=event.pos,
                    transform=transform,
                    on_transform_changed=self._emit_transform,
                )
                self._set_cursor(Qt.CursorShape.ClosedHandCursor)
        _LOGGER.debug("Gesture started: %s", self.mode.value)

    def handle_pointer_move(self, event: PointerEvent) -> None:
        """Advance the active gesture, or refresh the idle cursor hint."""
        if self._current_strategy is None:
            self._set_cursor(self.cursor_hint(event.pos, touch=event.touch))
            return
        self._current_strategy.on_move(event)

    def handle_pointer_up(self, event: Optional[PointerEvent] = None) -> None:
        """Finish the active gesture, committing its result."""
        strategy = self._current_strategy
        if strategy is None:
            return
        self._current_strategy = None
        strategy.on_end(event)
        _LOGGER.debug("Gesture finished: %s (changed=%s)", strategy.mode.value, strategy.changed)
        if isinstance(strategy, CreateStrategy) and strategy.created is not None:
            self._notify_selection(strategy.created.id)
        if strategy.changed and self._on_gesture_committed is not None:
            self._on_gesture_committed(self._editor.collection.snapshot())
        self._set_cursor(None)

    def handle_pointer_leave(self, event: Optional[PointerEvent] = None) -> None:
        """Leaving the canvas commits exactly like pointer-up."""
        self.handle_pointer_up(event)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _is_double_activation(self, region_id: Optional[str], event: PointerEvent) -> bool:
        now = event.timestamp_ms if event.timestamp_ms is not None else self._clock() * 1000.0
        previous_id, previous_time = self._last_body_id, self._last_body_time
        self._last_body_id = region_id
        self._last_body_time = now
        return previous_id == region_id and now - previous_time < self._double_window

    def _select(self, region_id: Optional[str]) -> None:
        collection = self._editor.collection
        if collection.selected_id == region_id:
            return
        collection.select(region_id)
        self._notify_selection(region_id)

    def _notify_selection(self, region_id: Optional[str]) -> None:
        if self._on_selection_changed is not None:
            self._on_selection_changed(region_id)

    def _emit_transform(self, transform: ViewTransform) -> None:
        if self._on_transform_changed is not None:
            self._on_transform_changed(transform)

    def _set_cursor(self, cursor: Optional[Qt.CursorShape]) -> None:
        if self._on_cursor_change is not None:
            self._on_cursor_change(cursor)
