"""
Abstract base class for pointer gesture strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..events import InteractionMode, PointerEvent


class InteractionStrategy(ABC):
    """Base class for gesture strategies (move, resize, rotate, ...)."""

    mode: InteractionMode = InteractionMode.IDLE

    def __init__(self) -> None:
        self.changed: bool = False

    @property
    def region_id(self) -> Optional[str]:
        """Return the region the gesture acts on, if any."""
        return None

    @abstractmethod
    def on_move(self, event: PointerEvent) -> None:
        """Handle a pointer sample while the gesture is active.

        Parameters
        ----------
        event:
            Pointer sample in display coordinates.
        """

    def on_end(self, event: Optional[PointerEvent]) -> None:
        """Handle the end of the gesture (pointer-up or pointer-leave)."""
