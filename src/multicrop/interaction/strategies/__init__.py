"""
Interaction strategies for pointer gestures.

This package implements the Strategy pattern for the different gestures
(move, resize, rotate, pan, create), allowing clean separation of logic.
"""

from .abstract import InteractionStrategy
from .create_strategy import CreateStrategy
from .move_strategy import MoveStrategy
from .pan_strategy import PanStrategy
from .resize_strategy import ResizeStrategy
from .rotate_strategy import RotateStrategy

__all__ = [
    "CreateStrategy",
    "InteractionStrategy",
    "MoveStrategy",
    "PanStrategy",
    "ResizeStrategy",
    "RotateStrategy",
]
