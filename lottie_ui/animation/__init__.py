"""Playback control for animated components."""

from .controller import AnimationController, AnimationStatus

__all__ = [
    "AnimationController",
    "AnimationStatus",
]
