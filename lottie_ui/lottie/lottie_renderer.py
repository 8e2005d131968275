from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .composition import LottieComposition


@dataclass(frozen=True)
class LottieRenderCommand:
    """Backend-agnostic paint instruction for one Lottie component.

    `x/y/width/height` is where the fitted composition lands; `box_*` is the
    component's own layout box. Without a composition both are the same
    placeholder rectangle.
    """

    component_id: str
    x: float
    y: float
    width: float
    height: float
    box_x: float
    box_y: float
    box_width: float
    box_height: float
    frame: str
    composition: LottieComposition | None
    progress: float = 0.0
    frame_number: float = 0.0

    @property
    def is_placeholder(self) -> bool:
        return self.composition is None


@dataclass(frozen=True)
class LottieRenderBatch:
    commands: tuple[LottieRenderCommand, ...]


class LottieRenderer(Protocol):
    """Backend-agnostic renderer interface for Lottie paint calls."""

    def draw_lottie_batch(self, batch: LottieRenderBatch) -> None:
        ...
