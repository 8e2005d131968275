from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lottie_ui.animation.controller import AnimationController
from lottie_ui.component_schema import DEFAULT_FRAME, BoundingBox
from lottie_ui.framework import RenderComponent
from lottie_ui.layout import BOX_FITS, CENTER, Alignment, BoxFit, apply_box_fit

from .composition import LottieComposition
from .lottie_renderer import LottieRenderBatch, LottieRenderCommand, LottieRenderer


DEFAULT_FIT: BoxFit = "contain"


@dataclass(frozen=True)
class Lottie(RenderComponent):
    """Paints a composition at the controller's progress.

    Without a composition the component lays out as a placeholder box of the
    requested `width`/`height` (zero when unset).
    """

    composition: LottieComposition | None = None
    controller: AnimationController | None = None
    width: float | None = None
    height: float | None = None
    fit: BoxFit | None = None
    alignment: Alignment | None = None
    component_id: str = "lottie"
    key: str | None = None

    def __post_init__(self) -> None:
        if self.width is not None and self.width < 0:
            raise ValueError("Lottie width must be >= 0")
        if self.height is not None and self.height < 0:
            raise ValueError("Lottie height must be >= 0")
        if self.fit is not None and self.fit not in BOX_FITS:
            raise ValueError(f"unknown box fit: {self.fit}")

    @property
    def progress(self) -> float:
        if self.controller is None:
            return 0.0
        return self.controller.value

    def resolve_size(self, bounds: BoundingBox) -> tuple[float, float]:
        composition = self.composition
        if composition is None:
            return (self.width or 0.0, self.height or 0.0)
        cw, ch = float(composition.width), float(composition.height)
        if self.width is not None and self.height is not None:
            return (float(self.width), float(self.height))
        if self.width is not None:
            return (float(self.width), float(self.width) * ch / cw)
        if self.height is not None:
            return (float(self.height) * cw / ch, float(self.height))
        return apply_box_fit("scale_down", (cw, ch), bounds.size).destination

    def layout(self, bounds: BoundingBox) -> tuple[LottieRenderCommand, BoundingBox]:
        alignment = self.alignment or CENTER
        frame = bounds.frame or DEFAULT_FRAME
        box = alignment.inscribe(self.resolve_size(bounds), bounds)
        composition = self.composition
        if composition is None:
            dest = box
            progress = 0.0
            frame_number = 0.0
        else:
            fitted = apply_box_fit(self.fit or DEFAULT_FIT, composition.size, box.size)
            dest = alignment.inscribe(fitted.destination, box)
            progress = self.progress
            frame_number = composition.frame_for_progress(progress)
        command = LottieRenderCommand(
            component_id=self.component_id,
            x=dest.x,
            y=dest.y,
            width=dest.width,
            height=dest.height,
            box_x=box.x,
            box_y=box.y,
            box_width=box.width,
            box_height=box.height,
            frame=frame,
            composition=composition,
            progress=progress,
            frame_number=frame_number,
        )
        return command, box

    def render(self, renderer: LottieRenderer, bounds: BoundingBox) -> LottieRenderBatch:
        command, _ = self.layout(bounds)
        batch = LottieRenderBatch(commands=(command,))
        renderer.draw_lottie_batch(batch)
        return batch

    def paint(self, renderer: Any, bounds: BoundingBox) -> None:
        self.render(renderer, bounds)
