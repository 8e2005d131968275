from __future__ import annotations

from dataclasses import dataclass, field

import torch

from lottie_ui.component_schema import DisplayableArea
from lottie_ui.lottie.lottie_renderer import LottieRenderBatch, LottieRenderCommand


PLACEHOLDER_RGBA = (96, 104, 118, 255)
COMPOSITION_RGBA = (236, 72, 153, 255)
PROGRESS_RGBA = (250, 250, 250, 255)


@dataclass
class MatrixLottieRenderer:
    """Torch-backed preview renderer for Lottie render commands.

    Animation content is not rasterized. Each command paints its destination
    rectangle: an outline for placeholders, a filled box plus a progress bar
    along the bottom edge once a composition is present.
    """

    placeholder_rgba: tuple[int, int, int, int] = PLACEHOLDER_RGBA
    composition_rgba: tuple[int, int, int, int] = COMPOSITION_RGBA
    progress_rgba: tuple[int, int, int, int] = PROGRESS_RGBA
    progress_bar_px: int = 2
    _display: DisplayableArea | None = None
    _frame: torch.Tensor | None = None
    _commands_drawn: list[LottieRenderCommand] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.progress_bar_px < 0:
            raise ValueError("progress_bar_px must be >= 0")

    @property
    def commands_drawn(self) -> tuple[LottieRenderCommand, ...]:
        return tuple(self._commands_drawn)

    def begin_frame(self, display: DisplayableArea, clear_color: tuple[int, int, int, int]) -> None:
        self._display = display
        width = int(round(display.viewport_width_px or display.content_width_px))
        height = int(round(display.viewport_height_px or display.content_height_px))
        if width <= 0 or height <= 0:
            raise ValueError("frame dimensions must be > 0")
        self._frame = torch.zeros((height, width, 4), dtype=torch.uint8)
        self._frame[:, :] = torch.tensor(clear_color, dtype=torch.uint8)
        self._commands_drawn = []

    def draw_lottie_batch(self, batch: LottieRenderBatch) -> None:
        if self._frame is None:
            raise RuntimeError("begin_frame must be called before draw_lottie_batch")
        for command in batch.commands:
            self._commands_drawn.append(command)
            x0 = int(round(command.x))
            y0 = int(round(command.y))
            w = int(round(command.width))
            h = int(round(command.height))
            if command.is_placeholder:
                self._stroke_rect(x0, y0, w, h, self.placeholder_rgba)
                continue
            self._blend_rect(x0, y0, w, h, self.composition_rgba)
            bar_h = min(self.progress_bar_px, h)
            bar_w = int(round(w * max(0.0, min(1.0, command.progress))))
            self._blend_rect(x0, y0 + h - bar_h, bar_w, bar_h, self.progress_rgba)

    def end_frame(self) -> torch.Tensor:
        if self._frame is None:
            raise RuntimeError("begin_frame must be called before end_frame")
        out = self._frame.clone()
        self._display = None
        self._frame = None
        return out

    def _stroke_rect(self, x: int, y: int, w: int, h: int, color: tuple[int, int, int, int]) -> None:
        if w <= 0 or h <= 0:
            return
        self._blend_rect(x, y, w, 1, color)
        self._blend_rect(x, y + h - 1, w, 1, color)
        self._blend_rect(x, y, 1, h, color)
        self._blend_rect(x + w - 1, y, 1, h, color)

    def _blend_rect(self, x: int, y: int, w: int, h: int, color: tuple[int, int, int, int]) -> None:
        if self._frame is None or w <= 0 or h <= 0:
            return
        x0 = max(0, x)
        y0 = max(0, y)
        x1 = min(self._frame.shape[1], x + w)
        y1 = min(self._frame.shape[0], y + h)
        if x1 <= x0 or y1 <= y0:
            return
        alpha = color[3] / 255.0
        if alpha <= 0:
            return
        dst = self._frame[y0:y1, x0:x1, :3].to(torch.float32)
        src = torch.tensor(color[:3], dtype=torch.float32).view(1, 1, 3)
        out = torch.clamp(src * alpha + dst * (1.0 - alpha), 0, 255).to(torch.uint8)
        self._frame[y0:y1, x0:x1, :3] = out
        self._frame[y0:y1, x0:x1, 3] = 255


def parse_hex_rgba(value: str) -> tuple[int, int, int, int]:
    raw = value.strip()
    if not raw.startswith("#"):
        raise ValueError(f"color must be #RRGGBB or #RRGGBBAA, got `{value}`")
    h = raw[1:]
    if len(h) == 6:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16), 255)
    if len(h) == 8:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16), int(h[6:8], 16))
    raise ValueError(f"color must be #RRGGBB or #RRGGBBAA, got `{value}`")
