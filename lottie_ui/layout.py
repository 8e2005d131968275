from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence, get_args

from .component_schema import BoundingBox


BoxFit = Literal["fill", "contain", "cover", "fit_width", "fit_height", "none", "scale_down"]

BOX_FITS: tuple[str, ...] = get_args(BoxFit)


@dataclass(frozen=True)
class FittedSizes:
    """Source region of the input and destination size in the output box."""

    source: tuple[float, float]
    destination: tuple[float, float]


def apply_box_fit(fit: BoxFit, input_size: tuple[float, float], output_size: tuple[float, float]) -> FittedSizes:
    in_w, in_h = float(input_size[0]), float(input_size[1])
    out_w, out_h = float(output_size[0]), float(output_size[1])
    if in_w <= 0 or in_h <= 0 or out_w <= 0 or out_h <= 0:
        return FittedSizes(source=(0.0, 0.0), destination=(0.0, 0.0))

    wider_output = out_w / out_h > in_w / in_h
    if fit == "fill":
        return FittedSizes(source=(in_w, in_h), destination=(out_w, out_h))
    if fit == "contain":
        if wider_output:
            return FittedSizes(source=(in_w, in_h), destination=(in_w * out_h / in_h, out_h))
        return FittedSizes(source=(in_w, in_h), destination=(out_w, in_h * out_w / in_w))
    if fit == "cover":
        if wider_output:
            return FittedSizes(source=(in_w, in_w * out_h / out_w), destination=(out_w, out_h))
        return FittedSizes(source=(in_h * out_w / out_h, in_h), destination=(out_w, out_h))
    if fit == "fit_width":
        if wider_output:
            return FittedSizes(source=(in_w, in_w * out_h / out_w), destination=(out_w, out_h))
        return FittedSizes(source=(in_w, in_h), destination=(out_w, in_h * out_w / in_w))
    if fit == "fit_height":
        if wider_output:
            return FittedSizes(source=(in_w, in_h), destination=(in_w * out_h / in_h, out_h))
        return FittedSizes(source=(in_h * out_w / out_h, in_h), destination=(out_w, out_h))
    if fit == "none":
        clipped = (min(in_w, out_w), min(in_h, out_h))
        return FittedSizes(source=clipped, destination=clipped)
    if fit == "scale_down":
        aspect = in_w / in_h
        dest_w, dest_h = in_w, in_h
        if dest_h > out_h:
            dest_w, dest_h = out_h * aspect, out_h
        if dest_w > out_w:
            dest_w, dest_h = out_w, out_w / aspect
        return FittedSizes(source=(in_w, in_h), destination=(dest_w, dest_h))
    raise ValueError(f"unknown box fit: {fit}")


def parse_box_fit(value: str) -> BoxFit:
    normalized = value.strip().lower().replace("-", "_")
    if normalized == "scaledown":
        normalized = "scale_down"
    if normalized not in BOX_FITS:
        raise ValueError(f"fit must be one of {', '.join(BOX_FITS)}; got `{value}`")
    return normalized  # type: ignore[return-value]


@dataclass(frozen=True)
class Alignment:
    """Point in a rectangle; (-1, -1) is top-left, (1, 1) bottom-right."""

    x: float = 0.0
    y: float = 0.0

    def inscribe(self, size: tuple[float, float], rect: BoundingBox) -> BoundingBox:
        width, height = float(size[0]), float(size[1])
        half_dx = (rect.width - width) / 2.0
        half_dy = (rect.height - height) / 2.0
        return BoundingBox(
            x=rect.x + half_dx + self.x * half_dx,
            y=rect.y + half_dy + self.y * half_dy,
            width=width,
            height=height,
            frame=rect.frame,
        )


TOP_LEFT = Alignment(-1.0, -1.0)
TOP_CENTER = Alignment(0.0, -1.0)
TOP_RIGHT = Alignment(1.0, -1.0)
CENTER_LEFT = Alignment(-1.0, 0.0)
CENTER = Alignment(0.0, 0.0)
CENTER_RIGHT = Alignment(1.0, 0.0)
BOTTOM_LEFT = Alignment(-1.0, 1.0)
BOTTOM_CENTER = Alignment(0.0, 1.0)
BOTTOM_RIGHT = Alignment(1.0, 1.0)

NAMED_ALIGNMENTS: dict[str, Alignment] = {
    "top_left": TOP_LEFT,
    "top_center": TOP_CENTER,
    "top_right": TOP_RIGHT,
    "center_left": CENTER_LEFT,
    "center": CENTER,
    "center_right": CENTER_RIGHT,
    "bottom_left": BOTTOM_LEFT,
    "bottom_center": BOTTOM_CENTER,
    "bottom_right": BOTTOM_RIGHT,
}


def parse_alignment(value: str | Sequence[float]) -> Alignment:
    """Parse a named alignment (`top_left`) or an `[x, y]` pair."""

    if isinstance(value, str):
        key = value.strip().lower().replace("-", "_")
        if key not in NAMED_ALIGNMENTS:
            raise ValueError(f"unknown alignment name: `{value}`")
        return NAMED_ALIGNMENTS[key]
    parts = list(value)
    if len(parts) != 2:
        raise ValueError("alignment must use `[x, y]` format")
    return Alignment(float(parts[0]), float(parts[1]))
