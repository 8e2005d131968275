from .base import DisplayFrame, HeadlessTarget, RenderTarget
from .png_target import PngSnapshotTarget, write_png

__all__ = [
    "DisplayFrame",
    "HeadlessTarget",
    "PngSnapshotTarget",
    "RenderTarget",
    "write_png",
]
