from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from .base import DisplayFrame, HeadlessTarget

LOGGER = logging.getLogger(__name__)


class PngSnapshotTarget(HeadlessTarget):
    """Headless target that writes the last presented frame as a PNG on stop."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)

    def stop(self) -> None:
        if self.started and self.last_frame is not None:
            write_png(self.last_frame, self.path)
            LOGGER.info("wrote snapshot frame %d to %s", self.last_frame.revision, self.path)
        super().stop()


def write_png(frame: DisplayFrame, path: Path) -> None:
    rgba = frame.to_numpy()
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(rgba).save(path, format="PNG")
