from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
import torch


@dataclass(frozen=True)
class DisplayFrame:
    revision: int
    width: int
    height: int
    rgba: torch.Tensor

    def to_numpy(self) -> np.ndarray:
        """Host copy of the frame as an (h, w, 4) uint8 array."""
        rgba = self.rgba.detach().to("cpu").contiguous().numpy()
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"expected an (h, w, 4) frame, got shape {tuple(rgba.shape)}")
        return rgba


class RenderTarget(ABC):
    """Receives presented viewer frames on the UI thread."""

    @abstractmethod
    def start(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def present_frame(self, frame: DisplayFrame) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    def should_close(self) -> bool:
        """Optional hook for targets that expose window-close state."""
        return False


@dataclass
class HeadlessTarget(RenderTarget):
    """Keeps the most recent frame in memory; used by tests and the CLI."""

    frames_presented: int = 0
    started: bool = False
    last_frame: DisplayFrame | None = None

    def start(self) -> None:
        self.started = True

    def present_frame(self, frame: DisplayFrame) -> None:
        if not self.started:
            raise RuntimeError("headless target not started")
        self.frames_presented += 1
        self.last_frame = frame

    def stop(self) -> None:
        self.started = False
