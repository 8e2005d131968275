from __future__ import annotations

from dataclasses import dataclass


DEFAULT_FRAME = "screen_tl"


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float
    frame: str | None = None

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("BoundingBox width/height must be >= 0")

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def deflate(self, insets: "Insets") -> "BoundingBox":
        """Shrink by `insets`; collapses to zero size instead of going negative."""

        width = max(0.0, self.width - insets.left - insets.right)
        height = max(0.0, self.height - insets.top - insets.bottom)
        return BoundingBox(
            x=self.x + min(insets.left, self.width),
            y=self.y + min(insets.top, self.height),
            width=width,
            height=height,
            frame=self.frame,
        )


@dataclass(frozen=True)
class Insets:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def __post_init__(self) -> None:
        if self.left < 0 or self.right < 0 or self.top < 0 or self.bottom < 0:
            raise ValueError("insets must be >= 0")

    @classmethod
    def all(cls, value: float) -> "Insets":
        return cls(left=value, right=value, top=value, bottom=value)

    @classmethod
    def symmetric(cls, *, horizontal: float = 0.0, vertical: float = 0.0) -> "Insets":
        return cls(left=horizontal, right=horizontal, top=vertical, bottom=vertical)


@dataclass(frozen=True)
class DisplayableArea:
    """Displayable content area (excludes black bars in preserve-aspect mode)."""

    content_width_px: float
    content_height_px: float
    viewport_width_px: float | None = None
    viewport_height_px: float | None = None

    def __post_init__(self) -> None:
        if self.content_width_px <= 0 or self.content_height_px <= 0:
            raise ValueError("content dimensions must be > 0")

    def content_bounds(self) -> BoundingBox:
        return BoundingBox(
            x=0.0,
            y=0.0,
            width=float(self.content_width_px),
            height=float(self.content_height_px),
            frame=DEFAULT_FRAME,
        )
