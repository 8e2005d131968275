from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .component_schema import BoundingBox, Insets
from .framework import Component, RenderComponent


@dataclass(frozen=True)
class Padding(RenderComponent):
    """Insets its single child by `padding` on every paint."""

    padding: Insets
    child: Component
    key: str | None = None

    def child_components(self) -> tuple[Component, ...]:
        return (self.child,)

    def with_children(self, children: tuple[RenderComponent, ...]) -> "Padding":
        if len(children) != 1:
            raise ValueError("Padding takes exactly one child")
        return replace(self, child=children[0])

    def paint(self, renderer: Any, bounds: BoundingBox) -> None:
        if not isinstance(self.child, RenderComponent):
            raise RuntimeError("Padding child must be resolved before paint")
        self.child.paint(renderer, bounds.deflate(self.padding))
