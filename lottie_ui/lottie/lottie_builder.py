from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Callable, Literal

from lottie_ui.animation.controller import AnimationController
from lottie_ui.framework import (
    AsyncSnapshot,
    BuildContext,
    Component,
    ComponentState,
    FutureBuilder,
    StatefulComponent,
)
from lottie_ui.layout import BOX_FITS, Alignment, BoxFit

from .assets import AssetBundle
from .composition import LottieComposition
from .lottie import Lottie
from .providers import AssetLottie, FileLottie, LottieProvider, MemoryLottie, NetworkLottie

LOGGER = logging.getLogger(__name__)

LottieFrameDecorator = Callable[[BuildContext, Component, "LottieComposition | None"], Component]
LoadStatus = Literal["idle", "loading", "loaded", "failed"]


@dataclass(frozen=True)
class LottieBuilder(StatefulComponent):
    """Loads a composition from `source` and displays it with `Lottie`.

    A load starts when the component is mounted and again whenever it is
    updated with a source that compares unequal to the previous one. Results
    of a superseded load are ignored.

    `on_loaded` runs once per load, during the build that first shows the
    composition, which makes it the place to size a controller from
    `composition.duration_s`.

    `frame_decorator(context, child, composition)` wraps the `Lottie` child on
    every build, before and after loading; use it for placeholders, padding or
    fade-in effects.
    """

    source: LottieProvider
    controller: AnimationController | None = None
    on_loaded: Callable[[LottieComposition], None] | None = None
    frame_decorator: LottieFrameDecorator | None = None
    width: float | None = None
    height: float | None = None
    fit: BoxFit | None = None
    alignment: Alignment | None = None
    key: str | None = None

    def __post_init__(self) -> None:
        if self.source is None:
            raise ValueError("LottieBuilder requires a source")
        if self.width is not None and self.width < 0:
            raise ValueError("LottieBuilder width must be >= 0")
        if self.height is not None and self.height < 0:
            raise ValueError("LottieBuilder height must be >= 0")
        if self.fit is not None and self.fit not in BOX_FITS:
            raise ValueError(f"unknown box fit: {self.fit}")

    @classmethod
    def network(cls, url: str, *, headers: tuple[tuple[str, str], ...] = (), **options: Any) -> "LottieBuilder":
        return cls(source=NetworkLottie(url, headers=headers), **options)

    @classmethod
    def file(cls, path: str | Path, **options: Any) -> "LottieBuilder":
        return cls(source=FileLottie(Path(path)), **options)

    @classmethod
    def asset(
        cls,
        name: str,
        *,
        bundle: AssetBundle | None = None,
        package: str | None = None,
        **options: Any,
    ) -> "LottieBuilder":
        return cls(source=AssetLottie(name, bundle=bundle, package=package), **options)

    @classmethod
    def memory(cls, data: bytes, **options: Any) -> "LottieBuilder":
        return cls(source=MemoryLottie(data), **options)

    def create_state(self) -> "LottieBuilderState":
        return LottieBuilderState()

    def debug_properties(self) -> dict[str, object]:
        return {
            "source": self.source,
            "controller": self.controller,
            "frame_decorator": self.frame_decorator,
            "width": self.width,
            "height": self.height,
            "fit": self.fit,
            "alignment": self.alignment,
        }


class LottieBuilderState(ComponentState[LottieBuilder]):
    def __init__(self) -> None:
        super().__init__()
        self._loading_future: Future | None = None
        self._called_loaded_callback = False
        self._epoch = 0

    @property
    def loading_future(self) -> Future | None:
        return self._loading_future

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def status(self) -> LoadStatus:
        future = self._loading_future
        if future is None:
            return "idle"
        if not future.done():
            return "loading"
        if future.cancelled() or future.exception() is not None:
            return "failed"
        return "loaded"

    def init_state(self) -> None:
        self._start_load()

    def did_update_component(self, old_component: LottieBuilder) -> None:
        if old_component.source != self.component.source:
            LOGGER.debug("lottie source changed: %r -> %r", old_component.source, self.component.source)
            self._start_load()

    def build(self, context: BuildContext) -> Component:
        return FutureBuilder(future=self._loading_future, builder=self._build_frame)

    def debug_properties(self) -> dict[str, object]:
        return {
            "loading_future": self._loading_future,
            "status": self.status,
            "epoch": self._epoch,
            "called_loaded_callback": self._called_loaded_callback,
        }

    def _start_load(self) -> None:
        self._loading_future = self.component.source.load(self.context.loader)
        self._called_loaded_callback = False
        self._epoch += 1

    def _build_frame(self, context: BuildContext, snapshot: AsyncSnapshot[LottieComposition]) -> Component:
        composition = snapshot.data
        if composition is not None and not self._called_loaded_callback:
            self._called_loaded_callback = True
            if self.component.on_loaded is not None:
                self.component.on_loaded(composition)

        component = self.component
        result: Component = Lottie(
            composition=composition,
            controller=component.controller,
            width=component.width,
            height=component.height,
            fit=component.fit,
            alignment=component.alignment,
        )
        if component.frame_decorator is not None:
            result = component.frame_decorator(context, result, composition)
        return result
