from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Callable

from lottie_ui.animation.controller import AnimationController
from lottie_ui.component_schema import DisplayableArea, Insets
from lottie_ui.containers import Padding
from lottie_ui.framework import BuildContext, Component, ComponentHost, ReportedError
from lottie_ui.lottie.composition import LottieComposition
from lottie_ui.lottie.loader import CompositionLoader, default_loader
from lottie_ui.lottie.lottie_builder import LottieBuilder, LottieBuilderState
from lottie_core.targets.base import DisplayFrame, RenderTarget

from .config import ViewerConfig
from .ui_frame_renderer import MatrixLottieRenderer

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewerRunResult:
    ticks_run: int
    frames_presented: int
    composition: LottieComposition | None
    status: str
    errors: tuple[ReportedError, ...]
    stopped_by_target_close: bool = False

    @property
    def composition_loaded(self) -> bool:
        return self.composition is not None


class ViewerRuntime:
    """Hosts one LottieBuilder and drives build, playback and present on the caller thread."""

    def __init__(
        self,
        config: ViewerConfig,
        target: RenderTarget,
        *,
        loader: CompositionLoader | None = None,
        renderer: MatrixLottieRenderer | None = None,
        controller: AnimationController | None = None,
    ) -> None:
        self._config = config
        self._target = target
        self._renderer = renderer or MatrixLottieRenderer()
        self._controller = controller or AnimationController()
        self._host = ComponentHost(loader=loader)
        self._composition: LottieComposition | None = None
        self._revision = 0
        self._last_status = "idle"

    @property
    def host(self) -> ComponentHost:
        return self._host

    @property
    def controller(self) -> AnimationController:
        return self._controller

    def build_root(self) -> LottieBuilder:
        layout = self._config.layout
        decorator = None
        if layout.padding > 0:
            decorator = _padding_decorator(Insets.all(layout.padding))
        return LottieBuilder(
            source=self._config.source.build_provider(),
            controller=self._controller,
            on_loaded=self._on_loaded,
            frame_decorator=decorator,
            width=layout.width,
            height=layout.height,
            fit=layout.fit,
            alignment=layout.alignment,
        )

    def run(
        self,
        *,
        max_ticks: int,
        realtime: bool = True,
        load_timeout_s: float | None = None,
        should_continue: Callable[[], bool] | None = None,
    ) -> ViewerRunResult:
        if max_ticks <= 0:
            raise ValueError("max_ticks must be > 0")
        viewport = self._config.viewport
        display = DisplayableArea(content_width_px=viewport.width, content_height_px=viewport.height)
        dt = 1.0 / float(viewport.fps)
        ticks = 0
        stopped_by_close = False
        LOGGER.info("viewer starting: source=%s ticks=%d fps=%d", self._config.source.kind, max_ticks, viewport.fps)
        self._target.start()
        try:
            self._host.mount(self.build_root())
            if load_timeout_s is not None:
                loader = self._host.loader or default_loader()
                if not loader.drain(timeout=load_timeout_s):
                    LOGGER.warning("composition still loading after %.2fs", load_timeout_s)
            while ticks < max_ticks:
                if should_continue is not None and not should_continue():
                    break
                if self._target.should_close():
                    stopped_by_close = True
                    break
                started_at = time.perf_counter()
                self._host.pump()
                self._controller.tick(dt)
                self._present(display)
                ticks += 1
                if realtime:
                    elapsed = time.perf_counter() - started_at
                    time.sleep(max(0.0, dt - elapsed))
        finally:
            self._target.stop()
            self._host.unmount()
        result = ViewerRunResult(
            ticks_run=ticks,
            frames_presented=self._revision,
            composition=self._composition,
            status=self._last_status,
            errors=self._host.errors,
            stopped_by_target_close=stopped_by_close,
        )
        LOGGER.info(
            "viewer finished: ticks=%d frames=%d status=%s errors=%d",
            result.ticks_run,
            result.frames_presented,
            result.status,
            len(result.errors),
        )
        return result

    def _present(self, display: DisplayableArea) -> None:
        root = self._host.root
        if root is not None:
            state = root.find_state(LottieBuilderState)
            if state is not None:
                self._last_status = state.status
        self._renderer.begin_frame(display, clear_color=self._config.viewport.background)
        self._host.render(self._renderer, display)
        rgba = self._renderer.end_frame()
        self._revision += 1
        frame = DisplayFrame(
            revision=self._revision,
            width=int(rgba.shape[1]),
            height=int(rgba.shape[0]),
            rgba=rgba,
        )
        self._target.present_frame(frame)

    def _on_loaded(self, composition: LottieComposition) -> None:
        self._composition = composition
        playback = self._config.playback
        if composition.duration_s > 0:
            self._controller.duration_s = composition.duration_s / playback.speed
        LOGGER.info(
            "composition loaded: %s %dx%d %.2fs",
            composition.name or "<unnamed>",
            composition.width,
            composition.height,
            composition.duration_s,
        )
        if not playback.autoplay or self._controller.duration_s is None:
            return
        if playback.repeat:
            self._controller.repeat(reverse=playback.reverse)
        else:
            self._controller.forward()


def _padding_decorator(insets: Insets) -> Callable[[BuildContext, Component, LottieComposition | None], Component]:
    def decorate(context: BuildContext, child: Component, composition: LottieComposition | None) -> Component:
        _ = (context, composition)
        return Padding(padding=insets, child=child)

    return decorate
