"""First-party UI contracts and components for Lottie playback."""

from .component_schema import BoundingBox, DisplayableArea, Insets
from .scheduler import UIScheduler
from .framework import (
    AsyncSnapshot,
    BuildContext,
    Component,
    ComponentHost,
    ComponentState,
    Element,
    FutureBuilder,
    RenderComponent,
    ReportedError,
    StatefulComponent,
    StatelessComponent,
)
from .layout import Alignment, BoxFit, FittedSizes, apply_box_fit, parse_alignment, parse_box_fit
from .containers import Padding
from .animation import AnimationController, AnimationStatus
from .lottie import (
    AssetLottie,
    CompositionLoader,
    FileLottie,
    Lottie,
    LottieBuilder,
    LottieBuilderState,
    LottieComposition,
    LottieLoadError,
    LottieProvider,
    LottieRenderBatch,
    LottieRenderCommand,
    LottieRenderer,
    MemoryLottie,
    NetworkLottie,
)

__all__ = [
    "Alignment",
    "AnimationController",
    "AnimationStatus",
    "AssetLottie",
    "AsyncSnapshot",
    "BoundingBox",
    "BoxFit",
    "BuildContext",
    "Component",
    "ComponentHost",
    "ComponentState",
    "CompositionLoader",
    "DisplayableArea",
    "Element",
    "FileLottie",
    "FittedSizes",
    "FutureBuilder",
    "Insets",
    "Lottie",
    "LottieBuilder",
    "LottieBuilderState",
    "LottieComposition",
    "LottieLoadError",
    "LottieProvider",
    "LottieRenderBatch",
    "LottieRenderCommand",
    "LottieRenderer",
    "MemoryLottie",
    "NetworkLottie",
    "Padding",
    "RenderComponent",
    "ReportedError",
    "StatefulComponent",
    "StatelessComponent",
    "UIScheduler",
    "apply_box_fit",
    "parse_alignment",
    "parse_box_fit",
]
