"""Lottie sources, loading, and display components."""

from .assets import AssetBundle, DirectoryAssetBundle, asset_key, default_asset_bundle
from .composition import CompositionDecodeError, LottieComposition, LottieImageAsset, Marker, decode_lottie_document
from .loader import CompositionLoader, LottieLoadError, default_loader
from .lottie import Lottie
from .lottie_builder import LoadStatus, LottieBuilder, LottieBuilderState, LottieFrameDecorator
from .lottie_renderer import LottieRenderBatch, LottieRenderCommand, LottieRenderer
from .providers import AssetLottie, FileLottie, LottieProvider, MemoryLottie, NetworkLottie

__all__ = [
    "AssetBundle",
    "AssetLottie",
    "CompositionDecodeError",
    "CompositionLoader",
    "DirectoryAssetBundle",
    "FileLottie",
    "LoadStatus",
    "Lottie",
    "LottieBuilder",
    "LottieBuilderState",
    "LottieComposition",
    "LottieFrameDecorator",
    "LottieImageAsset",
    "LottieLoadError",
    "LottieProvider",
    "LottieRenderBatch",
    "LottieRenderCommand",
    "LottieRenderer",
    "Marker",
    "MemoryLottie",
    "NetworkLottie",
    "asset_key",
    "decode_lottie_document",
    "default_asset_bundle",
    "default_loader",
]
