from .config import (
    LayoutConfig,
    PlaybackConfig,
    SourceConfig,
    ViewerConfig,
    ViewportConfig,
    load_viewer_config,
    parse_viewer_config,
)
from .ui_frame_renderer import MatrixLottieRenderer, parse_hex_rgba
from .viewer_runtime import ViewerRunResult, ViewerRuntime

__all__ = [
    "LayoutConfig",
    "MatrixLottieRenderer",
    "PlaybackConfig",
    "SourceConfig",
    "ViewerConfig",
    "ViewerRunResult",
    "ViewerRuntime",
    "ViewportConfig",
    "load_viewer_config",
    "parse_hex_rgba",
    "parse_viewer_config",
]
