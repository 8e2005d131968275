from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib
from typing import Any, Literal

from lottie_ui.layout import Alignment, BoxFit, CENTER, parse_alignment, parse_box_fit
from lottie_ui.lottie.assets import DirectoryAssetBundle, default_asset_bundle
from lottie_ui.lottie.providers import AssetLottie, FileLottie, LottieProvider, MemoryLottie, NetworkLottie

from .ui_frame_renderer import parse_hex_rgba


SourceKind = Literal["network", "file", "memory", "asset"]
SOURCE_KINDS: tuple[str, ...] = ("network", "file", "memory", "asset")


@dataclass(frozen=True)
class SourceConfig:
    kind: SourceKind
    path: Path | None = None
    url: str | None = None
    headers: tuple[tuple[str, str], ...] = ()
    name: str | None = None
    package: str | None = None
    root: Path | None = None

    def __post_init__(self) -> None:
        if self.kind not in SOURCE_KINDS:
            raise ValueError(f"source.kind must be one of {', '.join(SOURCE_KINDS)}; got `{self.kind}`")
        if self.kind in ("file", "memory") and self.path is None:
            raise ValueError(f"source.path is required for kind `{self.kind}`")
        if self.kind == "network" and not self.url:
            raise ValueError("source.url is required for kind `network`")
        if self.kind == "asset" and not self.name:
            raise ValueError("source.name is required for kind `asset`")

    def build_provider(self) -> LottieProvider:
        if self.kind == "network":
            assert self.url is not None
            return NetworkLottie(self.url, headers=self.headers)
        if self.kind == "file":
            assert self.path is not None
            return FileLottie(self.path)
        if self.kind == "memory":
            assert self.path is not None
            if not self.path.is_file():
                raise FileNotFoundError(f"memory source file not found: {self.path}")
            return MemoryLottie(self.path.read_bytes())
        assert self.name is not None
        bundle = DirectoryAssetBundle(self.root) if self.root is not None else default_asset_bundle()
        return AssetLottie(self.name, bundle=bundle, package=self.package)


@dataclass(frozen=True)
class LayoutConfig:
    width: float | None = None
    height: float | None = None
    fit: BoxFit | None = None
    alignment: Alignment = CENTER
    padding: float = 0.0

    def __post_init__(self) -> None:
        if self.width is not None and self.width <= 0:
            raise ValueError("layout.width must be > 0")
        if self.height is not None and self.height <= 0:
            raise ValueError("layout.height must be > 0")
        if self.padding < 0:
            raise ValueError("layout.padding must be >= 0")


@dataclass(frozen=True)
class PlaybackConfig:
    autoplay: bool = True
    repeat: bool = True
    reverse: bool = False
    speed: float = 1.0

    def __post_init__(self) -> None:
        if self.speed <= 0:
            raise ValueError("playback.speed must be > 0")


@dataclass(frozen=True)
class ViewportConfig:
    width: int = 320
    height: int = 240
    background: tuple[int, int, int, int] = (12, 14, 18, 255)
    fps: int = 30

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport width/height must be > 0")
        if self.fps <= 0:
            raise ValueError("viewport.fps must be > 0")


@dataclass(frozen=True)
class ViewerConfig:
    source: SourceConfig
    layout: LayoutConfig = LayoutConfig()
    playback: PlaybackConfig = PlaybackConfig()
    viewport: ViewportConfig = ViewportConfig()


def load_viewer_config(path: str | Path) -> ViewerConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"viewer config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return parse_viewer_config(raw, base_dir=config_path.parent)


def parse_viewer_config(raw: dict[str, Any], *, base_dir: Path | None = None) -> ViewerConfig:
    """Build a ViewerConfig from a parsed TOML mapping; relative paths resolve against `base_dir`."""

    base = base_dir or Path.cwd()
    source_raw = _require_table(raw, "source")
    if source_raw is None:
        raise ValueError("viewer config missing required table: [source]")
    layout_raw = _require_table(raw, "layout") or {}
    playback_raw = _require_table(raw, "playback") or {}
    viewport_raw = _require_table(raw, "viewport") or {}

    kind = _coerce_optional_str(source_raw.get("kind"), "source.kind")
    if kind is None:
        raise ValueError("viewer config missing required field: source.kind")
    raw_headers = source_raw.get("headers", {})
    if not isinstance(raw_headers, dict):
        raise ValueError("source.headers must be a table")
    source = SourceConfig(
        kind=kind,  # type: ignore[arg-type]
        path=_resolve_path(source_raw.get("path"), "source.path", base),
        url=_coerce_optional_str(source_raw.get("url"), "source.url"),
        headers=tuple((str(k), str(v)) for k, v in raw_headers.items()),
        name=_coerce_optional_str(source_raw.get("name"), "source.name"),
        package=_coerce_optional_str(source_raw.get("package"), "source.package"),
        root=_resolve_path(source_raw.get("root"), "source.root", base),
    )

    fit_raw = _coerce_optional_str(layout_raw.get("fit"), "layout.fit")
    alignment_raw = layout_raw.get("alignment")
    layout = LayoutConfig(
        width=_coerce_optional_float(layout_raw.get("width"), "layout.width"),
        height=_coerce_optional_float(layout_raw.get("height"), "layout.height"),
        fit=parse_box_fit(fit_raw) if fit_raw is not None else None,
        alignment=parse_alignment(alignment_raw) if alignment_raw is not None else CENTER,
        padding=_coerce_float(layout_raw.get("padding", 0.0), "layout.padding"),
    )
    playback = PlaybackConfig(
        autoplay=_coerce_bool(playback_raw.get("autoplay", True), "playback.autoplay"),
        repeat=_coerce_bool(playback_raw.get("repeat", True), "playback.repeat"),
        reverse=_coerce_bool(playback_raw.get("reverse", False), "playback.reverse"),
        speed=_coerce_float(playback_raw.get("speed", 1.0), "playback.speed"),
    )
    background = _coerce_optional_str(viewport_raw.get("background"), "viewport.background")
    viewport = ViewportConfig(
        width=_coerce_int(viewport_raw.get("width", 320), "viewport.width"),
        height=_coerce_int(viewport_raw.get("height", 240), "viewport.height"),
        background=parse_hex_rgba(background) if background is not None else (12, 14, 18, 255),
        fps=_coerce_int(viewport_raw.get("fps", 30), "viewport.fps"),
    )
    return ViewerConfig(source=source, layout=layout, playback=playback, viewport=viewport)


def _require_table(raw: dict[str, Any], name: str) -> dict[str, Any] | None:
    value = raw.get(name)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"[{name}] must be a table")
    return value


def _resolve_path(value: object, field_name: str, base: Path) -> Path | None:
    text = _coerce_optional_str(value, field_name)
    if text is None:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else (base / path)


def _coerce_optional_str(value: object, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string if provided")
    return value


def _coerce_optional_float(value: object, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number if provided")
    return float(value)


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)


def _coerce_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    return value


def _coerce_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return value
