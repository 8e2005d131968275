from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
import urllib.error
import urllib.parse
import urllib.request

from .assets import AssetBundle, asset_key, default_asset_bundle
from .composition import LottieComposition
from .loader import CompositionLoader, LottieLoadError, default_loader


class LottieProvider(Protocol):
    """Where a composition comes from. Equal providers load the same animation."""

    def load(self, loader: CompositionLoader | None = None) -> "Future[LottieComposition]":
        ...


@dataclass(frozen=True)
class NetworkLottie:
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    timeout_s: float = 30.0

    def __post_init__(self) -> None:
        scheme = urllib.parse.urlsplit(self.url).scheme.lower()
        if scheme not in ("http", "https"):
            raise ValueError(f"NetworkLottie url must be http(s), got `{self.url}`")
        if self.timeout_s <= 0:
            raise ValueError("NetworkLottie timeout_s must be > 0")
        object.__setattr__(self, "headers", tuple((str(k), str(v)) for k, v in self.headers))

    def fetch(self) -> bytes:
        req = urllib.request.Request(url=self.url, headers=dict(self.headers), method="GET")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                return resp.read()
        except urllib.error.HTTPError as exc:
            raise LottieLoadError(f"HTTP {exc.code} while fetching {self.url}", source=self.url) from exc
        except urllib.error.URLError as exc:
            raise LottieLoadError(f"cannot reach {self.url}: {exc.reason}", source=self.url) from exc

    def load(self, loader: CompositionLoader | None = None) -> "Future[LottieComposition]":
        return (loader or default_loader()).submit(self.url, self.fetch)


@dataclass(frozen=True)
class FileLottie:
    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def fetch(self) -> bytes:
        if not self.path.is_file():
            raise LottieLoadError(f"lottie file not found: {self.path}", source=str(self.path))
        return self.path.read_bytes()

    def load(self, loader: CompositionLoader | None = None) -> "Future[LottieComposition]":
        return (loader or default_loader()).submit(str(self.path), self.fetch)


@dataclass(frozen=True)
class MemoryLottie:
    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise TypeError("MemoryLottie data must be bytes-like")
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def label(self) -> str:
        return f"<memory:{len(self.data)} bytes>"

    def fetch(self) -> bytes:
        return self.data

    def load(self, loader: CompositionLoader | None = None) -> "Future[LottieComposition]":
        return (loader or default_loader()).submit(self.label, self.fetch)


@dataclass(frozen=True)
class AssetLottie:
    """Bundled asset; with `package`, the key is `packages/<package>/<name>`."""

    name: str
    bundle: AssetBundle | None = None
    package: str | None = None

    def __post_init__(self) -> None:
        asset_key(self.name, self.package)

    @property
    def key_name(self) -> str:
        return asset_key(self.name, self.package)

    def fetch(self) -> bytes:
        bundle = self.bundle if self.bundle is not None else default_asset_bundle()
        return bundle.load(self.key_name)

    def load(self, loader: CompositionLoader | None = None) -> "Future[LottieComposition]":
        return (loader or default_loader()).submit(f"asset:{self.key_name}", self.fetch)
