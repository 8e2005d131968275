from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Protocol


ASSET_ROOT_ENV_VAR = "LOTTIE_ASSET_ROOT"


class AssetBundle(Protocol):
    def load(self, key: str) -> bytes:
        ...


def asset_key(name: str, package: str | None = None) -> str:
    if not name.strip():
        raise ValueError("asset name must be non-empty")
    if package is None:
        return name
    if not package.strip():
        raise ValueError("asset package must be non-empty when provided")
    return f"packages/{package}/{name}"


@dataclass(frozen=True)
class DirectoryAssetBundle:
    """Asset bundle backed by a directory; keys are relative POSIX paths."""

    root: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))

    def resolve(self, key: str) -> Path:
        if not key.strip():
            raise ValueError("asset key must be non-empty")
        root = self.root.resolve()
        path = (root / key).resolve()
        if path != root and root not in path.parents:
            raise ValueError(f"asset key escapes bundle root: {key}")
        return path

    def load(self, key: str) -> bytes:
        path = self.resolve(key)
        if not path.is_file():
            raise FileNotFoundError(f"asset not found in bundle {self.root}: {key}")
        return path.read_bytes()


def default_asset_bundle() -> DirectoryAssetBundle:
    root = os.getenv(ASSET_ROOT_ENV_VAR, "").strip()
    return DirectoryAssetBundle(Path(root) if root else Path.cwd())
