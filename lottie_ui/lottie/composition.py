from __future__ import annotations

import base64
from dataclasses import dataclass
import gzip
import io
import json
import math
from typing import Any, Mapping
import zipfile
import zlib

import numpy as np
from PIL import Image


GZIP_MAGIC = b"\x1f\x8b"
ZIP_MAGIC = b"PK\x03\x04"

_IMAGE_MIME_BY_SUFFIX = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


class CompositionDecodeError(ValueError):
    pass


@dataclass(frozen=True)
class Marker:
    name: str
    start_frame: float
    duration_frames: float

    @property
    def end_frame(self) -> float:
        return self.start_frame + self.duration_frames

    def matches(self, name: str) -> bool:
        return self.name.strip().lower() == name.strip().lower()


@dataclass(frozen=True)
class LottieImageAsset:
    """Image referenced by image layers; `file_name` may be a data URI."""

    asset_id: str
    width: int
    height: int
    file_name: str
    directory: str = ""

    @property
    def embedded(self) -> bool:
        return self.file_name.startswith("data:")

    def decode_rgba(self) -> np.ndarray:
        """Decode an embedded image into an (h, w, 4) uint8 array."""

        if not self.embedded:
            raise CompositionDecodeError(f"image asset `{self.asset_id}` is not embedded")
        header, _, payload = self.file_name.partition(",")
        if ";base64" not in header or not payload:
            raise CompositionDecodeError(f"image asset `{self.asset_id}` must be a base64 data URI")
        try:
            raw = base64.b64decode(payload, validate=False)
            with Image.open(io.BytesIO(raw)) as image:
                rgba = image.convert("RGBA")
        except (ValueError, OSError) as exc:
            raise CompositionDecodeError(f"image asset `{self.asset_id}` could not be decoded: {exc}") from exc
        return np.asarray(rgba, dtype=np.uint8)


@dataclass(frozen=True, eq=False)
class LottieComposition:
    """Decoded Lottie header. Compared by identity; one instance per load."""

    version: str
    name: str
    width: int
    height: int
    start_frame: float
    end_frame: float
    frame_rate: float
    layers: tuple[Mapping[str, Any], ...] = ()
    images: tuple[LottieImageAsset, ...] = ()
    markers: tuple[Marker, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise CompositionDecodeError("composition width/height must be > 0")
        if self.frame_rate <= 0:
            raise CompositionDecodeError("composition frame rate must be > 0")
        if self.end_frame < self.start_frame:
            raise CompositionDecodeError("composition end frame must be >= start frame")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def duration_frames(self) -> float:
        return self.end_frame - self.start_frame

    @property
    def duration_s(self) -> float:
        return self.duration_frames / self.frame_rate

    def frame_for_progress(self, progress: float) -> float:
        clamped = max(0.0, min(1.0, float(progress)))
        return self.start_frame + clamped * self.duration_frames

    def progress_for_frame(self, frame: float) -> float:
        if self.duration_frames == 0:
            return 0.0
        return max(0.0, min(1.0, (float(frame) - self.start_frame) / self.duration_frames))

    def get_marker(self, name: str) -> Marker | None:
        for marker in self.markers:
            if marker.matches(name):
                return marker
        return None

    def summary(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "start_frame": self.start_frame,
            "end_frame": self.end_frame,
            "frame_rate": self.frame_rate,
            "duration_s": round(self.duration_s, 6),
            "layer_count": len(self.layers),
            "image_count": len(self.images),
            "markers": [
                {"name": m.name, "start_frame": m.start_frame, "duration_frames": m.duration_frames}
                for m in self.markers
            ],
        }

    @classmethod
    def from_bytes(cls, data: bytes) -> "LottieComposition":
        return cls.from_json(decode_lottie_document(data))

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "LottieComposition":
        if not isinstance(raw, Mapping):
            raise CompositionDecodeError("lottie document must be a JSON object")
        try:
            width = int(raw["w"])
            height = int(raw["h"])
            start_frame = float(raw["ip"])
            end_frame = float(raw["op"])
            frame_rate = float(raw["fr"])
            images = _parse_images(raw.get("assets", []))
            markers = _parse_markers(raw.get("markers", []))
        except KeyError as exc:
            raise CompositionDecodeError(f"lottie document missing required field: {exc.args[0]}") from exc
        except (TypeError, ValueError, OverflowError) as exc:
            raise CompositionDecodeError(f"lottie document has a non-numeric field: {exc}") from exc
        if not all(math.isfinite(v) for v in (start_frame, end_frame, frame_rate)):
            raise CompositionDecodeError("lottie `ip`, `op` and `fr` must be finite")
        layers = raw.get("layers", [])
        if not isinstance(layers, list):
            raise CompositionDecodeError("lottie `layers` must be a list")
        return cls(
            version=str(raw.get("v", "")),
            name=str(raw.get("nm", "")),
            width=width,
            height=height,
            start_frame=start_frame,
            end_frame=end_frame,
            frame_rate=frame_rate,
            layers=tuple(layer for layer in layers if isinstance(layer, Mapping)),
            images=images,
            markers=markers,
        )


def decode_lottie_document(data: bytes) -> dict[str, Any]:
    """Decode plain JSON, gzip (`.tgs`) or dotLottie zip bytes into the animation object."""

    if not data:
        raise CompositionDecodeError("lottie data is empty")
    if data.startswith(GZIP_MAGIC):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise CompositionDecodeError(f"invalid gzip lottie data: {exc}") from exc
    if data.startswith(ZIP_MAGIC):
        return _decode_dotlottie(data)
    return _parse_json(data)


def _parse_json(data: bytes) -> dict[str, Any]:
    try:
        doc = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CompositionDecodeError(f"invalid lottie json: {exc}") from exc
    except RecursionError as exc:
        raise CompositionDecodeError("lottie json is nested too deeply") from exc
    if not isinstance(doc, dict):
        raise CompositionDecodeError("lottie document must be a JSON object")
    return doc


def _decode_dotlottie(data: bytes) -> dict[str, Any]:
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise CompositionDecodeError(f"invalid dotLottie archive: {exc}") from exc
    with archive:
        names = set(archive.namelist())
        animation_path = _dotlottie_animation_path(archive, names)
        doc = _parse_json(_read_member(archive, animation_path))
        assets = doc.get("assets")
        if isinstance(assets, list):
            for asset in assets:
                if not isinstance(asset, dict) or "p" not in asset:
                    continue
                file_name = str(asset["p"])
                if file_name.startswith("data:"):
                    continue
                member = _find_image_member(names, str(asset.get("u", "")), file_name)
                if member is None:
                    continue
                suffix = "." + member.rsplit(".", 1)[-1].lower() if "." in member else ""
                mime = _IMAGE_MIME_BY_SUFFIX.get(suffix, "application/octet-stream")
                encoded = base64.b64encode(_read_member(archive, member)).decode("ascii")
                asset["p"] = f"data:{mime};base64,{encoded}"
                asset["u"] = ""
                asset["e"] = 1
    return doc


def _read_member(archive: zipfile.ZipFile, name: str) -> bytes:
    try:
        return archive.read(name)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as exc:
        raise CompositionDecodeError(f"dotLottie member `{name}` could not be read: {exc}") from exc


def _dotlottie_animation_path(archive: zipfile.ZipFile, names: set[str]) -> str:
    if "manifest.json" in names:
        manifest = _parse_json(_read_member(archive, "manifest.json"))
        animations = manifest.get("animations")
        if isinstance(animations, list) and animations:
            first = animations[0]
            if isinstance(first, dict) and first.get("id"):
                candidate = f"animations/{first['id']}.json"
                if candidate in names:
                    return candidate
    candidates = sorted(n for n in names if n.startswith("animations/") and n.endswith(".json"))
    if not candidates:
        raise CompositionDecodeError("dotLottie archive has no animations/*.json entry")
    return candidates[0]


def _find_image_member(names: set[str], directory: str, file_name: str) -> str | None:
    for candidate in (f"{directory}{file_name}", f"images/{file_name}", file_name):
        if candidate in names:
            return candidate
    return None


def _parse_images(raw_assets: Any) -> tuple[LottieImageAsset, ...]:
    if not isinstance(raw_assets, list):
        return ()
    images: list[LottieImageAsset] = []
    for raw in raw_assets:
        # precomp assets carry layers instead of an image path
        if not isinstance(raw, Mapping) or "p" not in raw or "layers" in raw:
            continue
        images.append(
            LottieImageAsset(
                asset_id=str(raw.get("id", "")),
                width=int(raw.get("w", 0)),
                height=int(raw.get("h", 0)),
                file_name=str(raw["p"]),
                directory=str(raw.get("u", "")),
            )
        )
    return tuple(images)


def _parse_markers(raw_markers: Any) -> tuple[Marker, ...]:
    if not isinstance(raw_markers, list):
        return ()
    markers: list[Marker] = []
    for raw in raw_markers:
        if not isinstance(raw, Mapping):
            continue
        markers.append(
            Marker(
                name=str(raw.get("cm", "")),
                start_frame=float(raw.get("tm", 0.0)),
                duration_frames=float(raw.get("dr", 0.0)),
            )
        )
    return tuple(markers)
