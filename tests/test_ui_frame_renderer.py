from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from PIL import Image
import torch

from lottie_core.core.ui_frame_renderer import (
    COMPOSITION_RGBA,
    PLACEHOLDER_RGBA,
    PROGRESS_RGBA,
    MatrixLottieRenderer,
    parse_hex_rgba,
)
from lottie_core.targets import DisplayFrame, PngSnapshotTarget
from lottie_ui.component_schema import DisplayableArea
from lottie_ui.lottie.composition import LottieComposition
from lottie_ui.lottie.lottie_renderer import LottieRenderBatch, LottieRenderCommand

BACKGROUND = (0, 0, 0, 255)


def _command(*, composition: LottieComposition | None, progress: float = 0.0) -> LottieRenderCommand:
    return LottieRenderCommand(
        component_id="lottie",
        x=2.0,
        y=2.0,
        width=10.0,
        height=6.0,
        box_x=2.0,
        box_y=2.0,
        box_width=10.0,
        box_height=6.0,
        frame="screen_tl",
        composition=composition,
        progress=progress,
    )


def _composition() -> LottieComposition:
    return LottieComposition(
        version="5.7.4", name="c", width=10, height=6, start_frame=0.0, end_frame=10.0, frame_rate=10.0
    )


def _pixel(frame: torch.Tensor, x: int, y: int) -> tuple[int, ...]:
    return tuple(int(v) for v in frame[y, x].tolist())


class MatrixLottieRendererTests(unittest.TestCase):
    def setUp(self) -> None:
        self.renderer = MatrixLottieRenderer()
        self.display = DisplayableArea(content_width_px=16, content_height_px=12)

    def test_frame_is_cleared_to_background(self) -> None:
        self.renderer.begin_frame(self.display, clear_color=(1, 2, 3, 255))
        frame = self.renderer.end_frame()
        self.assertEqual(tuple(frame.shape), (12, 16, 4))
        self.assertEqual(frame.dtype, torch.uint8)
        self.assertEqual(_pixel(frame, 5, 5), (1, 2, 3, 255))

    def test_placeholder_draws_outline_only(self) -> None:
        self.renderer.begin_frame(self.display, clear_color=BACKGROUND)
        self.renderer.draw_lottie_batch(LottieRenderBatch(commands=(_command(composition=None),)))
        frame = self.renderer.end_frame()
        self.assertEqual(_pixel(frame, 2, 2), PLACEHOLDER_RGBA)
        self.assertEqual(_pixel(frame, 11, 7), PLACEHOLDER_RGBA)
        self.assertEqual(_pixel(frame, 6, 4), BACKGROUND)
        self.assertEqual(_pixel(frame, 1, 1), BACKGROUND)
        self.assertEqual(len(self.renderer.commands_drawn), 1)

    def test_composition_fills_box_with_progress_bar(self) -> None:
        self.renderer.begin_frame(self.display, clear_color=BACKGROUND)
        self.renderer.draw_lottie_batch(LottieRenderBatch(commands=(_command(composition=_composition(), progress=0.5),)))
        frame = self.renderer.end_frame()
        self.assertEqual(_pixel(frame, 6, 4), COMPOSITION_RGBA)
        self.assertEqual(_pixel(frame, 2, 7), PROGRESS_RGBA)
        self.assertEqual(_pixel(frame, 6, 6), PROGRESS_RGBA)
        self.assertEqual(_pixel(frame, 7, 7), COMPOSITION_RGBA)

    def test_draw_requires_begin_frame(self) -> None:
        with self.assertRaises(RuntimeError):
            self.renderer.draw_lottie_batch(LottieRenderBatch(commands=()))
        with self.assertRaises(RuntimeError):
            self.renderer.end_frame()

    def test_parse_hex_rgba(self) -> None:
        self.assertEqual(parse_hex_rgba("#0c0e12"), (12, 14, 18, 255))
        self.assertEqual(parse_hex_rgba("#ffffff80"), (255, 255, 255, 128))
        with self.assertRaises(ValueError):
            parse_hex_rgba("0c0e12")
        with self.assertRaises(ValueError):
            parse_hex_rgba("#fff")


class PngSnapshotTargetTests(unittest.TestCase):
    def test_last_frame_written_on_stop(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "out" / "frame.png"
            target = PngSnapshotTarget(path)
            target.start()
            rgba = torch.zeros((4, 3, 4), dtype=torch.uint8)
            rgba[:, :] = torch.tensor((10, 20, 30, 255), dtype=torch.uint8)
            target.present_frame(DisplayFrame(revision=1, width=3, height=4, rgba=rgba))
            target.stop()
            with Image.open(path) as image:
                self.assertEqual(image.size, (3, 4))
                self.assertEqual(image.convert("RGBA").getpixel((1, 1)), (10, 20, 30, 255))

    def test_nothing_written_without_frames(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "frame.png"
            target = PngSnapshotTarget(path)
            target.start()
            target.stop()
            self.assertFalse(path.exists())


if __name__ == "__main__":
    unittest.main()
