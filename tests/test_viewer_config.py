from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from lottie_core.core.config import (
    LayoutConfig,
    PlaybackConfig,
    SourceConfig,
    ViewportConfig,
    load_viewer_config,
    parse_viewer_config,
)
from lottie_ui.layout import CENTER, TOP_RIGHT, Alignment
from lottie_ui.lottie.assets import DirectoryAssetBundle
from lottie_ui.lottie.providers import AssetLottie, FileLottie, MemoryLottie, NetworkLottie


class ViewerConfigTests(unittest.TestCase):
    def test_load_full_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            config_path = root / "viewer.toml"
            config_path.write_text(
                "\n".join(
                    [
                        "[source]",
                        'kind = "file"',
                        'path = "animations/dot.json"',
                        "",
                        "[layout]",
                        "width = 200",
                        "height = 120.5",
                        'fit = "fit-height"',
                        'alignment = "top_right"',
                        "padding = 4",
                        "",
                        "[playback]",
                        "autoplay = false",
                        "repeat = false",
                        "reverse = true",
                        "speed = 2.0",
                        "",
                        "[viewport]",
                        "width = 640",
                        "height = 360",
                        'background = "#102030"',
                        "fps = 24",
                    ]
                ),
                encoding="utf-8",
            )
            config = load_viewer_config(config_path)

        self.assertEqual(config.source.kind, "file")
        self.assertEqual(config.source.path, root / "animations" / "dot.json")
        self.assertEqual(
            config.layout,
            LayoutConfig(width=200.0, height=120.5, fit="fit_height", alignment=TOP_RIGHT, padding=4.0),
        )
        self.assertEqual(config.playback, PlaybackConfig(autoplay=False, repeat=False, reverse=True, speed=2.0))
        self.assertEqual(config.viewport, ViewportConfig(width=640, height=360, background=(16, 32, 48, 255), fps=24))
        self.assertEqual(config.source.build_provider(), FileLottie(root / "animations" / "dot.json"))

    def test_minimal_config_uses_defaults(self) -> None:
        config = parse_viewer_config({"source": {"kind": "network", "url": "https://cdn.test/a.json"}})
        self.assertEqual(config.layout, LayoutConfig())
        self.assertEqual(config.layout.alignment, CENTER)
        self.assertEqual(config.playback, PlaybackConfig())
        self.assertEqual(config.viewport, ViewportConfig())
        self.assertEqual(config.source.build_provider(), NetworkLottie("https://cdn.test/a.json"))

    def test_network_headers_and_alignment_pair(self) -> None:
        config = parse_viewer_config(
            {
                "source": {"kind": "network", "url": "https://cdn.test/a.json", "headers": {"X-Token": "abc"}},
                "layout": {"alignment": [0.5, 1.0]},
            }
        )
        self.assertEqual(config.source.headers, (("X-Token", "abc"),))
        self.assertEqual(config.layout.alignment, Alignment(0.5, 1.0))
        provider = config.source.build_provider()
        assert isinstance(provider, NetworkLottie)
        self.assertEqual(provider.headers, (("X-Token", "abc"),))

    def test_asset_source_with_root(self) -> None:
        base = Path("/srv/viewer")
        config = parse_viewer_config(
            {"source": {"kind": "asset", "name": "dot.json", "package": "shapes", "root": "assets"}},
            base_dir=base,
        )
        provider = config.source.build_provider()
        self.assertEqual(
            provider,
            AssetLottie("dot.json", bundle=DirectoryAssetBundle(base / "assets"), package="shapes"),
        )

    def test_memory_source_reads_file_bytes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "dot.json"
            path.write_bytes(b'{"w": 1}')
            provider = SourceConfig(kind="memory", path=path).build_provider()
            self.assertEqual(provider, MemoryLottie(b'{"w": 1}'))
            with self.assertRaises(FileNotFoundError):
                SourceConfig(kind="memory", path=Path(td) / "missing.json").build_provider()

    def test_invalid_configs_are_rejected(self) -> None:
        cases = [
            {},
            {"source": "file"},
            {"source": {}},
            {"source": {"kind": "ftp"}},
            {"source": {"kind": "file"}},
            {"source": {"kind": "network"}},
            {"source": {"kind": "asset"}},
            {"source": {"kind": "network", "url": "https://a.test/x.json", "headers": ["a"]}},
            {"source": {"kind": "file", "path": "a.json"}, "layout": {"width": -1}},
            {"source": {"kind": "file", "path": "a.json"}, "layout": {"fit": "stretch"}},
            {"source": {"kind": "file", "path": "a.json"}, "layout": {"padding": -2}},
            {"source": {"kind": "file", "path": "a.json"}, "playback": {"autoplay": "yes"}},
            {"source": {"kind": "file", "path": "a.json"}, "playback": {"speed": 0}},
            {"source": {"kind": "file", "path": "a.json"}, "viewport": {"fps": 0}},
            {"source": {"kind": "file", "path": "a.json"}, "viewport": {"width": 10.5}},
            {"source": {"kind": "file", "path": "a.json"}, "viewport": {"background": "red"}},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    parse_viewer_config(raw)

    def test_bundled_example_config_loads(self) -> None:
        example = Path(__file__).resolve().parents[1] / "examples" / "bouncing_dot" / "viewer.toml"
        config = load_viewer_config(example)
        self.assertEqual(config.source.path, example.parent / "animation.json")
        self.assertTrue(config.source.path.is_file())
        self.assertEqual(config.layout.padding, 8.0)

    def test_missing_config_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_viewer_config("/nonexistent/viewer.toml")


if __name__ == "__main__":
    unittest.main()
