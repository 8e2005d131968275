from __future__ import annotations

import argparse
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import replace
import json
import logging
from pathlib import Path

from lottie_core.core import ViewerRuntime, load_viewer_config
from lottie_core.targets import HeadlessTarget, PngSnapshotTarget, RenderTarget
from lottie_ui.lottie import CompositionLoader, FileLottie, LottieLoadError, LottieProvider, NetworkLottie


def main() -> None:
    parser = argparse.ArgumentParser(prog="lottie-matrix")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="Load a Lottie file or URL and print its composition header.")
    inspect.add_argument("source", help="Path to a .json/.lottie/.tgs file, or an http(s) URL.")
    inspect.add_argument("--timeout", type=float, default=30.0)

    run = sub.add_parser("run", help="Run the headless viewer from a viewer.toml config.")
    run.add_argument("config", type=Path)
    run.add_argument("--ticks", type=int, default=90)
    run.add_argument("--fps", type=int, default=None, help="Override viewport.fps from the config.")
    run.add_argument("--snapshot", type=Path, default=None, help="Write the last frame to this PNG path.")
    run.add_argument("--load-timeout", type=float, default=10.0)
    run.add_argument("--no-realtime", action="store_true", help="Do not sleep between ticks.")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "inspect":
        provider = _provider_for(args.source, timeout_s=args.timeout)
        loader = CompositionLoader(max_workers=1)
        try:
            composition = provider.load(loader).result(timeout=args.timeout)
        except LottieLoadError as exc:
            raise SystemExit(f"load failed: {exc}") from exc
        except FutureTimeoutError as exc:
            raise SystemExit(f"load timed out after {args.timeout}s: {args.source}") from exc
        finally:
            loader.shutdown(wait_for_jobs=False)
        print(json.dumps(composition.summary(), indent=2, sort_keys=True))
        return

    if args.command == "run":
        config = load_viewer_config(args.config)
        if args.fps is not None:
            if args.fps <= 0:
                raise ValueError("--fps must be > 0")
            config = replace(config, viewport=replace(config.viewport, fps=args.fps))
        target: RenderTarget = PngSnapshotTarget(args.snapshot) if args.snapshot is not None else HeadlessTarget()
        loader = CompositionLoader()
        try:
            runtime = ViewerRuntime(config, target, loader=loader)
            result = runtime.run(
                max_ticks=args.ticks,
                realtime=not args.no_realtime,
                load_timeout_s=args.load_timeout,
            )
        finally:
            loader.shutdown(wait_for_jobs=False)
        print(
            f"run complete: ticks={result.ticks_run} frames={result.frames_presented} "
            f"status={result.status} errors={len(result.errors)}"
        )
        for reported in result.errors:
            print(f"error: {reported.context_note}: {reported.error}")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _provider_for(source: str, *, timeout_s: float) -> LottieProvider:
    if source.startswith(("http://", "https://")):
        return NetworkLottie(source, timeout_s=timeout_s)
    return FileLottie(Path(source))


if __name__ == "__main__":
    main()
