from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
import logging
import threading
from typing import Callable

from .composition import LottieComposition

LOGGER = logging.getLogger(__name__)


class LottieLoadError(RuntimeError):
    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class CompositionLoader:
    """Runs fetch-and-decode jobs off the UI thread.

    Jobs are not cancellable once submitted; callers that lose interest in a
    result simply ignore its future.
    """

    def __init__(self, max_workers: int = 2) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lottie-load")
        self._in_flight: set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False
        self._submitted = 0

    @property
    def submitted_count(self) -> int:
        return self._submitted

    def in_flight_count(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def submit(self, source: str, fetch: Callable[[], bytes]) -> "Future[LottieComposition]":
        result: Future = Future()
        result.set_running_or_notify_cancel()
        with self._lock:
            if self._closed:
                raise RuntimeError("composition loader is shut down")
            job = self._executor.submit(self._run, source, fetch, result)
            self._in_flight.add(job)
            self._submitted += 1
        LOGGER.debug("lottie load submitted: %s", source)
        job.add_done_callback(self._forget)
        return result

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for every in-flight load, including the result callbacks. Returns False on timeout."""

        with self._lock:
            pending = set(self._in_flight)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_jobs: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait_for_jobs)

    def _forget(self, job: Future) -> None:
        with self._lock:
            self._in_flight.discard(job)

    def _run(self, source: str, fetch: Callable[[], bytes], result: Future) -> None:
        # Resolving `result` here runs its done-callbacks on this worker, so the
        # job only completes once every subscriber has been notified.
        try:
            composition = self._fetch_and_decode(source, fetch)
        except Exception as exc:  # noqa: BLE001
            result.set_exception(exc)
            return
        result.set_result(composition)

    def _fetch_and_decode(self, source: str, fetch: Callable[[], bytes]) -> LottieComposition:
        try:
            data = fetch()
        except LottieLoadError:
            LOGGER.warning("lottie fetch failed: %s", source)
            raise
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("lottie fetch failed: %s (%s)", source, exc)
            raise LottieLoadError(f"failed to fetch lottie data from {source}: {exc}", source=source) from exc
        try:
            composition = LottieComposition.from_bytes(data)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("lottie decode failed: %s (%s)", source, exc)
            raise LottieLoadError(f"failed to decode lottie data from {source}: {exc}", source=source) from exc
        LOGGER.debug(
            "lottie composition decoded: %s (%dx%d, %.2fs)",
            source,
            composition.width,
            composition.height,
            composition.duration_s,
        )
        return composition


_DEFAULT_LOADER: CompositionLoader | None = None
_DEFAULT_LOADER_LOCK = threading.Lock()


def default_loader() -> CompositionLoader:
    global _DEFAULT_LOADER
    with _DEFAULT_LOADER_LOCK:
        if _DEFAULT_LOADER is None:
            _DEFAULT_LOADER = CompositionLoader()
        return _DEFAULT_LOADER
