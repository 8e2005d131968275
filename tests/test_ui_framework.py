from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import threading
import unittest

from lottie_ui.component_schema import BoundingBox, DisplayableArea, Insets
from lottie_ui.containers import Padding
from lottie_ui.framework import (
    AsyncSnapshot,
    ComponentHost,
    ComponentState,
    FutureBuilder,
    RenderComponent,
    StatefulComponent,
    StatelessComponent,
)
from lottie_ui.scheduler import UIScheduler


@dataclass(frozen=True)
class _Label(RenderComponent):
    text: str
    key: str | None = None

    def paint(self, renderer, bounds: BoundingBox) -> None:
        renderer.append((self.text, bounds))


@dataclass(frozen=True)
class _Greeting(StatelessComponent):
    name: str

    def build(self, context) -> _Label:
        return _Label(text=f"hello {self.name}")


@dataclass(frozen=True)
class _Counter(StatefulComponent):
    label: str
    key: str | None = None

    def create_state(self) -> "_CounterState":
        return _CounterState()


class _CounterState(ComponentState[_Counter]):
    def __init__(self) -> None:
        super().__init__()
        self.count = 0
        self.updates = 0
        self.disposed = False

    def did_update_component(self, old_component: _Counter) -> None:
        self.updates += 1

    def build(self, context) -> _Label:
        return _Label(text=f"{self.component.label}={self.count}")

    def dispose(self) -> None:
        self.disposed = True


def _describe(context, snapshot: AsyncSnapshot) -> _Label:
    if snapshot.has_error:
        return _Label(text=f"error:{snapshot.error}")
    if snapshot.has_data:
        return _Label(text=f"data:{snapshot.data}")
    return _Label(text=snapshot.connection_state)


class UISchedulerTests(unittest.TestCase):
    def test_drain_runs_callbacks_in_order(self) -> None:
        scheduler = UIScheduler()
        seen: list[int] = []
        for i in range(3):
            scheduler.post(lambda i=i: seen.append(i))
        self.assertEqual(scheduler.pending_count(), 3)
        self.assertEqual(scheduler.drain(max_callbacks=2), 2)
        self.assertEqual(seen, [0, 1])
        self.assertEqual(scheduler.drain(), 1)
        self.assertEqual(seen, [0, 1, 2])

    def test_callbacks_may_post_follow_up_work(self) -> None:
        scheduler = UIScheduler()
        seen: list[str] = []
        scheduler.post(lambda: scheduler.post(lambda: seen.append("second")))
        self.assertEqual(scheduler.drain(), 2)
        self.assertEqual(seen, ["second"])

    def test_queue_is_bounded(self) -> None:
        scheduler = UIScheduler(max_pending=1)
        scheduler.post(lambda: None)
        with self.assertRaises(RuntimeError):
            scheduler.post(lambda: None)
        with self.assertRaises(ValueError):
            UIScheduler(max_pending=0)

    def test_required_posts_bypass_the_bound(self) -> None:
        scheduler = UIScheduler(max_pending=1)
        seen: list[str] = []
        scheduler.post(lambda: seen.append("ordinary"))
        scheduler.post(lambda: seen.append("completion"), required=True)
        self.assertEqual(scheduler.pending_count(), 2)
        self.assertEqual(scheduler.drain(), 2)
        self.assertEqual(seen, ["ordinary", "completion"])

    def test_post_from_worker_thread(self) -> None:
        scheduler = UIScheduler()
        seen: list[str] = []
        worker = threading.Thread(target=lambda: scheduler.post(lambda: seen.append(threading.current_thread().name)))
        worker.start()
        worker.join(timeout=5.0)
        scheduler.drain()
        self.assertEqual(seen, [threading.current_thread().name])


class ComponentHostTests(unittest.TestCase):
    def test_stateless_component_builds_render_tree(self) -> None:
        host = ComponentHost()
        tree = host.mount(_Greeting(name="lottie"))
        self.assertEqual(tree, _Label(text="hello lottie"))
        self.assertEqual(host.build_count, 1)
        with self.assertRaises(RuntimeError):
            host.mount(_Greeting(name="again"))

    def test_state_survives_update_and_set_state_rebuilds(self) -> None:
        host = ComponentHost()
        host.mount(_Counter(label="n"))
        assert host.root is not None
        state = host.root.state
        assert isinstance(state, _CounterState)

        host.update(_Counter(label="m"))
        self.assertIs(host.root.state, state)
        self.assertEqual(state.updates, 1)

        state.set_state(lambda: setattr(state, "count", 2))
        self.assertTrue(host.needs_build)
        self.assertEqual(host.pump(), _Label(text="m=2"))
        self.assertFalse(host.needs_build)

    def test_changed_key_replaces_state(self) -> None:
        host = ComponentHost()
        host.mount(_Counter(label="n", key="a"))
        assert host.root is not None
        first = host.root.state
        assert isinstance(first, _CounterState)
        host.update(_Counter(label="n", key="b"))
        self.assertIsNot(host.root.state, first)
        self.assertTrue(first.disposed)
        with self.assertRaises(RuntimeError):
            first.set_state()

    def test_render_paints_into_content_bounds(self) -> None:
        host = ComponentHost()
        host.mount(Padding(padding=Insets.all(10.0), child=_Greeting(name="x")))
        painted: list = []
        host.render(painted, DisplayableArea(content_width_px=100, content_height_px=50))
        self.assertEqual(painted, [("hello x", BoundingBox(10.0, 10.0, 80.0, 30.0, "screen_tl"))])

    def test_render_without_root_fails(self) -> None:
        with self.assertRaises(RuntimeError):
            ComponentHost().render([], DisplayableArea(content_width_px=1, content_height_px=1))


class FutureBuilderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.host = ComponentHost()

    def test_snapshot_moves_from_waiting_to_data(self) -> None:
        future: Future = Future()
        self.assertEqual(self.host.mount(FutureBuilder(future=future, builder=_describe)), _Label(text="waiting"))
        future.set_result(7)
        self.assertEqual(self.host.pump(), _Label(text="data:7"))

    def test_resolution_survives_a_full_scheduler(self) -> None:
        host = ComponentHost(scheduler=UIScheduler(max_pending=1))
        future: Future = Future()
        host.mount(FutureBuilder(future=future, builder=_describe))
        host.scheduler.post(lambda: None)
        future.set_result(3)
        self.assertEqual(host.pump(), _Label(text="data:3"))
        self.assertEqual(host.errors, ())

    def test_no_future_stays_in_none_state(self) -> None:
        self.assertEqual(self.host.mount(FutureBuilder(future=None, builder=_describe)), _Label(text="none"))

    def test_error_is_reported_and_shown(self) -> None:
        future: Future = Future()
        self.host.mount(FutureBuilder(future=future, builder=_describe))
        future.set_exception(RuntimeError("nope"))
        with self.assertLogs("lottie_ui.framework", level="ERROR") as logs:
            tree = self.host.pump()
        self.assertEqual(tree, _Label(text="error:nope"))
        self.assertEqual(len(self.host.errors), 1)
        self.assertIn("while resolving an asynchronous build", logs.output[0])

    def test_replaced_future_drops_old_result_and_data(self) -> None:
        first: Future = Future()
        second: Future = Future()
        self.host.mount(FutureBuilder(future=first, builder=_describe))
        first.set_result("old")
        self.host.pump()

        self.assertEqual(self.host.update(FutureBuilder(future=second, builder=_describe)), _Label(text="waiting"))
        stale: Future = Future()
        self.host.update(FutureBuilder(future=stale, builder=_describe))
        self.host.update(FutureBuilder(future=second, builder=_describe))
        stale.set_result("stale")
        self.assertEqual(self.host.pump(), _Label(text="waiting"))

        second.set_result("new")
        self.assertEqual(self.host.pump(), _Label(text="data:new"))


if __name__ == "__main__":
    unittest.main()
