from __future__ import annotations

from concurrent.futures import CancelledError, Future
from dataclasses import dataclass
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Generic, Literal, Protocol, TypeVar

from .component_schema import BoundingBox, DisplayableArea
from .scheduler import UIScheduler

if TYPE_CHECKING:
    from .lottie.loader import CompositionLoader

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound="StatefulComponent")

ConnectionState = Literal["none", "waiting", "done"]


class Component:
    """Immutable description of a piece of UI.

    Subclasses are frozen dataclasses. `key` participates in reconciliation:
    an element is reused only for a component of the same type and key.
    """

    key: str | None = None


class StatelessComponent(Component):
    def build(self, context: "BuildContext") -> Component:
        raise NotImplementedError


class StatefulComponent(Component):
    def create_state(self) -> "ComponentState[Any]":
        raise NotImplementedError


class RenderComponent(Component):
    """Leaf or container that paints itself once its children are resolved."""

    def child_components(self) -> tuple[Component, ...]:
        return ()

    def with_children(self, children: tuple["RenderComponent", ...]) -> "RenderComponent":
        _ = children
        return self

    def paint(self, renderer: Any, bounds: BoundingBox) -> None:
        raise NotImplementedError


class BuildContext(Protocol):
    @property
    def component(self) -> Component:
        ...

    @property
    def scheduler(self) -> UIScheduler:
        ...

    @property
    def loader(self) -> "CompositionLoader | None":
        ...

    @property
    def mounted(self) -> bool:
        ...

    def mark_needs_build(self) -> None:
        ...

    def report_error(self, error: BaseException, *, context_note: str) -> None:
        ...


class ComponentState(Generic[C]):
    """Mutable state owned by an element for one stateful component."""

    def __init__(self) -> None:
        self._component: C | None = None
        self._element: Element | None = None

    @property
    def component(self) -> C:
        if self._component is None:
            raise RuntimeError("state is not attached to a component")
        return self._component

    @property
    def context(self) -> "Element":
        if self._element is None:
            raise RuntimeError("state is not mounted")
        return self._element

    @property
    def mounted(self) -> bool:
        return self._element is not None

    def init_state(self) -> None:
        return

    def did_update_component(self, old_component: C) -> None:
        _ = old_component

    def build(self, context: BuildContext) -> Component:
        raise NotImplementedError

    def dispose(self) -> None:
        return

    def set_state(self, mutate: Callable[[], None] | None = None) -> None:
        if self._element is None:
            raise RuntimeError("set_state called on an unmounted state")
        if mutate is not None:
            mutate()
        self._element.mark_needs_build()


def can_update(old: Component, new: Component) -> bool:
    return type(old) is type(new) and old.key == new.key


class Element:
    """Mounted instance of a component; doubles as its BuildContext."""

    def __init__(self, component: Component, host: "ComponentHost", parent: "Element | None" = None) -> None:
        self._component = component
        self._host = host
        self._parent = parent
        self._state: ComponentState[Any] | None = None
        self._children: list[Element] = []
        self._mounted = False

    @property
    def component(self) -> Component:
        return self._component

    @property
    def state(self) -> ComponentState[Any] | None:
        return self._state

    @property
    def parent(self) -> "Element | None":
        return self._parent

    @property
    def children(self) -> tuple["Element", ...]:
        return tuple(self._children)

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def scheduler(self) -> UIScheduler:
        return self._host.scheduler

    @property
    def loader(self) -> "CompositionLoader | None":
        return self._host.loader

    def mount(self) -> None:
        self._mounted = True
        if isinstance(self._component, StatefulComponent):
            state = self._component.create_state()
            state._component = self._component
            state._element = self
            self._state = state
            state.init_state()

    def update(self, component: Component) -> None:
        if not can_update(self._component, component):
            raise ValueError(
                f"cannot update {type(self._component).__name__} element with {type(component).__name__}"
            )
        old = self._component
        self._component = component
        if self._state is not None:
            self._state._component = component
            self._state.did_update_component(old)

    def unmount(self) -> None:
        for child in self._children:
            child.unmount()
        self._children = []
        if self._state is not None:
            self._state.dispose()
            self._state._element = None
            self._state = None
        self._mounted = False

    def mark_needs_build(self) -> None:
        if self._mounted:
            self._host.schedule_build()

    def report_error(self, error: BaseException, *, context_note: str) -> None:
        self._host.report_error(error, context_note=context_note, component=self._component)

    def find_state(self, state_type: type[T]) -> T | None:
        """Depth-first lookup of the first mounted state of `state_type`."""

        if isinstance(self._state, state_type):
            return self._state
        for child in self._children:
            found = child.find_state(state_type)
            if found is not None:
                return found
        return None

    def build(self) -> RenderComponent:
        component = self._component
        if self._state is not None:
            produced = self._state.build(self)
            return self._resolve_single(produced)
        if isinstance(component, StatelessComponent):
            return self._resolve_single(component.build(self))
        if isinstance(component, RenderComponent):
            wanted = component.child_components()
            resolved = tuple(self._build_child(i, child) for i, child in enumerate(wanted))
            self._trim_children(len(wanted))
            return component.with_children(resolved)
        raise TypeError(f"unsupported component type: {type(component).__name__}")

    def _resolve_single(self, produced: Component) -> RenderComponent:
        resolved = self._build_child(0, produced)
        self._trim_children(1)
        return resolved

    def _build_child(self, index: int, component: Component) -> RenderComponent:
        if not isinstance(component, Component):
            raise TypeError(f"build must return a Component, got {type(component).__name__}")
        existing = self._children[index] if index < len(self._children) else None
        if existing is not None and can_update(existing.component, component):
            if existing.component is not component:
                existing.update(component)
            return existing.build()
        if existing is not None:
            existing.unmount()
        child = Element(component, self._host, parent=self)
        child.mount()
        if index < len(self._children):
            self._children[index] = child
        else:
            self._children.append(child)
        return child.build()

    def _trim_children(self, count: int) -> None:
        while len(self._children) > count:
            self._children.pop().unmount()


@dataclass(frozen=True)
class ReportedError:
    error: BaseException
    context_note: str
    component_type: str | None
    ts_ns: int


class ComponentHost:
    """Owns the element tree and runs build passes on the UI thread."""

    def __init__(
        self,
        *,
        scheduler: UIScheduler | None = None,
        loader: "CompositionLoader | None" = None,
        error_handler: Callable[[ReportedError], None] | None = None,
    ) -> None:
        self._scheduler = scheduler or UIScheduler()
        self._loader = loader
        self._error_handler = error_handler
        self._root: Element | None = None
        self._render_tree: RenderComponent | None = None
        self._needs_build = False
        self._build_count = 0
        self._errors: list[ReportedError] = []

    @property
    def scheduler(self) -> UIScheduler:
        return self._scheduler

    @property
    def loader(self) -> "CompositionLoader | None":
        return self._loader

    @property
    def root(self) -> Element | None:
        return self._root

    @property
    def render_tree(self) -> RenderComponent | None:
        return self._render_tree

    @property
    def build_count(self) -> int:
        return self._build_count

    @property
    def errors(self) -> tuple[ReportedError, ...]:
        return tuple(self._errors)

    @property
    def needs_build(self) -> bool:
        return self._needs_build

    def mount(self, component: Component) -> RenderComponent:
        if self._root is not None:
            raise RuntimeError("host already has a mounted root; use update()")
        root = Element(component, self)
        root.mount()
        self._root = root
        return self._rebuild()

    def update(self, component: Component) -> RenderComponent:
        if self._root is None:
            return self.mount(component)
        if can_update(self._root.component, component):
            self._root.update(component)
        else:
            self._root.unmount()
            self._root = Element(component, self)
            self._root.mount()
        return self._rebuild()

    def unmount(self) -> None:
        if self._root is not None:
            self._root.unmount()
        self._root = None
        self._render_tree = None
        self._needs_build = False

    def schedule_build(self) -> None:
        self._needs_build = True

    def pump(self, max_callbacks: int | None = None) -> RenderComponent | None:
        """Apply queued async completions, then rebuild once if anything is dirty."""

        self._scheduler.drain(max_callbacks=max_callbacks)
        if self._needs_build and self._root is not None:
            return self._rebuild()
        return self._render_tree

    def render(self, renderer: Any, display: DisplayableArea) -> None:
        if self._render_tree is None:
            raise RuntimeError("nothing mounted to render")
        self._render_tree.paint(renderer, display.content_bounds())

    def report_error(
        self,
        error: BaseException,
        *,
        context_note: str,
        component: Component | None = None,
    ) -> None:
        reported = ReportedError(
            error=error,
            context_note=context_note,
            component_type=type(component).__name__ if component is not None else None,
            ts_ns=time.time_ns(),
        )
        self._errors.append(reported)
        LOGGER.error(
            "%s (%s): %s",
            context_note,
            reported.component_type or "host",
            error,
            exc_info=(type(error), error, error.__traceback__),
        )
        if self._error_handler is not None:
            self._error_handler(reported)

    def _rebuild(self) -> RenderComponent:
        assert self._root is not None
        self._needs_build = False
        self._render_tree = self._root.build()
        self._build_count += 1
        return self._render_tree


@dataclass(frozen=True)
class AsyncSnapshot(Generic[T]):
    connection_state: ConnectionState
    data: T | None = None
    error: BaseException | None = None

    @classmethod
    def nothing(cls) -> "AsyncSnapshot[T]":
        return cls(connection_state="none")

    @classmethod
    def waiting(cls) -> "AsyncSnapshot[T]":
        return cls(connection_state="waiting")

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def has_error(self) -> bool:
        return self.error is not None


AsyncComponentBuilder = Callable[[BuildContext, AsyncSnapshot[Any]], Component]


@dataclass(frozen=True)
class FutureBuilder(StatefulComponent):
    """Rebuilds from the latest snapshot of `future`.

    A replaced future starts over from a fresh waiting snapshot; results of a
    future that is no longer current are dropped.
    """

    future: Future | None
    builder: AsyncComponentBuilder
    key: str | None = None

    def create_state(self) -> "FutureBuilderState":
        return FutureBuilderState()


class FutureBuilderState(ComponentState[FutureBuilder]):
    def __init__(self) -> None:
        super().__init__()
        self._snapshot: AsyncSnapshot[Any] = AsyncSnapshot.nothing()
        self._active: Future | None = None

    @property
    def snapshot(self) -> AsyncSnapshot[Any]:
        return self._snapshot

    def init_state(self) -> None:
        self._subscribe()

    def did_update_component(self, old_component: FutureBuilder) -> None:
        if old_component.future is not self.component.future:
            self._active = None
            self._snapshot = AsyncSnapshot.nothing()
            self._subscribe()

    def build(self, context: BuildContext) -> Component:
        return self.component.builder(context, self._snapshot)

    def dispose(self) -> None:
        self._active = None

    def _subscribe(self) -> None:
        future = self.component.future
        if future is None:
            return
        self._active = future
        self._snapshot = AsyncSnapshot.waiting()
        scheduler = self.context.scheduler

        def _on_done(done: Future) -> None:
            scheduler.post(lambda: self._resolve(done), required=True)

        future.add_done_callback(_on_done)

    def _resolve(self, done: Future) -> None:
        if done is not self._active or not self.mounted:
            LOGGER.debug("dropping result of superseded future %r", done)
            return
        if done.cancelled():
            error: BaseException | None = CancelledError()
        else:
            error = done.exception()
        if error is not None:
            failed = AsyncSnapshot(connection_state="done", error=error)

            def _fail() -> None:
                self._snapshot = failed

            self.set_state(_fail)
            self.context.report_error(error, context_note="while resolving an asynchronous build")
            return
        resolved = AsyncSnapshot(connection_state="done", data=done.result())

        def _succeed() -> None:
            self._snapshot = resolved

        self.set_state(_succeed)
