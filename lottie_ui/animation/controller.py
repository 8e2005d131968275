from __future__ import annotations

from typing import Callable, Literal


AnimationStatus = Literal["dismissed", "forward", "reverse", "completed"]


class AnimationController:
    """Playback controller driven by explicit `tick(dt)` calls from the host loop.

    The value moves between `lower_bound` and `upper_bound` over `duration_s`
    seconds. Display components read `value` as the animation progress.
    """

    def __init__(
        self,
        *,
        duration_s: float | None = None,
        value: float = 0.0,
        lower_bound: float = 0.0,
        upper_bound: float = 1.0,
    ) -> None:
        if upper_bound <= lower_bound:
            raise ValueError("upper_bound must be > lower_bound")
        self._lower = float(lower_bound)
        self._upper = float(upper_bound)
        self._duration_s: float | None = None
        if duration_s is not None:
            self.duration_s = duration_s
        self._value = self._clamp(value)
        self._status: AnimationStatus = "dismissed"
        self._animating = False
        self._direction = 1
        self._repeat = False
        self._bounce = False
        self._listeners: list[Callable[[], None]] = []
        self._status_listeners: list[Callable[[AnimationStatus], None]] = []

    @property
    def duration_s(self) -> float | None:
        return self._duration_s

    @duration_s.setter
    def duration_s(self, duration_s: float | None) -> None:
        if duration_s is not None and duration_s <= 0:
            raise ValueError("duration_s must be > 0")
        self._duration_s = None if duration_s is None else float(duration_s)

    @property
    def lower_bound(self) -> float:
        return self._lower

    @property
    def upper_bound(self) -> float:
        return self._upper

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, value: float) -> None:
        self.stop()
        self._set_value(value)
        self._set_status("completed" if self._value >= self._upper else "dismissed")

    @property
    def status(self) -> AnimationStatus:
        return self._status

    @property
    def is_animating(self) -> bool:
        return self._animating

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_status_listener(self, listener: Callable[[AnimationStatus], None]) -> None:
        self._status_listeners.append(listener)

    def remove_status_listener(self, listener: Callable[[AnimationStatus], None]) -> None:
        if listener in self._status_listeners:
            self._status_listeners.remove(listener)

    def forward(self, from_value: float | None = None) -> None:
        self._start(direction=1, from_value=from_value, repeat=False, bounce=False)

    def reverse(self, from_value: float | None = None) -> None:
        self._start(direction=-1, from_value=from_value, repeat=False, bounce=False)

    def repeat(self, *, reverse: bool = False) -> None:
        """Loop forever; with `reverse=True` alternate direction at each bound."""

        self._start(direction=1, from_value=None, repeat=True, bounce=reverse)

    def stop(self) -> None:
        self._animating = False
        self._repeat = False
        self._bounce = False

    def reset(self) -> None:
        self.value = self._lower

    def tick(self, dt: float) -> bool:
        """Advance by `dt` seconds. Returns True when the value changed."""

        if dt < 0:
            raise ValueError("dt must be >= 0")
        if not self._animating or dt == 0:
            return False
        assert self._duration_s is not None
        span = self._upper - self._lower
        step = (dt / self._duration_s) * span * self._direction
        target = self._value + step
        if self._lower <= target <= self._upper:
            return self._set_value(target)

        if not self._repeat:
            bound = self._upper if self._direction > 0 else self._lower
            changed = self._set_value(bound)
            self._animating = False
            self._set_status("completed" if self._direction > 0 else "dismissed")
            return changed

        if self._bounce:
            while target > self._upper or target < self._lower:
                if target > self._upper:
                    target = self._upper - (target - self._upper)
                    self._direction = -1
                else:
                    target = self._lower + (self._lower - target)
                    self._direction = 1
            self._set_status("forward" if self._direction > 0 else "reverse")
            return self._set_value(target)

        overshoot = (target - self._lower) % span
        return self._set_value(self._lower + overshoot)

    def _start(self, *, direction: int, from_value: float | None, repeat: bool, bounce: bool) -> None:
        if self._duration_s is None:
            raise RuntimeError("AnimationController.duration_s must be set before starting playback")
        if from_value is not None:
            self._set_value(from_value)
        self._direction = direction
        self._repeat = repeat
        self._bounce = bounce
        self._animating = True
        self._set_status("forward" if direction > 0 else "reverse")

    def _clamp(self, value: float) -> float:
        return max(self._lower, min(self._upper, float(value)))

    def _set_value(self, value: float) -> bool:
        clamped = self._clamp(value)
        if clamped == self._value:
            return False
        self._value = clamped
        for listener in list(self._listeners):
            listener()
        return True

    def _set_status(self, status: AnimationStatus) -> None:
        if status == self._status:
            return
        self._status = status
        for listener in list(self._status_listeners):
            listener(status)
