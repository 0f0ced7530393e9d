from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
import time
from typing import Any, Literal

from scatterplot.scene import SceneNode


LOGGER = logging.getLogger(__name__)

Easing = Callable[[float], float]
TransitionState = Literal["running", "done", "cancelled"]


def ease_linear(t: float) -> float:
    return t


def ease_cubic_in_out(t: float) -> float:
    t *= 2.0
    if t <= 1.0:
        return t * t * t / 2.0
    t -= 2.0
    return (t * t * t + 2.0) / 2.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TransitionHandle:
    """One in-flight attribute animation on a single scene node."""

    def __init__(
        self,
        target: SceneNode,
        to_attrs: Mapping[str, Any],
        *,
        started_at: float,
        duration_ms: float,
        easing: Easing,
    ) -> None:
        self.target = target
        self.started_at = started_at
        self.duration_ms = duration_ms
        self.easing = easing
        self.to_attrs = dict(to_attrs)
        self.from_attrs = {name: target.attrs.get(name) for name in self.to_attrs}
        self.state: TransitionState = "running"
        self._callbacks: list[Callable[[TransitionHandle], None]] = []

    def __repr__(self) -> str:
        return f"<TransitionHandle {self.target.tag} {self.state} attrs={sorted(self.to_attrs)}>"

    def done(self) -> bool:
        return self.state == "done"

    def cancelled(self) -> bool:
        return self.state == "cancelled"

    def add_done_callback(self, fn: Callable[["TransitionHandle"], None]) -> None:
        if self.state == "done":
            fn(self)
            return
        self._callbacks.append(fn)

    def progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        elapsed_ms = (now - self.started_at) * 1000.0
        return max(0.0, min(1.0, elapsed_ms / self.duration_ms))

    def _apply(self, t: float) -> None:
        eased = self.easing(t)
        for name, end in self.to_attrs.items():
            start = self.from_attrs.get(name)
            if _is_number(start) and _is_number(end):
                self.target.attrs[name] = float(start) + (float(end) - float(start)) * eased
        # Non-numeric attributes (colours, path data) switch on completion only.

    def _complete(self) -> None:
        self.target.set_attrs(self.to_attrs)
        self.state = "done"
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            fn(self)

    def _cancel(self) -> None:
        self.state = "cancelled"
        self._callbacks.clear()


class TransitionScheduler:
    """Schedules attribute transitions and advances them from a host clock.

    Nothing here blocks: ``begin`` records the animation and returns a handle,
    and the host drives progress by calling ``tick`` from its own loop. A node
    runs at most one transition; starting another interrupts the first.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, easing: Easing = ease_cubic_in_out) -> None:
        self._clock = clock
        self._easing = easing
        self._active: dict[int, TransitionHandle] = {}

    def begin(self, target: SceneNode, to_attrs: Mapping[str, Any], duration_ms: float) -> TransitionHandle:
        if duration_ms < 0:
            raise ValueError("duration_ms must be >= 0")
        self.interrupt(target)
        handle = TransitionHandle(
            target,
            to_attrs,
            started_at=self._clock(),
            duration_ms=float(duration_ms),
            easing=self._easing,
        )
        if handle.duration_ms == 0:
            handle._complete()
            return handle
        self._active[id(target)] = handle
        return handle

    def interrupt(self, target: SceneNode) -> TransitionHandle | None:
        previous = self._active.pop(id(target), None)
        if previous is not None:
            LOGGER.debug("interrupting %r", previous)
            previous._cancel()
        return previous

    def interrupt_tree(self, root: SceneNode) -> int:
        count = 0
        for node in (root, *root.iter()):
            if self.interrupt(node) is not None:
                count += 1
        return count

    def tick(self, now: float | None = None) -> list[TransitionHandle]:
        """Advance all running transitions; returns the ones that finished."""
        current = self._clock() if now is None else now
        finished: list[TransitionHandle] = []
        for key, handle in list(self._active.items()):
            if self._active.get(key) is not handle:
                continue
            t = handle.progress(current)
            if t >= 1.0:
                del self._active[key]
                handle._complete()
                finished.append(handle)
            else:
                handle._apply(t)
        return finished

    def finish_all(self) -> list[TransitionHandle]:
        finished: list[TransitionHandle] = []
        while self._active:
            _, handle = self._active.popitem()
            handle._complete()
            finished.append(handle)
        return finished

    def active_count(self) -> int:
        return len(self._active)

    def is_animating(self, target: SceneNode) -> bool:
        return id(target) in self._active
