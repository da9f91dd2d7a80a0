"""Frame/timer clock shared by the scheduler and the halo.

Nothing here reads the wall clock. Time only moves when the owner calls
`step()`: the `run()` loop feeds it measured frame time, tests feed it fixed
steps, so both see exactly the same callback ordering.
"""

import heapq
import itertools
from typing import Callable, Optional

FRAME_MS = 1000.0 / 60

FrameCallback = Callable[[float], None]
TimerCallback = Callable[[], None]


class IdleDeadline:
    """Handed to idle callbacks; reports how much of the frame is still free."""

    def __init__(self, remaining_ms: float, did_timeout: bool = False):
        self._remaining_ms = remaining_ms
        self.did_timeout = did_timeout

    def time_remaining(self) -> float:
        return max(0.0, self._remaining_ms)


class FrameClock:
    """Virtual millisecond clock with frame, timeout and (optional) idle callbacks.

    Args:
        idle_budget_ms: Idle time offered to idle callbacks each step. None means
            the host has no idle primitive and `supports_idle` is False.
        start_ms: Initial value of `now()`.
    """

    def __init__(self, idle_budget_ms: Optional[float] = None, start_ms: float = 0.0):
        self.idle_budget_ms = idle_budget_ms
        self._now = start_ms
        self._ids = itertools.count(1)
        self._timers: list[tuple[float, int, TimerCallback]] = []
        self._frames: dict[int, FrameCallback] = {}
        self._idle: dict[int, tuple[float, Callable[[IdleDeadline], None]]] = {}
        self._cancelled: set[int] = set()
        self.frame_number = 0

    @property
    def supports_idle(self) -> bool:
        return self.idle_budget_ms is not None

    def now(self) -> float:
        return self._now

    def on_next_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._frames[handle] = callback
        return handle

    def on_timeout(self, delay_ms: float, callback: TimerCallback) -> int:
        handle = next(self._ids)
        heapq.heappush(self._timers, (self._now + max(0.0, delay_ms), handle, callback))
        return handle

    def on_idle(self, callback: Callable[[IdleDeadline], None], timeout_ms: float) -> int:
        """Run `callback` on the next step with idle time, or at `timeout_ms` at the latest."""
        if not self.supports_idle:
            raise RuntimeError("idle callbacks are not available on this clock")
        handle = next(self._ids)
        self._idle[handle] = (self._now + max(0.0, timeout_ms), callback)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        """Forget a pending callback. Unknown or already-fired handles are ignored."""
        if handle is None:
            return
        if self._frames.pop(handle, None) is not None:
            return
        if self._idle.pop(handle, None) is not None:
            return
        if any(h == handle for _, h, _ in self._timers):
            self._cancelled.add(handle)

    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        timers = sum(1 for _, h, _ in self._timers if h not in self._cancelled)
        return timers + len(self._frames) + len(self._idle)

    def advance(self, ms: float) -> None:
        """Move time forward, firing due timers in deadline order."""
        target = self._now + max(0.0, ms)
        while self._timers and self._timers[0][0] <= target:
            due, handle, callback = heapq.heappop(self._timers)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            self._now = max(self._now, due)
            callback()
        self._now = target

    def step(self, dt_ms: float = FRAME_MS) -> None:
        """One host frame: timers, then idle work, then frame callbacks.

        Frame callbacks registered while this frame runs wait for the next one.
        """
        self.advance(dt_ms)
        self._run_idle()
        frames, self._frames = self._frames, {}
        self.frame_number += 1
        for callback in frames.values():
            callback(self._now)

    def run_for(self, ms: float, dt_ms: float = FRAME_MS) -> None:
        """Step repeatedly until `ms` of virtual time has passed."""
        elapsed = 0.0
        while elapsed < ms:
            self.step(dt_ms)
            elapsed += dt_ms

    def _run_idle(self) -> None:
        if not self._idle:
            return
        budget = self.idle_budget_ms or 0.0
        ready = {}
        for handle, (deadline, callback) in list(self._idle.items()):
            timed_out = self._now >= deadline
            if budget > 0 or timed_out:
                ready[handle] = (callback, timed_out)
                del self._idle[handle]
        for callback, timed_out in ready.values():
            callback(IdleDeadline(budget, did_timeout=timed_out))
