"""
Host timer and animation facility.

Everything in the navigator runs on a single thread: synchronous handlers
plus callbacks scheduled here. Time is virtual (milliseconds) and only
moves when the host calls `advance`, which makes animations deterministic.

Transitions follow the usual interrupt rules: starting a transition stops
any older one, and an older transition whose delay elapses after a newer
one started never runs. There is no queue; the last caller wins.
"""

import itertools
import logging
import sched
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

Tick = Callable[[float], None]
TweenFactory = Callable[[], Optional[Tick]]


def ease_cubic_in_out(t: float) -> float:
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    t2 = t * t
    t3 = t2 * t
    return 4 * (t3 if t < 0.5 else 3 * (t - t2) + t3 - 0.75)


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, scheduler: sched.scheduler, event: sched.Event):
        self._scheduler = scheduler
        self._event = event
        self.cancelled = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        try:
            self._scheduler.cancel(self._event)
        except ValueError:
            # Already ran
            pass


class FrameClock:
    """
    Virtual-time scheduler.

    Args:
        frame_interval_ms: Spacing of animation frames
    """

    def __init__(self, frame_interval_ms: float = 1000.0 / 60.0):
        self.frame_interval_ms = frame_interval_ms
        self._now = 0.0
        self._scheduler = sched.scheduler(self.now, self._sleep)
        self._transition_ids = itertools.count(1)
        self.active_transition = 0

    def now(self) -> float:
        return self._now

    def _sleep(self, delay: float) -> None:
        # Time only moves in advance()
        pass

    def call_later(self, delay_ms: float, callback: Callable, *args) -> TimerHandle:
        """Run callback(*args) once `delay_ms` from now."""
        event = self._scheduler.enter(max(0.0, delay_ms), 0, callback, args)
        return TimerHandle(self._scheduler, event)

    def request_animation_frame(self, callback: Callable[[], None]) -> TimerHandle:
        """Run callback on the next animation frame."""
        return self.call_later(self.frame_interval_ms, callback)

    @property
    def pending(self) -> int:
        return len(self._scheduler.queue)

    def advance(self, ms: float) -> None:
        """
        Move time forward, running every callback due up to now + ms.

        Callbacks scheduled while advancing run too if they fall inside the
        window.
        """
        end = self._now + ms
        while True:
            self._scheduler.run(blocking=False)
            queue = self._scheduler.queue
            if not queue or queue[0].time > end:
                break
            self._now = queue[0].time
        self._now = end

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def transition(self, delay_ms: float = 0.0, duration_ms: float = 250.0) -> "Transition":
        """Schedule a new transition; it supersedes older ones when it starts."""
        return Transition(self, next(self._transition_ids), delay_ms, duration_ms)

    def interrupt(self) -> None:
        """Stop any running transition and cancel older pending ones."""
        self.active_transition = next(self._transition_ids)
        logger.debug(f"Transitions interrupted (lock={self.active_transition})")


class TransitionState(Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    ENDED = "ended"
    INTERRUPTED = "interrupted"


class Transition:
    """
    A timed animation with named tweens.

    Tween factories are invoked when the transition starts (after its
    delay), so they observe the state at that moment. A factory returning
    None contributes no tween.
    """

    def __init__(self, clock: FrameClock, transition_id: int, delay_ms: float, duration_ms: float,
                 ease: Callable[[float], float] = ease_cubic_in_out):
        self.clock = clock
        self.id = transition_id
        self.delay_ms = delay_ms
        self.duration_ms = duration_ms
        self.ease = ease
        self.state = TransitionState.SCHEDULED
        self._factories: List[Tuple[str, TweenFactory]] = []
        self._ticks: List[Tick] = []
        self._listeners: Dict[str, List[Callable[[], None]]] = {}
        self._start_time = 0.0
        self._handle = clock.call_later(delay_ms, self._start)

    def tween(self, name: str, factory: TweenFactory) -> "Transition":
        self._factories.append((name, factory))
        return self

    def on(self, event: str, callback: Callable[[], None]) -> "Transition":
        """Listen for "start", "end" or "interrupt"."""
        self._listeners.setdefault(event, []).append(callback)
        return self

    @property
    def n_tweens(self) -> int:
        return len(self._ticks)

    def _emit(self, event: str) -> None:
        for callback in self._listeners.get(event, []):
            callback()

    def _start(self) -> None:
        if self.clock.active_transition > self.id:
            # A newer transition already owns the target
            self.state = TransitionState.INTERRUPTED
            return

        self.clock.active_transition = self.id
        self.state = TransitionState.RUNNING
        self._start_time = self.clock.now()

        for name, factory in self._factories:
            tick = factory()
            if tick is not None:
                self._ticks.append(tick)
            else:
                logger.debug(f"Transition {self.id}: tween '{name}' skipped")

        self._emit("start")
        self._frame()

    def _frame(self) -> None:
        if self.clock.active_transition != self.id:
            self.state = TransitionState.INTERRUPTED
            self._emit("interrupt")
            return

        elapsed = self.clock.now() - self._start_time
        t = min(1.0, elapsed / self.duration_ms) if self.duration_ms > 0 else 1.0
        e = self.ease(t)
        for tick in self._ticks:
            tick(e)

        if t >= 1.0:
            self.state = TransitionState.ENDED
            self._emit("end")
            return
        self._handle = self.clock.request_animation_frame(self._frame)
