"""
Wait for a map element to exist.

World data loads asynchronously, so a view command can arrive before the
element it highlights has been inserted. The poller re-checks at a fixed
interval until the element appears. There is no attempt ceiling: a target
that never appears is polled forever unless the handle is cancelled.
"""

import logging
from typing import Callable, Optional

from .clock import FrameClock, TimerHandle
from .document import MapDocument

logger = logging.getLogger(__name__)


class PollHandle:
    """
    Cancellable element poll.

    attempts: number of checks made so far
    done: True once the callback has run
    """

    def __init__(self, element_id: str):
        self.element_id = element_id
        self.attempts = 0
        self.done = False
        self.cancelled = False
        self._timer: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return not (self.done or self.cancelled)

    def cancel(self) -> None:
        if not self.active:
            return
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        logger.debug(f"Stopped waiting for '{self.element_id}' after {self.attempts} attempts")


def wait_for_element(
    clock: FrameClock,
    document: MapDocument,
    element_id: str,
    callback: Callable[[], None],
    interval_ms: float = 10.0
) -> PollHandle:
    """
    Run `callback` once `element_id` exists in the document.

    The first check happens one interval from now, so the callback never
    runs synchronously.

    Args:
        clock: Host timer facility
        document: Map document to query
        element_id: Element to wait for
        callback: Called once, when the element exists
        interval_ms: Delay between checks

    Returns:
        PollHandle for inspection and cancellation
    """
    handle = PollHandle(element_id)

    def check() -> None:
        if handle.cancelled:
            return
        handle.attempts += 1
        if document.exists(element_id):
            handle.done = True
            logger.debug(f"'{element_id}' ready after {handle.attempts} attempts")
            callback()
            return
        handle._timer = clock.call_later(interval_ms, check)

    handle._timer = clock.call_later(interval_ms, check)
    return handle
