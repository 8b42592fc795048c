import time
import logging

logger = logging.getLogger(__name__)


class TimerHandle:
    """A repeating timer owned by TickScheduler. Keep it to cancel it later."""

    def __init__(self, interval, callback, next_due):
        self.interval = float(interval)
        self.callback = callback
        self.next_due = next_due
        self.cancelled = False

    def __repr__(self):
        state = "cancelled" if self.cancelled else f"due={self.next_due:.2f}"
        return f"<TimerHandle every {self.interval}s {state}>"


class TickScheduler:
    """Repeating timers pumped from the host's frame loop.

    Nothing runs on a background thread: callbacks fire from run_due(), which
    the game loop calls once per frame next to its event handling, so a tick
    and a button press never interleave.
    """

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self._timers = []

    @property
    def active_count(self):
        return len(self._timers)

    def schedule_repeating(self, interval, callback):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        handle = TimerHandle(interval, callback, self.clock() + interval)
        self._timers.append(handle)
        logger.debug("Scheduled %r", handle)
        return handle

    def cancel(self, handle):
        """Stop a timer. Cancelling twice, or cancelling None, is harmless."""
        if handle is None or handle.cancelled:
            return
        handle.cancelled = True
        if handle in self._timers:
            self._timers.remove(handle)
        logger.debug("Cancelled %r", handle)

    def run_due(self, now=None):
        """Fire every callback that is due, once per elapsed interval.

        A callback may cancel or schedule timers; a handle cancelled earlier in
        the same pass does not fire again, and a handle scheduled during the
        pass waits for the next one.
        """
        if now is None:
            now = self.clock()
        fired = 0
        for handle in list(self._timers):
            while not handle.cancelled and handle.next_due <= now:
                handle.next_due += handle.interval
                handle.callback()
                fired += 1
        return fired

    def cancel_all(self):
        for handle in list(self._timers):
            self.cancel(handle)
