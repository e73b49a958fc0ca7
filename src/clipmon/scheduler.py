import threading
from collections.abc import Iterator


class CancellationToken:
    """Shared stop flag between a run loop and whoever wants to end it.

    Safe to cancel from a signal handler or another thread.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to timeout seconds. Returns True if cancelled."""
        return self._event.wait(timeout)


class Ticker:
    """Yields tick numbers every `interval` seconds until the token is cancelled.

    The consumer does its work between iterations, so a tick is always fully
    processed before the wait for the next one begins.
    """

    def __init__(self, interval: float, token: CancellationToken):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.token = token

    def __iter__(self) -> Iterator[int]:
        tick = 0
        while not self.token.cancelled:
            yield tick
            tick += 1
            if self.token.wait(self.interval):
                break
