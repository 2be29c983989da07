"""A cancellable context tied to process termination signals."""

import signal
import threading
from collections.abc import Callable

__all__ = ["CommandContext", "init", "handle_signal"]


class CommandContext:
    """A flag that is raised once, when the command should stop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Mark the context as cancelled."""
        self._event.set()

    def cancelled(self) -> bool:
        """Return True once the context has been cancelled."""
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or the timeout passes; return whether cancelled."""
        return self._event.wait(timeout)


def handle_signal(cancel: Callable[[], None]) -> None:
    """Call ``cancel`` on SIGINT or SIGTERM. Must run in the main thread."""

    def _handler(signum, frame):
        print("Received termination signal, shutting down...")
        cancel()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def init() -> CommandContext:
    """Create a context that is cancelled on SIGINT or SIGTERM."""
    context = CommandContext()
    handle_signal(context.cancel)
    return context