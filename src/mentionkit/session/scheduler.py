"""One-shot deferred callbacks for the post-commit suppression window."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable

logger = logging.getLogger(__name__)

Scheduler = Callable[[Callable[[], None]], None]


class DeferredQueue:
    """Scheduler for hosts that drive their own event loop.

    Callbacks are queued and only run when the host calls ``run_pending``,
    typically once per UI tick.
    """

    def __init__(self) -> None:
        self._pending: deque[Callable[[], None]] = deque()

    def __call__(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def __len__(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        """Run the callbacks queued before this call.

        Callbacks scheduled while running wait for the next call.

        Returns:
            Number of callbacks run.
        """
        count = len(self._pending)
        for _ in range(count):
            callback = self._pending.popleft()
            try:
                callback()
            except Exception:
                logger.exception("Error in deferred callback")
        return count


# Fallback for call_soon outside an event loop; drained by run_pending().
pending_callbacks = DeferredQueue()


def call_soon(callback: Callable[[], None]) -> None:
    """Run ``callback`` on the next scheduling tick, on the calling thread.

    Uses the running asyncio event loop when there is one. Without a loop,
    the callback waits in ``pending_callbacks`` until the host calls
    ``run_pending``.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        pending_callbacks(callback)
        return
    loop.call_soon(callback)


def run_pending() -> int:
    """Run callbacks ``call_soon`` deferred while no event loop was running.

    Returns:
        Number of callbacks run.
    """
    return pending_callbacks.run_pending()
