"""Running UI updates directly before the UI starts, and queued afterwards."""

from __future__ import annotations

import threading
from collections.abc import Callable

Update = Callable[[], None]


class UpdateDispatcher:
    """Dispatches UI updates.

    Before the UI has drawn for the first time, updates run at once in the
    caller's thread. Afterwards they are handed to enqueue from a separate
    thread, so a caller already running on the UI thread cannot deadlock.
    Without an enqueue function updates always run at once.
    """

    def __init__(self, enqueue: Callable[[Update], None] | None = None) -> None:
        self._enqueue = enqueue
        self._started = threading.Event()

    def mark_started(self) -> None:
        """Record that the UI has drawn its first frame."""
        self._started.set()

    def started(self) -> bool:
        """Whether the UI has drawn its first frame."""
        return self._started.is_set()

    def dispatch(self, update: Update | None) -> None:
        """Run or queue an update; None is ignored."""
        if update is None:
            return
        if self._enqueue is None or not self._started.is_set():
            update()
            return
        threading.Thread(target=self._enqueue, args=(update,), daemon=True).start()