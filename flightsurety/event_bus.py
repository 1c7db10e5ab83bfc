"""Publish/subscribe dispatch of committed contract events."""

import logging
import queue
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from .models.events import ContractEvent

logger = logging.getLogger(__name__)

Handler = Callable[[ContractEvent], None]

WILDCARD = "*"


class EventBus:
    """
    Fans events out to subscribers.

    Synchronous by default; `start_background()` moves delivery onto a
    dispatcher thread so publishers never wait on subscribers.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._queue: "queue.Queue[Optional[ContractEvent]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._delivered = 0
        self._error_count = 0

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for one event name (or "*" for all).

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._handlers[name].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers[name]:
                    self._handlers[name].remove(handler)

        return unsubscribe

    def publish(self, event: ContractEvent) -> None:
        if self._thread is not None and self._thread.is_alive():
            self._queue.put(event)
        else:
            self._deliver(event)

    def _deliver(self, event: ContractEvent) -> None:
        with self._lock:
            handlers = list(self._handlers[event.name]) + list(self._handlers[WILDCARD])

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # One failing subscriber must not starve the others
                self._error_count += 1
                logger.exception(f"Subscriber failed on {event.name} #{event.sequence}")
        self._delivered += 1

    def _run(self) -> None:
        while True:
            event = self._queue.get()
            try:
                if event is None:
                    return
                self._deliver(event)
            finally:
                self._queue.task_done()

    def start_background(self) -> None:
        """Start delivering events on a dispatcher thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("Event dispatcher already running")
            return

        self._thread = threading.Thread(target=self._run, name="event-dispatcher", daemon=True)
        self._thread.start()
        logger.info("Background event dispatch started")

    def drain(self) -> None:
        """Block until every queued event has been delivered."""
        self._queue.join()

    def stop(self) -> None:
        """Deliver what is queued, then stop the dispatcher thread."""
        if self._thread and self._thread.is_alive():
            self._queue.put(None)
            self._thread.join(timeout=5)
        self._thread = None
        logger.info("Event dispatch stopped")

    @property
    def stats(self) -> dict:
        return {
            "delivered": self._delivered,
            "error_count": self._error_count,
            "background": self._thread is not None and self._thread.is_alive(),
        }
