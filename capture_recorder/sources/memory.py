"""
In-memory event source for CaptureRecorder.

Delivers emitted events synchronously, on the emitting thread, to every open
subscription.
"""

import logging
import threading
from typing import Any

from capture_recorder.core.events import Event
from capture_recorder.core.names import Name, resolve_name
from capture_recorder.sources.base import Listener, Source, Subscription

logger = logging.getLogger(__name__)


class InMemorySource(Source):
    """
    Source that dispatches each emitted event serially to its listeners.

    Emission and subscription changes share one re-entrant lock, so a
    listener is never invoked concurrently and closing a subscription waits
    for any delivery already in flight.

    Example:
        ```python
        source = InMemorySource()
        recorder = Recorder(source)

        recorder.start()
        source.emit("door", "open")
        source.emit("door", "closed")
        head = recorder.stop()

        assert head.values() == ["closed", "open"]
        ```
    """

    def __init__(self) -> None:
        self._subscriptions: list[_MemorySubscription] = []
        self._lock = threading.RLock()

    @property
    def subscriber_count(self) -> int:
        """Number of open subscriptions."""
        with self._lock:
            return len(self._subscriptions)

    def consume(self, listener: Listener) -> Subscription:
        subscription = _MemorySubscription(self, listener)
        with self._lock:
            self._subscriptions.append(subscription)
            logger.debug(f"Listener subscribed ({len(self._subscriptions)} open)")
        return subscription

    def emit(self, subject: Any, emittance: Any) -> int:
        """
        Deliver an event to all open subscriptions, in subscription order.

        Args:
            subject: Emitter name; strings are interned with ``Name.of``,
                references and referents are resolved to their name
            emittance: The event payload

        Returns:
            The number of listeners the event was delivered to
        """
        name = Name.of(subject) if isinstance(subject, str) else resolve_name(subject)
        event = Event.of(name, emittance)

        delivered = 0
        with self._lock:
            for subscription in list(self._subscriptions):
                if subscription.closed:
                    continue
                subscription.listener(event)
                delivered += 1
        return delivered

    def _release(self, subscription: "_MemorySubscription") -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
            logger.debug(f"Listener unsubscribed ({len(self._subscriptions)} open)")


class _MemorySubscription(Subscription):
    """Registration of one listener with an InMemorySource."""

    def __init__(self, source: InMemorySource, listener: Listener) -> None:
        self._source = source
        self._closed = False
        self.listener = listener

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._source._lock:
            if self._closed:
                return
            self._closed = True
            self._source._release(self)
