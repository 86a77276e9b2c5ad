"""
Base event source interface for CaptureRecorder.
"""

from abc import ABC, abstractmethod
from typing import Callable

from capture_recorder.core.events import Event

Listener = Callable[[Event], None]


class Subscription(ABC):
    """
    Handle for an active registration with a Source.

    Closing the subscription stops delivery to its listener.
    """

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Whether the subscription has been closed."""
        ...

    @abstractmethod
    def close(self) -> None:
        """
        Release the registration.

        Must be idempotent. Once this returns, no further events reach the
        listener, including events whose delivery was already in progress
        on another thread.
        """
        ...

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Source(ABC):
    """
    Abstract provider of an event stream.

    Implementations can feed events from anywhere:
    - in-memory emission (default, see InMemorySource)
    - message brokers
    - instrumentation hooks
    """

    @abstractmethod
    def consume(self, listener: Listener) -> Subscription:
        """
        Register a listener for all subsequent events.

        Delivery contract: a source must never invoke the same listener
        concurrently. Listeners (the Recorder's included) update their own
        state without locking and rely on serial delivery.

        Exceptions raised by the listener propagate to whoever triggered the
        delivery.

        Args:
            listener: Callable invoked once per delivered event

        Returns:
            The subscription to close when done
        """
        ...
