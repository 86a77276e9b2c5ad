"""
Main Recorder class for CaptureRecorder.

This is the primary interface for turning an event stream into a capture chain.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
import logging
from typing import Any, Callable, Generator, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

from capture_recorder.core.capture import Capture, capture
from capture_recorder.core.errors import (
    RecorderAlreadyStartedError,
    RecorderAlreadyStoppedError,
)
from capture_recorder.core.events import Event
from capture_recorder.sources.base import Source, Subscription

R = TypeVar("R")


def _accept_all(emittance: Any) -> bool:
    return True


def _identity(emittance: Any) -> Any:
    return emittance


class _Session(Generic[R]):
    """State of one start/stop cycle."""

    __slots__ = ("subscription", "head")

    def __init__(self) -> None:
        self.subscription: Optional[Subscription] = None
        self.head: Optional[Capture[R]] = None


@dataclass
class Recording(Generic[R]):
    """Result holder yielded by ``Recorder.recording``; filled in on exit."""

    capture: Optional[Capture[R]] = None
    finished: bool = False


class Recorder(Generic[R]):
    """
    Records the events of a source as a capture chain.

    Each accepted event prepends a new capture named after the event's
    emitter, holding the mapped emittance. The chain is handed back by
    ``stop``.

    Events are expected to arrive serially (see ``Source.consume``); the
    chain head is updated without a lock on the delivery path.

    Example:
        ```python
        from capture_recorder import InMemorySource, Recorder

        source = InMemorySource()
        recorder = Recorder(source, filter=lambda n: n > 0, mapper=str)

        recorder.start()
        for n in (1, -2, 3):
            source.emit("counter", n)
        head = recorder.stop()

        assert head.values() == ["3", "1"]
        ```
    """

    def __init__(
        self,
        source: Source,
        filter: Optional[Callable[[Any], bool]] = None,
        mapper: Optional[Callable[[Any], R]] = None,
    ) -> None:
        """
        Initialize the recorder.

        Args:
            source: The event source to subscribe to on start
            filter: Predicate over the emittance; defaults to accepting everything
            mapper: Function from emittance to captured value; defaults to identity
        """
        self._source = source
        self._filter = filter or _accept_all
        self._mapper: Callable[[Any], R] = mapper or _identity

        # State
        self._session: Optional[_Session[R]] = None
        self._lock = threading.Lock()

    @property
    def source(self) -> Source:
        return self._source

    @property
    def is_recording(self) -> bool:
        """Check if recording is active."""
        return self._session is not None

    def start(self) -> None:
        """
        Subscribe to the source and start recording.

        Raises:
            RecorderAlreadyStartedError: If the recorder is already recording
        """
        with self._lock:
            if self._session is not None:
                raise RecorderAlreadyStartedError()

            session: _Session[R] = _Session()
            accept = self._filter
            mapper = self._mapper

            def on_event(event: Event) -> None:
                emittance = event.emittance
                if accept(emittance):
                    session.head = capture(
                        event.emitter.name,
                        mapper(emittance),
                        session.head,
                    )

            session.subscription = self._source.consume(on_event)
            self._session = session

            logger.debug(f"Recording started on {type(self._source).__name__}")

    def stop(self) -> Optional[Capture[R]]:
        """
        Unsubscribe from the source and stop recording.

        The subscription is closed before this returns, so the returned
        chain never grows afterwards.

        Returns:
            The most recent capture, or None if no event was accepted

        Raises:
            RecorderAlreadyStoppedError: If the recorder is not recording
        """
        with self._lock:
            session = self._session
            if session is None:
                raise RecorderAlreadyStoppedError()

            if session.subscription is not None:
                session.subscription.close()
            self._session = None

            head = session.head

        logger.debug(
            f"Recording stopped with {head.size if head is not None else 0} capture(s)"
        )
        return head

    @contextmanager
    def recording(self) -> Generator[Recording[R], None, None]:
        """
        Context manager that records for the duration of the block.

        Example:
            ```python
            with recorder.recording() as rec:
                source.emit("door", "open")

            assert rec.capture.value == "open"
            ```
        """
        result: Recording[R] = Recording()
        self.start()
        try:
            yield result
        finally:
            result.capture = self.stop()
            result.finished = True


def recorder(
    source: Source,
    filter: Optional[Callable[[Any], bool]] = None,
    mapper: Optional[Callable[[Any], R]] = None,
) -> Recorder[R]:
    """
    Return a new recorder bound to ``source``.

    ``recorder(source)`` records every emittance unchanged,
    ``recorder(source, mapper=fn)`` records ``fn(emittance)`` and
    ``recorder(source, filter, mapper)`` records only accepted emittances.
    """
    return Recorder(source, filter=filter, mapper=mapper)
