"""Tests for the in-memory event source."""

import threading

import pytest

from capture_recorder.core.events import Event
from capture_recorder.core.names import Name
from capture_recorder.sources import InMemorySource


class TestInMemorySource:
    """Tests for InMemorySource."""

    def test_delivers_to_listeners_in_order(self) -> None:
        """Test every open subscription receives each event in subscription order."""
        source = InMemorySource()
        seen: list[tuple[str, object]] = []

        source.consume(lambda e: seen.append(("first", e.emittance)))
        source.consume(lambda e: seen.append(("second", e.emittance)))
        delivered = source.emit("sources.sensor", 7)

        assert delivered == 2
        assert seen == [("first", 7), ("second", 7)]

    def test_string_subjects_are_interned(self) -> None:
        """Test that string emitters become interned names."""
        source = InMemorySource()
        events: list[Event] = []
        source.consume(events.append)

        source.emit("sources.sensor", 1)
        source.emit(Name.of("sources.sensor"), 2)

        assert events[0].emitter.name is events[1].emitter.name
        assert events[0].emitter.name is Name.of("sources.sensor")

    def test_close_is_idempotent(self) -> None:
        """Test closing twice is harmless and stops delivery."""
        source = InMemorySource()
        events: list[Event] = []
        subscription = source.consume(events.append)

        subscription.close()
        subscription.close()

        assert subscription.closed
        assert source.subscriber_count == 0
        assert source.emit("sources.sensor", 1) == 0
        assert events == []

    def test_subscription_context_manager(self) -> None:
        """Test a subscription closes when its block exits."""
        source = InMemorySource()

        with source.consume(lambda e: None) as subscription:
            assert source.subscriber_count == 1

        assert subscription.closed
        assert source.subscriber_count == 0

    def test_listener_error_propagates(self) -> None:
        """Test listener exceptions reach the emitter."""
        source = InMemorySource()

        def fail(event: Event) -> None:
            raise RuntimeError("listener failed")

        source.consume(fail)
        with pytest.raises(RuntimeError, match="listener failed"):
            source.emit("sources.sensor", 1)

    def test_close_waits_for_delivery_in_flight(self) -> None:
        """Test close from another thread returns only after delivery completes."""
        source = InMemorySource()
        entered = threading.Event()
        release = threading.Event()
        finished: list[str] = []

        def slow(event: Event) -> None:
            entered.set()
            release.wait(timeout=5)
            finished.append("delivered")

        subscription = source.consume(slow)
        producer = threading.Thread(target=source.emit, args=("sources.sensor", 1))
        producer.start()
        assert entered.wait(timeout=5)

        closer = threading.Thread(target=subscription.close)
        closer.start()
        closer.join(timeout=0.1)
        assert closer.is_alive()

        release.set()
        closer.join(timeout=5)
        producer.join(timeout=5)

        assert not closer.is_alive()
        assert finished == ["delivered"]
        assert subscription.closed
