"""Event sources for CaptureRecorder."""

from capture_recorder.sources.base import Listener, Source, Subscription
from capture_recorder.sources.memory import InMemorySource

__all__ = ["Listener", "Source", "Subscription", "InMemorySource"]
