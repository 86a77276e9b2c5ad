"""
CaptureRecorder - Event history capture for test assertions

Records a stream of domain events as an immutable chain of named
observations that can be inspected and compared for equality.
"""

from capture_recorder.core.capture import Capture, capture
from capture_recorder.core.errors import (
    RecorderError,
    RecorderAlreadyStartedError,
    RecorderAlreadyStoppedError,
)
from capture_recorder.core.events import Emitter, Event
from capture_recorder.core.names import Name
from capture_recorder.core.recorder import Recorder, Recording, recorder
from capture_recorder.sources import InMemorySource, Source, Subscription

__version__ = "0.1.0"
__all__ = [
    "Capture",
    "capture",
    "RecorderError",
    "RecorderAlreadyStartedError",
    "RecorderAlreadyStoppedError",
    "Emitter",
    "Event",
    "Name",
    "Recorder",
    "Recording",
    "recorder",
    "InMemorySource",
    "Source",
    "Subscription",
]
