"""Core module for CaptureRecorder."""

from capture_recorder.core.capture import Capture, capture
from capture_recorder.core.errors import (
    RecorderError,
    RecorderAlreadyStartedError,
    RecorderAlreadyStoppedError,
)
from capture_recorder.core.events import Emitter, Event
from capture_recorder.core.names import Name, Reference, Referent, resolve_name
from capture_recorder.core.recorder import Recorder, Recording, recorder

__all__ = [
    "Capture",
    "capture",
    "RecorderError",
    "RecorderAlreadyStartedError",
    "RecorderAlreadyStoppedError",
    "Emitter",
    "Event",
    "Name",
    "Reference",
    "Referent",
    "resolve_name",
    "Recorder",
    "Recording",
    "recorder",
]
