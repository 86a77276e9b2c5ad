"""Exceptions raised by CaptureRecorder."""


class RecorderError(RuntimeError):
    """Base class for recorder lifecycle misuse."""


class RecorderAlreadyStartedError(RecorderError):
    """Raised when ``start`` is called on a recorder that is already recording."""

    def __init__(self) -> None:
        super().__init__("Recorder already started")


class RecorderAlreadyStoppedError(RecorderError):
    """Raised when ``stop`` is called on a recorder that is not recording."""

    def __init__(self) -> None:
        super().__init__("Recorder already stopped")
