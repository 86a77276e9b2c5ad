"""
Event models for CaptureRecorder.

Defines what a source delivers to its listeners: an emittance (the payload)
together with the emitter that produced it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from capture_recorder.core.names import Name


class Emitter(BaseModel):
    """The identified entity that produced an event."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: Name = Field(description="Interned name of the emitting entity")

    def __str__(self) -> str:
        return str(self.name)


class Event(BaseModel):
    """A single delivery from a source to a listener."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    emitter: Emitter = Field(description="Entity the event is about")
    emittance: Any = Field(default=None, description="The event payload")

    @classmethod
    def of(cls, name: Name, emittance: Any) -> "Event":
        """Build an event for the emitter with the given name."""
        return cls(emitter=Emitter(name=name), emittance=emittance)
