"""
Name identity layer for CaptureRecorder.

Captures compare names by identity, so names handed out here are interned:
``Name.of("order.item")`` always returns the same object for the same path.
"""

import threading
import weakref
from typing import Any, Optional, Protocol, runtime_checkable


class Name:
    """
    An interned, dot-separated hierarchical name.

    Example:
        ```python
        item = Name.of("order", "item")
        assert item is Name.of("order.item")
        assert item.enclosure is Name.of("order")
        ```
    """

    __slots__ = ("_path", "_parts", "_enclosure", "__weakref__")

    _SEPARATOR = "."
    # Names nobody holds any more drop out of the table.
    _interned: "weakref.WeakValueDictionary[str, Name]" = weakref.WeakValueDictionary()
    _lock = threading.Lock()

    def __init__(self, parts: tuple[str, ...], enclosure: Optional["Name"]) -> None:
        self._parts = parts
        self._path = self._SEPARATOR.join(parts)
        self._enclosure = enclosure

    @classmethod
    def of(cls, *parts: str) -> "Name":
        """
        Return the interned name for the given path parts.

        Each part may itself contain dots; ``Name.of("a.b", "c")`` is the
        same object as ``Name.of("a", "b", "c")``.

        Raises:
            ValueError: If no parts are given or any segment is blank
        """
        segments: list[str] = []
        for part in parts:
            segments.extend(str(part).split(cls._SEPARATOR))

        if not segments:
            raise ValueError("A name requires at least one part")
        if any(not segment.strip() for segment in segments):
            raise ValueError(f"Invalid name: {'.'.join(segments)!r}")

        with cls._lock:
            name: Optional[Name] = None
            for depth in range(1, len(segments) + 1):
                path = cls._SEPARATOR.join(segments[:depth])
                interned = cls._interned.get(path)
                if interned is None:
                    interned = cls(tuple(segments[:depth]), name)
                    cls._interned[path] = interned
                name = interned
            return name  # type: ignore[return-value]

    @property
    def path(self) -> str:
        """The full dotted path."""
        return self._path

    @property
    def parts(self) -> tuple[str, ...]:
        return self._parts

    @property
    def value(self) -> str:
        """The last segment of the path."""
        return self._parts[-1]

    @property
    def enclosure(self) -> Optional["Name"]:
        """The enclosing name, or None for a root name."""
        return self._enclosure

    def child(self, part: str) -> "Name":
        return Name.of(self._path, part)

    def __setattr__(self, key: str, value: Any) -> None:
        if hasattr(self, "_enclosure"):
            raise AttributeError("Name is immutable")
        object.__setattr__(self, key, value)

    def __reduce__(self) -> tuple[Any, ...]:
        # Unpickling must go through the intern table to keep identity.
        return (Name.of, (self._path,))

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"Name({self._path!r})"


@runtime_checkable
class Reference(Protocol):
    """Anything that resolves to a name."""

    @property
    def name(self) -> Any: ...


@runtime_checkable
class Referent(Protocol):
    """Anything that resolves to a reference."""

    @property
    def reference(self) -> Reference: ...

def resolve_name(subject: Any) -> Any:
    """
    Resolve a referent or reference down to its name.

    A reference is only followed when it leads to a ``Name``. Anything else,
    including objects that merely carry an unrelated ``name`` attribute
    (paths, records), is an opaque name and returned as-is.
    """
    if isinstance(subject, Name):
        return subject

    candidate = subject.reference if isinstance(subject, Referent) else subject
    if isinstance(candidate, Reference):
        name = candidate.name
        if isinstance(name, Name):
            return name
    return subject
