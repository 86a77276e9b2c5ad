"""
Capture chains for CaptureRecorder.

A capture is an immutable node holding one named observation and a link to
the observation recorded before it. Chains grow by prepending, so the newest
capture is the head and following ``previous`` walks backward in time.
Nodes are never mutated, which makes it safe for many chains to share a
common tail.
"""

from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

from capture_recorder.core.names import resolve_name

R = TypeVar("R")

_UNSET: Any = object()

# Hash contribution of values that cannot be hashed.
_UNHASHABLE = 0x2F1C


def _hash_or(obj: Any, fallback: int) -> int:
    try:
        return hash(obj)
    except TypeError:
        return fallback


class Capture(Generic[R]):
    """
    One named observation in a backward-linked history chain.

    Example:
        ```python
        origin = capture(Name.of("door"), "closed")
        head = origin.to("open").to("closed")

        assert head.size == 3
        assert head.previous.previous is origin
        assert [c.value for c in head] == ["closed", "open", "closed"]
        ```
    """

    __slots__ = ("_name", "_value", "_previous", "_index", "_hash")

    def __init__(
        self,
        name: Any,
        value: R,
        previous: Optional["Capture[R]"] = None,
    ) -> None:
        """
        Build a capture node.

        Args:
            name: Identifier of the entity observed, compared by identity
            value: The observed value
            previous: The capture observed immediately before, or None
        """
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_previous", previous)
        object.__setattr__(
            self, "_index", previous._index + 1 if previous is not None else 0
        )
        object.__setattr__(
            self,
            "_hash",
            hash((
                _hash_or(name, id(name)),
                _hash_or(value, _UNHASHABLE),
                previous._hash if previous is not None else None,
            )),
        )

    @property
    def name(self) -> Any:
        return self._name

    @property
    def value(self) -> R:
        return self._value

    @property
    def previous(self) -> Optional["Capture[R]"]:
        """The capture recorded immediately before this one, or None at the origin."""
        return self._previous

    @property
    def index(self) -> int:
        """Zero-based position of this capture counted from the origin."""
        return self._index

    @property
    def size(self) -> int:
        """Number of captures from this one back to the origin, inclusive."""
        return self._index + 1

    def to(self, subject: Any, value: Any = _UNSET) -> "Capture[R]":
        """
        Extend the chain with a new head.

        ``to(name, value)`` records a value for the given name (a Name, a
        reference or a referent). ``to(value)`` records a new value for this
        capture's own name.

        Returns:
            A new capture whose ``previous`` is this capture
        """
        if value is _UNSET:
            return Capture(self._name, subject, self)
        return Capture(resolve_name(subject), value, self)

    def stream(self) -> Iterator["Capture[R]"]:
        """Lazily walk from this capture back to the origin."""
        current: Optional[Capture[R]] = self
        while current is not None:
            yield current
            current = current._previous

    def values(self) -> list[R]:
        """Captured values, newest first."""
        return [node._value for node in self]

    def as_records(self) -> list[dict[str, Any]]:
        """Diagnostic view of the chain, oldest first."""
        return [
            {"index": node._index, "name": node._name, "value": node._value}
            for node in reversed(self)
        ]

    def __iter__(self) -> Iterator["Capture[R]"]:
        return self.stream()

    def __reversed__(self) -> Iterator["Capture[R]"]:
        return reversed(list(self.stream()))

    def __len__(self) -> int:
        return self._index + 1

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Capture):
            return NotImplemented
        if self._index != other._index:
            return False

        left: Optional[Capture[Any]] = self
        right: Optional[Capture[Any]] = other
        while left is not None and right is not None:
            if left is right:
                # Shared tail
                return True
            if left._name is not right._name:
                return False
            if left._value is not right._value and left._value != right._value:
                return False
            left, right = left._previous, right._previous
        return True

    def __hash__(self) -> int:
        return self._hash

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError("Capture is immutable")

    def __delattr__(self, key: str) -> None:
        raise AttributeError("Capture is immutable")

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, ([(node._name, node._value) for node in reversed(self)],))

    def __repr__(self) -> str:
        opened = "".join(
            f"Capture(name={node._name!s}, value={node._value!r}, previous="
            for node in self
        )
        return f"{opened}None{')' * self.size}"


def _rebuild(entries: Iterable[tuple[Any, Any]]) -> Optional[Capture[Any]]:
    head: Optional[Capture[Any]] = None
    for name, value in entries:
        head = Capture(name, value, head)
    return head


def capture(
    name: Any,
    value: R,
    previous: Optional[Capture[R]] = None,
) -> Capture[R]:
    """
    Create a capture.

    Args:
        name: A Name, reference or referent identifying the observed entity
        value: The observed value
        previous: The capture prior to this one, or None for a new origin

    Returns:
        A new origin capture, or ``previous.to(name, value)``
    """
    if previous is None:
        return Capture(resolve_name(name), value)
    return previous.to(name, value)
