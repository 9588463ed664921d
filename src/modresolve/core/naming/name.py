"""Case-insensitive module identifiers."""

from __future__ import annotations

from functools import total_ordering


@total_ordering
class Name:
    """A normalised identifier for a module.

    Two names are equal when they match ignoring case. The original spelling
    is kept for display, since ids are often camel cased for readability.

    Instances are immutable and hashable.
    """

    __slots__ = ("_original", "_normalised")

    EMPTY: Name

    def __init__(self, name: str) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Name requires a str, got {type(name).__name__}")
        self._original = name
        self._normalised = name.lower()

    @classmethod
    def of(cls, value: Name | str) -> Name:
        """Return *value* as a ``Name``, wrapping plain strings."""
        if isinstance(value, Name):
            return value
        return cls(value)

    @property
    def normalised(self) -> str:
        return self._normalised

    def is_empty(self) -> bool:
        return not self._normalised

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Name):
            return self._normalised == other._normalised
        return NotImplemented

    def __lt__(self, other: Name) -> bool:
        if isinstance(other, Name):
            return self._normalised < other._normalised
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._normalised)

    def __str__(self) -> str:
        return self._original

    def __repr__(self) -> str:
        return f"Name({self._original!r})"


Name.EMPTY = Name("")
