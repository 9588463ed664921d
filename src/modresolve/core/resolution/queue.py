"""A FIFO work queue that ignores items it already holds."""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable, Iterable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class UniqueQueue(Generic[T]):
    """FIFO queue where each item is present at most once.

    Adding an item that is already queued is a no-op and keeps its original
    position. Once an item is popped it may be queued again.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._queue: deque[T] = deque()
        self._members: set[T] = set()
        self.extend(items)

    def add(self, item: T) -> bool:
        """Queue *item* unless already queued. Returns whether it was added."""
        if item in self._members:
            return False
        self._members.add(item)
        self._queue.append(item)
        return True

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def pop(self) -> T:
        """Remove and return the oldest item.

        Raises:
            IndexError: If the queue is empty.
        """
        item = self._queue.popleft()
        self._members.discard(item)
        return item

    def __contains__(self, item: object) -> bool:
        return item in self._members

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._queue))
