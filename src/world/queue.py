# src/world/queue.py
"""FIFO work queue used by breadth-first exploration."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class QueueFullError(OverflowError):
    """Raised when enqueueing into a BoundedQueue at capacity."""


class BoundedQueue(Generic[T]):
    """
    FIFO queue with an optional capacity.

    capacity=None means unbounded. Enqueueing past capacity raises
    QueueFullError rather than silently dropping the oldest item.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be >= 1 or None")
        self.capacity = capacity
        self._items: Deque[T] = deque()

    def enqueue(self, item: T) -> None:
        if self.capacity is not None and len(self._items) >= self.capacity:
            raise QueueFullError(f"queue is at capacity ({self.capacity})")
        self._items.append(item)

    def enqueue_all(self, items: Iterable[T]) -> None:
        for item in items:
            self.enqueue(item)

    def dequeue(self) -> T:
        if not self._items:
            raise IndexError("dequeue from empty queue")
        return self._items.popleft()

    def dequeue_chunk(self, size: int) -> List[T]:
        """Remove and return up to `size` items from the front."""
        chunk: List[T] = []
        while self._items and len(chunk) < size:
            chunk.append(self._items.popleft())
        return chunk

    def peek(self) -> T:
        if not self._items:
            raise IndexError("peek at empty queue")
        return self._items[0]

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
