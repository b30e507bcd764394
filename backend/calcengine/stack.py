"""
Growable LIFO container used by the shunting-yard parser.

Capacity grows by a fixed increment each time it is exhausted. The backing
storage is a plain list; ``capacity`` only tracks the growth policy.
"""

from __future__ import annotations

import sys
from typing import Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_CAPACITY = 10
GROWTH_INCREMENT = 32


class Stack(Generic[T]):
    """
    Last-in first-out container.

    Example:
        stack = Stack()
        stack.push(3)
        stack.push(5)
        stack.pop()   # 5
        stack.pop()   # 3
        stack.pop()   # None
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, growth: int = GROWTH_INCREMENT):
        if capacity < 0:
            raise ValueError(f"Stack capacity must be non-negative, got {capacity}")
        if capacity > sys.maxsize:
            raise OverflowError("Initial allocation too large")
        if growth < 1:
            raise ValueError(f"Stack growth increment must be positive, got {growth}")

        self._items: List[T] = []
        self._capacity = capacity
        self._growth = growth
        self.grow_count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def growth(self) -> int:
        return self._growth

    def push(self, value: T) -> None:
        """Insert an element at the top of the stack."""
        if len(self._items) == self._capacity:
            self._grow()
        self._items.append(value)

    def pop(self) -> Optional[T]:
        """Remove and return the top element, or None when empty."""
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[T]:
        """Return the top element without removing it, or None when empty."""
        if not self._items:
            return None
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> List[T]:
        """Release every element in LIFO order and return them."""
        released = []
        while self._items:
            released.append(self._items.pop())
        return released

    def _grow(self) -> None:
        new_capacity = self._capacity + self._growth
        if new_capacity > sys.maxsize:
            raise OverflowError("Capacity overflow")
        self._capacity = new_capacity
        self.grow_count += 1

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        # Top to bottom, matching pop order
        return reversed(self._items)

    def __enter__(self) -> "Stack[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return f"Stack({self._items!r}, capacity={self._capacity})"
