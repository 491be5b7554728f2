"""Bounded FIFO queue of processes."""

from __future__ import annotations

from typing import Any, Optional

MAX_QUEUE_SIZE = 10


class ProcessQueue:
    """FIFO of at most ``MAX_QUEUE_SIZE`` processes with an MLQ slot counter."""

    def __init__(self, capacity: int = MAX_QUEUE_SIZE) -> None:
        self.capacity = capacity
        self.fixed_slot = 0
        self._items: list[Any] = []

    def enqueue(self, proc: Any) -> None:
        """Append ``proc``; ``None`` and anything beyond capacity are dropped."""
        if proc is None or len(self._items) >= self.capacity:
            return
        self._items.append(proc)

    def dequeue(self) -> Optional[Any]:
        """Remove and return the oldest process, or ``None`` when empty."""
        if not self._items:
            return None
        return self._items.pop(0)

    def empty(self) -> bool:
        """True when the queue holds no process."""
        return not self._items

    def __len__(self) -> int:
        return len(self._items)