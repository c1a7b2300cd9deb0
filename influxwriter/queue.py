"""Batches of line-protocol data and the bounded retry queue."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass


@dataclass(eq=False)
class Batch:
    """Lines to send with retry bookkeeping.

    ``expires`` is a ``time.monotonic()`` timestamp.
    """

    data: str
    retry_attempts: int = 0
    evicted: bool = False
    expires: float = 0.0


def new_batch(data: str, expire_delay_ms: int) -> Batch:
    """Create a batch that expires ``expire_delay_ms`` milliseconds from now."""
    return Batch(data=data, expires=time.monotonic() + expire_delay_ms / 1000)


class RetryQueue:
    """FIFO of batches holding at most ``limit`` items; the oldest is dropped."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._items: deque[Batch] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def push(self, batch: Batch) -> bool:
        """Append a batch; return True if the oldest batch had to be dropped."""
        overwritten = False
        if len(self._items) == self.limit:
            self.pop()
            overwritten = True
        self._items.append(batch)
        return overwritten

    def pop(self) -> Batch | None:
        """Remove and return the oldest batch, marking it evicted."""
        if not self._items:
            return None
        batch = self._items.popleft()
        batch.evicted = True
        return batch

    def first(self) -> Batch | None:
        """Return the oldest batch without removing it."""
        return self._items[0] if self._items else None

    def is_empty(self) -> bool:
        """Return True if the queue holds no batches."""
        return not self._items