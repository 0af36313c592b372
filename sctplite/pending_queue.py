"""Outbound chunks waiting to be assigned a TSN and sent."""

from collections import deque
from typing import Deque, Optional

from .data import PayloadData


class PendingQueueError(RuntimeError):
    """Raised when chunks are popped out of the expected order."""


class PendingBaseQueue:
    """A simple FIFO of chunks."""

    def __init__(self) -> None:
        self._queue: Deque[PayloadData] = deque()

    def push(self, chunk: PayloadData) -> None:
        self._queue.append(chunk)

    def pop(self) -> Optional[PayloadData]:
        """Remove and return the first chunk, or None when empty."""
        return self._queue.popleft() if self._queue else None

    def get(self, index: int) -> Optional[PayloadData]:
        """Return the chunk at ``index``, or None when out of range."""
        if 0 <= index < len(self._queue):
            return self._queue[index]
        return None

    def __len__(self) -> int:
        return len(self._queue)


class PendingQueue:
    """Ordered and unordered FIFOs; unordered wins, but a fragmented message
    is drained from one queue until its ending fragment."""

    def __init__(self) -> None:
        self._unordered = PendingBaseQueue()
        self._ordered = PendingBaseQueue()
        self._n_bytes = 0
        self._selected = False
        self._unordered_is_selected = False

    def push(self, chunk: PayloadData) -> None:
        (self._unordered if chunk.unordered else self._ordered).push(chunk)
        self._n_bytes += len(chunk.user_data)

    def peek(self) -> Optional[PayloadData]:
        """Return the chunk that must be sent next, without removing it."""
        if self._selected:
            queue = self._unordered if self._unordered_is_selected else self._ordered
            return queue.get(0)
        chunk = self._unordered.get(0)
        return chunk if chunk is not None else self._ordered.get(0)

    def _pop_from(self, unordered: bool, chunk: PayloadData) -> PayloadData:
        popped = (self._unordered if unordered else self._ordered).pop()
        if popped is not chunk:
            kind = "unordered" if unordered else "ordered"
            raise PendingQueueError(f"unexpected chunk popped ({kind})")
        return popped

    def pop(self, chunk: PayloadData) -> None:
        """Remove ``chunk``, which must be the one ``peek`` returned."""
        if self._selected:
            popped = self._pop_from(self._unordered_is_selected, chunk)
            if popped.ending_fragment:
                self._selected = False
        else:
            if not chunk.beginning_fragment:
                raise PendingQueueError("unexpected q state (should've been selected)")
            popped = self._pop_from(chunk.unordered, chunk)
            if not popped.ending_fragment:
                self._selected = True
                self._unordered_is_selected = chunk.unordered
        self._n_bytes -= len(chunk.user_data)

    def num_bytes(self) -> int:
        """Total user data bytes waiting."""
        return self._n_bytes

    def __len__(self) -> int:
        return len(self._unordered) + len(self._ordered)