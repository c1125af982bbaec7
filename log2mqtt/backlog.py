"""
Pending Queue
=============

Bounded Context: Pre-flush backlog

Ordered store for log calls issued before a logger instance exists.

Capacity policy:
- capacity=None: unbounded (default); grows until the first flush
- DROP_OLDEST: a full queue evicts its oldest call to admit the new one
- REJECT: a full queue refuses the new call

Threading: not synchronized; the Dispatcher lock serializes access.
"""

from collections import deque
from enum import Enum
from typing import Deque, List, Optional

from .schemas import LogCall


class OverflowPolicy(str, Enum):
    """What a bounded queue does when it is full."""
    DROP_OLDEST = "drop_oldest"
    REJECT = "reject"


class PendingQueue:
    """
    FIFO backlog of LogCall entries.

    Attributes:
        capacity: Maximum number of stored calls (None = unbounded)
        policy: Overflow policy for a bounded queue
        dropped: Number of calls lost to the overflow policy

    Example:
        >>> queue = PendingQueue()
        >>> queue.append(LogCall("hello", Severity.INFO))
        True
        >>> [c.template for c in queue.drain_all()]
        ['hello']
        >>> len(queue)
        0
    """

    def __init__(
        self,
        capacity: Optional[int] = None,
        policy: OverflowPolicy = OverflowPolicy.DROP_OLDEST
    ):
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be >= 1 or None, got {capacity}")

        self.capacity = capacity
        self.policy = OverflowPolicy(policy)
        self.dropped = 0
        self._items: Deque[LogCall] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def is_full(self) -> bool:
        return self.capacity is not None and len(self._items) >= self.capacity

    def append(self, call: LogCall) -> bool:
        """
        Add a call at the tail.

        Returns:
            False if the call was refused (REJECT policy on a full queue),
            True otherwise. Under DROP_OLDEST the new call is always stored
            and the head is evicted instead.
        """
        if self.is_full():
            self.dropped += 1
            if self.policy is OverflowPolicy.REJECT:
                return False
            self._items.popleft()

        self._items.append(call)
        return True

    def drain_all(self) -> List[LogCall]:
        """Return every stored call, oldest first, and leave the queue empty."""
        drained = list(self._items)
        self._items.clear()
        return drained
