"""Max-ordered priority queue backing the admission pool's waiting list.

Example:
    >>> queue = PriorityQueue()
    >>> queue.insert(10, "small")
    >>> queue.insert(1000, "large")
    >>> queue.extract_max()
    'large'
"""

import heapq
import itertools
from typing import Generic, List, Tuple, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Binary max-heap keyed by a numeric weight.

    Both insert and extract_max run in O(log n). heapq is a min-heap, so
    weights are stored negated. Items with equal weights come out in
    insertion order (FIFO): every entry carries a monotonically increasing
    sequence number that breaks ties before the item itself is compared.
    """

    def __init__(self) -> None:
        self._heap: List[Tuple[float, int, T]] = []
        self._counter = itertools.count()

    def insert(self, weight: float, item: T) -> None:
        heapq.heappush(self._heap, (-weight, next(self._counter), item))

    def extract_max(self) -> T:
        """Remove and return the item with the highest weight.

        Raises:
            IndexError: If the queue is empty.
        """
        if not self._heap:
            raise IndexError("Cannot extract from an empty priority queue")
        _, _, item = heapq.heappop(self._heap)
        return item

    def is_empty(self) -> bool:
        return not self._heap

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)
