"""Top-N selection with a fixed-capacity min-heap.

Selecting N winners out of M candidates costs O(M log N) and keeps at most
N items alive, instead of sorting all M.
"""

import heapq
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from gitreviewer.models import Stat

T = TypeVar("T")


class _Entry(Generic[T]):
    """Heap entry; ``a < b`` means ``a`` ranks below ``b``.

    Lower score ranks lower. On equal scores a larger tie-break value ranks
    lower, then a later push ranks lower.
    """

    __slots__ = ("score", "tie", "seq", "item")

    def __init__(self, score: float, tie: Any, seq: int, item: T) -> None:
        self.score = score
        self.tie = tie
        self.seq = seq
        self.item = item

    def __lt__(self, other: "_Entry[T]") -> bool:
        if self.score != other.score:
            return self.score < other.score
        if self.tie is not None and self.tie != other.tie:
            return self.tie > other.tie
        return self.seq > other.seq


class BoundedMinHeap(Generic[T]):
    """Keeps the ``capacity`` highest-scoring items pushed into it.

    The root is always the weakest kept item. Equal scores are decided by
    ``tiebreak`` (smaller value ranks higher) when given, and otherwise by
    push order, the earlier item winning. Without ``tiebreak``,
    ``drain_descending`` reproduces a stable descending sort truncated to
    ``capacity``.

    Attributes:
        capacity: Maximum number of items retained (>= 0).
        key: Function returning the score of an item.
        tiebreak: Optional function returning a secondary ordering value.
    """

    def __init__(
        self,
        capacity: int,
        key: Callable[[T], float],
        tiebreak: Callable[[T], Any] | None = None,
    ) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self.key = key
        self.tiebreak = tiebreak
        self._heap: list[_Entry[T]] = []
        self._pushed = 0

    def push(self, item: T) -> bool:
        """Offer an item to the heap.

        Returns:
            True if the item was kept, False if it was rejected.
        """
        tie = self.tiebreak(item) if self.tiebreak is not None else None
        entry = _Entry(self.key(item), tie, self._pushed, item)
        self._pushed += 1

        if self.capacity == 0:
            return False
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, entry)
            return True
        if self._heap[0] < entry:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.push(item)

    def peek_min(self) -> T | None:
        """Weakest kept item, or None when empty."""
        if not self._heap:
            return None
        return self._heap[0].item

    def drain_descending(self) -> list[T]:
        """Remove and return every kept item, highest rank first."""
        entries = sorted(self._heap, reverse=True)
        self._heap = []
        return [entry.item for entry in entries]

    def __len__(self) -> int:
        return len(self._heap)


def select_top_n(
    n: int,
    stats: Iterable[Stat],
    tiebreak: Callable[[Stat], Any] | None = None,
) -> list[Stat]:
    """Return the ``n`` highest-scoring stats, descending.

    Ties are ordered by ``tiebreak`` when given, otherwise they keep their
    input order. ``n == 0`` or empty input yields an empty list; ``n``
    larger than the input yields everything, sorted.

    Raises:
        ValueError: If ``n`` is negative.
    """
    heap: BoundedMinHeap[Stat] = BoundedMinHeap(
        n,
        key=lambda stat: stat.score,
        tiebreak=tiebreak,
    )
    heap.extend(stats)
    return heap.drain_descending()


__all__ = ["BoundedMinHeap", "select_top_n"]
