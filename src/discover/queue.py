"""
The discover queue: an ordered buffer of candidate ids with stack-top access.

The tail of the sequence is the current item. New candidates are appended
at the tail, so a freshly pushed id is presented next.
"""

from typing import Iterable, Iterator, List, Optional, Set, Tuple

from discover.models import CandidateId, PushResult


class DiscoverQueue:
    """
    Ordered, duplicate-free sequence of candidate ids.

    Not thread-safe on its own; DiscoverEngine serializes access.

    Usage:
        queue = DiscoverQueue()
        queue.push_back("a")
        queue.push_back("b")
        queue.current()      # "b"
        queue.pop_current()  # "b"
    """

    def __init__(self, candidates: Iterable[CandidateId] = ()):
        self._items: List[CandidateId] = []
        self._index: Set[CandidateId] = set()
        self.extend(candidates)

    def current(self) -> Optional[CandidateId]:
        """Return the item presented right now, or None when empty."""
        if not self._items:
            return None
        return self._items[-1]

    def pop_current(self) -> Optional[CandidateId]:
        """Remove and return the current item, or None when empty."""
        if not self._items:
            return None
        candidate = self._items.pop()
        self._index.discard(candidate)
        return candidate

    def push_back(self, candidate: CandidateId) -> PushResult:
        """
        Append a candidate so it becomes the current item.

        An id already in the queue is rejected without changing anything.
        """
        if candidate in self._index:
            return PushResult.DUPLICATE
        self._items.append(candidate)
        self._index.add(candidate)
        return PushResult.ACCEPTED

    def extend(self, candidates: Iterable[CandidateId]) -> List[CandidateId]:
        """Push each candidate in order; return the ones that were accepted."""
        return [c for c in candidates if self.push_back(c) is PushResult.ACCEPTED]

    def reset(self) -> None:
        self._items.clear()
        self._index.clear()

    def size(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def as_tuple(self) -> Tuple[CandidateId, ...]:
        """Ids from bottom to top (the last element is current)."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._index

    def __iter__(self) -> Iterator[CandidateId]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"DiscoverQueue({self._items!r})"
