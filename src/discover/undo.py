"""Single-slot memory of the last candidate removed by a decision or reject."""

from typing import Optional

from discover.models import CandidateId


class UndoMemory:
    """Holds at most one candidate id. A new record overwrites the old one."""

    def __init__(self):
        self._candidate: Optional[CandidateId] = None

    def record(self, candidate: CandidateId) -> None:
        self._candidate = candidate

    def peek(self) -> Optional[CandidateId]:
        return self._candidate

    def consume(self) -> Optional[CandidateId]:
        """Return the stored id and empty the slot."""
        candidate, self._candidate = self._candidate, None
        return candidate

    def clear(self) -> None:
        self._candidate = None

    @property
    def available(self) -> bool:
        return self._candidate is not None

    def __repr__(self) -> str:
        return f"UndoMemory({self._candidate!r})"
