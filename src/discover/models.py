"""
Value types shared by the discover queue engine.

Candidates are opaque ids; the engine never looks at item content. The
engine talks to the outside world only through Intent values handed to an
ActionDispatcher.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Tuple, Union


CandidateId = Union[int, str]


class GestureOutcome(Enum):
    """Discrete result reported by the gesture recognizer when a drag ends."""
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


class Decision(Enum):
    """Persisted judgment derived from a gesture outcome."""
    LIKE = "like"
    SEEN = "seen"
    NONE = "none"


OUTCOME_TO_DECISION = {
    GestureOutcome.LEFT: Decision.LIKE,
    GestureOutcome.RIGHT: Decision.SEEN,
    GestureOutcome.NONE: Decision.NONE,
}


class IntentKind(Enum):
    FETCH_MORE = "fetch-more"
    RESET_REMOTE_STATE = "reset-remote-state"
    RECORD_AS_LIKED = "record-as-liked"
    RECORD_AS_SEEN = "record-as-seen"
    PUSH_BACK = "push-back"


@dataclass(frozen=True)
class Intent:
    """A typed request for the dispatcher. Only record/push-back intents carry an id."""
    kind: IntentKind
    candidate_id: Optional[CandidateId] = None

    @classmethod
    def fetch_more(cls) -> "Intent":
        return cls(IntentKind.FETCH_MORE)

    @classmethod
    def reset_remote_state(cls) -> "Intent":
        return cls(IntentKind.RESET_REMOTE_STATE)

    @classmethod
    def record(cls, decision: Decision, candidate_id: CandidateId) -> "Intent":
        if decision is Decision.LIKE:
            return cls(IntentKind.RECORD_AS_LIKED, candidate_id)
        if decision is Decision.SEEN:
            return cls(IntentKind.RECORD_AS_SEEN, candidate_id)
        raise ValueError(f"No record intent for decision {decision.value!r}")

    @classmethod
    def push_back(cls, candidate_id: CandidateId) -> "Intent":
        return cls(IntentKind.PUSH_BACK, candidate_id)


class PushResult(Enum):
    """Outcome of appending a candidate to the queue."""
    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"


class ReplenishmentAction(Enum):
    FETCH_MORE = "fetch-more"
    RESET_AND_REFETCH = "reset-and-refetch"


class ActionDispatcher(Protocol):
    """External collaborator that performs the I/O behind each intent."""

    def dispatch(self, intent: Intent) -> None:
        ...


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only projection of an engine for display."""
    current: Optional[CandidateId]
    size: int
    undo_available: bool
    candidates: Tuple[CandidateId, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "current": self.current,
            "size": self.size,
            "undo_available": self.undo_available,
        }
