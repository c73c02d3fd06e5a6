"""
Discover engine: one user's decision queue behind a single lock.

The engine wires a DiscoverQueue, an UndoMemory, a DecisionClassifier and a
ReplenishmentController around an injected ActionDispatcher. All inbound
events and the fetch-results path run in the same critical section, so a
pop followed by its dispatch and replenishment check can never interleave
with a push_back arriving from an earlier fetch.

Usage:
    engine = DiscoverEngine(dispatcher)
    engine.start()                   # asks for the first batch
    engine.append_candidates([1, 2, 3])
    engine.gesture_end("left")       # like 3
    engine.undo()                    # 3 is current again
"""

import threading
from typing import Iterable, List, Optional, Union

from core.logging import get_logger
from discover.classifier import DecisionClassifier
from discover.models import (
    ActionDispatcher,
    CandidateId,
    Decision,
    EngineSnapshot,
    GestureOutcome,
    Intent,
    PushResult,
    ReplenishmentAction,
)
from discover.queue import DiscoverQueue
from discover.replenishment import ReplenishmentController, ReplenishmentPolicy
from discover.undo import UndoMemory


logger = get_logger(__name__)


class DiscoverEngine:
    """
    Thread-safe facade over the decision queue components.

    Args:
        dispatcher: Collaborator performing the I/O behind each intent
        policy: Replenishment policy (defaults to a low-water mark of 10)
    """

    def __init__(
        self,
        dispatcher: ActionDispatcher,
        policy: Optional[ReplenishmentPolicy] = None,
    ):
        self._dispatcher = dispatcher
        # Re-entrant: a dispatcher may deliver results synchronously from dispatch()
        self._lock = threading.RLock()

        self.queue = DiscoverQueue()
        self.undo_memory = UndoMemory()
        self.replenishment = ReplenishmentController(
            self.queue, self.undo_memory, self._dispatch, policy
        )
        self.classifier = DecisionClassifier(
            self.queue, self.undo_memory, self._dispatch, self.replenishment
        )

    def _dispatch(self, intent: Intent) -> None:
        # Dispatcher failures must not leave the queue half-updated
        try:
            self._dispatcher.dispatch(intent)
        except Exception:
            logger.exception(
                "Intent dispatch failed",
                intent=intent.kind.value,
                candidate_id=intent.candidate_id,
            )

    # =========================================================================
    # Inbound events
    # =========================================================================

    def start(self) -> Optional[ReplenishmentAction]:
        """Engine start: request candidates if the queue is short."""
        with self._lock:
            logger.info("Discover engine started", size=self.queue.size())
            return self.replenishment.check_and_replenish()

    def gesture_end(self, outcome: Union[GestureOutcome, str, None]) -> Decision:
        with self._lock:
            return self.classifier.handle_gesture_end(outcome)

    def manual_reject(self) -> Optional[CandidateId]:
        with self._lock:
            return self.classifier.manual_reject()

    def undo(self) -> Optional[PushResult]:
        with self._lock:
            return self.classifier.undo_last()

    def reset(self) -> ReplenishmentAction:
        with self._lock:
            return self.replenishment.reset_session()

    # =========================================================================
    # Fetch results
    # =========================================================================

    def push_back(self, candidate: CandidateId) -> PushResult:
        with self._lock:
            return self.queue.push_back(candidate)

    def append_candidates(self, candidates: Iterable[CandidateId]) -> List[CandidateId]:
        """
        Append fetched candidates; duplicates are dropped.

        Returns:
            The ids that were actually queued.
        """
        candidates = list(candidates)
        with self._lock:
            accepted = self.queue.extend(candidates)
            size = self.queue.size()

        rejected = len(candidates) - len(accepted)
        logger.debug(
            "Candidates appended",
            accepted=len(accepted),
            duplicates=rejected,
            size=size,
        )
        return accepted

    # =========================================================================
    # Read-only projections
    # =========================================================================

    @property
    def current(self) -> Optional[CandidateId]:
        with self._lock:
            return self.queue.current()

    @property
    def size(self) -> int:
        with self._lock:
            return self.queue.size()

    @property
    def undo_available(self) -> bool:
        with self._lock:
            return self.undo_memory.available

    def snapshot(self) -> EngineSnapshot:
        """Consistent view of current item, size and undo state."""
        with self._lock:
            return EngineSnapshot(
                current=self.queue.current(),
                size=self.queue.size(),
                undo_available=self.undo_memory.available,
                candidates=self.queue.as_tuple(),
            )
