"""
Turns gesture-end outcomes, reject taps and undo taps into queue mutations
and decision intents.

    LEFT  -> LIKE -> record-as-liked(current)
    RIGHT -> SEEN -> record-as-seen(current)
    NONE  -> nothing happens

Every removal fills the undo slot and is followed by a replenishment check.
Undo re-queues the id but never "un-records" a decision.
"""

from typing import Callable, Optional, Union

from core.errors import InvalidOutcomeError
from core.logging import get_logger
from discover.models import (
    CandidateId,
    Decision,
    GestureOutcome,
    Intent,
    OUTCOME_TO_DECISION,
    PushResult,
)
from discover.queue import DiscoverQueue
from discover.replenishment import ReplenishmentController
from discover.undo import UndoMemory


logger = get_logger(__name__)


def parse_outcome(outcome: Union[GestureOutcome, str, None]) -> GestureOutcome:
    """Accept an enum member, its string value, or None (treated as NONE)."""
    if isinstance(outcome, GestureOutcome):
        return outcome
    if outcome is None:
        return GestureOutcome.NONE
    if isinstance(outcome, str):
        try:
            return GestureOutcome(outcome.strip().lower())
        except ValueError:
            pass
    raise InvalidOutcomeError(outcome)


class DecisionClassifier:
    """
    Applies user decisions to the queue.

    Args:
        queue: Queue holding the candidates
        undo: Single-slot undo memory
        dispatch: Callable that forwards an intent to the dispatcher
        replenishment: Controller consulted after every removal
    """

    def __init__(
        self,
        queue: DiscoverQueue,
        undo: UndoMemory,
        dispatch: Callable[[Intent], None],
        replenishment: ReplenishmentController,
    ):
        self.queue = queue
        self.undo = undo
        self.replenishment = replenishment
        self._dispatch = dispatch

    def handle_gesture_end(self, outcome: Union[GestureOutcome, str, None]) -> Decision:
        """
        Classify a finished drag and apply it to the current candidate.

        Returns:
            The decision applied; Decision.NONE when nothing changed.
        """
        decision = OUTCOME_TO_DECISION[parse_outcome(outcome)]
        if decision is Decision.NONE:
            return Decision.NONE

        candidate = self.queue.current()
        if candidate is None:
            logger.debug("Gesture ignored, queue is empty", decision=decision.value)
            return Decision.NONE

        self.undo.record(candidate)
        self._dispatch(Intent.record(decision, candidate))
        self.queue.pop_current()

        logger.info(
            "Decision recorded",
            candidate_id=candidate,
            decision=decision.value,
            size=self.queue.size(),
        )
        self.replenishment.check_and_replenish()
        return decision

    def manual_reject(self) -> Optional[CandidateId]:
        """Discard the current candidate without recording a decision."""
        candidate = self.queue.current()
        if candidate is None:
            logger.debug("Reject ignored, queue is empty")
            return None

        self.undo.record(candidate)
        self.queue.pop_current()

        logger.info("Candidate rejected", candidate_id=candidate, size=self.queue.size())
        self.replenishment.check_and_replenish()
        return candidate

    def undo_last(self) -> Optional[PushResult]:
        """
        Put the last removed candidate back on top of the queue.

        Returns:
            None when there was nothing to undo, PushResult.DUPLICATE when a
            fetch already brought the id back, PushResult.ACCEPTED otherwise.
        """
        candidate = self.undo.consume()
        if candidate is None:
            return None

        if candidate in self.queue:
            logger.info("Undo skipped, candidate already queued", candidate_id=candidate)
            return PushResult.DUPLICATE

        self._dispatch(Intent.push_back(candidate))
        result = self.queue.push_back(candidate)
        logger.info("Undo applied", candidate_id=candidate, size=self.queue.size())
        return result
