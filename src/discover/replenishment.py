"""
Low-water-mark replenishment of the discover queue.

The controller only decides when more candidates are needed. Fetching is
done by the dispatcher, which later appends results through push_back.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from config.constants import DEFAULT_REPLENISHMENT_CONFIG
from core.logging import get_logger
from discover.models import Intent, ReplenishmentAction
from discover.queue import DiscoverQueue
from discover.undo import UndoMemory


logger = get_logger(__name__)


@dataclass(frozen=True)
class ReplenishmentPolicy:
    """When to ask for more candidates."""
    low_water_mark: int = DEFAULT_REPLENISHMENT_CONFIG.LOW_WATER_MARK

    def __post_init__(self):
        if self.low_water_mark < 1:
            raise ValueError(f"low_water_mark must be >= 1, got {self.low_water_mark}")

    def needs_more(self, size: int) -> bool:
        return size < self.low_water_mark


class ReplenishmentController:
    """
    Keeps the queue from running dry and restarts discovery sessions.

    Args:
        queue: The queue being watched
        undo: Undo memory, cleared on session reset
        dispatch: Callable that forwards an intent to the dispatcher
        policy: Low-water-mark policy
    """

    def __init__(
        self,
        queue: DiscoverQueue,
        undo: UndoMemory,
        dispatch: Callable[[Intent], None],
        policy: Optional[ReplenishmentPolicy] = None,
    ):
        self.queue = queue
        self.undo = undo
        self.policy = policy or ReplenishmentPolicy()
        self._dispatch = dispatch

    def check_and_replenish(self) -> Optional[ReplenishmentAction]:
        """Dispatch one fetch-more intent if the queue is below the low-water mark."""
        size = self.queue.size()
        if not self.policy.needs_more(size):
            return None

        logger.debug(
            "Queue below low-water mark",
            size=size,
            low_water_mark=self.policy.low_water_mark,
        )
        self._dispatch(Intent.fetch_more())
        return ReplenishmentAction.FETCH_MORE

    def reset_session(self) -> ReplenishmentAction:
        """Drop every queued candidate and the undo slot, then refetch."""
        dropped = self.queue.size()
        self._dispatch(Intent.reset_remote_state())
        self.queue.reset()
        self.undo.clear()
        logger.info("Discover session reset", dropped=dropped)

        # The queue is empty now, so this always fetches
        self.check_and_replenish()
        return ReplenishmentAction.RESET_AND_REFETCH
