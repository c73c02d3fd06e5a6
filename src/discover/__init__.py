"""
Decision queue engine for one-at-a-time candidate discovery.

- DiscoverQueue: duplicate-free buffer, tail is the current item
- DecisionClassifier: gesture outcomes -> decisions, reject, undo
- ReplenishmentController: low-water-mark fetches and session resets
- DiscoverEngine: lock-protected facade wiring them to a dispatcher
"""
from .models import (
    ActionDispatcher,
    CandidateId,
    Decision,
    EngineSnapshot,
    GestureOutcome,
    Intent,
    IntentKind,
    PushResult,
    ReplenishmentAction,
)
from .queue import DiscoverQueue
from .undo import UndoMemory
from .replenishment import ReplenishmentController, ReplenishmentPolicy
from .classifier import DecisionClassifier, parse_outcome
from .engine import DiscoverEngine

__all__ = [
    'ActionDispatcher', 'CandidateId', 'Decision', 'EngineSnapshot',
    'GestureOutcome', 'Intent', 'IntentKind', 'PushResult', 'ReplenishmentAction',
    'DiscoverQueue', 'UndoMemory',
    'ReplenishmentController', 'ReplenishmentPolicy',
    'DecisionClassifier', 'parse_outcome',
    'DiscoverEngine',
]
