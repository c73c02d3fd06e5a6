"""
Application constants and algorithm configuration.

These are values that don't change based on environment but may need
to be tuned or referenced across the codebase.
"""

from dataclasses import dataclass, field
from typing import Tuple


# =============================================================================
# Replenishment Configuration
# =============================================================================

@dataclass(frozen=True)
class ReplenishmentConfig:
    """Defaults for keeping the discover queue stocked."""

    # Below this many queued candidates a fetch-more intent is dispatched
    LOW_WATER_MARK: int = 10

    # Candidates returned by one catalog page
    PAGE_SIZE: int = 20


DEFAULT_REPLENISHMENT_CONFIG = ReplenishmentConfig()


# =============================================================================
# Discover Parameters
# =============================================================================

@dataclass(frozen=True)
class DiscoverParamsConfig:
    """Allowed values for the random discover parameters."""

    SORT_OPTIONS: Tuple[str, ...] = field(default_factory=lambda: (
        "popularity.desc",
        "rating.desc",
        "year.desc",
    ))

    DEFAULT_SORT: str = "popularity.desc"
    FIRST_PAGE: int = 1


DEFAULT_DISCOVER_PARAMS_CONFIG = DiscoverParamsConfig()
