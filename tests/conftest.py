"""
Pytest configuration and shared fixtures for the discover queue tests.
"""
import os
import sys
from typing import Callable, List, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))


# ============================================================================
# Fixtures: Test Doubles
# ============================================================================

class RecordingDispatcher:
    """ActionDispatcher that only records the intents it receives."""

    def __init__(self, on_dispatch: Optional[Callable] = None):
        self.intents: List = []
        self._on_dispatch = on_dispatch

    def dispatch(self, intent) -> None:
        self.intents.append(intent)
        if self._on_dispatch is not None:
            self._on_dispatch(intent)

    def kinds(self) -> List[str]:
        return [intent.kind.value for intent in self.intents]

    def count(self, kind: str) -> int:
        return self.kinds().count(kind)

    def clear(self) -> None:
        self.intents.clear()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def make_engine(dispatcher):
    """
    Factory for engines pre-filled with candidates (last id is current).

    The recorded intents are cleared so tests only see what they trigger.
    """
    from discover import DiscoverEngine, ReplenishmentPolicy

    def _make(candidates=(), low_water_mark: int = 10):
        engine = DiscoverEngine(dispatcher, ReplenishmentPolicy(low_water_mark=low_water_mark))
        engine.append_candidates(candidates)
        dispatcher.clear()
        return engine

    return _make


# ============================================================================
# Fixtures: Catalog
# ============================================================================

@pytest.fixture
def sample_catalog_items() -> list:
    """60 items spread over three years with distinct popularity/rating."""
    from services.catalog import CatalogItem

    items = []
    for i in range(60):
        items.append(CatalogItem(
            id=i,
            title=f"Item {i}",
            year=2017 + (i % 3),
            popularity=float(100 - i),
            rating=float(i % 10),
        ))
    return items


@pytest.fixture
def sample_catalog(sample_catalog_items):
    from services.catalog import CandidateCatalog
    return CandidateCatalog(sample_catalog_items)


@pytest.fixture
def catalog_dispatcher(sample_catalog):
    from services.discover_dispatcher import CatalogDispatcher

    dispatcher = CatalogDispatcher(sample_catalog, page_size=5, max_workers=1, seed=3)
    yield dispatcher
    dispatcher.shutdown()


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "slow: marks tests as slow")
