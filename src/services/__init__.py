"""
Services module for the collaborators around the discover engine.

Provides the candidate catalog, the catalog-backed intent dispatcher and
session management for discover sessions.
"""

from services.catalog import CandidateCatalog, CatalogItem, load_catalog
from services.discover_dispatcher import CatalogDispatcher, DiscoverParams
from services.session_manager import (
    DiscoverSession,
    DiscoverSessionManager,
    get_discover_session_manager,
    reset_discover_session_manager,
)

__all__ = [
    "CandidateCatalog",
    "CatalogItem",
    "load_catalog",
    "CatalogDispatcher",
    "DiscoverParams",
    "DiscoverSession",
    "DiscoverSessionManager",
    "get_discover_session_manager",
    "reset_discover_session_manager",
]
