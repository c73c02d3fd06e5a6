"""
Tests for the discover session registry.
"""

from datetime import datetime, timedelta

import pytest


@pytest.fixture
def manager(sample_catalog):
    from services.session_manager import DiscoverSessionManager

    manager = DiscoverSessionManager(sample_catalog, page_size=5, fetch_workers=1, seed=11)
    yield manager
    manager.shutdown()


class TestSessionLifecycle:

    def test_create_session_starts_engine(self, manager):
        session = manager.create_session()
        session.dispatcher.drain(timeout=5)

        assert session.engine.size == 5
        assert manager.get_session(session.session_id) is session

    def test_sessions_are_isolated(self, manager):
        first = manager.create_session()
        second = manager.create_session()
        first.dispatcher.drain(timeout=5)
        second.dispatcher.drain(timeout=5)

        first.engine.gesture_end("left")

        assert first.engine.undo_available is True
        assert second.engine.undo_available is False
        assert second.dispatcher.wishlist == ()

    def test_unknown_session(self, manager):
        from core.errors import SessionNotFoundError

        assert manager.get_session("missing") is None
        with pytest.raises(SessionNotFoundError) as exc_info:
            manager.require_session("missing")
        assert exc_info.value.code == "SESSION_NOT_FOUND"

    def test_delete_session(self, manager):
        session = manager.create_session()

        assert manager.delete_session(session.session_id) is True
        assert manager.get_session(session.session_id) is None
        assert manager.delete_session(session.session_id) is False

    def test_to_dict_includes_params(self, manager):
        session = manager.create_session()
        session.dispatcher.drain(timeout=5)

        state = session.to_dict()

        assert state["session_id"] == session.session_id
        assert state["size"] == 5
        assert set(state["params"]) == {"year", "sort_by", "page"}


class TestExpiry:

    def _age(self, session, seconds):
        session.updated_at = datetime.utcnow() - timedelta(seconds=seconds)

    def test_expired_session_is_removed_on_access(self, sample_catalog):
        from services.session_manager import DiscoverSessionManager

        manager = DiscoverSessionManager(sample_catalog, ttl_seconds=60)
        try:
            session = manager.create_session()
            self._age(session, 120)

            assert manager.get_session(session.session_id) is None
            assert manager.get_stats()["sessions"] == 0
        finally:
            manager.shutdown()

    def test_clear_expired(self, sample_catalog):
        from services.session_manager import DiscoverSessionManager

        manager = DiscoverSessionManager(sample_catalog, ttl_seconds=60)
        try:
            old = manager.create_session()
            fresh = manager.create_session()
            self._age(old, 120)

            assert manager.clear_expired() == 1
            assert manager.get_session(fresh.session_id) is fresh
        finally:
            manager.shutdown()

    def test_access_extends_lifetime(self, manager):
        session = manager.create_session()
        self._age(session, 10)
        before = session.updated_at

        manager.get_session(session.session_id)

        assert session.updated_at > before


class TestFromSettings:

    def test_from_settings_uses_configured_values(self, sample_catalog):
        from config.settings import get_settings_for_testing
        from services.session_manager import DiscoverSessionManager

        settings = get_settings_for_testing(low_water_mark=4, fetch_page_size=3)
        manager = DiscoverSessionManager.from_settings(settings, catalog=sample_catalog)
        try:
            session = manager.create_session()
            session.dispatcher.drain(timeout=5)

            assert manager.get_stats()["low_water_mark"] == 4
            assert session.engine.size == 3
        finally:
            manager.shutdown()

    def test_from_settings_loads_catalog_file(self, tmp_path):
        import json
        from config.settings import get_settings_for_testing
        from services.session_manager import DiscoverSessionManager

        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"id": i, "year": 2020} for i in range(8)]))

        settings = get_settings_for_testing(catalog_path=str(path))
        manager = DiscoverSessionManager.from_settings(settings)
        try:
            assert manager.get_stats()["catalog_items"] == 8
        finally:
            manager.shutdown()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
