"""
Unit tests for the low-water-mark replenishment policy and session reset.
"""

import pytest


class TestReplenishmentPolicy:

    def test_default_low_water_mark(self):
        from discover.replenishment import ReplenishmentPolicy

        assert ReplenishmentPolicy().low_water_mark == 10

    def test_needs_more_is_strictly_below(self):
        from discover.replenishment import ReplenishmentPolicy

        policy = ReplenishmentPolicy(low_water_mark=10)
        assert policy.needs_more(9) is True
        assert policy.needs_more(10) is False

    def test_rejects_non_positive_mark(self):
        from discover.replenishment import ReplenishmentPolicy

        with pytest.raises(ValueError):
            ReplenishmentPolicy(low_water_mark=0)


class TestCheckAndReplenish:

    def test_pop_from_nine_dispatches_one_fetch(self, make_engine, dispatcher):
        engine = make_engine(list(range(9)))

        engine.manual_reject()

        assert engine.size == 8
        assert dispatcher.count("fetch-more") == 1

    def test_pop_from_fifteen_dispatches_nothing(self, make_engine, dispatcher):
        engine = make_engine(list(range(15)))

        engine.gesture_end("right")

        assert engine.size == 14
        assert dispatcher.count("fetch-more") == 0

    def test_crossing_the_mark(self, make_engine, dispatcher):
        engine = make_engine(list(range(11)))

        engine.manual_reject()  # 11 -> 10
        assert dispatcher.count("fetch-more") == 0

        engine.manual_reject()  # 10 -> 9
        assert dispatcher.count("fetch-more") == 1

    def test_every_pop_below_mark_asks_again(self, make_engine, dispatcher):
        engine = make_engine(list(range(5)))

        for _ in range(3):
            engine.manual_reject()

        assert dispatcher.count("fetch-more") == 3

    def test_start_on_empty_engine_fetches(self, make_engine, dispatcher):
        from discover.models import ReplenishmentAction

        engine = make_engine([])

        assert engine.start() is ReplenishmentAction.FETCH_MORE
        assert dispatcher.kinds() == ["fetch-more"]

    def test_start_on_full_engine_does_nothing(self, make_engine, dispatcher):
        engine = make_engine(list(range(10)))

        assert engine.start() is None
        assert dispatcher.intents == []

    def test_undo_does_not_fetch(self, make_engine, dispatcher):
        engine = make_engine(list(range(3)))
        engine.manual_reject()
        dispatcher.clear()

        engine.undo()

        assert dispatcher.count("fetch-more") == 0


class TestResetSession:

    def test_reset_clears_queue_and_undo(self, make_engine, dispatcher):
        from discover.models import ReplenishmentAction

        engine = make_engine(list(range(20)))
        engine.gesture_end("left")
        dispatcher.clear()

        assert engine.reset() is ReplenishmentAction.RESET_AND_REFETCH

        assert engine.size == 0
        assert engine.current is None
        assert engine.undo_available is False
        assert dispatcher.kinds() == ["reset-remote-state", "fetch-more"]

    def test_queue_is_empty_when_fetch_is_requested(self, make_engine, dispatcher):
        sizes = []
        engine = make_engine(list(range(20)))
        dispatcher._on_dispatch = lambda intent: sizes.append(
            (intent.kind.value, engine.queue.size())
        )

        engine.reset()

        assert sizes == [("reset-remote-state", 20), ("fetch-more", 0)]

    def test_reset_on_empty_queue_still_fetches(self, make_engine, dispatcher):
        engine = make_engine([])

        engine.reset()

        assert dispatcher.count("fetch-more") == 1

    def test_stale_results_after_reset_are_merged(self, make_engine):
        engine = make_engine([1, 2, 3])
        engine.reset()

        # Results of a fetch issued before the reset arrive now
        engine.append_candidates([2, 3, 4])
        engine.append_candidates([3, 4, 5])

        assert engine.snapshot().candidates == (2, 3, 4, 5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
