from klondike.cycles import STUCK_CYCLE_LIMIT, StockCycleTracker


def test_three_unproductive_resets_force_restart():
    tracker = StockCycleTracker()
    assert STUCK_CYCLE_LIMIT == 3
    assert tracker.on_stock_reset() is False
    assert tracker.on_stock_reset() is False
    assert tracker.on_stock_reset() is True
    assert tracker.cycles == 0


def test_productive_cycle_resets_the_count():
    tracker = StockCycleTracker()
    tracker.on_stock_reset()
    tracker.on_stock_reset()
    tracker.mark_productive()
    assert tracker.on_stock_reset() is False
    assert tracker.cycles == 0
    assert tracker.used_this_cycle is False


def test_reset_clears_state():
    tracker = StockCycleTracker(limit=2, cycles=1, used_this_cycle=True)
    tracker.reset()
    assert (tracker.cycles, tracker.used_this_cycle) == (0, False)
