from gungame.timers import TimerRegistry


def test_one_shot_fires_when_due():
    timers = TimerRegistry()
    fired = []
    timers.schedule(100, lambda: fired.append(timers.now_ms))
    timers.advance(99)
    assert fired == []
    timers.advance(130)
    assert fired == [100]
    assert timers.now_ms == 130
    assert len(timers) == 0


def test_fires_in_due_then_insertion_order():
    timers = TimerRegistry()
    order = []
    timers.schedule(50, lambda: order.append("b"))
    timers.schedule(10, lambda: order.append("a"))
    timers.schedule(50, lambda: order.append("c"))
    timers.advance(60)
    assert order == ["a", "b", "c"]


def test_cancelled_timer_never_fires():
    timers = TimerRegistry()
    fired = []
    handle = timers.schedule(10, lambda: fired.append(1))
    timers.cancel(handle)
    timers.advance(100)
    assert fired == []


def test_cancel_all_drops_stale_handles():
    timers = TimerRegistry()
    fired = []
    timers.schedule(10, lambda: fired.append("old"))
    timers.schedule_interval(5, lambda: fired.append("tick"))
    timers.cancel_all()
    timers.schedule(10, lambda: fired.append("new"))
    timers.advance(100)
    assert fired == ["new"]


def test_interval_repeats_until_cancelled():
    timers = TimerRegistry()
    fired = []
    handle = timers.schedule_interval(100, lambda: fired.append(timers.now_ms))
    timers.advance(350)
    assert fired == [100, 200, 300]
    handle.cancel()
    timers.advance(1000)
    assert fired == [100, 200, 300]


def test_chained_timers_fire_in_same_advance():
    timers = TimerRegistry()
    fired = []

    def first():
        fired.append(timers.now_ms)
        timers.schedule(20, lambda: fired.append(timers.now_ms))

    timers.schedule(10, first)
    timers.advance(40)
    assert fired == [10, 30]


def test_cancel_all_inside_callback():
    timers = TimerRegistry()
    fired = []
    timers.schedule(10, timers.cancel_all)
    timers.schedule(20, lambda: fired.append(1))
    timers.advance(50)
    assert fired == []
