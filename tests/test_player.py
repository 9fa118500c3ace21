from gungame.entities import PlayerRunState
from gungame.player import BlinkSequence, PlayerState, PlayerStateMachine
from gungame.timers import TimerRegistry


def make_machine(lives=3):
    timers = TimerRegistry()
    run = PlayerRunState(lives=lives)
    over = []
    machine = PlayerStateMachine(run, timers, on_game_over=lambda: over.append(timers.now_ms))
    return machine, timers, over


def test_hit_starts_respawn_once():
    machine, timers, _ = make_machine()
    assert machine.hit()
    assert machine.state is PlayerState.RESPAWNING
    assert not machine.run.visible
    assert machine.run.immune

    # Re-entrant hits are ignored while the sequence runs
    assert not machine.hit()
    timers.advance(1999)
    assert machine.run.lives == 3
    timers.advance(2000)
    assert machine.run.lives == 2
    assert machine.state is PlayerState.IMMUNE
    assert machine.run.visible
    assert not machine.hit()

    timers.advance(6999)
    assert machine.run.immune
    timers.advance(7000)
    assert machine.state is PlayerState.ACTIVE
    assert machine.run.visible


def test_invincible_hit_is_ignored():
    machine, timers, _ = make_machine()
    assert not machine.hit(invincible=True)
    assert machine.state is PlayerState.ACTIVE
    timers.advance(10_000)
    assert machine.run.lives == 3


def test_last_life_ends_the_run():
    machine, timers, over = make_machine(lives=1)
    machine.hit()
    timers.advance(2000)
    assert machine.run.lives == 0
    assert machine.state is PlayerState.GAME_OVER
    assert over == [2000]
    assert not machine.hit()


def test_three_lives_three_hits():
    machine, timers, over = make_machine()
    for expected in (2, 1):
        assert machine.hit()
        timers.advance(timers.now_ms + 7000)
        assert machine.run.lives == expected
        assert machine.state is PlayerState.ACTIVE
    assert machine.hit()
    timers.advance(timers.now_ms + 2000)
    assert machine.run.lives == 0
    assert machine.state is PlayerState.GAME_OVER
    assert len(over) == 1


def test_blink_decays_and_ends_visible():
    timers = TimerRegistry()
    toggles = []
    blink = BlinkSequence(timers, lambda v: toggles.append((timers.now_ms, v)))
    blink.start(5000)
    assert toggles[0] == (0, True)
    assert blink.running

    timers.advance(5000)
    assert not blink.running
    assert toggles[-1] == (5000, True)

    times = [t for t, _ in toggles]
    gaps = [b - a for a, b in zip(times, times[1:])]
    assert gaps[:2] == [500, 440]
    assert all(g >= 100 for g in gaps[:-1])
    assert all(a >= b for a, b in zip(gaps[:-2], gaps[1:-1]))
    # Visibility alternates until the final forced show
    values = [v for _, v in toggles[:-1]]
    assert all(a != b for a, b in zip(values, values[1:]))


def test_blink_restart_replaces_previous_sequence():
    timers = TimerRegistry()
    seen = []
    blink = BlinkSequence(timers, seen.append)
    blink.start(5000)
    timers.advance(1000)
    blink.start(30_000)
    timers.advance(6000)
    assert blink.running
    timers.advance(30_000 + 1000)
    assert not blink.running
    assert seen[-1] is True
