import pytest

from gungame.entities import IdSequence, PlayerRunState, PowerUp, PowerUpType
from gungame.powerups import ActivePowerUps, apply_power_up, drop, expire_field, pick_type


@pytest.mark.parametrize("draw, expected", [
    (0.0, PowerUpType.SHOTGUN),
    (0.2499, PowerUpType.SHOTGUN),
    (0.25, PowerUpType.POINTS100),
    (0.5, PowerUpType.BOUNCE),
    (0.75, PowerUpType.INVINCIBILITY),
    (0.85, PowerUpType.NUKE),
    (0.95, PowerUpType.EXTRA_LIFE),
    (0.9999, PowerUpType.EXTRA_LIFE),
    (1.0, PowerUpType.SHOTGUN),
])
def test_pick_type_weights(draw, expected, fixed_rng):
    assert pick_type(fixed_rng(draw)) is expected


def test_drop_is_uncollectable_at_first(fixed_rng):
    ids = IdSequence()
    first = drop(10, 20, 500, ids, fixed_rng(0.6))
    second = drop(10, 20, 500, ids, fixed_rng(0.6))
    assert first.kind is PowerUpType.BOUNCE
    assert first.just_dropped
    assert first.duration_ms == 10_000
    assert (first.id, second.id) == (0, 1)


def test_field_power_ups_expire_at_lifetime():
    pu = PowerUp(id=0, x=0, y=0, kind=PowerUpType.NUKE, spawn_ms=0)
    assert expire_field([pu], 9_999) == [pu]
    assert expire_field([pu], 10_000) == []


def test_timed_effects_arm_and_reset():
    run = PlayerRunState()
    active = ActivePowerUps()
    apply_power_up(PowerUpType.SHOTGUN, run, active, 0)
    apply_power_up(PowerUpType.SHOTGUN, run, active, 4_000)
    assert len(active) == 1
    assert active.get(PowerUpType.SHOTGUN).start_ms == 4_000

    apply_power_up(PowerUpType.BOUNCE, run, active, 4_000)
    apply_power_up(PowerUpType.INVINCIBILITY, run, active, 4_000)
    assert len(active) == 3
    assert active.get(PowerUpType.INVINCIBILITY).duration_ms == 30_000
    assert run.score == 0 and run.lives == 3


def test_active_effects_expire_after_duration():
    active = ActivePowerUps()
    active.arm(PowerUpType.BOUNCE, 0)
    assert active.is_active(PowerUpType.BOUNCE, 9_999)
    assert active.expire(10_000) == []
    assert PowerUpType.BOUNCE in active
    assert active.expire(10_001) == [PowerUpType.BOUNCE]
    assert PowerUpType.BOUNCE not in active


def test_remaining_seconds_round_up():
    active = ActivePowerUps()
    active.arm(PowerUpType.SHOTGUN, 0)
    assert active.remaining(1)["shotgun"] == 10
    assert active.remaining(9_500)["shotgun"] == 1


def test_run_down_effects_leave_the_hud():
    active = ActivePowerUps()
    active.arm(PowerUpType.SHOTGUN, 0)
    active.arm(PowerUpType.BOUNCE, 5_000)
    assert active.remaining(10_000) == {"bounce": 5}
    assert PowerUpType.SHOTGUN in active


def test_instant_effects():
    run = PlayerRunState()
    active = ActivePowerUps()

    effect = apply_power_up(PowerUpType.EXTRA_LIFE, run, active, 0)
    assert run.lives == 4 and effect.message == "EXTRA LIFE!"

    apply_power_up(PowerUpType.POINTS100, run, active, 0)
    assert run.score == 100

    effect = apply_power_up(PowerUpType.NUKE, run, active, 0)
    assert effect.nuke
    assert run.score == 350
    assert run.suppress_clear_bonus
    assert len(active) == 0


def test_unknown_type_is_rejected():
    with pytest.raises(ValueError):
        apply_power_up("laser", PlayerRunState(), ActivePowerUps(), 0)
