import pytest

from masterbot.difficulty import (
    AdaptiveAdjustment,
    ProgressionBoost,
    base_configuration,
    power_tier,
    resolve,
    search_time_limit,
)


def test_depth_non_decreasing_in_power() -> None:
    depths = [resolve(p, 1).depth for p in range(101)]
    assert depths == sorted(depths)
    assert depths[0] == 2


def test_blunder_chance_zero_above_fifty() -> None:
    assert all(base_configuration(p, 1).blunder_chance == 0 for p in range(51, 101))
    assert base_configuration(0, 1).blunder_chance == pytest.approx(0.45)
    assert base_configuration(25, 1).blunder_chance == pytest.approx(0.225)


def test_multi_pv_breakpoints() -> None:
    assert {base_configuration(p, 1).multi_pv for p in range(0, 34)} == {4}
    assert {base_configuration(p, 1).multi_pv for p in range(34, 67)} == {3}
    assert {base_configuration(p, 1).multi_pv for p in range(67, 101)} == {1}


def test_power_ninety_level_one() -> None:
    config = resolve(90, 1)
    assert config.depth == 20
    assert config.multi_pv == 1
    assert config.blunder_chance == 0
    assert config.think_time_range == (1295, 2572)
    assert search_time_limit(config, 3_000) == 2572


def test_power_ten_level_one_think_range() -> None:
    assert resolve(10, 1).think_time_range == (144, 333)


def test_randomness_falls_with_power() -> None:
    assert base_configuration(0, 1).randomness == pytest.approx(0.6)
    assert base_configuration(100, 1).randomness == pytest.approx(0.0)
    assert base_configuration(30, 1).randomness > base_configuration(60, 1).randomness


def test_level_narrows_think_range() -> None:
    low, high = base_configuration(70, 1).think_time_range
    low40, high40 = base_configuration(70, 40).think_time_range
    assert low == low40
    assert high40 - low40 < high - low


def test_depth_clamped_to_base_range() -> None:
    assert base_configuration(100, 200).depth == 24


def test_adjustments_are_additive_and_clamped() -> None:
    config = resolve(
        20,
        1,
        AdaptiveAdjustment(depth_adjust=-4, randomness_adjust=0.9, blunder_adjust=0.1),
        ProgressionBoost(depth_boost=0, blunder_reduction=0.05),
    )
    assert config.depth == 2  # 6 - 4
    assert config.randomness == 1.0
    base = base_configuration(20, 1)
    assert config.blunder_chance == pytest.approx(base.blunder_chance + 0.1 - 0.05)


def test_depth_never_below_one() -> None:
    config = resolve(0, 1, AdaptiveAdjustment(depth_adjust=-4))
    assert config.depth == 1


def test_speed_boost_respects_floors() -> None:
    config = resolve(100, 1, boost=ProgressionBoost(speed_boost=2.0))
    assert config.think_time_range == (300, 970)

    # Values already under the floor are left alone.
    assert resolve(10, 1, boost=ProgressionBoost(speed_boost=0.5)).think_time_range == (144, 333)


@pytest.mark.parametrize("power", [0, 25, 50, 75, 100])
def test_exploit_override(power: int) -> None:
    plain = resolve(power, 1, AdaptiveAdjustment(blunder_adjust=0.1))
    flagged = resolve(power, 1, AdaptiveAdjustment(blunder_adjust=0.1), exploit_detected=True)
    assert flagged.depth == min(plain.depth + 4, 28)
    assert flagged.blunder_chance == 0


def test_exploit_override_caps_at_twenty_eight() -> None:
    config = resolve(100, 200, AdaptiveAdjustment(depth_adjust=4), ProgressionBoost(depth_boost=10),
                     exploit_detected=True)
    assert config.depth == 28


def test_power_clamped() -> None:
    assert resolve(150, 1) == resolve(100, 1)
    assert resolve(-5, 1) == resolve(0, 1)


def test_power_tier() -> None:
    assert power_tier(33).name == "easy"
    assert power_tier(34).name == "medium"
    assert power_tier(66).name == "medium"
    assert power_tier(67).name == "hard"
