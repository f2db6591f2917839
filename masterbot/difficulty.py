"""
Difficulty model: power, progression level and feedback signals in, search
configuration out.

``resolve()`` is a pure reducer applied in a fixed order:

    base_configuration(power, level)
        -> apply_adaptive(adaptive adjustment)
        -> apply_progression(progression boost)
        -> apply_exploit_override()          # only when a trick was detected

The exploit override always runs last, so nothing can re-enable blunders or
reduce depth after a trick has been flagged. Every stage returns a new frozen
``DifficultyConfiguration``; nothing is mutated in place.
"""

import math
from dataclasses import dataclass, replace

from masterbot.constants import (
    ABSOLUTE_MAX_DEPTH,
    ADJUSTED_MIN_DEPTH,
    BASE_MAX_DEPTH,
    BASE_MAX_THINK_MS,
    BASE_MIN_DEPTH,
    BASE_MIN_THINK_MS,
    BLUNDER_POWER_CEILING,
    EXPLOIT_DEPTH_BONUS,
    MAX_BLUNDER_CHANCE,
    MAX_POWER,
    MAX_RANDOMNESS,
    MAX_THINK_FLOOR_MS,
    MAX_THINK_SPAN_MS,
    MAX_VARIANCE_REDUCTION,
    MIN_POWER,
    MIN_THINK_FLOOR_MS,
    MIN_THINK_SPAN_MS,
    POWER_EXPONENT,
    VARIANCE_REDUCTION_PER_LEVEL,
)


@dataclass(frozen=True)
class AdaptiveAdjustment:
    """Deltas derived from the player's recent results against the bot."""

    depth_adjust: int = 0
    randomness_adjust: float = 0.0
    blunder_adjust: float = 0.0
    think_time_adjust: int = 0


@dataclass(frozen=True)
class ProgressionBoost:
    """Strength bonus earned through the player's long-term progression."""

    depth_boost: int = 0
    blunder_reduction: float = 0.0
    speed_boost: float = 0.0  # seconds


@dataclass(frozen=True)
class DifficultyConfiguration:
    depth: int
    multi_pv: int
    randomness: float
    blunder_chance: float
    think_time_range: tuple[int, int]

    @property
    def min_think_ms(self) -> int:
        return self.think_time_range[0]

    @property
    def max_think_ms(self) -> int:
        return self.think_time_range[1]


@dataclass(frozen=True)
class PowerTier:
    name: str
    description: str


def _clamp(value, low, high):
    return max(low, min(high, value))


def clamp_power(power: int) -> int:
    return int(_clamp(power, MIN_POWER, MAX_POWER))


def scaled_power(power: int) -> float:
    """(power / 100) ** 1.5, the curve every power-driven term follows."""
    return math.pow(clamp_power(power) / 100, POWER_EXPONENT)


def power_tier(power: int) -> PowerTier:
    """Human-facing label for a power value."""
    if power <= 33:
        return PowerTier("easy", "Frequent mistakes, good for practice")
    if power <= 66:
        return PowerTier("medium", "Occasional mistakes, tactical play")
    return PowerTier("hard", "Strong moves, competitive strength")


def base_configuration(power: int, level: int) -> DifficultyConfiguration:
    """Configuration implied by power and progression level alone."""
    power = clamp_power(power)
    scaled = scaled_power(power)

    depth = _clamp(BASE_MIN_DEPTH + power // 5 + level // 4, BASE_MIN_DEPTH, BASE_MAX_DEPTH)

    if power <= 33:
        multi_pv = 4
    elif power <= 66:
        multi_pv = 3
    else:
        multi_pv = 1

    randomness = max(0.0, MAX_RANDOMNESS - scaled * MAX_RANDOMNESS)

    if power <= BLUNDER_POWER_CEILING:
        blunder_chance = max(0.0, MAX_BLUNDER_CHANCE - (power / BLUNDER_POWER_CEILING) * MAX_BLUNDER_CHANCE)
    else:
        blunder_chance = 0.0

    min_think = round(BASE_MIN_THINK_MS + scaled * MIN_THINK_SPAN_MS)
    raw_max_think = BASE_MAX_THINK_MS + scaled * MAX_THINK_SPAN_MS
    variance_reduction = min(MAX_VARIANCE_REDUCTION, level * VARIANCE_REDUCTION_PER_LEVEL)
    max_think = round(min_think + (raw_max_think - min_think) * (1 - variance_reduction))

    return DifficultyConfiguration(
        depth=depth,
        multi_pv=multi_pv,
        randomness=randomness,
        blunder_chance=blunder_chance,
        think_time_range=(min_think, max_think),
    )


def apply_adaptive(config: DifficultyConfiguration, adj: AdaptiveAdjustment) -> DifficultyConfiguration:
    """Fold in win/loss-streak feedback."""
    low, high = config.think_time_range
    low = max(0, low + adj.think_time_adjust)
    high = max(low, high + adj.think_time_adjust)
    return replace(
        config,
        depth=config.depth + adj.depth_adjust,
        randomness=_clamp(config.randomness + adj.randomness_adjust, 0.0, 1.0),
        blunder_chance=_clamp(config.blunder_chance + adj.blunder_adjust, 0.0, 1.0),
        think_time_range=(low, high),
    )


def _speed_up(value: int, reduction: float, floor: int) -> int:
    # A boost never drags a value under its floor, nor lifts one already below it.
    reduced = round(value - reduction)
    if reduced < floor:
        return min(value, floor)
    return reduced


def apply_progression(config: DifficultyConfiguration, boost: ProgressionBoost) -> DifficultyConfiguration:
    """Fold in the progression boost and bring depth back inside its range."""
    low, high = config.think_time_range
    if boost.speed_boost > 0:
        reduction = boost.speed_boost * 1000
        low = _speed_up(low, reduction, MIN_THINK_FLOOR_MS)
        high = max(low, _speed_up(high, reduction, MAX_THINK_FLOOR_MS))
    return replace(
        config,
        depth=_clamp(config.depth + boost.depth_boost, ADJUSTED_MIN_DEPTH, BASE_MAX_DEPTH),
        blunder_chance=_clamp(config.blunder_chance - boost.blunder_reduction, 0.0, 1.0),
        think_time_range=(low, high),
    )


def apply_exploit_override(config: DifficultyConfiguration) -> DifficultyConfiguration:
    """Play at full attention once the opponent has been caught using a trick."""
    return replace(
        config,
        depth=min(config.depth + EXPLOIT_DEPTH_BONUS, ABSOLUTE_MAX_DEPTH),
        blunder_chance=0.0,
    )


def resolve(
    power: int,
    level: int,
    adaptive: AdaptiveAdjustment | None = None,
    boost: ProgressionBoost | None = None,
    exploit_detected: bool = False,
) -> DifficultyConfiguration:
    """
    Compose the full configuration for one move.

    Args:
        power:            Difficulty dial, clamped to [0, 100].
        level:            Progression level of the player.
        adaptive:         Streak-based deltas; none when omitted.
        boost:            Progression boost; none when omitted.
        exploit_detected: Apply the trick override as the final stage.

    Returns:
        DifficultyConfiguration with depth inside [1, 28].
    """
    config = base_configuration(power, level)
    config = apply_adaptive(config, adaptive or AdaptiveAdjustment())
    config = apply_progression(config, boost or ProgressionBoost())
    if exploit_detected:
        config = apply_exploit_override(config)
    return replace(config, depth=_clamp(config.depth, ADJUSTED_MIN_DEPTH, ABSOLUTE_MAX_DEPTH))


def search_time_limit(config: DifficultyConfiguration, hard_limit_ms: int) -> int:
    """Per-search budget: the top of the think range, never above the hard cap."""
    return min(hard_limit_ms, config.max_think_ms)


def think_time_ms(config: DifficultyConfiguration, rng) -> float:
    """Sample a pacing delay uniformly from the configuration's range."""
    return rng.uniform(config.min_think_ms, config.max_think_ms)


def is_lightweight(power: int, threshold: int) -> bool:
    return clamp_power(power) < threshold

