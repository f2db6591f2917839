"""
Long-lived player state that feeds the difficulty model.

Two providers live here, both owned by the caller and kept across games:

    AdaptiveState   : win/loss streaks, recent results and a memory of
                      tricks the player has used. Produces small deltas
                      that push the bot stronger or weaker, and flags known
                      tricks so the orchestrator can switch off blunders.
    ProgressionState: XP and level earned by beating the bot. Higher levels
                      make the bot deeper, steadier and quicker.

The orchestrator only ever reads from these through the three Protocols
below, so a caller is free to substitute its own implementations (for example
ones backed by a database).

Results are always recorded from the player's point of view: a 'win' means
the human beat the bot.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol, Sequence

import chess

from masterbot.constants import (
    BLUNDER_REDUCTION_PER_LEVEL,
    EARLY_QUEEN_PLIES,
    LEVEL_XP_FACTOR,
    LEVELS_PER_DEPTH_BOOST,
    MAX_BLUNDER_ADJUST,
    MAX_BLUNDER_REDUCTION,
    MAX_DEPTH_ADJUST,
    MAX_RANDOMNESS_ADJUST,
    MAX_SPEED_BOOST,
    MAX_THINK_TIME_ADJUST_MS,
    MAX_XP_REWARD,
    MIN_XP_REWARD,
    OPENING_SIGNATURE_PLIES,
    QUICK_WIN_MOVES,
    RECENT_GAMES_KEPT,
    REPEATED_OPENING_COUNT,
    SCHOLARS_MATE_SEQUENCE,
    SPEED_BOOST_PER_LEVEL,
    STREAK_THRESHOLD,
    XP_PER_POWER,
)
from masterbot.difficulty import AdaptiveAdjustment, ProgressionBoost

_log = logging.getLogger(__name__)

RESULTS = ("win", "loss", "draw")


class AdaptiveProvider(Protocol):
    def get_adaptive_adjustment(self) -> AdaptiveAdjustment: ...


class ProgressionProvider(Protocol):
    @property
    def level(self) -> int: ...

    def get_progression_boost(self) -> ProgressionBoost: ...


class ExploitDetector(Protocol):
    def detect_pattern(self, board: chess.Board, move_history: Sequence[str]) -> str | None: ...


def san_history(board: chess.Board) -> list[str]:
    """SAN of every move played to reach ``board``, replayed from its root."""
    replay = board.root()
    moves = []
    for move in board.move_stack:
        moves.append(replay.san(move))
        replay.push(move)
    return moves


def opening_signature(moves: Sequence[str]) -> str:
    return ",".join(moves[:OPENING_SIGNATURE_PLIES])


def _clamp(value, bound):
    return max(-bound, min(bound, value))


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class GameRecord:
    result: str
    moves: int
    patterns: list[str] = field(default_factory=list)


@dataclass
class TrickPattern:
    pattern: str
    count: int = 1
    last_seen: str = field(default_factory=_utcnow)


class AdaptiveState:
    """Streak and trick memory for one player."""

    def __init__(self) -> None:
        self.win_streak = 0
        self.loss_streak = 0
        self.recent_games: list[GameRecord] = []
        self.known_tricks: dict[str, TrickPattern] = {}

    def record_outcome(
        self,
        result: str,
        move_count: int,
        opening_moves: Sequence[str] = (),
        patterns: Sequence[str] = (),
    ) -> None:
        """
        Record a finished game.

        Args:
            result:        'win', 'loss' or 'draw' from the player's side.
            move_count:    Full moves played.
            opening_moves: SAN moves of the game; the first six form the
                           opening signature remembered as a trick.
            patterns:      Extra trick labels detected during the game.
        """
        if result not in RESULTS:
            raise ValueError(f"unknown result {result!r}, expected one of {RESULTS}")

        seen = list(patterns)
        if opening_moves:
            seen.append(opening_signature(opening_moves))

        self.recent_games.append(GameRecord(result, move_count, seen))
        self.recent_games = self.recent_games[-RECENT_GAMES_KEPT:]

        if result == "win":
            self.win_streak += 1
            self.loss_streak = 0
        elif result == "loss":
            self.loss_streak += 1
            self.win_streak = 0
        else:
            self.win_streak = 0
            self.loss_streak = 0

        for pattern in seen:
            trick = self.known_tricks.get(pattern)
            if trick is None:
                self.known_tricks[pattern] = TrickPattern(pattern)
            else:
                trick.count += 1
                trick.last_seen = _utcnow()

        _log.info(
            "recorded %s in %d moves (win streak %d, loss streak %d)",
            result,
            move_count,
            self.win_streak,
            self.loss_streak,
        )

    def get_adaptive_adjustment(self) -> AdaptiveAdjustment:
        depth = 0
        randomness = 0.0
        blunder = 0.0
        think_time = 0

        # Player keeps winning: tighten up.
        if self.win_streak >= STREAK_THRESHOLD:
            depth = min(self.win_streak * 2, MAX_DEPTH_ADJUST)
            randomness = -0.1
            blunder = -0.1
            think_time = 200

        # Player keeps losing: ease off.
        if self.loss_streak >= STREAK_THRESHOLD:
            depth = -min(self.loss_streak * 2, MAX_DEPTH_ADJUST)
            randomness = 0.1
            blunder = 0.05
            think_time = -200

        quick_wins = sum(1 for g in self.recent_games if g.result == "win" and g.moves < QUICK_WIN_MOVES)
        if quick_wins >= 2:
            depth += 2
            randomness -= 0.05

        recent_draws = sum(1 for g in self.recent_games[-5:] if g.result == "draw")
        if recent_draws >= 3:
            randomness += 0.1

        return AdaptiveAdjustment(
            depth_adjust=_clamp(depth, MAX_DEPTH_ADJUST),
            randomness_adjust=_clamp(randomness, MAX_RANDOMNESS_ADJUST),
            blunder_adjust=_clamp(blunder, MAX_BLUNDER_ADJUST),
            think_time_adjust=_clamp(think_time, MAX_THINK_TIME_ADJUST_MS),
        )

    def detect_pattern(self, board: chess.Board, move_history: Sequence[str]) -> str | None:
        """Name the trick the player appears to be using, if any."""
        if SCHOLARS_MATE_SEQUENCE in "".join(move_history):
            return "scholars_mate"

        if len(move_history) < EARLY_QUEEN_PLIES and any(m.startswith("Q") for m in move_history):
            return "early_queen_attack"

        trick = self.known_tricks.get(opening_signature(move_history))
        if trick is not None and trick.count >= REPEATED_OPENING_COUNT:
            return "repeated_opening"

        return None

    def top_tricks(self, limit: int = 5) -> list[TrickPattern]:
        return sorted(self.known_tricks.values(), key=lambda t: t.count, reverse=True)[:limit]


def next_level_xp(level: int) -> int:
    return math.floor(LEVEL_XP_FACTOR * level)


def xp_reward(power: int) -> int:
    return max(MIN_XP_REWARD, min(MAX_XP_REWARD, round(power * XP_PER_POWER)))


@dataclass
class ProgressionState:
    """XP and level a player has earned against the bot."""

    xp: int = 0
    level: int = 1
    total_matches: int = 0
    total_wins: int = 0
    total_losses: int = 0
    last_power_used: int | None = None

    def award(self, power: int, won: bool) -> bool:
        """
        Credit a finished match. XP is only earned by winning.

        Returns:
            True when the player gained at least one level.
        """
        self.total_matches += 1
        self.last_power_used = power
        if won:
            self.total_wins += 1
        else:
            self.total_losses += 1
            return False

        self.xp += xp_reward(power)
        leveled_up = False
        while self.xp >= next_level_xp(self.level):
            self.xp -= next_level_xp(self.level)
            self.level += 1
            leveled_up = True

        if leveled_up:
            _log.info("progression reached level %d", self.level)
        return leveled_up

    def get_progression_boost(self) -> ProgressionBoost:
        return ProgressionBoost(
            depth_boost=self.level // LEVELS_PER_DEPTH_BOOST,
            blunder_reduction=min(BLUNDER_REDUCTION_PER_LEVEL * self.level, MAX_BLUNDER_REDUCTION),
            speed_boost=min(SPEED_BOOST_PER_LEVEL * self.level, MAX_SPEED_BOOST),
        )
