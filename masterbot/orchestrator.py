"""
Move orchestration: the public entry point of the engine.

One ``EngineSession`` is created per game. It owns that game's MoveCache and
PerformanceLog, and holds references to the player's adaptive and progression
state (owned by the caller, shared across games).

A call to ``choose_move`` runs these phases strictly in order:

    cache lookup      hit -> log and return, no pacing
    cleanup + resolve difficulty (exploit override applied last)
    pacing delay      awaited, never computed
    lightweight pick  power < 40: return straight after pacing
    root search       every legal move scored, best first
    blunder check     maybe return a move from the worst 60%
    multi-PV pick     maybe pick among the top N
    anti-lag check    call overran: fall back to a pre-captured move
    cache write
    log and return

The anti-lag check measures the whole call, pacing delay included, from the
moment ``choose_move`` is entered. A search result that arrives after
ANTI_LAG_THRESHOLD_MS of wall-clock time is replaced by a move captured before
the search started.

Concurrency:
    The pacing delay is the only await point, which hands control back to the
    caller's event loop. The search itself runs synchronously on the calling
    thread; no worker threads are started.
"""

import asyncio
import logging
import random
import time
from typing import Awaitable, Callable

import chess

from masterbot import lightweight, search
from masterbot.adaptive import (
    AdaptiveProvider,
    AdaptiveState,
    ExploitDetector,
    ProgressionProvider,
    ProgressionState,
    san_history,
)
from masterbot.cache import MoveCache
from masterbot.constants import (
    ANTI_LAG_THRESHOLD_MS,
    BLUNDER_POOL_START,
    FALLBACK_CANDIDATES,
    HESITATION_CHANCE,
    LIGHTWEIGHT_POWER_THRESHOLD,
    SEARCH_HARD_LIMIT_MS,
)
from masterbot.difficulty import (
    DifficultyConfiguration,
    clamp_power,
    is_lightweight,
    resolve,
    search_time_limit,
    think_time_ms,
)
from masterbot.search import ScoredMove, now_ms
from masterbot.telemetry import PerformanceLog, PerformanceLogEntry, PerformanceMetrics

_log = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class EngineSession:
    """
    Move selection for one game.

    Args:
        adaptive:         Streak feedback provider. Defaults to a fresh
                          AdaptiveState.
        progression:      Level/boost provider. Defaults to a level-1
                          ProgressionState.
        exploit_detector: Trick detector. Defaults to ``adaptive`` when that is
                          an AdaptiveState, otherwise to a fresh one.
        rng:              Source of every random draw (pacing, noise,
                          blunders, multi-PV).
        clock:            Monotonic millisecond clock.
        sleep:            Coroutine used for pacing, called with seconds.
    """

    def __init__(
        self,
        adaptive: AdaptiveProvider | None = None,
        progression: ProgressionProvider | None = None,
        exploit_detector: ExploitDetector | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = now_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.adaptive = adaptive if adaptive is not None else AdaptiveState()
        self.progression = progression if progression is not None else ProgressionState()
        if exploit_detector is None:
            exploit_detector = self.adaptive if isinstance(self.adaptive, AdaptiveState) else AdaptiveState()
        self.exploit_detector = exploit_detector
        self.rng = rng or random.Random()
        self._clock = clock
        self._sleep = sleep
        self.cache = MoveCache(clock=clock)
        self.log = PerformanceLog()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def choose_move(self, board: chess.Board, power: int) -> chess.Move | None:
        """
        Pick the engine's move for ``board`` at the given power.

        Args:
            board: Position with the engine to move. Not modified.
            power: Difficulty dial in [0, 100]; out-of-range values are clamped.

        Returns:
            A legal move, or None if the position has no legal moves. Callers
            are expected to check for game over before asking.
        """
        power = clamp_power(power)
        start = self._clock()

        legal = list(board.legal_moves)
        if not legal:
            _log.debug("no legal moves, fen=%s", board.fen())
            return None

        fingerprint = board.fen()
        cached = self.cache.get(fingerprint)
        if cached is not None:
            _log.debug("cache hit move=%s fen=%s", cached.best_move.uci(), fingerprint)
            self._record(0.0, 0, power, cache_hit=True, light=False)
            return cached.best_move

        self.cache.cleanup()
        config = self.resolve_configuration(board, power)

        if is_lightweight(power, LIGHTWEIGHT_POWER_THRESHOLD):
            await self._pace(think_time_ms(config, self.rng))
            move = lightweight.quick_evaluate(board, self.rng)
            self._record(self._clock() - start, 0, power, cache_hit=False, light=True)
            _log.info("power=%d lightweight move=%s", power, move.uci())
            return move

        fallback = legal[:FALLBACK_CANDIDATES]

        delay = think_time_ms(config, self.rng)
        if self.rng.random() < HESITATION_CHANCE:
            delay *= 2
        await self._pace(delay)

        scored = search.search_root(board, config.depth, search_time_limit(config, SEARCH_HARD_LIMIT_MS))

        blunder = self._maybe_blunder(scored, config)
        if blunder is not None:
            self._record(self._clock() - start, config.depth, power, cache_hit=False, light=False)
            _log.info("power=%d blunder move=%s score=%d", power, blunder.move.uci(), blunder.score)
            return blunder.move

        chosen = self._select_multi_pv(scored, config)

        elapsed_ms = self._clock() - start
        if elapsed_ms > ANTI_LAG_THRESHOLD_MS:
            _log.warning(
                "move took %.0fms (limit %dms), falling back to %s",
                elapsed_ms,
                ANTI_LAG_THRESHOLD_MS,
                fallback[0].uci(),
            )
            chosen = next(
                (sm for sm in scored if sm.move == fallback[0]),
                ScoredMove(fallback[0], 0),
            )

        self.cache.put(fingerprint, chosen.move, chosen.score)
        self._record(self._clock() - start, config.depth, power, cache_hit=False, light=False)
        _log.info(
            "power=%d depth=%d move=%s score=%d",
            power,
            config.depth,
            chosen.move.uci(),
            chosen.score,
        )
        return chosen.move

    def resolve_configuration(self, board: chess.Board, power: int) -> DifficultyConfiguration:
        """Difficulty for this move, including the exploit override if a trick is seen."""
        pattern = self.exploit_detector.detect_pattern(board, san_history(board))
        config = resolve(
            power,
            self.progression.level,
            self.adaptive.get_adaptive_adjustment(),
            self.progression.get_progression_boost(),
            exploit_detected=pattern is not None,
        )
        if pattern is not None:
            _log.warning("exploit pattern %r detected, depth=%d blunders off", pattern, config.depth)
        _log.debug("resolved %s", config)
        return config

    def metrics(self) -> PerformanceMetrics:
        return self.log.metrics()

    def reset(self) -> None:
        """Forget cached moves and telemetry, as at the start of a new game."""
        self.cache.clear()
        self.log.clear()
        _log.info("engine session reset")

    # -----------------------------------------------------------------------
    # Phases
    # -----------------------------------------------------------------------

    async def _pace(self, delay_ms: float) -> None:
        await self._sleep(delay_ms / 1000)

    def _maybe_blunder(self, scored: list[ScoredMove], config: DifficultyConfiguration) -> ScoredMove | None:
        if config.blunder_chance <= 0 or self.rng.random() >= config.blunder_chance:
            return None
        pool = scored[int(len(scored) * BLUNDER_POOL_START):]
        return self.rng.choice(pool)

    def _select_multi_pv(self, scored: list[ScoredMove], config: DifficultyConfiguration) -> ScoredMove:
        top = scored[:config.multi_pv]
        if config.randomness > 0 and config.multi_pv > 1 and self.rng.random() < config.randomness:
            return self.rng.choice(top)
        return top[0]

    def _record(self, move_time_ms: float, depth: int, power: int, cache_hit: bool, light: bool) -> None:
        self.log.append(PerformanceLogEntry(move_time_ms, depth, power, cache_hit, light))
        self.log.record_power(power, self.progression.level, _wall_clock_ms())


def choose_move_sync(session: EngineSession, board: chess.Board, power: int) -> chess.Move | None:
    """Run ``session.choose_move`` to completion from synchronous code."""
    return asyncio.run(session.choose_move(board, power))
