#!/usr/bin/env python3
"""
Benchmark: play a fixed set of positions at several power levels and report
the session metrics for each level.

Pacing delays are skipped so the numbers reflect search cost only. Compare
runs before and after a change to the evaluator or search to see its effect
on think time and the depth actually requested.

Usage: python tools/bench.py [power ...]
"""
import asyncio
import sys

import chess

from masterbot.orchestrator import EngineSession

# Fixed positions spanning opening, middlegame and endgame.
POSITIONS = [
    ("Start",        chess.STARTING_FEN),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Queen ending", "6k1/ppp2ppp/8/3p4/3P4/8/PPP2PPP/6K1 w - - 0 1"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
]

DEFAULT_POWERS = [10, 50, 90]


async def _no_pacing(seconds: float) -> None:
    return None


def run_power(power: int) -> None:
    """Play every position once at ``power`` and print per-move results."""
    session = EngineSession(sleep=_no_pacing)
    print(f"Power {power}")
    for label, fen in POSITIONS:
        board = chess.Board(fen)
        move = asyncio.run(session.choose_move(board, power))
        entry = session.log.entries[-1]
        print(
            f"  {label:<14} {move.uci() if move else '(none)':<7} "
            f"depth {entry.depth:>2}  {entry.move_time_ms:>8.0f}ms"
            f"{'  lightweight' if entry.lightweight else ''}"
        )

    m = session.metrics()
    print(
        f"  avg {m.avg_think_time_ms:.0f}ms, "
        f"lightweight {m.lightweight_rate_pct:.0f}%, "
        f"depths {m.depth_distribution}"
    )
    print()


def main() -> None:
    powers = [int(p) for p in sys.argv[1:]] or DEFAULT_POWERS
    for power in powers:
        run_power(power)


if __name__ == "__main__":
    main()
