"""
Time-boxed minimax with alpha-beta pruning and capture-first move ordering.

The search walks the tree depth-first on a scratch copy of the caller's board,
using python-chess's push/pop to apply and undo each move instead of cloning
a position per node. Scores come from ``evaluate`` with the engine's colour
fixed at the root; maximizing plies belong to the engine and minimizing plies
to its opponent.

Time management:
    Every node, not only the leaves, compares the elapsed time against the
    budget. Once the budget is spent a node returns its static evaluation
    immediately, so a wide subtree can never hold the caller much longer than
    ``time_limit_ms``. There is no external stop signal; the clock is the
    only way out of the recursion.

There is deliberately no transposition table. The orchestrator's MoveCache
memoizes whole-position results at the root only.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable

import chess

from masterbot.constants import INF
from masterbot.evaluate import captured_value, evaluate

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredMove:
    """A root move and its minimax score from the engine's perspective."""

    move: chess.Move
    score: int


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


def order_moves(board: chess.Board, moves: Iterable[chess.Move]) -> list[chess.Move]:
    """
    Sort captures ahead of quiet moves, most valuable victim first.

    The sort is stable, so quiet moves (and captures of equal value) keep the
    rules engine's generation order.
    """
    return sorted(moves, key=lambda m: captured_value(board, m), reverse=True)


def minimax(
    board: chess.Board,
    depth: int,
    alpha: int,
    beta: int,
    maximizing: bool,
    start_time: float,
    time_limit_ms: float,
    color: chess.Color,
) -> int:
    """
    Minimax value of ``board`` searched ``depth`` plies deep.

    Args:
        board:         Scratch position. Modified in place via push/pop and
                       always restored before returning.
        depth:         Remaining plies.
        alpha:         Best score the maximizer can already guarantee.
        beta:          Best score the minimizer can already guarantee.
        maximizing:    True when the engine (``color``) is to move.
        start_time:    ``now_ms()`` timestamp when the search began.
        time_limit_ms: Budget measured from ``start_time``.
        color:         The engine's side; fixes the evaluation perspective.

    Returns:
        Integer score from ``color``'s perspective.
    """
    if now_ms() - start_time > time_limit_ms:
        return evaluate(board, color)

    if depth <= 0 or board.is_game_over():
        return evaluate(board, color)

    if maximizing:
        best = -INF
        for move in order_moves(board, board.legal_moves):
            board.push(move)
            score = minimax(board, depth - 1, alpha, beta, False, start_time, time_limit_ms, color)
            board.pop()
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return best

    best = INF
    for move in order_moves(board, board.legal_moves):
        board.push(move)
        score = minimax(board, depth - 1, alpha, beta, True, start_time, time_limit_ms, color)
        board.pop()
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def search_root(board: chess.Board, depth: int, time_limit_ms: float) -> list[ScoredMove]:
    """
    Score every legal root move and return them best-first.

    Each root move is applied to a private copy of ``board`` and the reply
    tree is searched ``depth - 1`` plies deep with a full window. All root
    moves share one clock: once ``time_limit_ms`` has elapsed, the remaining
    moves are scored by static evaluation only.

    Args:
        board:         Position to move from. Not modified.
        depth:         Total search depth in plies, including the root move.
        time_limit_ms: Budget for the whole root search.

    Returns:
        ScoredMove list sorted by descending score. Ties keep capture-first
        order. Empty when the position has no legal moves.
    """
    scratch = board.copy()
    color = scratch.turn
    start = now_ms()

    scored = []
    for move in order_moves(scratch, scratch.legal_moves):
        scratch.push(move)
        score = minimax(scratch, depth - 1, -INF, INF, False, start, time_limit_ms, color)
        scratch.pop()
        scored.append(ScoredMove(move, score))

    scored.sort(key=lambda sm: sm.score, reverse=True)

    _log.debug(
        "search_root depth=%d moves=%d elapsed=%.0fms best=%s",
        depth,
        len(scored),
        now_ms() - start,
        scored[0].move.uci() if scored else None,
    )
    return scored
