"""
Cheap move picker for low power levels.

No tree is searched. Each legal move gets a little uniform noise, plus the
value of whatever it captures, plus a bonus for landing on a centre square,
and the highest total wins. The noise makes quiet moves interchangeable while
still letting obvious captures through, which is roughly how a beginner plays.
"""

import random

import chess

from masterbot.constants import CENTER_BONUS, CENTER_SQUARES, LIGHTWEIGHT_NOISE
from masterbot.evaluate import captured_value


def score_move(board: chess.Board, move: chess.Move, rng: random.Random) -> float:
    score = rng.uniform(0, LIGHTWEIGHT_NOISE) + captured_value(board, move)
    if move.to_square in CENTER_SQUARES:
        score += CENTER_BONUS
    return score


def quick_evaluate(board: chess.Board, rng: random.Random | None = None) -> chess.Move | None:
    """Return the best-scoring legal move, or None when there are none."""
    rng = rng or random.Random()
    best_move = None
    best_score = float("-inf")
    for move in board.legal_moves:
        score = score_move(board, move, rng)
        if score > best_score:
            best_score = score
            best_move = move
    return best_move
